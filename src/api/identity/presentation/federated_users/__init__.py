from identity.presentation.federated_users.routes import router

__all__ = ["router"]
