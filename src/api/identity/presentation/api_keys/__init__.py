from identity.presentation.api_keys.routes import router

__all__ = ["router"]
