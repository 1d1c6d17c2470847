"""Products presentation layer."""

from products.presentation.routes import router

__all__ = ["router"]
