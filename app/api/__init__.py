"""API routers package initialization."""

from app.api.dispatch import router as dispatch_router

__all__ = [
    "dispatch_router",
]
