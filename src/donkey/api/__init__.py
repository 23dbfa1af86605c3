"""HTTP boundary: FastAPI app, routes and request/response models."""

from donkey.api.app import create_app

__all__ = ["create_app"]
