"""API surfaces built on the HTTP layer."""

from .management import Management

__all__ = ["Management"]
