"""Remote order store API client."""

from .client import OrderStoreClient

__all__ = ["OrderStoreClient"]
