from typing import Any, Dict

from oxistore.config import StoreConfig
from oxistore.store import OxiStorage


class ServiceContainer:
    """Services owned by one application instance.

    `create_app` builds one per app and stores it on `app.state.container`;
    request handlers reach it through the dependencies in `resolver`.
    """

    def __init__(self, storage: OxiStorage, config: StoreConfig) -> None:
        self.storage = storage
        self.config = config

    def describe(self) -> Dict[str, Any]:
        """Summary of the composed storage, safe to return to clients."""
        return {
            "backend": type(self.storage.backend).__name__,
            "serializer": self.config.serializer,
            "metadata": self.storage.metadata,
            "active_views": len(self.storage.active_views),
        }
