from .container import ServiceContainer
from .resolver import get_container, get_storage

__all__ = ["ServiceContainer", "get_container", "get_storage"]
