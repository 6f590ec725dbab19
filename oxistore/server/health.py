"""Server health utilities.

`get_health` reports process uptime and, when given a storage, whether
its root container can still be read from the backend.
"""
from datetime import datetime, timezone
import logging
import time
from typing import Optional

from oxistore import __version__
from oxistore.store import OxiStorage
from oxistore.tree import ROOT, is_descriptor

logger = logging.getLogger(__name__)

# process start, taken at import
_START_TIME = time.time()


def _storage_status(storage: OxiStorage) -> str:
    try:
        root = storage.backend.get(ROOT)
    except (OSError, ValueError) as e:
        logger.warning("Storage health check failed: %s", e)
        return "error"
    return "ok" if is_descriptor(root) else "missing_root"


def get_health(storage: Optional[OxiStorage] = None) -> dict:
    """Return a dict representing server health.

    Fields:
    - status: 'ok', or 'degraded' when the storage check fails
    - start_time: ISO 8601 UTC timestamp when the process started
    - uptime_seconds: integer seconds since start
    - version: package version
    - storage: root record status, only when a storage is given
    """
    start_dt = datetime.fromtimestamp(_START_TIME, tz=timezone.utc)
    health = {
        "status": "ok",
        "start_time": start_dt.isoformat(),
        "uptime_seconds": int(time.time() - _START_TIME),
        "version": __version__,
    }
    if storage is not None:
        health["storage"] = _storage_status(storage)
        if health["storage"] != "ok":
            health["status"] = "degraded"
    return health
