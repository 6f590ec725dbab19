from __future__ import annotations
import logging
from typing import Optional


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure root logging for oxistore entry points.

    `level` is a level name such as "INFO", usually taken from the
    StoreConfig `log_level`. Existing root handlers are replaced so the
    format and level apply even if something logged earlier. Returns a
    module logger for the caller.
    """
    log_level = logging.WARNING
    if level:
        numeric = getattr(logging, level.upper(), None)
        if isinstance(numeric, int):
            log_level = numeric

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    logging.basicConfig(level=log_level, format='%(asctime)s %(levelname)s [%(name)s]: %(message)s')
    logger = logging.getLogger(__name__)

    # Keep known noisy libraries quiet by default
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logger.debug("Log level set to %s", logging.getLevelName(log_level))

    return logger
