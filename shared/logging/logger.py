"""Logger lookup for siphon components.

Modules grab their logger at import time, before the entrypoint has switched
the root logger to JSON. Until then records go to a plain-text stderr
handler so one-off scripts and the REPL still show them.
"""

from __future__ import annotations

import logging

_FALLBACK_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return the named logger, propagating to the root handler.

    Installs the plain-text fallback only when the root logger has no
    handler yet; configure_logging replaces it with the JSON handler.
    """
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format=_FALLBACK_FORMAT)

    logger = logging.getLogger(name)
    logger.propagate = True
    return logger
