"""Central level-based logger (standard library `logging`).

Env:
- LOG_LEVEL: DEBUG|INFO|WARNING|ERROR|CRITICAL (default: INFO)
"""

from __future__ import annotations

import logging
import os
from typing import Optional

_CONFIGURED_MARKER = "_k8s_kv_configured"


def _level_from_env() -> int:
    raw = (os.getenv("LOG_LEVEL") or "INFO").upper().strip()
    level = getattr(logging, raw, logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger, configuring the root logger on first use.

    Configuration happens once per process; later calls only re-apply the
    level from LOG_LEVEL so tests and hosts can change it at runtime.
    """
    level = _level_from_env()
    root = logging.getLogger()
    if not getattr(root, _CONFIGURED_MARKER, False):
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        )
        setattr(root, _CONFIGURED_MARKER, True)
    root.setLevel(level)
    return logging.getLogger(name or "k8s_kv")
