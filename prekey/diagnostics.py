"""
Diagnostics sink injected into the session oracle and key initializer.

Events carry peer identities and key ids only, never key material.
"""

import logging
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)


class Diagnostics(Protocol):
    def event(self, name: str, **fields: Any) -> None: ...


class LoggingDiagnostics:
    def __init__(self, log: Optional[logging.Logger] = None, level: int = logging.INFO):
        self.log = log or logging.getLogger("prekey.events")
        self.level = level

    def event(self, name: str, **fields: Any) -> None:
        detail = " ".join(f"{k}={v}" for k, v in sorted(fields.items()))
        self.log.log(self.level, "%s %s", name, detail)


class NullDiagnostics:
    def event(self, name: str, **fields: Any) -> None:
        pass


def emit(diagnostics: Diagnostics, name: str, **fields: Any) -> None:
    """Send an event; a failing sink is reported and otherwise ignored."""
    try:
        diagnostics.event(name, **fields)
    except Exception:
        logger.debug("diagnostics sink failed on %s", name, exc_info=True)
