"""
State transactions for the adventure engine.

A command is validated before anything changes, but composite effects can
still fail halfway (a second item overflowing a container the first one
just fit into, or an integrity error surfacing mid-commit). A transaction
keeps a deep copy of the WorldState and writes it back in place when the
command is abandoned, so every service holding the state sees the restore.
"""

from __future__ import annotations

import logging
from types import TracebackType

from src.models.state import WorldState

logger = logging.getLogger(__name__)


class StateTransaction:
    """
    Context manager giving all-or-nothing mutation of a WorldState.

    Example:
        with StateTransaction(state) as tx:
            ...mutate...
            if failed:
                tx.rollback()
    """

    def __init__(self, state: WorldState) -> None:
        self.state = state
        self._saved: WorldState | None = None
        self.rolled_back = False

    def __enter__(self) -> StateTransaction:
        self._saved = self.state.copy_deep()
        return self

    def rollback(self) -> None:
        """Restore the state captured on entry."""
        if self._saved is None:
            raise RuntimeError("Transaction was never started")
        saved = self._saved.copy_deep()
        for name in WorldState.model_fields:
            setattr(self.state, name, getattr(saved, name))
        self.rolled_back = True

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc is not None and not self.rolled_back:
            logger.error("Rolling back state after %s: %s", exc_type.__name__, exc)
            self.rollback()
        self._saved = None
