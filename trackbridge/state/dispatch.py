"""Per driving call bookkeeping for the dispatch adapter (dataclasses only)."""

from __future__ import annotations

from typing import TYPE_CHECKING
from dataclasses import dataclass, field

from trackbridge.errors import DispatchError
from trackbridge.config.dispatch import REASON_CALLBACK_FAILED

if TYPE_CHECKING:
    from trackbridge.bridge.handle import ModuleHandle
    from trackbridge.state.registration import Registration


@dataclass(slots=True)
class DispatchReport:
    """Collected while one update()/wait_update() runs; consumed when it returns."""

    operation: str
    thread_id: int
    delivered: int = 0
    dropped: int = 0
    failures: list[tuple[int, Exception]] = field(default_factory=list)
    deferred: list[tuple[ModuleHandle, Registration]] = field(default_factory=list)

    def record_failure(self, handler_id: int, exc: Exception) -> None:
        self.failures.append((handler_id, exc))

    def raise_errors(self) -> None:
        if not self.failures:
            return
        handler_id, first = self.failures[0]
        reason = first.reason_code if isinstance(first, DispatchError) else REASON_CALLBACK_FAILED
        count = len(self.failures)
        raise DispatchError(
            f"{count} delivery failure(s) during {self.operation}; first from handler {handler_id}: {first!r}",
            reason,
            handler_id=handler_id,
            failures=count,
        ) from first


__all__ = ["DispatchReport"]
