"""The seam between the bridge and a native tracking SDK binding."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol
from collections.abc import Callable, Mapping

if TYPE_CHECKING:
    from trackbridge.state.devices import DeviceInfo
    from trackbridge.config.modules import ModuleKind
    from trackbridge.native.event import NativeEvent

NativeCallback = Callable[["NativeEvent"], None]


class NativeBackend(Protocol):
    """Everything the bridge needs from a native binding.

    Implementations call connected callbacks only from inside `update()` or
    `wait_update()`, on the calling thread. Failures are signalled by raising;
    the bridge translates every exception at the call site.
    """

    def init(self, config_path: str, config: Mapping[str, str]) -> None: ...

    def run(self) -> None: ...

    def update(self) -> None: ...

    def wait_update(self, module: Any, timeout_s: float | None) -> None: ...

    def cancel_waits(self) -> None: ...

    def release(self) -> None: ...

    def set_config_value(self, key: str, value: str) -> None: ...

    def get_config_value(self, key: str) -> str: ...

    def list_devices(self) -> list[DeviceInfo]: ...

    def select_device(self, device: DeviceInfo) -> None: ...

    def create_module(self, kind: ModuleKind) -> Any: ...

    def connect(self, module: Any, event: str, callback: NativeCallback) -> int: ...

    def disconnect(self, module: Any, native_id: int) -> None: ...

    def call(self, module: Any, operation: str, *args: Any) -> Any:
        """Run a per-module operation.

        `"latest"` returns the module's newest frame as a `NativeRef` that already
        carries one count for the caller; the bridge adopts that count instead of
        acquiring its own, so the frame cannot be freed in between.
        """
        ...


__all__ = ["NativeBackend", "NativeCallback"]
