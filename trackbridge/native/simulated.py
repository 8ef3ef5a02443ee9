"""In-process stand-in for the native tracking SDK.

Frames are scripted with `emit()` from any thread and delivered to connected
callbacks only inside `update()`/`wait_update()`, on the driving thread, the
way the real SDK behaves. Failures can be injected per operation.
"""

from __future__ import annotations

import math
import logging
import threading
import itertools
from typing import Any
from collections.abc import Iterable, Mapping

from trackbridge.state.frames import Vector3
from trackbridge.native.event import NativeEvent
from trackbridge.state.devices import DeviceInfo
from trackbridge.bridge.ownership import NativeRef
from trackbridge.native.backend import NativeCallback
from trackbridge.config.modules import MODULE_EVENTS, SNAPSHOT_EVENTS, ModuleKind
from trackbridge.native.errors import NativeError, NativeTimeoutError, NativeReleasedError
from trackbridge.native.simulated_module import PendingEvent, SimulatedModule, empty_payload

logger = logging.getLogger(__name__)

DEFAULT_DEVICES = (
    DeviceInfo(name="Simulated Depth Camera", serial_number="SIM-0001", provider_name="simulated", index=0),
)


class SimulatedBackend:
    def __init__(
        self,
        *,
        devices: Iterable[DeviceInfo] = DEFAULT_DEVICES,
        unavailable: Iterable[ModuleKind] = (),
    ) -> None:
        self._cond = threading.Condition()
        self._ids = itertools.count(1)
        self._modules: list[SimulatedModule] = []
        self._failures: dict[str, BaseException] = {}
        self._config: dict[str, str] = {}
        self._devices = list(devices)
        self._unavailable = set(unavailable)
        self._cancel_epoch = 0
        self._licensed = True
        self.initialized = False
        self.running = False
        self.config_path = ""
        self.selected_device: DeviceInfo | None = None
        self.freed_frames = 0
        self.init_count = 0
        self.release_count = 0

    # ---- test controls ----

    def fail_next(self, operation: str, exc: BaseException | None = None) -> None:
        """Make the next call of `operation` raise `exc` (a generic NativeError by default)."""
        with self._cond:
            self._failures[operation] = exc or NativeError(f"simulated {operation} failure")

    def revoke_license(self) -> None:
        """Every following driving call fails the way an unlicensed SDK does."""
        with self._cond:
            self._licensed = False

    def emit(self, module: SimulatedModule, event: str, payload: Any) -> int:
        """Queue one produced item for `module`; returns its sequence number."""
        if event not in MODULE_EVENTS[module.kind]:
            raise ValueError(f"{module.kind.value} does not emit {event!r}")
        ref = NativeRef(payload, on_release=self._on_frame_freed, label=f"{module.kind.value} frame")
        with self._cond:
            sequence = module.next_sequence
            module.next_sequence += 1
            module.timestamp = getattr(payload, "timestamp", module.timestamp)
            module.pending.append(PendingEvent(event=event, ref=ref, sequence=sequence))
            if SNAPSHOT_EVENTS.get(module.kind) == event:
                previous, module.latest = module.latest, ref.acquire()
                if previous is not None:
                    previous.release()
            self._cond.notify_all()
        return sequence

    def connection_count(self, module: SimulatedModule) -> int:
        with self._cond:
            return len(module.connections)

    def pending_count(self, module: SimulatedModule) -> int:
        with self._cond:
            return len(module.pending)

    # ---- NativeBackend ----

    def init(self, config_path: str, config: Mapping[str, str]) -> None:
        self._check("init")
        with self._cond:
            if self.initialized:
                raise NativeError("SDK is already initialized")
            self.config_path = config_path
            self._config = dict(config)
            self.initialized = True
            self.init_count += 1

    def run(self) -> None:
        self._check("run")
        self._require_initialized()
        self.running = True

    def update(self) -> None:
        self._check("update")
        self._check_license()
        with self._cond:
            self._require_initialized()
            batch = [(module, module.pending.popleft()) for module in self._modules for _ in range(len(module.pending))]
        for module, item in batch:
            self._fire(module, item)

    def wait_update(self, module: SimulatedModule, timeout_s: float | None) -> None:
        self._check("wait_update")
        self._check_license()
        with self._cond:
            self._require_initialized()
            epoch = self._cancel_epoch
            ready = self._cond.wait_for(
                lambda: bool(module.pending) or self._cancel_epoch != epoch or not self.initialized,
                timeout=timeout_s,
            )
            if self._cancel_epoch != epoch or not self.initialized:
                raise NativeReleasedError("wait cancelled: SDK is shutting down")
            if not ready:
                raise NativeTimeoutError(f"no data from {module.kind.value} within {timeout_s}s")
            batch = list(module.pending)
            module.pending.clear()
        for item in batch:
            self._fire(module, item)

    def cancel_waits(self) -> None:
        with self._cond:
            self._cancel_epoch += 1
            self._cond.notify_all()

    def release(self) -> None:
        # An injected release failure is raised after teardown, like a driver
        # that reports an error while shutting down.
        try:
            self._teardown()
        finally:
            self._check("release")

    def _teardown(self) -> None:
        with self._cond:
            modules, self._modules = self._modules, []
            self.initialized = False
            self.running = False
            self.release_count += 1
            self._cancel_epoch += 1
            self._cond.notify_all()
        for module in modules:
            self._destroy(module)
        logger.debug("simulated SDK released (%d modules destroyed)", len(modules))

    def set_config_value(self, key: str, value: str) -> None:
        self._check("set_config_value")
        self._require_initialized()
        with self._cond:
            self._config[key] = value

    def get_config_value(self, key: str) -> str:
        self._check("get_config_value")
        self._require_initialized()
        with self._cond:
            return self._config.get(key, "")

    def list_devices(self) -> list[DeviceInfo]:
        self._check("list_devices")
        return list(self._devices)

    def select_device(self, device: DeviceInfo) -> None:
        self._check("select_device")
        self.selected_device = device

    def create_module(self, kind: ModuleKind) -> SimulatedModule:
        self._check("create_module")
        self._require_initialized()
        if kind in self._unavailable:
            raise NativeError(f"{kind.value} is not available on this device")
        with self._cond:
            module = SimulatedModule(kind=kind, module_id=next(self._ids))
            module.latest = NativeRef(empty_payload(kind), on_release=self._on_frame_freed, label=f"{kind.value} frame")
            self._modules.append(module)
        return module

    def connect(self, module: SimulatedModule, event: str, callback: NativeCallback) -> int:
        self._check("connect")
        if event not in MODULE_EVENTS[module.kind]:
            raise NativeError(f"{module.kind.value} has no {event} signal")
        with self._cond:
            if module.destroyed:
                raise NativeError(f"{module.kind.value} module was destroyed")
            native_id = next(self._ids)
            module.connections[native_id] = (event, callback)
        return native_id

    def disconnect(self, module: SimulatedModule, native_id: int) -> None:
        self._check("disconnect")
        with self._cond:
            if module.connections.pop(native_id, None) is None:
                raise NativeError(f"no connection {native_id} on {module.kind.value}")

    def call(self, module: SimulatedModule, operation: str, *args: Any) -> Any:
        self._check(operation)
        handler = getattr(self, f"_op_{operation}", None)
        if handler is None:
            raise NativeError(f"{module.kind.value} has no operation {operation}")
        with self._cond:
            if module.destroyed:
                raise NativeError(f"{module.kind.value} module was destroyed")
            return handler(module, *args)

    # ---- module operations ----

    def _op_processing_time(self, module: SimulatedModule) -> float:
        return module.processing_time

    def _op_timestamp(self, module: SimulatedModule) -> int:
        return module.timestamp

    def _op_can_update(self, module: SimulatedModule) -> bool:
        return bool(module.pending)

    def _op_latest(self, module: SimulatedModule) -> NativeRef:
        # Counted while the lock is held, so a concurrent emit() cannot free it first.
        if module.latest is None:
            raise NativeError(f"{module.kind.value} has no frame yet")
        return module.latest.acquire()

    def _op_output_mode(self, module: SimulatedModule):
        return module.output_mode

    def _op_is_mirror(self, module: SimulatedModule) -> bool:
        return module.mirror

    def _op_set_mirror(self, module: SimulatedModule, mirror: bool) -> None:
        module.mirror = bool(mirror)

    def _op_set_num_active_users(self, module: SimulatedModule, num_users: int) -> None:
        module.num_active_users = num_users

    def _op_is_auto_tracking(self, module: SimulatedModule) -> bool:
        return module.auto_tracking

    def _op_set_auto_tracking(self, module: SimulatedModule, enabled: bool) -> None:
        module.auto_tracking = bool(enabled)

    def _op_start_tracking(self, module: SimulatedModule, user_id: int) -> None:
        module.tracked_users.add(user_id)

    def _op_stop_tracking(self, module: SimulatedModule, user_id: int) -> None:
        module.tracked_users.discard(user_id)

    def _op_is_tracking(self, module: SimulatedModule, user_id: int) -> bool:
        return module.auto_tracking or user_id in module.tracked_users

    def _op_set_control_gestures_status(self, module: SimulatedModule, enabled: bool) -> None:
        module.control_gestures = bool(enabled)

    def _op_convert_proj_to_real(self, module: SimulatedModule, point: Vector3) -> Vector3:
        mode = module.output_mode
        focal = mode.xres / (2.0 * math.tan(mode.hfov / 2.0))
        return Vector3(
            x=(point.x - mode.xres / 2.0) * point.z / focal,
            y=(mode.yres / 2.0 - point.y) * point.z / focal,
            z=point.z,
        )

    def _op_convert_real_to_proj(self, module: SimulatedModule, point: Vector3) -> Vector3:
        mode = module.output_mode
        if point.z == 0:
            return Vector3(x=mode.xres / 2.0, y=mode.yres / 2.0, z=0.0)
        focal = mode.xres / (2.0 * math.tan(mode.hfov / 2.0))
        return Vector3(
            x=point.x * focal / point.z + mode.xres / 2.0,
            y=mode.yres / 2.0 - point.y * focal / point.z,
            z=point.z,
        )

    # ---- internals ----

    def _fire(self, module: SimulatedModule, item: PendingEvent) -> None:
        with self._cond:
            callbacks = [cb for event, cb in module.connections.values() if event == item.event]
        event = NativeEvent(ref=item.ref, sequence=item.sequence)
        try:
            for callback in callbacks:
                callback(event)
        finally:
            # The SDK's own buffer count ends once every subscriber has seen the frame.
            item.ref.release()

    def _destroy(self, module: SimulatedModule) -> None:
        with self._cond:
            module.destroyed = True
            module.connections.clear()
            pending = list(module.pending)
            module.pending.clear()
            latest, module.latest = module.latest, None
        for item in pending:
            item.ref.release()
        if latest is not None:
            latest.release()

    def _on_frame_freed(self, _payload: Any) -> None:
        with self._cond:
            self.freed_frames += 1

    def _check(self, operation: str) -> None:
        with self._cond:
            exc = self._failures.pop(operation, None)
        if exc is not None:
            raise exc

    def _check_license(self) -> None:
        if not self._licensed:
            raise NativeError("LicenseNotAcquired: license is not activated for this device")

    def _require_initialized(self) -> None:
        if not self.initialized:
            raise NativeError("SDK is not initialized")


__all__ = ["DEFAULT_DEVICES", "SimulatedBackend"]
