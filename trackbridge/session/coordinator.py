"""Process-wide lifecycle of the native tracking SDK."""

from __future__ import annotations

import time
import logging
import weakref
import threading
import contextlib
from typing import Any
from collections.abc import Iterator

from trackbridge.modules import (
    HANDLE_TYPES,
    DepthSensor,
    ColorSensor,
    HandTracker,
    UserTracker,
    SkeletonTracker,
    GestureRecognizer,
)
from trackbridge.state.session import SessionState
from trackbridge.state.dispatch import DispatchReport
from trackbridge.bridge.dispatch import DispatchAdapter
from trackbridge.native.backend import NativeBackend
from trackbridge.bridge.translate import native_call
from trackbridge.config.modules import ModuleKind
from trackbridge.native.simulated import SimulatedBackend
from trackbridge.runtime.config_file import load_config_file
from trackbridge.bridge.handle import ModuleHandle, require_handle
from trackbridge.state.devices import DeviceInfo, DeviceSelector
from trackbridge.runtime.settings_loader import load_settings
from trackbridge.state.settings import BridgeSettings
from trackbridge.errors import BridgeError, InitError, UpdateError, UnknownError, CreationError, NullHandleError
from trackbridge.config.session import (
    REASON_RUN_FAILED,
    REASON_INVALID_STATE,
    REASON_CONCURRENT_WAIT,
    REASON_DEVICE_NOT_FOUND,
    REASON_REENTRANT_UPDATE,
    REASON_ALREADY_INITIALIZED,
    REASON_SESSION_RELEASED,
    REASON_SESSION_NOT_INITIALIZED,
    REASON_RELEASE_DURING_DISPATCH,
    REASON_DISPATCH_IN_PROGRESS,
)

logger = logging.getLogger(__name__)

# Held by whichever Session is initialized; the native SDK is a process-wide singleton.
_PROCESS_CLAIM = threading.Lock()

# How often release() re-signals blocked waiters while waiting for the driving lock.
_CANCEL_RETRY_S = 0.05


class Session:
    """Owns the native SDK between `init()` and `release()`.

    States: UNINITIALIZED -> INITIALIZED (init) -> RUNNING (run) -> RELEASED
    (release) -> INITIALIZED (init again). Only one Session per process can be
    initialized at a time. Driving calls (`update`, `wait_update`) are
    serialized; callbacks run on the thread that drives.
    """

    def __init__(self, backend: NativeBackend | None = None, *, settings: BridgeSettings | None = None) -> None:
        if backend is None:
            logger.info("no native backend given; using the simulated SDK")
            backend = SimulatedBackend()
        self.backend = backend
        self.settings = settings or load_settings()
        self.dispatcher = DispatchAdapter(drop_duplicates=self.settings.dispatch.drop_duplicate_frames)
        self.generation = 0
        self._state = SessionState.UNINITIALIZED
        self._state_lock = threading.RLock()
        self._driving = threading.Lock()
        self._handles: weakref.WeakSet[ModuleHandle] = weakref.WeakSet()
        self._warned_not_running = False

    @property
    def state(self) -> SessionState:
        return self._state

    def is_current(self, generation: int) -> bool:
        return self._state.is_active and generation == self.generation

    # ---- lifecycle ----

    def init(self, config_path: str = "") -> None:
        """Initialize the native SDK, optionally from a JSON key/value config file."""
        with self._state_lock:
            if self._state.is_active:
                raise InitError("session is already initialized", REASON_ALREADY_INITIALIZED)
            if not _PROCESS_CLAIM.acquire(blocking=False):
                raise InitError("another session is already initialized in this process", REASON_ALREADY_INITIALIZED)
            try:
                path = config_path or self.settings.session.config_path
                values = load_config_file(path) if path else {}
                with native_call("init", InitError):
                    self.backend.init(path, values)
            except BaseException:
                _PROCESS_CLAIM.release()
                self._state = SessionState.UNINITIALIZED
                raise
            self.generation += 1
            self._state = SessionState.INITIALIZED
            self._warned_not_running = False
            logger.info("session initialized (generation %d, config=%r)", self.generation, path or "<defaults>")

    def run(self) -> None:
        with self._state_lock:
            if self._state is not SessionState.INITIALIZED:
                raise InitError(f"run() needs an initialized session, state is {self._state.value}", REASON_INVALID_STATE)
            try:
                with native_call("run", InitError):
                    self.backend.run()
            except InitError as exc:
                logger.error("native run failed; tearing the session down: %s", exc)
                self._teardown(SessionState.UNINITIALIZED)
                reason = exc.reason_code if exc.is_license_error else REASON_RUN_FAILED
                raise InitError(exc.message, reason) from exc
            self._state = SessionState.RUNNING
            logger.info("session running")

    def release(self) -> None:
        """Tear the native SDK down and invalidate every handle it produced.

        Raises `UnknownError` (`dispatch_in_progress`) and leaves the session
        untouched when a driving call is still delivering callbacks after
        `release_timeout_s`.
        """
        if self.dispatcher.in_dispatch():
            raise UnknownError("release() cannot be called from inside a callback", REASON_RELEASE_DURING_DISPATCH)
        with self._state_lock:
            if not self._state.is_active:
                raise UnknownError("session is not initialized", REASON_SESSION_NOT_INITIALIZED)
            self._teardown(SessionState.RELEASED)
            logger.info("session released (generation %d)", self.generation)

    def _teardown(self, final_state: SessionState) -> None:
        previous, self._state = self._state, final_state
        timeout = self.settings.session.release_timeout_s
        if not self._await_driving_idle(timeout):
            # Callbacks are still being delivered; the native SDK and the process claim stay ours.
            self._state = previous
            logger.warning("driving call still delivering callbacks after %.1fs; session stays %s", timeout, previous.value)
            raise UnknownError(
                f"cannot release while a driving call is delivering callbacks (waited {timeout:.1f}s)",
                REASON_DISPATCH_IN_PROGRESS,
            )
        try:
            for handle in list(self._handles):
                handle._invalidate()
            self._handles = weakref.WeakSet()
            try:
                with native_call("release", UnknownError):
                    self.backend.release()
            except BridgeError:
                logger.exception("native release failed; session state was reset regardless")
        finally:
            self._driving.release()
            _PROCESS_CLAIM.release()

    def _await_driving_idle(self, timeout_s: float) -> bool:
        """Take the driving lock, waking blocked waiters until the in-flight call returns."""
        deadline = time.monotonic() + timeout_s
        while True:
            try:
                self.backend.cancel_waits()
            except Exception:
                logger.exception("cancelling blocked waits failed")
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            if self._driving.acquire(timeout=min(remaining, _CANCEL_RETRY_S)):
                return True

    # ---- driving calls ----

    def update(self) -> None:
        """Advance every module and deliver due callbacks on this thread."""
        with self._driving_call("update"):
            with native_call("update", UpdateError):
                self.backend.update()

    def wait_update(self, handle: ModuleHandle | None) -> None:
        """Block until `handle` has new data, then deliver only its callbacks."""
        handle = require_handle(handle)
        module = handle.native
        self._reject_reentrant("wait_update")
        if not handle.wait_lock.acquire(blocking=False):
            raise UpdateError(f"another thread is already waiting on this {handle.kind.value}", REASON_CONCURRENT_WAIT)
        try:
            timeout = self.settings.session.wait_update_timeout_s
            with self._driving_call(f"wait_update({handle.kind.value})"):
                with native_call(f"wait_update {handle.kind.value}", UpdateError):
                    self.backend.wait_update(module, timeout if timeout > 0 else None)
        finally:
            handle.wait_lock.release()

    @contextlib.contextmanager
    def _driving_call(self, operation: str) -> Iterator[DispatchReport]:
        self._reject_reentrant(operation)
        self._require_active(UpdateError, operation)
        with self._driving:
            self._require_active(UpdateError, operation)
            self._warn_if_not_running(operation)
            with self.dispatcher.driving(operation) as report:
                yield report
        report.raise_errors()

    def _reject_reentrant(self, operation: str) -> None:
        if self.dispatcher.driving_thread == threading.get_ident():
            raise UpdateError(f"{operation} called from inside a callback", REASON_REENTRANT_UPDATE)

    def _warn_if_not_running(self, operation: str) -> None:
        if self._state is SessionState.INITIALIZED and not self._warned_not_running:
            self._warned_not_running = True
            logger.warning("%s called before run(); the native pipeline produces no data until started", operation)

    def _require_active(self, error_cls: type[BridgeError], operation: str) -> None:
        if self._state is SessionState.RELEASED:
            raise error_cls(f"{operation}: session was released", REASON_SESSION_RELEASED)
        if not self._state.is_active:
            raise error_cls(f"{operation} needs an initialized session", REASON_SESSION_NOT_INITIALIZED)

    # ---- configuration and devices ----

    def set_config_value(self, key: str, value: str) -> None:
        self._require_active(UnknownError, "set_config_value")
        with native_call(f"set_config_value {key}", UnknownError):
            self.backend.set_config_value(key, str(value))

    def get_config_value(self, key: str) -> str:
        self._require_active(UnknownError, "get_config_value")
        with native_call(f"get_config_value {key}", UnknownError):
            return self.backend.get_config_value(key)

    def devices(self) -> list[DeviceInfo]:
        self._require_active(UnknownError, "devices")
        with native_call("list devices", UnknownError):
            return list(self.backend.list_devices())

    def select_device(self, selector: DeviceSelector | DeviceInfo | int | str = 0) -> DeviceInfo:
        """Pick the sensor by list index, serial number, or a DeviceInfo from `devices()`."""
        if isinstance(selector, DeviceInfo):
            device = selector
        else:
            if isinstance(selector, int):
                selector = DeviceSelector(index=selector)
            elif isinstance(selector, str):
                selector = DeviceSelector(index=None, serial_number=selector)
            device = next((d for d in self.devices() if selector.matches(d)), None)
            if device is None:
                raise CreationError(f"no device matches {selector}", REASON_DEVICE_NOT_FOUND)
        self._require_active(CreationError, "select_device")
        with native_call(f"select device {device.serial_number}", CreationError):
            self.backend.select_device(device)
        logger.info("selected device %s (%s)", device.name, device.serial_number)
        return device

    # ---- modules ----

    def create_module(self, kind: ModuleKind | str) -> ModuleHandle:
        kind = ModuleKind(kind)
        self._require_active(CreationError, f"create {kind.value}")
        with native_call(f"create {kind.value}", CreationError):
            module = self.backend.create_module(kind)
        try:
            handle = HANDLE_TYPES[kind](self, module)
        except NullHandleError as exc:
            raise CreationError(f"native SDK returned no {kind.value}", exc.reason_code) from exc
        self._handles.add(handle)
        logger.debug("created %s", kind.value)
        return handle

    def create_skeleton_tracker(self) -> SkeletonTracker:
        return self.create_module(ModuleKind.SKELETON_TRACKER)

    def create_hand_tracker(self) -> HandTracker:
        return self.create_module(ModuleKind.HAND_TRACKER)

    def create_user_tracker(self) -> UserTracker:
        return self.create_module(ModuleKind.USER_TRACKER)

    def create_depth_sensor(self) -> DepthSensor:
        return self.create_module(ModuleKind.DEPTH_SENSOR)

    def create_color_sensor(self) -> ColorSensor:
        return self.create_module(ModuleKind.COLOR_SENSOR)

    def create_gesture_recognizer(self) -> GestureRecognizer:
        return self.create_module(ModuleKind.GESTURE_RECOGNIZER)

    def connect(
        self,
        handle: ModuleHandle | None,
        context: Any = None,
        *,
        event: str,
        callback: Any = None,
        queue: Any = None,
        loop: Any = None,
    ) -> int:
        return require_handle(handle).connect(event, context, callback=callback, queue=queue, loop=loop)

    def disconnect(self, handle: ModuleHandle | None, handler_id: int) -> None:
        require_handle(handle).disconnect(handler_id)

    # ---- context manager ----

    def __enter__(self) -> Session:
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._state.is_active:
            self.release()

    def __repr__(self) -> str:
        return f"Session(state={self._state.value}, generation={self.generation})"


__all__ = ["Session"]
