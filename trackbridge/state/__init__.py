from .session import SessionState
from .dispatch import DispatchReport
from .delivered import DeliveredFrame
from .registration import Registration
from .devices import DeviceInfo, DeviceSelector
from .settings import BridgeSettings, DispatchSettings, SessionSettings

__all__ = [
    "BridgeSettings",
    "DeliveredFrame",
    "DeviceInfo",
    "DeviceSelector",
    "DispatchReport",
    "DispatchSettings",
    "Registration",
    "SessionSettings",
    "SessionState",
]
