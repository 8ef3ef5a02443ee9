"""Cross-runtime bridge core: ownership, envelopes, registry and dispatch."""

from .ownership import NativeRef
from .envelope import FrameEnvelope
from .translate import native_call
from .dispatch import DispatchAdapter
from .registry import CallbackRegistry
from .handle import ModuleHandle, require_handle
from .delivery import CallDelivery, QueueDelivery

__all__ = [
    "CallDelivery",
    "CallbackRegistry",
    "DispatchAdapter",
    "FrameEnvelope",
    "ModuleHandle",
    "NativeRef",
    "QueueDelivery",
    "native_call",
    "require_handle",
]
