from .stream import FrameStream
from .coordinator import Session
from .async_session import AsyncSession

__all__ = ["AsyncSession", "FrameStream", "Session"]
