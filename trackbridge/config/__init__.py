"""Configuration module exports (env names, defaults and constants only)."""

from .modules import MODULE_EVENTS, ModuleKind

__all__ = [
    "MODULE_EVENTS",
    "ModuleKind",
]
