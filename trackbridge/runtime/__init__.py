"""Runtime package.

Keep this module dependency-light: importing `trackbridge.runtime.*` must not
pull in a native SDK binding.
"""

__all__: list[str] = []
