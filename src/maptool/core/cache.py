"""Process-lifetime cache for resolved setting values.

Values whose resolution is expensive or must be idempotent (data directory,
log directory, startup file path) are computed once and kept until the
process exits. Each entry moves through UNSET -> RESOLVING -> RESOLVED;
RESOLVING guards against re-entrant resolution.
"""

from enum import Enum
from functools import wraps
from typing import Any, Callable, Dict, Optional, Tuple

from loguru import logger

from maptool.core.errors import ResolutionCycleError
from maptool.core.settings import Setting


class CacheState(Enum):
    UNSET = "unset"
    RESOLVING = "resolving"
    RESOLVED = "resolved"


class ResolvedValueCache:
    """Keyed by Setting, holds the first computed value of each setting.

    Attributes:
        _entries: Mapping of setting to (state, value).
    """

    def __init__(self) -> None:
        self._entries: Dict[Setting, Tuple[CacheState, Any]] = {}

    def state(self, setting: Setting) -> CacheState:
        return self._entries.get(setting, (CacheState.UNSET, None))[0]

    def get(self, setting: Setting) -> Optional[Any]:
        """Returns the resolved value, or None if not resolved yet."""
        state, value = self._entries.get(setting, (CacheState.UNSET, None))
        return value if state is CacheState.RESOLVED else None

    def begin(self, setting: Setting) -> None:
        """Marks ``setting`` as being resolved.

        Raises:
            ResolutionCycleError: If it is already being resolved.
        """
        if self.state(setting) is CacheState.RESOLVING:
            raise ResolutionCycleError(setting.name)
        self._entries[setting] = (CacheState.RESOLVING, None)

    def abort(self, setting: Setting) -> None:
        """Returns a setting to UNSET after a failed resolution."""
        if self.state(setting) is CacheState.RESOLVING:
            del self._entries[setting]

    def set(self, setting: Setting, value: Any) -> None:
        self._entries[setting] = (CacheState.RESOLVED, value)
        logger.debug(f"Resolved {setting.name}: {value}")

    def clear(self, *settings: Setting) -> None:
        """Clears the given settings, or everything when none are given."""
        if not settings:
            self._entries.clear()
            return
        for setting in settings:
            self._entries.pop(setting, None)


def cached(setting: Setting) -> Callable:
    """Decorator computing a method's value once per instance.

    The instance must expose a ResolvedValueCache as ``_cache``. A failed
    resolution leaves the entry UNSET so nothing invalid reaches the cache.

    Example:
        @cached(Setting.DATA_DIR_NAME)
        def data_dir(self) -> Path:
            ...
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            cache: ResolvedValueCache = self._cache
            if cache.state(setting) is CacheState.RESOLVED:
                return cache.get(setting)
            cache.begin(setting)
            try:
                value = func(self, *args, **kwargs)
            except BaseException:
                cache.abort(setting)
                raise
            cache.set(setting, value)
            return value

        return wrapper

    return decorator
