"""Read access to OS-level system properties.

Values come from the process environment. A handful of well-known keys
(``os.name``, ``user.home``, ``user.language``, ``user.region``) are derived
from the running interpreter when the environment does not define them.
"""

import locale
import os
import platform
from pathlib import Path
from typing import Dict, MutableMapping, Optional, Tuple


def default_locale() -> Tuple[str, str]:
    """(language, region) of the interpreter's locale; either may be empty."""
    language_code = locale.getlocale()[0] or ""
    language, _, region = language_code.partition("_")
    return language, region


def _derived_properties() -> Dict[str, str]:
    language, region = default_locale()
    os_name = platform.system()
    if os_name == "Darwin":
        os_name = "Mac OS X"
    derived = {
        "os.name": os_name,
        "user.home": str(Path.home()),
    }
    if language:
        derived["user.language"] = language
    if region:
        derived["user.region"] = region
    return derived


class SystemProperties:
    """Environment-backed property lookup.

    Args:
        environ: Mapping to read from and publish to. Defaults to os.environ.
        derived: Fallback values for keys missing from ``environ``. Defaults
            to values derived from the running interpreter.
    """

    def __init__(
        self,
        environ: Optional[MutableMapping[str, str]] = None,
        derived: Optional[Dict[str, str]] = None,
    ) -> None:
        self._environ = os.environ if environ is None else environ
        self._derived = _derived_properties() if derived is None else dict(derived)

    def get(self, key: Optional[str], default: Optional[str] = None) -> Optional[str]:
        """Returns the value of ``key`` or ``default`` when it is not set."""
        if key is None:
            return default
        if key in self._environ:
            return self._environ[key]
        return self._derived.get(key, default)

    def set(self, key: str, value: str) -> None:
        """Publishes a value so that code reading the environment later sees it."""
        self._environ[key] = value
