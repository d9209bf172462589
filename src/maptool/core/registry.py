"""Single source of truth for every named setting.

Values are resolved with the precedence (low -> high)
default -> system property -> startup file -> command line.
Directory-valued settings are normalized to absolute paths and cached for the
lifetime of the registry.

Bootstrap order:
    1. startup_file_path() uses only the command line, system properties and
       defaults. A name without a path separator is placed under
       ``<data dir>/config``; in that case the data directory is resolved
       without looking at the startup file.
    2. The startup file is loaded and handed over with bind_startup_file().
       Only if its path was absolute may it redefine the data directory.
"""

import os
import warnings
from pathlib import Path
from typing import Optional, Tuple

from maptool.core.cache import ResolvedValueCache, cached
from maptool.core.cmdline import CommandLineSource
from maptool.core.errors import ConfigurationError, UnusableDirectoryError
from maptool.core.settings import (
    STARTUP_FILE_SETTINGS,
    AutosaveChoice,
    Setting,
    classify_autosave,
    default_int,
    descriptor,
    effective_key,
    parse_integer,
)
from maptool.core.startup_file import StartupFileSource
from maptool.core.system import SystemProperties

FORBIDDEN_PATH_CHARACTERS = "!"


def looks_absolute(value: str) -> bool:
    """True if ``value`` contains any path separator spelling."""
    return os.sep in value or "/" in value or "\\" in value


def check_usable_path(path: str) -> None:
    """Raises UnusableDirectoryError if ``path`` contains a forbidden character.

    "!" separates archive and member in jar-style resource URLs.
    """
    if any(c in path for c in FORBIDDEN_PATH_CHARACTERS):
        raise UnusableDirectoryError(path)


def normalize_directory(value: str, parent: str) -> Path:
    """Makes ``value`` absolute, placing it under ``parent`` if it looks relative."""
    if not looks_absolute(value):
        value = os.path.join(parent, value)
    absolute = os.path.abspath(value)
    check_usable_path(absolute)
    return Path(absolute)


class PropertyRegistry:
    """Resolves settings from the command line, startup file and system properties.

    Args:
        system: System property source.
        cmdline: Parsed command line.
        startup_file: Startup properties; may be bound later with
            bind_startup_file() once its path is known.
    """

    def __init__(
        self,
        system: SystemProperties,
        cmdline: CommandLineSource,
        startup_file: Optional[StartupFileSource] = None,
    ) -> None:
        self.system = system
        self.cmdline = cmdline
        self.startup_file = startup_file
        self._cache = ResolvedValueCache()
        self._startup_file_name_original: Optional[str] = None
        self._startup_file_path_absolute = False

    def bind_startup_file(self, startup_file: StartupFileSource) -> None:
        self.startup_file = startup_file

    # ------------------------------------------------------------------
    # Generic precedence chain
    # ------------------------------------------------------------------

    def _system_value(self, setting: Setting, default: Optional[str]) -> Optional[str]:
        return self.system.get(effective_key(setting), default)

    def _file_value(self, setting: Setting, default: Optional[str]) -> Optional[str]:
        if self.startup_file is None or setting not in STARTUP_FILE_SETTINGS:
            return default
        return self.startup_file.get_option(effective_key(setting), default)

    def _file_flag(self, setting: Setting) -> bool:
        if self.startup_file is None:
            return False
        return self.startup_file.has_option(effective_key(setting))

    def _cli_option(self, setting: Setting) -> Optional[str]:
        return descriptor(setting).cli_long_option

    def resolve(self, setting: Setting) -> Optional[str]:
        """Resolves a setting through every layer it takes part in.

        The startup file layer only applies to settings it is allowed to
        define.
        """
        value = self._system_value(setting, descriptor(setting).default_value)
        value = self._file_value(setting, value)
        return self.cmdline.get_option(self._cli_option(setting), value)

    def resolve_int(self, setting: Setting) -> int:
        return parse_integer(self.resolve(setting), default_int(setting))

    # ------------------------------------------------------------------
    # Operating system
    # ------------------------------------------------------------------

    @property
    def os_name(self) -> str:
        return self._system_value(Setting.OS_NAME, "") or ""

    def is_windows_os(self) -> bool:
        return self.os_name.lower().startswith("windows")

    def is_mac_os(self) -> bool:
        return self.os_name.lower().startswith("mac os x")

    def is_unix_os(self) -> bool:
        os_name = self.os_name.lower()
        return any(part in os_name for part in ("nix", "nux", "aix", "sunos"))

    @property
    def user_home(self) -> str:
        return self._system_value(Setting.USER_HOME, None) or str(Path.home())

    # ------------------------------------------------------------------
    # Directories and the startup file
    # ------------------------------------------------------------------

    @property
    def config_subdir_name(self) -> str:
        return descriptor(Setting.CONFIG_SUBDIR_NAME).default_value or "config"

    @property
    def tmp_subdir_name(self) -> str:
        return descriptor(Setting.TEMP_SUBDIR_NAME).default_value or "tmp"

    @cached(Setting.DATA_DIR_NAME)
    def data_dir(self) -> Path:
        """Absolute data directory, by default ``<user home>/.maptool``.

        A value without any path separator is taken as a subdirectory of the
        user's home directory.
        """
        self._classify_startup_file_name()
        if self._startup_file_path_absolute and self.startup_file is None:
            raise ConfigurationError(
                Setting.DATA_DIR_NAME.name, message_key="msg.error.startupFileNotLoaded"
            )
        value = self._system_value(Setting.DATA_DIR_NAME, descriptor(Setting.DATA_DIR_NAME).default_value)
        if self._startup_file_path_absolute:
            value = self._file_value(Setting.DATA_DIR_NAME, value)
        value = self.cmdline.get_option(self._cli_option(Setting.DATA_DIR_NAME), value)
        return normalize_directory(value or "", self.user_home)

    @cached(Setting.LOG_DIR_NAME)
    def log_dir(self) -> Path:
        """Absolute log directory, by default ``<data dir>/logs``.

        The resolved value is published as a system property so that logging
        configured outside this registry can find it.
        """
        value = self._system_value(Setting.LOG_DIR_NAME, descriptor(Setting.LOG_DIR_NAME).default_value)
        value = self._file_value(Setting.LOG_DIR_NAME, value)
        path = normalize_directory(value or "", str(self.data_dir()))
        self.system.set(effective_key(Setting.LOG_DIR_NAME), str(path))
        return path

    def _classify_startup_file_name(self) -> str:
        """Resolves the raw startup file name and whether it is a path.

        Uses only the command line, system properties and the default, so it
        is safe to call while the data directory is being resolved.
        """
        if self._startup_file_name_original is None:
            original = self.resolve(Setting.STARTUP_PROPS_FILE_NAME) or ""
            self._startup_file_name_original = original
            self._startup_file_path_absolute = looks_absolute(original)
        return self._startup_file_name_original

    @cached(Setting.STARTUP_PROPS_FILE_NAME)
    def startup_file_path(self) -> Path:
        """Absolute path of the startup properties file.

        A name with a path separator is used as is, and the data directory
        may then be redefined inside the file. Otherwise the file lives in
        ``<data dir>/config`` and cannot redefine the data directory.
        """
        original = self._classify_startup_file_name()
        if self._startup_file_path_absolute:
            path = original
        else:
            path = os.path.join(str(self.data_dir()), self.config_subdir_name, original)
        absolute = os.path.abspath(path)
        check_usable_path(absolute)
        return Path(absolute)

    @property
    def startup_file_path_absolute(self) -> bool:
        self._classify_startup_file_name()
        return self._startup_file_path_absolute

    @property
    def startup_file_name_original(self) -> str:
        return self._classify_startup_file_name()

    def reset_directory_caches(self) -> None:
        """Forgets the cached directory values so they are resolved again.

        Deprecated: only meant for tests.
        """
        warnings.warn(
            "reset_directory_caches() is only meant for tests",
            DeprecationWarning,
            stacklevel=2,
        )
        self._cache.clear(Setting.DATA_DIR_NAME, Setting.LOG_DIR_NAME)

    # ------------------------------------------------------------------
    # Command line only
    # ------------------------------------------------------------------

    def debug_flag(self) -> bool:
        return self.cmdline.has_option(self._cli_option(Setting.DEBUG_FLAG))

    def reset_flag(self) -> bool:
        return self.cmdline.has_option(self._cli_option(Setting.RESET_FLAG))

    def list_macros_flag(self) -> bool:
        return self.cmdline.has_option(self._cli_option(Setting.LIST_MACROS_FLAG))

    def version_overwrite(self) -> Optional[str]:
        """Version string overriding the built-in one, None by default."""
        return self.cmdline.get_option(
            self._cli_option(Setting.VERSION_OVERWRITE),
            descriptor(Setting.VERSION_OVERWRITE).default_value,
        )

    def _cli_int(self, setting: Setting) -> int:
        return self.cmdline.get_int_option(self._cli_option(setting), default_int(setting))

    def monitor_to_use(self) -> int:
        return self._cli_int(Setting.MONITOR_TO_USE)

    def window_width(self) -> int:
        return self._cli_int(Setting.WINDOW_WIDTH)

    def window_height(self) -> int:
        return self._cli_int(Setting.WINDOW_HEIGHT)

    def window_xpos(self) -> int:
        return self._cli_int(Setting.WINDOW_XPOS)

    def window_ypos(self) -> int:
        return self._cli_int(Setting.WINDOW_YPOS)

    # ------------------------------------------------------------------
    # Startup file and command line
    # ------------------------------------------------------------------

    def fullscreen_flag(self) -> bool:
        """True if either the startup file or the command line asks for it."""
        return self._file_flag(Setting.FULLSCREEN_FLAG) or self.cmdline.has_option(
            self._cli_option(Setting.FULLSCREEN_FLAG)
        )

    def load_server_flag(self) -> bool:
        """True if either the startup file or the command line asks for it."""
        return self._file_flag(Setting.LOAD_SERVER_FLAG) or self.cmdline.has_option(
            self._cli_option(Setting.LOAD_SERVER_FLAG)
        )

    def skip_auto_update_flag(self) -> bool:
        return self._file_flag(Setting.SKIP_AUTO_UPDATE_FLAG)

    def load_server_delay(self) -> int:
        """Seconds to wait before starting the server."""
        return self.resolve_int(Setting.LOAD_SERVER_DELAY)

    def load_campaign_name(self) -> Optional[str]:
        """Campaign to load at startup; ``--campaign`` beats the deprecated ``--file``."""
        value = self._system_value(
            Setting.LOAD_CAMPAIGN_NAME, descriptor(Setting.LOAD_CAMPAIGN_NAME).default_value
        )
        value = self._file_value(Setting.LOAD_CAMPAIGN_NAME, value)
        value = self.cmdline.get_option(self._cli_option(Setting.DEPRECATED_LOAD_CAMPAIGN_NAME), value)
        return self.cmdline.get_option(self._cli_option(Setting.LOAD_CAMPAIGN_NAME), value)

    def load_autosave(self) -> AutosaveChoice:
        return classify_autosave(self.resolve(Setting.LOAD_AUTOSAVE_FILE))

    def locale(self) -> Tuple[str, str]:
        """(language, region) from the startup file or system properties."""
        return (
            self.resolve(Setting.LOCALE_LANGUAGE) or "",
            self.resolve(Setting.LOCALE_REGION) or "",
        )
