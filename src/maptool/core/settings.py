"""Descriptor table for every named application setting.

Each setting is declared once with the key it may appear under as a system
property (or startup file entry), its long command line option and a textual
default. The table is fixed at import time and never mutated.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from maptool.core.system import default_locale


class Setting(Enum):
    """Stable identifiers for the settings in DESCRIPTORS."""

    OS_NAME = "OS_NAME"
    USER_HOME = "USER_HOME"
    DATA_DIR_NAME = "DATA_DIR_NAME"
    LOG_DIR_NAME = "LOG_DIR_NAME"
    CONFIG_SUBDIR_NAME = "CONFIG_SUBDIR_NAME"
    TEMP_SUBDIR_NAME = "TEMP_SUBDIR_NAME"
    CMD_OPTIONS_HELP = "CMD_OPTIONS_HELP"
    DEBUG_FLAG = "DEBUG_FLAG"
    RESET_FLAG = "RESET_FLAG"
    LIST_MACROS_FLAG = "LIST_MACROS_FLAG"
    VERSION_OVERWRITE = "VERSION_OVERWRITE"
    FULLSCREEN_FLAG = "FULLSCREEN_FLAG"
    MONITOR_TO_USE = "MONITOR_TO_USE"
    WINDOW_WIDTH = "WINDOW_WIDTH"
    WINDOW_HEIGHT = "WINDOW_HEIGHT"
    WINDOW_XPOS = "WINDOW_XPOS"
    WINDOW_YPOS = "WINDOW_YPOS"
    LOAD_SERVER_FLAG = "LOAD_SERVER_FLAG"
    LOAD_SERVER_DELAY = "LOAD_SERVER_DELAY"
    LOAD_CAMPAIGN_NAME = "LOAD_CAMPAIGN_NAME"
    DEPRECATED_LOAD_CAMPAIGN_NAME = "DEPRECATED_LOAD_CAMPAIGN_NAME"
    LOAD_AUTOSAVE_FILE = "LOAD_AUTOSAVE_FILE"
    STARTUP_PROPS_FILE_NAME = "STARTUP_PROPS_FILE_NAME"
    SKIP_AUTO_UPDATE_FLAG = "SKIP_AUTO_UPDATE_FLAG"
    LOCALE_LANGUAGE = "LOCALE_LANGUAGE"
    LOCALE_REGION = "LOCALE_REGION"


class AutosaveChoice(Enum):
    """What to do when an autosave is newer than the campaign being loaded."""

    YES = "yes"
    NO = "no"
    ASK = "ask"


@dataclass(frozen=True)
class SettingDescriptor:
    """Static metadata for one setting.

    Attributes:
        setting: Identifier of the setting.
        system_key: Name under which the value may appear as a system property.
            None means no system property; "" means the identifier name.
        cli_long_option: Long command line option, or None if the setting
            cannot be overridden from the command line.
        default_value: Textual default, or None if there is none.
    """

    setting: Setting
    system_key: Optional[str]
    cli_long_option: Optional[str]
    default_value: Optional[str]


def parse_integer(value: Optional[str], default: int) -> int:
    """Parses ``value`` as an integer, returning ``default`` if that fails."""
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def classify_autosave(value: Optional[str]) -> AutosaveChoice:
    """Maps a textual answer to an AutosaveChoice by its first letter.

    "y..." is YES, "n..." is NO, anything else (including empty) is ASK.
    """
    if not value:
        return AutosaveChoice.ASK
    first = value.strip()[:1].lower()
    if first == "y":
        return AutosaveChoice.YES
    if first == "n":
        return AutosaveChoice.NO
    return AutosaveChoice.ASK


_DEFAULT_LANGUAGE, _DEFAULT_REGION = default_locale()
_DEFAULT_LANGUAGE = _DEFAULT_LANGUAGE or "en"


DESCRIPTORS: Dict[Setting, SettingDescriptor] = {
    d.setting: d
    for d in (
        SettingDescriptor(Setting.OS_NAME, "os.name", None, None),
        SettingDescriptor(Setting.USER_HOME, "user.home", None, None),
        SettingDescriptor(Setting.DATA_DIR_NAME, "MAPTOOL_DATADIR", "datadir", ".maptool"),
        SettingDescriptor(Setting.LOG_DIR_NAME, "MAPTOOL_LOGDIR", None, "logs"),
        SettingDescriptor(Setting.CONFIG_SUBDIR_NAME, None, None, "config"),
        SettingDescriptor(Setting.TEMP_SUBDIR_NAME, None, None, "tmp"),
        SettingDescriptor(Setting.CMD_OPTIONS_HELP, None, "help", "false"),
        SettingDescriptor(Setting.DEBUG_FLAG, None, "debug", "false"),
        SettingDescriptor(Setting.RESET_FLAG, None, "reset", "false"),
        SettingDescriptor(Setting.LIST_MACROS_FLAG, None, "macros", "false"),
        SettingDescriptor(Setting.VERSION_OVERWRITE, None, "version", None),
        SettingDescriptor(Setting.FULLSCREEN_FLAG, "", "fullscreen", "false"),
        SettingDescriptor(Setting.MONITOR_TO_USE, None, "monitor", "-1"),
        SettingDescriptor(Setting.WINDOW_WIDTH, None, "width", "-1"),
        SettingDescriptor(Setting.WINDOW_HEIGHT, None, "height", "-1"),
        SettingDescriptor(Setting.WINDOW_XPOS, None, "xpos", "-1"),
        SettingDescriptor(Setting.WINDOW_YPOS, None, "ypos", "-1"),
        SettingDescriptor(Setting.LOAD_SERVER_FLAG, "", "server", "false"),
        SettingDescriptor(Setting.LOAD_SERVER_DELAY, "", "server-delay", "0"),
        SettingDescriptor(Setting.LOAD_CAMPAIGN_NAME, "", "campaign", None),
        SettingDescriptor(Setting.DEPRECATED_LOAD_CAMPAIGN_NAME, None, "file", None),
        SettingDescriptor(Setting.LOAD_AUTOSAVE_FILE, "", "autosave", "ask"),
        SettingDescriptor(
            Setting.STARTUP_PROPS_FILE_NAME,
            "MAPTOOL_STARTUP_FILE",
            "props-file",
            "startup.properties",
        ),
        SettingDescriptor(Setting.SKIP_AUTO_UPDATE_FLAG, "", None, "false"),
        SettingDescriptor(Setting.LOCALE_LANGUAGE, "user.language", None, _DEFAULT_LANGUAGE),
        SettingDescriptor(Setting.LOCALE_REGION, "user.region", None, _DEFAULT_REGION),
    )
}

# Settings that may be overridden from the startup properties file.
STARTUP_FILE_SETTINGS: Tuple[Setting, ...] = (
    Setting.DATA_DIR_NAME,
    Setting.LOG_DIR_NAME,
    Setting.LOAD_SERVER_FLAG,
    Setting.LOAD_SERVER_DELAY,
    Setting.LOAD_CAMPAIGN_NAME,
    Setting.LOAD_AUTOSAVE_FILE,
    Setting.LOCALE_LANGUAGE,
    Setting.LOCALE_REGION,
    Setting.FULLSCREEN_FLAG,
    Setting.SKIP_AUTO_UPDATE_FLAG,
)


def descriptor(setting: Setting) -> SettingDescriptor:
    return DESCRIPTORS[setting]


def effective_key(setting: Setting) -> Optional[str]:
    """Returns the system property key, substituting the identifier name for ""."""
    key = DESCRIPTORS[setting].system_key
    if key is not None and not key:
        return setting.name
    return key


def default_int(setting: Setting) -> int:
    """Default value parsed as an integer, -1 if it is not a number."""
    return parse_integer(DESCRIPTORS[setting].default_value, -1)


def default_autosave(setting: Setting) -> AutosaveChoice:
    return classify_autosave(DESCRIPTORS[setting].default_value)
