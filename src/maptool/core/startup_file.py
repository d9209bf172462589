"""Startup properties: a small key=value file that survives across launches.

The file is read with python-dotenv, so only dotenv syntax is understood.
Java properties escapes such as ``C\\:\\\\maptool`` are not translated and
reach the value as written. The file must be UTF-8. A missing file is normal
and yields an empty map; other read or decode errors are recorded for later
reporting and also leave the map empty. Writing replaces the whole file with
the in-memory map.
"""

from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Union

from dotenv import dotenv_values
from loguru import logger

from maptool.core.diagnostics import Diagnostics
from maptool.core.errors import StartupFileStoreError
from maptool.core.messages import get_text
from maptool.core.settings import STARTUP_FILE_SETTINGS, Setting, effective_key, parse_integer

KEY_NOT_FOUND = "<key not found>"


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


class StartupFileSource:
    """Key/value store backed by the startup properties file.

    Attributes:
        path: Absolute path of the file.
        properties: Loaded values, in file order.
    """

    def __init__(self, path: Union[str, Path], diagnostics: Optional[Diagnostics] = None) -> None:
        self.path = Path(path)
        self.diagnostics = diagnostics or Diagnostics()
        self.properties: Dict[str, str] = {}
        self._loaded = False
        self._load_error: Optional[Union[OSError, UnicodeDecodeError]] = None
        self.allowed_keys = [effective_key(s) for s in STARTUP_FILE_SETTINGS]

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def load_error(self) -> Optional[Union[OSError, UnicodeDecodeError]]:
        """The non-"not found" error hit by load(), if any."""
        return self._load_error

    def load(self) -> None:
        """Reads the file into memory. Later calls are no-ops."""
        if self._loaded:
            return
        self._loaded = True
        self.diagnostics.info(f"Start up properties file: {self.path}")
        try:
            with open(self.path, encoding="utf-8") as stream:
                values = dotenv_values(stream=stream, interpolate=False)
        except FileNotFoundError:
            self.diagnostics.info(
                f"{self.path} not found. This can be ok, if it really does not exist."
            )
            return
        except (OSError, UnicodeDecodeError) as e:
            self._load_error = e
            self.diagnostics.error(get_text("msg.error.loadStartupProps", self.path), e)
            return
        self.properties = {k: ("" if v is None else v) for k, v in values.items()}

    def has_option(self, key: Optional[str]) -> bool:
        """True if the key is present; its value does not matter."""
        return key is not None and key in self.properties

    def get_option(self, key: Optional[str], default: Optional[str] = None) -> Optional[str]:
        if key is None:
            return default
        return self.properties.get(key, default)

    def get_int_option(self, key: Optional[str], default: int) -> int:
        if key is None:
            return default
        return parse_integer(self.properties.get(key), default)

    def set(self, key: str, value: Union[str, bool, int]) -> None:
        """Stores a value in memory only; call store() to write it."""
        if isinstance(value, bool):
            text = "true" if value else "false"
        else:
            text = str(value)
        self.properties[key] = text

    def store(self) -> None:
        """Overwrites the file with the in-memory map.

        Raises:
            StartupFileStoreError: If the file cannot be written.
        """
        lines = [f"# {datetime.now().strftime('%a %b %d %H:%M:%S %Y')}"]
        lines += [f"{key}={_quote(value)}" for key, value in self.properties.items()]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        except OSError as e:
            logger.error(f"Unexpected error during store of startup properties: {e}")
            raise StartupFileStoreError(str(self.path)) from e
        logger.info(f"File {self.path.name} stored in {self.path} with following value pairs:")
        for key in self.allowed_keys:
            if key in self.properties:
                logger.info(f"Key: {key}, Value: {self.properties[key]}")

    def log_audit(self, file_path_absolute: bool, original_name: str) -> None:
        """Logs every usable key and whether it was found.

        Warns when the data directory is set in a file that was itself
        located relative to the data directory, since that entry is ignored.
        """
        data_dir_key = effective_key(Setting.DATA_DIR_NAME)
        for key in self.allowed_keys:
            value = self.properties.get(key, KEY_NOT_FOUND)
            logger.info(f"Usable keys in startup properties: {key}, value found: {value}")
            if key == data_dir_key and value != KEY_NOT_FOUND and not file_path_absolute:
                logger.warning(
                    f"Start up properties file definition '{original_name}' was set relative "
                    f"to the {data_dir_key}, so redefinition of the {data_dir_key} will be ignored!"
                )
