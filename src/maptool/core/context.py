"""Explicit container for the configuration components.

A ConfigContext is built once at startup and passed to whatever needs
configuration. Building it runs the bootstrap in a fixed order:

    1. parse the command line,
    2. resolve the startup file path (command line, system properties and
       defaults only),
    3. load the startup file and bind it to the registry.

Logging is attached afterwards with attach_logger(), once the caller is ready
for the log directory to be resolved.
"""

from pathlib import Path
from typing import Optional, Sequence, Tuple

from loguru import logger

from maptool.core.cmdline import CommandLineSource
from maptool.core.config import Settings, settings as default_settings
from maptool.core.diagnostics import Diagnostics, Notifier
from maptool.core.errors import DirectoryCreationError
from maptool.core.logger import setup_logging
from maptool.core.registry import PropertyRegistry
from maptool.core.startup_file import StartupFileSource
from maptool.core.system import SystemProperties


class ConfigContext:
    """Holds the command line, startup file and registry for one process.

    Usage:
        context = ConfigContext.create(sys.argv[1:])
        context.attach_logger()
        context.initialize_main_dirs()
        data_dir = context.registry.data_dir()
    """

    def __init__(
        self,
        system: SystemProperties,
        cmdline: CommandLineSource,
        startup_file: StartupFileSource,
        registry: PropertyRegistry,
        diagnostics: Diagnostics,
    ) -> None:
        self.system = system
        self.cmdline = cmdline
        self.startup_file = startup_file
        self.registry = registry
        self.diagnostics = diagnostics
        self.language: Optional[str] = None
        self.log_file: Optional[Path] = None
        self._main_dirs_ready = False

    @classmethod
    def create(
        cls,
        args: Sequence[str] = (),
        system: Optional[SystemProperties] = None,
        notifier: Optional[Notifier] = None,
    ) -> "ConfigContext":
        """Builds the components in bootstrap order.

        Raises:
            UnusableDirectoryError: If the startup file path or the data
                directory it depends on contains a forbidden character.
        """
        system = system or SystemProperties()
        diagnostics = Diagnostics(notifier)

        cmdline = CommandLineSource(diagnostics)
        cmdline.initialize(args)

        # Phase 1: startup file path without the startup file.
        registry = PropertyRegistry(system, cmdline)
        startup_path = registry.startup_file_path()

        # Phase 2: load it; the registry may now consult it.
        startup_file = StartupFileSource(startup_path, diagnostics)
        startup_file.load()
        registry.bind_startup_file(startup_file)

        return cls(system, cmdline, startup_file, registry, diagnostics)

    @property
    def notifier(self) -> Notifier:
        return self.diagnostics.notifier

    def attach_logger(self, configure: bool = True, config: Optional[Settings] = None) -> None:
        """Makes logging available to the components. Only the first call acts.

        Args:
            configure: Set up loguru handlers in the resolved log directory.
                Pass False when logging is configured elsewhere.
            config: Logging settings; defaults to the module-level settings.
        """
        if self.diagnostics.attached:
            return
        config = config or default_settings
        if configure:
            self.log_file = setup_logging(self.registry.log_dir(), config)

        logger.info("*" * 80)
        logger.info("**" + f"{config.APP_NAME} Started!".center(76) + "**")
        logger.info("*" * 80)
        logger.info(f"Logging to: {self.log_file or 'NOT_CONFIGURED'}")

        self.diagnostics.attach()
        self.startup_file.log_audit(
            self.registry.startup_file_path_absolute,
            self.registry.startup_file_name_original,
        )
        self.cmdline.attach_logger()

    def initialize_main_dirs(self) -> None:
        """Creates the data and log directories. Only the first call acts.

        Raises:
            DirectoryCreationError: If a directory cannot be created.
        """
        if self._main_dirs_ready:
            return
        _create_dir(self.registry.data_dir())
        _create_dir(self.registry.log_dir())
        self._main_dirs_ready = True

    def app_home(self, subdir: Optional[str] = None) -> Path:
        """The data directory, or ``subdir`` inside it, created on demand."""
        path = self.registry.data_dir()
        if subdir:
            path = path / subdir
        _create_dir(path)
        return path

    def config_dir(self) -> Path:
        return self.app_home(self.registry.config_subdir_name)

    def tmp_dir(self) -> Path:
        return self.app_home(self.registry.tmp_subdir_name)

    def initialize_default_locale(self) -> Tuple[str, str]:
        """Resolves (language, region) and uses the language for messages."""
        language, region = self.registry.locale()
        self.language = language or None
        locale_name = f"{language}_{region}" if region else language
        logger.info(f"Default locale initialized to: {locale_name}")
        return language, region


def _create_dir(path: Path) -> None:
    if path.is_dir():
        return
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.info(f"Unable to create directory {path}: {e}")
        raise DirectoryCreationError(str(path)) from e
    if not path.is_dir():
        raise DirectoryCreationError(str(path))
