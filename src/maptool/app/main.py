import sys
from typing import Optional, Sequence

from loguru import logger

from maptool.core.context import ConfigContext
from maptool.core.diagnostics import ConsoleNotifier, Notifier
from maptool.core.errors import ConfigurationError
from maptool.core.settings import Setting, effective_key
from maptool.core.system import SystemProperties


def log_settings_summary(context: ConfigContext) -> None:
    """Logs every resolved setting, one per line."""
    registry = context.registry
    summary = {
        "os name": registry.os_name,
        "data dir": registry.data_dir(),
        "log dir": registry.log_dir(),
        "startup file": registry.startup_file_path(),
        "debug": registry.debug_flag(),
        "reset": registry.reset_flag(),
        "list macros": registry.list_macros_flag(),
        "version overwrite": registry.version_overwrite(),
        "fullscreen": registry.fullscreen_flag(),
        "monitor": registry.monitor_to_use(),
        "window": (
            f"{registry.window_width()}x{registry.window_height()}"
            f"+{registry.window_xpos()}+{registry.window_ypos()}"
        ),
        "campaign": registry.load_campaign_name(),
        "load server": registry.load_server_flag(),
        "server delay": registry.load_server_delay(),
        "autosave": registry.load_autosave().value,
        "skip auto update": registry.skip_auto_update_flag(),
        "locale": "_".join(part for part in registry.locale() if part),
    }
    for name, value in summary.items():
        logger.info(f"{name}: {value}")


def main(
    argv: Optional[Sequence[str]] = None,
    system: Optional[SystemProperties] = None,
    notifier: Optional[Notifier] = None,
    configure_logging: bool = True,
) -> int:
    """Resolves the startup configuration and reports it.

    Returns:
        Exit status: 0 on success, 1 if the configuration is unusable.
    """
    args = sys.argv[1:] if argv is None else list(argv)
    system = system or SystemProperties()
    notifier = notifier or ConsoleNotifier()
    context = None
    try:
        context = ConfigContext.create(args, system=system, notifier=notifier)
        context.attach_logger(configure=configure_logging)
        context.initialize_main_dirs()
        context.initialize_default_locale()
        log_settings_summary(context)
    except ConfigurationError as e:
        if context is not None and context.language:
            language = context.language
        else:
            language = system.get(effective_key(Setting.LOCALE_LANGUAGE))
        logger.opt(exception=e).debug("Configuration failed")
        notifier.show_error(e.localized(language))
        return 1
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
