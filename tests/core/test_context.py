"""Tests for maptool.core.context."""

from pathlib import Path

import pytest
from loguru import logger

from maptool.core.errors import DirectoryCreationError, UnusableDirectoryError


def write_startup_file(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


class TestCreate:
    def test_default_bootstrap(self, make_context, home):
        context = make_context()
        expected = home / ".maptool" / "config" / "startup.properties"
        assert context.startup_file.path == expected
        assert context.startup_file.loaded
        assert context.registry.startup_file is context.startup_file
        assert context.registry.data_dir() == home / ".maptool"

    def test_relative_startup_file_values_are_used(self, make_context, home):
        write_startup_file(
            home / ".maptool" / "config" / "startup.properties",
            "LOAD_SERVER_DELAY=4\nFULLSCREEN_FLAG=true\n",
        )
        context = make_context()
        assert context.registry.load_server_delay() == 4
        assert context.registry.fullscreen_flag() is True

    def test_relative_startup_file_cannot_move_data_dir(self, make_context, home, log_messages):
        write_startup_file(
            home / ".maptool" / "config" / "startup.properties",
            "MAPTOOL_DATADIR=/srv/elsewhere\n",
        )
        context = make_context()
        assert context.registry.data_dir() == home / ".maptool"
        context.attach_logger(configure=False)
        assert any("will be ignored" in m for m in log_messages)

    def test_absolute_startup_file_moves_data_dir(self, make_context, tmp_path):
        data_dir = tmp_path / "shared-data"
        props = write_startup_file(
            tmp_path / "etc" / "startup.properties",
            f"MAPTOOL_DATADIR={data_dir}\nMAPTOOL_LOGDIR=mylogs\n",
        )
        context = make_context("--props-file", str(props))
        assert context.startup_file.path == props
        assert context.registry.data_dir() == data_dir
        assert context.registry.log_dir() == data_dir / "mylogs"

    def test_unusable_data_dir(self, make_context, environ):
        environ["MAPTOOL_DATADIR"] = "/srv/bad!dir"
        with pytest.raises(UnusableDirectoryError):
            make_context()


class TestAttachLogger:
    def test_flushes_pending_diagnostics(self, make_context, log_messages):
        context = make_context()
        context.attach_logger(configure=False)
        assert any(m.startswith("Start up properties file:") for m in log_messages)
        assert "no argument passed via command line" in log_messages
        assert any("MapTool Started!" in m for m in log_messages)
        assert context.log_file is None

    def test_banner_comes_before_flushed_records(self, make_context, log_messages):
        context = make_context()
        context.attach_logger(configure=False)
        banner = next(i for i, m in enumerate(log_messages) if "Started!" in m)
        flushed = next(
            i for i, m in enumerate(log_messages) if m.startswith("Start up properties file:")
        )
        assert banner < flushed

    def test_only_first_call_acts(self, make_context, log_messages):
        context = make_context()
        context.attach_logger(configure=False)
        context.attach_logger(configure=False)
        assert sum("Started!" in m for m in log_messages) == 1

    def test_command_line_problems_reach_the_user(self, make_context, notifier):
        context = make_context("--bogus", "--debug")
        assert notifier.warnings == []
        context.attach_logger(configure=False)
        assert len(notifier.warnings) == 1
        assert context.registry.debug_flag() is True

    def test_help_exits(self, make_context, notifier):
        context = make_context("-?")
        with pytest.raises(SystemExit) as exc:
            context.attach_logger(configure=False)
        assert exc.value.code == 0
        assert len(notifier.information) == 1

    def test_configures_log_file(self, make_context, home, restore_logger):
        context = make_context()
        context.attach_logger()
        assert context.log_file == home / ".maptool" / "logs" / "maptool.log"
        logger.remove()
        assert "MapTool Started!" in context.log_file.read_text()


class TestDirectories:
    def test_initialize_main_dirs(self, make_context, home, environ):
        context = make_context()
        context.initialize_main_dirs()
        assert (home / ".maptool").is_dir()
        assert (home / ".maptool" / "logs").is_dir()
        assert environ["MAPTOOL_LOGDIR"] == str(home / ".maptool" / "logs")

    def test_initialize_main_dirs_failure(self, make_context, home):
        (home / ".maptool").write_text("not a directory")
        context = make_context()
        with pytest.raises(DirectoryCreationError) as exc:
            context.initialize_main_dirs()
        assert str(home / ".maptool") in str(exc.value)

    def test_app_home(self, make_context, home):
        context = make_context()
        assert context.app_home() == home / ".maptool"
        assert context.app_home("themes") == home / ".maptool" / "themes"
        assert (home / ".maptool" / "themes").is_dir()

    def test_config_and_tmp_dirs(self, make_context, home):
        context = make_context()
        assert context.config_dir() == home / ".maptool" / "config"
        assert context.tmp_dir() == home / ".maptool" / "tmp"
        assert context.tmp_dir().is_dir()


class TestLocale:
    def test_from_system(self, make_context):
        context = make_context()
        assert context.initialize_default_locale() == ("en", "US")
        assert context.language == "en"

    def test_from_startup_file(self, make_context, home, log_messages):
        write_startup_file(
            home / ".maptool" / "config" / "startup.properties",
            "user.language=de\nuser.region=AT\n",
        )
        context = make_context()
        assert context.initialize_default_locale() == ("de", "AT")
        assert context.language == "de"
        assert "Default locale initialized to: de_AT" in log_messages
