"""Command line options for the application.

Arguments are parsed against a fixed schema with argparse. Parsing never
aborts the program: an unrecognized option is dropped and the parse retried,
and any other failure discards the remaining arguments and retries with none.
"""

import argparse
import sys
from dataclasses import dataclass
from typing import Dict, List, NoReturn, Optional, Sequence

from loguru import logger
from pydantic import BaseModel, ConfigDict

from maptool.core.diagnostics import Diagnostics
from maptool.core.errors import MalformedArgumentsError, UnrecognizedOptionError
from maptool.core.messages import get_text
from maptool.core.settings import Setting, descriptor, parse_integer


@dataclass(frozen=True)
class OptionSpec:
    """One command line option: ``-<short>`` / ``--<long>``."""

    short: str
    long: str
    takes_value: bool
    description: str

    @property
    def dest(self) -> str:
        return self.long.replace("-", "_")


def _option(short: str, setting: Setting, takes_value: bool, description: str) -> OptionSpec:
    long_option = descriptor(setting).cli_long_option
    assert long_option is not None, setting
    return OptionSpec(short, long_option, takes_value, description)


# Declaration order is the order used by the help table.
OPTION_SCHEMA: List[OptionSpec] = [
    _option("?", Setting.CMD_OPTIONS_HELP, False,
            "list of options incl. description to log and information frame, then exit the application"),
    _option("d", Setting.DEBUG_FLAG, False, "turn on enhanced debug output"),
    _option("v", Setting.VERSION_OVERWRITE, True,
            "override MapTool version. Some MapTool functions will break if the version is not set correct!"),
    _option("f", Setting.FULLSCREEN_FLAG, False, "set to maximize window"),
    _option("g", Setting.MONITOR_TO_USE, True, "sets which monitor (graphical device) to use"),
    _option("w", Setting.WINDOW_WIDTH, True,
            "override MapTool window width. Only usable together with monitor and height"),
    _option("h", Setting.WINDOW_HEIGHT, True,
            "override MapTool window height. Only usable together with monitor and width"),
    _option("x", Setting.WINDOW_XPOS, True,
            "override MapTool window starting x coordinate. Only usable together with monitor and ypos"),
    _option("y", Setting.WINDOW_YPOS, True,
            "override MapTool window starting y coordinate. Only usable together with monitor and xpos"),
    _option("m", Setting.LIST_MACROS_FLAG, False, "display defined list of macro functions"),
    _option("r", Setting.RESET_FLAG, False, "reset startup options to defaults"),
    _option("F", Setting.DEPRECATED_LOAD_CAMPAIGN_NAME, True,
            "load campaign on startup. Deprecated: Please use C or campaign"),
    _option("C", Setting.LOAD_CAMPAIGN_NAME, True,
            "load campaign on startup. Arg.: Full file path and name of the campaign"),
    _option("S", Setting.LOAD_SERVER_FLAG, False,
            "start server on startup. Using server parameters from user preferences"),
    _option("s", Setting.LOAD_SERVER_DELAY, True,
            "delay the start of the server for x seconds. e.g. network needs more time to be ready"),
    _option("A", Setting.LOAD_AUTOSAVE_FILE, True,
            "if there is a newer autosave file then the campaign to load, should the app load it (yes), "
            "not load it (no) or ask (ask) for the decision (default is ask)"),
    _option("D", Setting.DATA_DIR_NAME, True, "override MapTool data directory"),
    _option("P", Setting.STARTUP_PROPS_FILE_NAME, True,
            "override name (& path) of the startup properties file"),
]


class ParsedCommandLine(BaseModel):
    """Outcome of parsing an argument vector.

    ``options`` maps each recognized long option to its value (None for
    flags). ``arguments`` is the argument list the successful parse ran on.
    """

    model_config = ConfigDict(frozen=True)

    options: Dict[str, Optional[str]]
    arguments: List[str]
    positional: List[str]
    dropped: List[str]
    failures: List[str]

    def has(self, name: str) -> bool:
        return name in self.options

    def value(self, name: str) -> Optional[str]:
        return self.options.get(name)


class _SchemaParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of printing usage and exiting."""

    def error(self, message: str) -> NoReturn:
        raise MalformedArgumentsError(message)


def _build_parser(schema: Sequence[OptionSpec]) -> _SchemaParser:
    parser = _SchemaParser(prog="maptool", add_help=False, allow_abbrev=False)
    for spec in schema:
        flags = (f"-{spec.short}", f"--{spec.long}")
        if spec.takes_value:
            parser.add_argument(*flags, dest=spec.dest, default=None)
        else:
            parser.add_argument(*flags, dest=spec.dest, action="store_true")
    return parser


def _parse_once(
    parser: _SchemaParser, schema: Sequence[OptionSpec], args: List[str]
) -> tuple[Dict[str, Optional[str]], List[str]]:
    """Runs one parse attempt.

    Raises:
        UnrecognizedOptionError: An option-looking token is not in the schema.
        MalformedArgumentsError: Any other failure, e.g. a missing value.
    """
    namespace, extras = parser.parse_known_args(args)
    positional = []
    for token in extras:
        if len(token) > 1 and token.startswith("-") and not _is_number(token):
            raise UnrecognizedOptionError(token)
        positional.append(token)

    options: Dict[str, Optional[str]] = {}
    for spec in schema:
        value = getattr(namespace, spec.dest)
        if spec.takes_value and value is not None:
            options[spec.long] = value
        elif not spec.takes_value and value:
            options[spec.long] = None
    return options, positional


def _is_number(token: str) -> bool:
    try:
        float(token)
    except ValueError:
        return False
    return True


def parse_arguments(
    args: Sequence[str], schema: Sequence[OptionSpec] = OPTION_SCHEMA
) -> ParsedCommandLine:
    """Parses ``args`` against ``schema``, dropping what cannot be parsed.

    Every failed attempt strictly shrinks the working list, and an empty list
    always parses, so this terminates with a result.
    """
    parser = _build_parser(schema)
    remaining = list(args)
    dropped: List[str] = []
    failures: List[str] = []
    while True:
        try:
            options, positional = _parse_once(parser, schema, remaining)
        except UnrecognizedOptionError as e:
            failures.append(str(e))
            if e.option not in remaining:
                # Reported token is not in argv as given; nothing to strip.
                dropped.extend(remaining)
                remaining = []
                continue
            remaining.remove(e.option)
            dropped.append(e.option)
            continue
        except MalformedArgumentsError as e:
            if not remaining:
                raise
            failures.append(str(e))
            dropped.extend(remaining)
            remaining = []
            continue
        return ParsedCommandLine(
            options=options,
            arguments=remaining,
            positional=positional,
            dropped=dropped,
            failures=failures,
        )


class CommandLineSource:
    """Queryable view of the process command line.

    Usage:
        cmdline = CommandLineSource(diagnostics)
        cmdline.initialize(sys.argv[1:])
        width = cmdline.get_int_option("width", -1)
    """

    def __init__(
        self,
        diagnostics: Optional[Diagnostics] = None,
        schema: Sequence[OptionSpec] = OPTION_SCHEMA,
    ) -> None:
        self.diagnostics = diagnostics or Diagnostics()
        self.schema = list(schema)
        self._args: List[str] = []
        self._parsed: Optional[ParsedCommandLine] = None
        self._logged = False

    @property
    def parsed(self) -> ParsedCommandLine:
        if self._parsed is None:
            self.initialize([])
        assert self._parsed is not None
        return self._parsed

    @property
    def initialized(self) -> bool:
        return self._parsed is not None

    def initialize(self, args: Sequence[str]) -> None:
        """Records and parses the argument vector. Later calls are no-ops."""
        if self._parsed is not None:
            return
        self._args = list(args)
        self._parsed = parse_arguments(self._args, self.schema)

    def attach_logger(self) -> None:
        """Re-parses with logging available, then prints help if requested.

        Parsing twice yields the same result; the second pass exists so the
        parse warnings and surviving arguments reach the log.
        """
        if self._logged:
            return
        self._logged = True
        self._parsed = parse_arguments(self._args, self.schema)
        for failure in self._parsed.failures:
            self.diagnostics.warning(get_text("msg.warning.commandLine", failure))
        if not self._parsed.arguments:
            logger.info("no argument passed via command line")
        for arg in self._parsed.arguments:
            logger.info(f"argument passed via command line: {arg}")
        if self.has_option(descriptor(Setting.CMD_OPTIONS_HELP).cli_long_option):
            self.print_help()

    def has_option(self, name: Optional[str]) -> bool:
        """True if the option was given."""
        if name is None:
            return False
        return self.parsed.has(name)

    def get_option(self, name: Optional[str], default: Optional[str] = None) -> Optional[str]:
        """The option's value, or ``default`` when it was not given."""
        if name is None or not self.parsed.has(name):
            return default
        return self.parsed.value(name)

    def get_int_option(self, name: Optional[str], default: int) -> int:
        """The option's value as an int; ``default`` if absent or not a number."""
        if name is None:
            return default
        return parse_integer(self.parsed.value(name), default)

    def help_text(self) -> str:
        title = "Long Option"
        width = max([len(title)] + [len(spec.long) for spec in self.schema])
        lines = [
            "List of available command line options:",
            f"X | {title.ljust(width)} | Description",
        ]
        for spec in self.schema:
            lines.append(f"{spec.short} | {spec.long.ljust(width)} | {spec.description}")
        lines.append("Application will stop now!")
        return "\n".join(lines) + "\n"

    def print_help(self) -> NoReturn:
        """Logs the option table, shows it to the user and exits with status 0."""
        message = self.help_text()
        logger.info(message)
        self.diagnostics.notifier.show_information(message.replace("\n", "<br>"))
        sys.exit(0)
