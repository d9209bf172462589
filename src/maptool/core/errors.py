"""Exceptions raised while resolving application configuration."""

from typing import Optional

from maptool.core.messages import get_text


class ConfigurationError(RuntimeError):
    """Fatal configuration problem carrying a translatable message.

    Attributes:
        message_key: Catalog key of the message.
        args: Positional arguments formatted into the message.
    """

    message_key = "msg.error.configuration"

    def __init__(self, *args: object, message_key: Optional[str] = None) -> None:
        if message_key is not None:
            self.message_key = message_key
        super().__init__(*args)

    def localized(self, language: Optional[str] = None) -> str:
        return get_text(self.message_key, *self.args, language=language)

    def __str__(self) -> str:
        return self.localized()


class UnusableDirectoryError(ConfigurationError):
    """A resolved directory or file path contains a forbidden character."""

    message_key = "msg.error.unusableDataDir"


class DirectoryCreationError(ConfigurationError):
    """A required directory does not exist and could not be created."""

    message_key = "msg.error.unableToCreateDataDir"


class StartupFileStoreError(ConfigurationError):
    """Writing the startup properties file failed."""

    message_key = "msg.error.storeStartupProps"


class ResolutionCycleError(ConfigurationError):
    """A cached value was requested while it was being resolved."""

    message_key = "msg.error.resolutionCycle"


class UnrecognizedOptionError(Exception):
    """A single parse attempt hit an option that is not in the schema."""

    def __init__(self, option: str) -> None:
        super().__init__(f"Unrecognized option: {option}")
        self.option = option


class MalformedArgumentsError(Exception):
    """A single parse attempt failed for any reason other than an unknown option."""
