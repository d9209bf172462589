"""Message catalogs for user-facing configuration messages."""

from typing import Dict, Optional

DEFAULT_LANGUAGE = "en"

CATALOGS: Dict[str, Dict[str, str]] = {
    "en": {
        "msg.error.configuration": "Invalid configuration: {0}",
        "msg.error.unusableDataDir": (
            "The directory '{0}' cannot be used because its path contains "
            "the character '!'. Please choose another data directory."
        ),
        "msg.error.unableToCreateDataDir": (
            "Unable to create the directory '{0}'. Please check the "
            "permissions or choose another data directory."
        ),
        "msg.error.storeStartupProps": (
            "Unable to store the startup properties to '{0}'."
        ),
        "msg.error.resolutionCycle": (
            "The setting '{0}' was requested while it was still being resolved."
        ),
        "msg.error.startupFileNotLoaded": (
            "The startup properties file must be loaded before '{0}' is resolved."
        ),
        "msg.error.loadStartupProps": (
            "Unexpected error while loading the startup properties from '{0}'."
        ),
        "msg.warning.commandLine": "Error parsing the command line: {0}",
    },
    "de": {
        "msg.error.configuration": "Ungültige Konfiguration: {0}",
        "msg.error.unusableDataDir": (
            "Das Verzeichnis '{0}' kann nicht verwendet werden, da der Pfad "
            "das Zeichen '!' enthält. Bitte ein anderes Datenverzeichnis wählen."
        ),
        "msg.error.unableToCreateDataDir": (
            "Das Verzeichnis '{0}' konnte nicht angelegt werden. Bitte die "
            "Berechtigungen prüfen oder ein anderes Datenverzeichnis wählen."
        ),
        "msg.error.storeStartupProps": (
            "Die Startoptionen konnten nicht nach '{0}' gespeichert werden."
        ),
        "msg.error.resolutionCycle": (
            "Die Einstellung '{0}' wurde angefordert, während sie noch ermittelt wurde."
        ),
        "msg.error.startupFileNotLoaded": (
            "Die Startoptionen müssen geladen sein, bevor '{0}' ermittelt wird."
        ),
        "msg.error.loadStartupProps": (
            "Unerwarteter Fehler beim Laden der Startoptionen aus '{0}'."
        ),
        "msg.warning.commandLine": "Fehler beim Lesen der Kommandozeile: {0}",
    },
}


def get_text(key: str, *args: object, language: Optional[str] = None) -> str:
    """Looks up ``key`` in the catalog for ``language`` and formats it.

    Falls back to English, then to the key itself.
    """
    catalog = CATALOGS.get((language or DEFAULT_LANGUAGE).lower(), {})
    template = catalog.get(key) or CATALOGS[DEFAULT_LANGUAGE].get(key, key)
    return template.format(*args)
