from __future__ import annotations

from typing import Optional


class TypedexError(Exception):
    """Base class for lookup failures. `title`/`detail` are the user-facing text."""

    title = "Fehler beim Laden"

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail)
        self.detail = detail


class InputEmpty(TypedexError):
    title = "Bitte geben Sie einen Pokémon-Namen ein."

    def __init__(self) -> None:
        super().__init__("Sie müssen einen Namen eingeben, um nach einem Pokémon zu suchen.")


class NotFound(TypedexError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f'Pokémon "{name}" wurde nicht gefunden. Bitte überprüfen Sie die Schreibweise.'
        )
        self.name = name


class RecordNotFound(TypedexError):
    """The record store answered 404 for a resource path."""

    def __init__(self, path: str) -> None:
        super().__init__(f"{path} not found")
        self.path = path


class UpstreamError(TypedexError):
    def __init__(self, status: int, path: Optional[str] = None) -> None:
        super().__init__(
            f"Server-Fehler ({status}): Die API ist möglicherweise nicht erreichbar."
        )
        self.status = status
        self.path = path


class NetworkUnavailable(TypedexError):
    title = "Netzwerkfehler"

    def __init__(self, reason: str = "") -> None:
        super().__init__(
            "Die Verbindung zur PokéAPI konnte nicht hergestellt werden. "
            "Bitte überprüfen Sie Ihre Internetverbindung und versuchen Sie es erneut."
        )
        self.reason = reason


class ResolutionFailure(TypedexError):
    """Building the bilingual name index failed."""

    def __init__(self, reason: str = "") -> None:
        super().__init__(f"Namensliste konnte nicht geladen werden: {reason}".rstrip(": "))
        self.reason = reason


class UnknownTypeError(TypedexError, ValueError):
    def __init__(self, type_name: str) -> None:
        super().__init__(f"Unbekannter Typ: {type_name!r}")
        self.type_name = type_name
