from typing import Iterable, List, Sequence, TypeVar

T = TypeVar("T")


def normalize_name(text: str | None) -> str:
    """Lookup key for a display name: trimmed and lower-cased."""
    if not text:
        return ""
    return text.strip().lower()


def to_api_id(text: str | None) -> str:
    """PokeAPI resource slug (lowercase, inner whitespace collapsed to hyphens)."""
    return "-".join(normalize_name(text).split())


def chunked(seq: Iterable[T], size: int) -> List[List[T]]:
    if size < 1:
        raise ValueError("chunk size must be positive")
    items: Sequence[T] = list(seq)
    return [list(items[i : i + size]) for i in range(0, len(items), size)]
