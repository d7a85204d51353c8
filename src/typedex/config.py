from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Dict, Mapping, Optional

DEFAULT_BASE_URL = "https://pokeapi.co/api/v2"
ENV_PREFIX = "TYPEDEX_"


@dataclass(frozen=True)
class LookupConfig:
    """Per-session settings.

    `species_limit` bounds how many species the bilingual name index lists
    (`/pokemon?limit=N`). Names of species beyond it cannot be resolved from
    German or suggested; 1025 covers generations 1-9.
    """

    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = 10.0
    species_limit: int = 1025
    batch_size: int = 50
    min_query_length: int = 2
    suggestion_limit: int = 10
    use_static_types: bool = False

    def __post_init__(self) -> None:
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        if self.species_limit < 1:
            raise ValueError("species_limit must be at least 1")
        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if self.suggestion_limit < 1:
            raise ValueError("suggestion_limit must be at least 1")

    @classmethod
    def from_env(
        cls, env_path: str | Path = ".env", environ: Optional[Mapping[str, str]] = None
    ) -> "LookupConfig":
        """Read TYPEDEX_* keys from a .env file, overridden by the process environment."""
        merged = _settings_from_file(env_path)
        merged.update(os.environ if environ is None else environ)
        overrides = {}
        for f in fields(cls):
            raw = merged.get(ENV_PREFIX + f.name.upper())
            if raw is None or raw == "":
                continue
            overrides[f.name] = _coerce(raw, f.default)
        return replace(cls(), **overrides)


def _settings_from_file(path: str | Path) -> Dict[str, str]:
    """TYPEDEX_* assignments of a .env file.

    Accepts `KEY=value`, `export KEY=value`, values wrapped in matching single
    or double quotes, and trailing ` # comments` after unquoted values. Other
    keys are ignored.
    """
    env_path = Path(path)
    settings: Dict[str, str] = {}
    if not env_path.is_file():
        return settings
    for line in env_path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line.startswith("export "):
            line = line[len("export ") :].lstrip()
        if not line.startswith(ENV_PREFIX) or "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        elif " #" in value:
            value = value.split(" #", 1)[0].rstrip()
        settings[key] = value
    return settings


def _coerce(raw: str, default: object) -> object:
    if isinstance(default, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw.rstrip("/") if raw.startswith("http") else raw
