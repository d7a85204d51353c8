from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests

from typedex.config import DEFAULT_BASE_URL
from typedex.errors import NetworkUnavailable, RecordNotFound, UpstreamError
from typedex.knowledge.type_chart import TypeRelations, relations_from_api
from typedex.utils.format import to_api_id
from typedex.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PokemonRecord:
    name: str
    canonical_id: int
    types: Tuple[str, ...]
    sprite_url: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, object]) -> "PokemonRecord":
        slots = sorted(data.get("types") or [], key=lambda t: t.get("slot", 0))
        sprites = data.get("sprites") or {}
        sprite = sprites.get("front_default")
        if not sprite:
            artwork = (sprites.get("other") or {}).get("official-artwork") or {}
            sprite = artwork.get("front_default")
        return cls(
            name=data["name"],
            canonical_id=int(data.get("id") or 0),
            types=tuple(t["type"]["name"] for t in slots),
            sprite_url=sprite,
        )


def id_from_url(url: str) -> int:
    """PokeAPI resource urls end in the numeric id: .../pokemon/25/"""
    return int([part for part in url.split("/") if part][-1])


class PokeApiClient:
    """Record store, type relation and localized name adapter over PokeAPI.

    Blocking `requests` calls run in a worker thread so the coroutines can be
    awaited from the session's event loop. Every request carries a timeout.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        requester: Optional[Callable[..., object]] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._requester = requester or requests.get

    def get_json(self, path: str) -> Dict[str, object]:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            resp = self._requester(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("pokeapi_unreachable", url=url, error=str(exc))
            raise NetworkUnavailable(str(exc)) from exc
        status = resp.status_code
        if status == 404:
            raise RecordNotFound(path)
        if status >= 400:
            logger.warning("pokeapi_error_status", url=url, status=status)
            raise UpstreamError(status, path)
        try:
            data = resp.json()
        except ValueError as exc:
            # requests' JSONDecodeError is a ValueError
            logger.warning("pokeapi_bad_body", url=url, status=status, error=str(exc))
            raise UpstreamError(status, path) from exc
        if not isinstance(data, dict):
            logger.warning("pokeapi_bad_body", url=url, status=status, error="not a JSON object")
            raise UpstreamError(status, path)
        return data

    async def fetch_json(self, path: str) -> Dict[str, object]:
        return await asyncio.to_thread(self.get_json, path)

    async def fetch_pokemon(self, name: str) -> PokemonRecord:
        slug = quote(to_api_id(name), safe="-")
        data = await self.fetch_json(f"pokemon/{slug}")
        record = PokemonRecord.from_api(data)
        logger.debug("pokemon_fetched", name=record.name, types=record.types)
        return record

    async def fetch_type_relations(self, type_name: str) -> TypeRelations:
        data = await self.fetch_json(f"type/{type_name}")
        return relations_from_api(data.get("name", type_name), data.get("damage_relations") or {})

    async def list_pokemon(self, limit: int) -> List[Tuple[int, str]]:
        """(id, english name) for the first `limit` entries of the listing."""
        data = await self.fetch_json(f"pokemon?limit={limit}&offset=0")
        return [(id_from_url(entry["url"]), entry["name"]) for entry in data.get("results", [])]

    async def fetch_german_name(self, canonical_id: int) -> Optional[str]:
        data = await self.fetch_json(f"pokemon-species/{canonical_id}")
        for entry in data.get("names", []):
            if (entry.get("language") or {}).get("name") == "de":
                return entry.get("name")
        return None
