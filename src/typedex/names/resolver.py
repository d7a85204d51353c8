from __future__ import annotations

from typing import Dict, Optional

from typedex.errors import InputEmpty, NotFound, RecordNotFound, ResolutionFailure
from typedex.knowledge.pokeapi_client import PokeApiClient, PokemonRecord
from typedex.names.name_index import NameIndex
from typedex.utils.format import normalize_name, to_api_id
from typedex.utils.inflight import InFlight
from typedex.utils.logger import get_logger

logger = get_logger(__name__)

_MAPPING_KEY = "de"


class NameResolver:
    """Resolves English or German display names to a record of the store."""

    def __init__(self, client: PokeApiClient, index: NameIndex) -> None:
        self.client = client
        self.index = index
        self._mapping: InFlight[str, Dict[str, str]] = InFlight()

    @property
    def cached_mapping(self) -> Optional[Dict[str, str]]:
        return self._mapping.peek(_MAPPING_KEY)

    async def german_mapping(self) -> Dict[str, str]:
        return await self._mapping.get(_MAPPING_KEY, self._build_mapping)

    async def resolve_name(self, display_name: str) -> Optional[str]:
        """Canonical English name for a German display name, if known."""
        key = normalize_name(display_name)
        if not key:
            return None
        try:
            mapping = await self.german_mapping()
        except ResolutionFailure as exc:
            logger.warning("name_mapping_unavailable", name=key, error=str(exc))
            return None
        return mapping.get(key)

    async def resolve(self, display_name: str) -> PokemonRecord:
        name = normalize_name(display_name)
        if not name:
            raise InputEmpty()

        # transport and server errors propagate from here unchanged
        try:
            return await self.client.fetch_pokemon(name)
        except RecordNotFound:
            logger.info("direct_lookup_missed", name=name)

        canonical = await self.resolve_name(name)
        if not canonical or to_api_id(canonical) == to_api_id(name):
            raise NotFound(display_name.strip())
        try:
            record = await self.client.fetch_pokemon(canonical)
        except RecordNotFound as exc:
            raise NotFound(display_name.strip()) from exc
        logger.info("name_resolved", name=name, canonical=canonical)
        return record

    async def _build_mapping(self) -> Dict[str, str]:
        # reuses a warmed (or in-flight) index instead of a second bulk fetch
        await self.index.build()
        mapping = self.index.german_to_english()
        logger.info("name_mapping_ready", names=len(mapping))
        return mapping
