from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import List, Optional

from typedex.config import LookupConfig
from typedex.engine.effectiveness import (
    EffectivenessProfile,
    TypeMultiplier,
    defensive_profile,
    offensive_strengths,
)
from typedex.errors import TypedexError
from typedex.knowledge.pokeapi_client import PokeApiClient, PokemonRecord
from typedex.knowledge.type_provider import PokeApiTypeSource, StaticTypeSource, TypeChartProvider
from typedex.names.name_index import NameIndex, NameIndexEntry
from typedex.names.resolver import NameResolver
from typedex.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class LookupResult:
    record: PokemonRecord
    profile: EffectivenessProfile
    strengths: List[TypeMultiplier] = field(default_factory=list)


@dataclass(frozen=True)
class LookupOutcome:
    query: str
    result: Optional[LookupResult] = None
    error: Optional[TypedexError] = None

    @property
    def ok(self) -> bool:
        return self.result is not None


class LookupSession:
    """All caches of one session, wired together.

    Create one per session; nothing is shared between instances.
    """

    def __init__(self, config: Optional[LookupConfig] = None, client: Optional[PokeApiClient] = None) -> None:
        self.config = config or LookupConfig()
        self.client = client or PokeApiClient(
            base_url=self.config.base_url, timeout=self.config.request_timeout
        )
        source = StaticTypeSource() if self.config.use_static_types else PokeApiTypeSource(self.client)
        self.types = TypeChartProvider(source)
        self.index = NameIndex(
            self.client,
            species_limit=self.config.species_limit,
            batch_size=self.config.batch_size,
            min_query_length=self.config.min_query_length,
        )
        self.resolver = NameResolver(self.client, self.index)
        self._prefetch: Optional[asyncio.Task] = None

    async def __aenter__(self) -> "LookupSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def start_prefetch(self) -> asyncio.Task:
        """Warm the name index in the background; idempotent."""
        if self._prefetch is None:
            self._prefetch = asyncio.create_task(self._warm_index())
        return self._prefetch

    async def _warm_index(self) -> None:
        try:
            await self.index.build()
        except TypedexError as exc:
            logger.warning("prefetch_failed", error=str(exc))

    async def lookup(self, name: str) -> LookupResult:
        record = await self.resolver.resolve(name)
        profile, strengths = await asyncio.gather(
            defensive_profile(record.types, self.types),
            offensive_strengths(record.types, self.types),
        )
        return LookupResult(record=record, profile=profile, strengths=strengths)

    async def search(self, name: str) -> LookupOutcome:
        """Lookup with every lookup error turned into an outcome for display."""
        try:
            result = await self.lookup(name)
        except TypedexError as exc:
            logger.info("search_failed", query=name, error=type(exc).__name__)
            return LookupOutcome(query=name, error=exc)
        logger.info("search_ok", query=name, pokemon=result.record.name)
        return LookupOutcome(query=name, result=result)

    async def suggest(self, text: str) -> List[NameIndexEntry]:
        return await self.index.suggest(text, limit=self.config.suggestion_limit)

    async def close(self) -> None:
        if self._prefetch is not None and not self._prefetch.done():
            self._prefetch.cancel()
            try:
                await self._prefetch
            except asyncio.CancelledError:
                pass
        self._prefetch = None
