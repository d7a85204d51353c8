from __future__ import annotations

import asyncio
from typing import Dict, Iterable, List, Mapping, Optional, Protocol

from typedex.knowledge.pokeapi_client import PokeApiClient
from typedex.knowledge.type_chart import STATIC_CHART, TYPE_LIST, TypeRelations, normalize_type
from typedex.utils.inflight import InFlight
from typedex.utils.logger import get_logger

logger = get_logger(__name__)


class TypeRelationSource(Protocol):
    async def fetch(self, type_name: str) -> TypeRelations:
        ...


class StaticTypeSource:
    """Embedded chart; resolves without network access."""

    def __init__(self, chart: Optional[Mapping[str, TypeRelations]] = None) -> None:
        self.chart: Mapping[str, TypeRelations] = STATIC_CHART if chart is None else chart

    async def fetch(self, type_name: str) -> TypeRelations:
        return self.chart[type_name]


class PokeApiTypeSource:
    def __init__(self, client: PokeApiClient) -> None:
        self.client = client

    async def fetch(self, type_name: str) -> TypeRelations:
        return await self.client.fetch_type_relations(type_name)


class TypeChartProvider:
    """Session cache of TypeRelations with one in-flight fetch per type."""

    def __init__(self, source: TypeRelationSource) -> None:
        self.source = source
        self._cache: InFlight[str, TypeRelations] = InFlight()

    async def get_relations(self, type_name: str) -> TypeRelations:
        key = normalize_type(type_name)
        return await self._cache.get(key, lambda: self._load(key))

    async def get_many(self, type_names: Iterable[str]) -> List[TypeRelations]:
        return list(await asyncio.gather(*(self.get_relations(t) for t in type_names)))

    def is_loading(self, type_name: str) -> bool:
        return self._cache.is_pending(normalize_type(type_name))

    def cached(self) -> Dict[str, TypeRelations]:
        return {t: self._cache.peek(t) for t in TYPE_LIST if t in self._cache}

    async def _load(self, type_name: str) -> TypeRelations:
        logger.debug("type_relations_fetch", type=type_name)
        try:
            relations = await self.source.fetch(type_name)
        except Exception as exc:
            logger.warning("type_relations_failed", type=type_name, error=str(exc))
            raise
        logger.info("type_relations_cached", type=type_name)
        return relations
