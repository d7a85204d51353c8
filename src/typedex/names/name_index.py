from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Dict, List, Optional

from typedex.errors import ResolutionFailure, TypedexError
from typedex.knowledge.pokeapi_client import PokeApiClient
from typedex.utils.format import chunked, normalize_name
from typedex.utils.inflight import InFlight
from typedex.utils.logger import get_logger

logger = get_logger(__name__)

_INDEX_KEY = "all"


@dataclass(frozen=True)
class NameIndexEntry:
    canonical_id: int
    english_name: str
    german_name: str


class NameIndex:
    """Bilingual (English/German) species list used for suggestions and name resolution.

    Built once per session from the species listing plus one species request
    per entry. Species requests run concurrently within a chunk of
    `batch_size`; chunks run one after another.
    """

    def __init__(
        self,
        client: PokeApiClient,
        species_limit: int = 1025,
        batch_size: int = 50,
        min_query_length: int = 2,
    ) -> None:
        self.client = client
        self.species_limit = species_limit
        self.batch_size = batch_size
        self.min_query_length = min_query_length
        self._builds: InFlight[str, List[NameIndexEntry]] = InFlight()

    @property
    def built(self) -> bool:
        return _INDEX_KEY in self._builds

    @property
    def building(self) -> bool:
        return self._builds.is_pending(_INDEX_KEY)

    @property
    def entries(self) -> List[NameIndexEntry]:
        return list(self._builds.peek(_INDEX_KEY) or [])

    async def build(self) -> List[NameIndexEntry]:
        return list(await self._builds.get(_INDEX_KEY, self._build))

    def query(self, text: str, limit: int = 10) -> List[NameIndexEntry]:
        term = normalize_name(text)
        if len(term) < self.min_query_length or limit < 1:
            return []
        matches = []
        for entry in self._builds.peek(_INDEX_KEY) or []:
            if term in entry.german_name.lower() or term in entry.english_name.lower():
                matches.append(entry)
                if len(matches) >= limit:
                    break
        return matches

    async def suggest(self, text: str, limit: int = 10) -> List[NameIndexEntry]:
        if len(normalize_name(text)) < self.min_query_length:
            return []
        try:
            await self.build()
        except ResolutionFailure as exc:
            logger.warning("suggestions_unavailable", error=str(exc))
            return []
        return self.query(text, limit)

    def german_to_english(self) -> Dict[str, str]:
        """Lower-cased German name -> canonical English name, from the built entries."""
        return {e.german_name.lower(): e.english_name for e in self._builds.peek(_INDEX_KEY) or []}

    async def _build(self) -> List[NameIndexEntry]:
        try:
            listing = await self.client.list_pokemon(self.species_limit)
        except TypedexError as exc:
            logger.error("name_index_listing_failed", error=str(exc))
            raise ResolutionFailure(str(exc)) from exc

        entries: List[NameIndexEntry] = []
        for batch in chunked(listing, self.batch_size):
            results = await asyncio.gather(*(self._entry(cid, name) for cid, name in batch))
            entries.extend(e for e in results if e is not None)
        if not entries:
            logger.error("name_index_empty", listed=len(listing))
            raise ResolutionFailure(f"no species names loaded ({len(listing)} listed)")
        logger.info("name_index_built", entries=len(entries), listed=len(listing))
        return entries

    async def _entry(self, canonical_id: int, english_name: str) -> Optional[NameIndexEntry]:
        try:
            german = await self.client.fetch_german_name(canonical_id)
        except TypedexError as exc:
            logger.warning("species_fetch_failed", name=english_name, error=str(exc))
            return None
        return NameIndexEntry(canonical_id, english_name, german or english_name)
