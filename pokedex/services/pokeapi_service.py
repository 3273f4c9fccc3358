"""Catalog client for the public PokeAPI.

Turns the paged ``/pokemon`` listing plus one detail lookup per entry into a
single filtered page of summaries.  Species names and per-Pokémon details are
kept in a :class:`~pokedex.db.memory_cache.MemoryCache` with independent
lifetimes.
"""

import asyncio
import logging
from typing import Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from pokedex.config import settings
from pokedex.db.memory_cache import MemoryCache
from pokedex.models.pokemon import (
    PokemonDetailResponse,
    PokemonDetails,
    PokemonListResponse,
    PokemonPage,
    PokemonSummary,
    SpeciesPageResponse,
    SpeciesResponse,
)

logger = logging.getLogger(__name__)

SPECIES_LIST_KEY = "species_list"
DETAIL_KEY_PREFIX = "pokemon_"

ModelT = TypeVar("ModelT", bound=BaseModel)


class CatalogFetchError(Exception):
    """Raised when PokeAPI is unreachable or returns an unusable payload."""


def detail_cache_key(name: str) -> str:
    return f"{DETAIL_KEY_PREFIX}{name}"


def _matches(value: Optional[str], needle: Optional[str]) -> bool:
    """Case-insensitive substring match; an empty needle matches everything."""
    if not needle:
        return True
    if not value:
        return False
    return needle.casefold() in value.casefold()


class PokeApiService:
    """Cache-backed access to PokeAPI listings and details."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: MemoryCache | None = None,
        species_ttl: float = settings.SPECIES_CACHE_TTL,
        detail_ttl: float = settings.DETAIL_CACHE_TTL,
        species_limit: int = settings.SPECIES_LIST_LIMIT,
        concurrency: int = settings.DETAIL_FETCH_CONCURRENCY,
    ) -> None:
        self._client = client
        self._cache = cache if cache is not None else MemoryCache()
        self._species_ttl = species_ttl
        self._detail_ttl = detail_ttl
        self._species_limit = species_limit
        self._concurrency = max(1, concurrency)

    @property
    def cache(self) -> MemoryCache:
        return self._cache

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    async def _get_json(self, path: str, model: type[ModelT], params: dict | None = None) -> ModelT:
        """GET *path* and decode it into *model*.

        Transport errors, non-2xx statuses and shape mismatches all surface as
        :class:`CatalogFetchError`; the original ``httpx.HTTPStatusError`` is
        kept as ``__cause__`` so callers can inspect the status code.
        """
        logger.debug("GET %s %s", path, params or "")
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
            return model.model_validate(response.json())
        except httpx.HTTPError as e:
            raise CatalogFetchError(f"PokeAPI request to {path} failed: {e}") from e
        except (ValidationError, ValueError) as e:
            raise CatalogFetchError(f"Unexpected PokeAPI payload from {path}: {e}") from e

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    async def fetch_page(
        self,
        page: int,
        page_size: int,
        name_filter: Optional[str] = None,
        species_filter: Optional[str] = None,
    ) -> PokemonPage:
        """Return one page of Pokémon, filtered by name and species.

        The name filter is applied to the raw listing before any detail is
        fetched; the species filter needs the resolved detail.  Entries whose
        detail cannot be resolved are dropped.  Fewer than ``page_size`` items
        may come back when filters are active.
        """
        if page < 1:
            raise ValueError("page must be >= 1")
        if page_size < 1:
            raise ValueError("page_size must be >= 1")

        offset = (page - 1) * page_size
        listing = await self._get_json(
            "pokemon", PokemonListResponse, params={"limit": page_size, "offset": offset}
        )

        candidates = [entry.name for entry in listing.results if _matches(entry.name, name_filter)]
        semaphore = asyncio.Semaphore(self._concurrency)

        async def resolve(name: str) -> PokemonSummary | None:
            async with semaphore:
                return await self._resolve_summary(name, species_filter)

        resolved = await asyncio.gather(*(resolve(name) for name in candidates))
        items = [summary for summary in resolved if summary is not None]

        total = await self._fetch_total()
        if total is None:
            total = len(items)

        logger.info(
            "Page %d (size %d, name=%s, species=%s): %d of %d listed entries kept",
            page, page_size, name_filter, species_filter, len(items), len(listing.results),
        )
        return PokemonPage(items=items, total=total)

    async def _resolve_summary(self, name: str, species_filter: Optional[str]) -> PokemonSummary | None:
        """Return the summary for *name*, or ``None`` when it should be skipped."""
        try:
            detail = await self.fetch_detail(name)
        except Exception as e:
            logger.warning("Skipping %s: detail lookup failed (%s)", name, e)
            return None
        if detail is None:
            return None
        if not _matches(detail.species_name, species_filter):
            return None
        return detail.to_summary()

    async def _fetch_total(self) -> int | None:
        """Return the upstream catalog size, or ``None`` if it cannot be read."""
        try:
            root = await self._get_json("pokemon", PokemonListResponse, params={"limit": 1, "offset": 0})
        except CatalogFetchError as e:
            logger.warning("Could not read catalog total, falling back to page count: %s", e)
            return None
        if root.count is None:
            logger.warning("Catalog listing carried no count, falling back to page count")
        return root.count

    # ------------------------------------------------------------------
    # Species
    # ------------------------------------------------------------------

    async def fetch_all_species_names(self) -> list[str]:
        """Return every species name in upstream order (cached for hours)."""
        return await self._cache.get_or_create(SPECIES_LIST_KEY, self._load_species_names, self._species_ttl)

    async def _load_species_names(self) -> list[str]:
        payload = await self._get_json("pokemon-species", SpeciesPageResponse, params={"limit": self._species_limit})
        names = [species.name for species in payload.results or []]
        logger.info("Loaded %d species names", len(names))
        return names

    # ------------------------------------------------------------------
    # Detail
    # ------------------------------------------------------------------

    async def fetch_detail(self, name: str) -> PokemonDetails | None:
        """Return full detail for *name*, or ``None`` if PokeAPI does not know it."""
        key = name.strip().lower()
        if not key:
            # "pokemon/" is the listing endpoint, not a detail record
            return None
        return await self._cache.get_or_create(
            detail_cache_key(key), lambda: self._load_detail(key), self._detail_ttl
        )

    async def _load_detail(self, name: str) -> PokemonDetails | None:
        try:
            raw = await self._get_json(f"pokemon/{name}", PokemonDetailResponse)
        except CatalogFetchError as e:
            cause = e.__cause__
            if isinstance(cause, httpx.HTTPStatusError) and cause.response.status_code == 404:
                logger.info("Pokémon not found upstream: %s", name)
                return None
            raise

        species_name = await self._fetch_species_name(raw.id)
        return PokemonDetails(
            name=raw.name,
            species_name=species_name,
            image_url=raw.sprites.front_default if raw.sprites else None,
            height=raw.height,
            weight=raw.weight,
            abilities=[slot.ability.name for slot in raw.abilities],
            types=[slot.type.name for slot in raw.types],
        )

    async def _fetch_species_name(self, pokemon_id: int) -> str | None:
        try:
            species = await self._get_json(f"pokemon-species/{pokemon_id}", SpeciesResponse)
        except CatalogFetchError as e:
            logger.warning("Species lookup failed for id %s: %s", pokemon_id, e)
            return None
        return species.name or None
