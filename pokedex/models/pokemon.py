"""Pydantic models for Pokémon data, both upstream (PokeAPI) and API-facing."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from pokedex.config import settings


# ---------------------------------------------------------------------------
# Domain models
# ---------------------------------------------------------------------------

class PokemonSummary(BaseModel):
    """Minimal projection of a Pokémon used in list views and exports."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    name: str = Field(..., description="Pokémon name")
    species_name: Optional[str] = Field(None, description="Species display name")
    image_url: Optional[str] = Field(None, description="Front sprite URL")


class PokemonDetails(PokemonSummary):
    """Full record for a single Pokémon."""

    height: int = Field(0, description="Height in decimetres")
    weight: int = Field(0, description="Weight in hectograms")
    abilities: list[str] = Field(default_factory=list, description="Ability names in upstream order")
    types: list[str] = Field(default_factory=list, description="Type names in upstream order")

    def to_summary(self) -> PokemonSummary:
        return PokemonSummary(name=self.name, species_name=self.species_name, image_url=self.image_url)


class PokemonPage(BaseModel):
    """A filtered page of summaries.

    ``total`` is the upstream catalog's full size, not the number of entries
    matching the active filters.
    """

    items: list[PokemonSummary] = Field(default_factory=list)
    total: int = 0


# ---------------------------------------------------------------------------
# PokeAPI payloads
# ---------------------------------------------------------------------------

class NamedResource(BaseModel):
    name: str
    url: str = ""


class PokemonListResponse(BaseModel):
    count: Optional[int] = None
    next: Optional[str] = None
    previous: Optional[str] = None
    results: list[NamedResource] = Field(default_factory=list)


class Sprites(BaseModel):
    front_default: Optional[str] = None


class AbilitySlot(BaseModel):
    ability: NamedResource


class TypeSlot(BaseModel):
    type: NamedResource


class PokemonDetailResponse(BaseModel):
    id: int
    name: str
    height: int = 0
    weight: int = 0
    sprites: Optional[Sprites] = None
    abilities: list[AbilitySlot] = Field(default_factory=list)
    types: list[TypeSlot] = Field(default_factory=list)


class SpeciesResponse(BaseModel):
    name: str


class SpeciesPageResponse(BaseModel):
    results: Optional[list[NamedResource]] = None


# ---------------------------------------------------------------------------
# API request / response schemas
# ---------------------------------------------------------------------------

class PokemonPageResponse(BaseModel):
    """Response schema for the paginated Pokémon listing."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    page: int = Field(..., description="Current page (1-indexed)")
    page_size: int = Field(..., description="Requested page size")
    total: int = Field(..., description="Total Pokémon in the upstream catalog (unfiltered)")
    name_filter: Optional[str] = Field(None, description="Active name filter")
    species_filter: Optional[str] = Field(None, description="Active species filter")
    items: list[PokemonSummary] = Field(..., description="Pokémon on this page")
    species_options: list[str] = Field(default_factory=list, description="Species names for the filter dropdown")


class SpeciesListResponse(BaseModel):
    """Response schema for the full species listing."""

    data: list[str]
    count: int


class EmailRequest(BaseModel):
    """Request schema for emailing the current page as a spreadsheet."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    to_email: EmailStr = Field(..., description="Recipient address")
    name: Optional[str] = Field(None, description="Name filter")
    species: Optional[str] = Field(None, description="Species filter")
    page: int = Field(1, ge=1, description="Page (1-indexed)")
    page_size: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Page size")


class EmailResponse(BaseModel):
    success: bool = True


class ErrorDetail(BaseModel):
    """Error detail with machine-readable code and human-readable message."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")


class ApiErrorResponse(BaseModel):
    error: ErrorDetail
