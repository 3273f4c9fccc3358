"""Pokémon catalog endpoints: listing, detail, spreadsheet export and email."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from pokedex.config import settings
from pokedex.dependencies import get_pokeapi_service
from pokedex.models.pokemon import (
    ApiErrorResponse,
    EmailRequest,
    EmailResponse,
    PokemonDetails,
    PokemonPageResponse,
    SpeciesListResponse,
)
from pokedex.services import email_service
from pokedex.services.export_service import EXPORT_FILENAME, XLSX_MIME_TYPE, build_workbook
from pokedex.services.pokeapi_service import PokeApiService

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


def _failure(code: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": {"code": code, "message": message}},
    )


@router.get(
    "/pokemon",
    response_model=PokemonPageResponse,
    responses={502: {"model": ApiErrorResponse}},
    summary="List Pokémon",
    description="Paginated Pokémon listing, optionally filtered by name and species.",
)
@limiter.limit(settings.RATE_LIMIT)
async def list_pokemon(
    request: Request,
    page: int = Query(1, ge=1, description="Page (1-indexed)"),
    page_size: int = Query(
        settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, alias="pageSize", description="Page size"
    ),
    name: Optional[str] = Query(None, description="Case-insensitive name substring"),
    species: Optional[str] = Query(None, description="Case-insensitive species substring"),
    service: PokeApiService = Depends(get_pokeapi_service),
) -> PokemonPageResponse:
    """Get one page of Pokémon plus the species options for the filter dropdown."""
    species_names = await service.fetch_all_species_names()
    result = await service.fetch_page(page, page_size, name, species)
    return PokemonPageResponse(
        page=page,
        page_size=page_size,
        total=result.total,
        name_filter=name,
        species_filter=species,
        items=result.items,
        species_options=species_names[: settings.SPECIES_OPTIONS_LIMIT],
    )


@router.get(
    "/pokemon/species",
    response_model=SpeciesListResponse,
    responses={502: {"model": ApiErrorResponse}},
    summary="List all species names",
)
@limiter.limit(settings.RATE_LIMIT)
async def list_species(
    request: Request,
    service: PokeApiService = Depends(get_pokeapi_service),
) -> SpeciesListResponse:
    names = await service.fetch_all_species_names()
    return SpeciesListResponse(data=names, count=len(names))


@router.get(
    "/pokemon/export",
    response_class=Response,
    responses={
        200: {"content": {XLSX_MIME_TYPE: {}}},
        500: {"model": ApiErrorResponse},
    },
    summary="Export the current page as a spreadsheet",
)
@limiter.limit(settings.RATE_LIMIT)
async def export_pokemon(
    request: Request,
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, alias="pageSize"),
    name: Optional[str] = Query(None),
    species: Optional[str] = Query(None),
    service: PokeApiService = Depends(get_pokeapi_service),
) -> Response:
    """Download the filtered page as ``pokemons.xlsx``."""
    logger.info("Exporting spreadsheet: name=%s species=%s page=%d pageSize=%d", name, species, page, page_size)
    try:
        result = await service.fetch_page(page, page_size, name, species)
        content = build_workbook(result.items)
    except Exception as e:
        logger.exception("Spreadsheet export failed")
        raise _failure("export_failed", "Error generating the spreadsheet") from e
    return Response(
        content=content,
        media_type=XLSX_MIME_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.post(
    "/pokemon/email",
    response_model=EmailResponse,
    responses={500: {"model": ApiErrorResponse}},
    summary="Email the current page as a spreadsheet",
)
@limiter.limit(settings.RATE_LIMIT)
async def email_pokemon(
    request: Request,
    body: EmailRequest,
    service: PokeApiService = Depends(get_pokeapi_service),
) -> EmailResponse:
    """Build the spreadsheet for the requested page and send it to ``toEmail``."""
    logger.info(
        "Emailing spreadsheet: name=%s species=%s page=%d pageSize=%d",
        body.name, body.species, body.page, body.page_size,
    )
    try:
        result = await service.fetch_page(body.page, body.page_size, body.name, body.species)
        content = build_workbook(result.items)
        await email_service.send_export(body.to_email, content)
    except Exception as e:
        logger.exception("Sending export email failed")
        raise _failure("email_failed", "Error sending email") from e
    return EmailResponse(success=True)


@router.get(
    "/pokemon/{name}",
    response_model=PokemonDetails,
    responses={404: {"model": ApiErrorResponse}, 502: {"model": ApiErrorResponse}},
    summary="Get Pokémon detail",
)
@limiter.limit(settings.RATE_LIMIT)
async def pokemon_detail(
    request: Request,
    name: str,
    service: PokeApiService = Depends(get_pokeapi_service),
) -> PokemonDetails:
    detail = await service.fetch_detail(name)
    if detail is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": {"code": "pokemon_not_found", "message": f"Pokémon '{name}' not found"}},
        )
    return detail


@router.get(
    "/health",
    summary="Health check",
    description="Check that the API is running.",
)
@limiter.limit(settings.RATE_LIMIT)
async def health_check(request: Request) -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}
