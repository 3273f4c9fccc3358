"""Shared FastAPI dependencies."""

from fastapi import Request

from pokedex.services.pokeapi_service import PokeApiService


def get_pokeapi_service(request: Request) -> PokeApiService:
    """Return the PokeApiService created during application startup."""
    service = getattr(request.app.state, "pokeapi_service", None)
    if service is None:
        raise RuntimeError("PokeApiService not initialized. Check lifespan setup.")
    return service
