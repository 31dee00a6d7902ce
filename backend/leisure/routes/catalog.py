"""
Leisure Catalog API — Catalog Route Handlers
==============================================

What:  GET /api/genres, GET /api/genre/{genre}, GET /api/tvshow/{id}.
How:   Each handler passes a CatalogService method to `Database.run()`,
       which checks out a pooled connection for the call and always
       returns it. Errors propagate to the global exception handlers.
Who:   Called by the catalog frontend.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends

from leisure.database import Database, get_database
from leisure.schemas.catalog import ErrorResponse, ShowSummary
from leisure.services.catalog_service import catalog_service

router = APIRouter(prefix="/api", tags=["Catalog"])


@router.get(
    "/genres",
    response_model=List[Optional[str]],
    responses={500: {"description": "Database error", "model": ErrorResponse}},
    summary="List all genres",
    description="Distinct genre labels in ascending order. A NULL label is returned as null.",
)
async def list_genres(database: Database = Depends(get_database)) -> List[Optional[str]]:
    return await database.run(catalog_service.list_genres)


@router.get(
    "/genre/{genre}",
    response_model=List[ShowSummary],
    responses={500: {"description": "Database error", "model": ErrorResponse}},
    summary="List the shows of a genre",
    description=(
        "Shows whose genre matches the path segment (SQL LIKE semantics), "
        "ordered by name. An unknown genre returns an empty array."
    ),
)
async def list_shows_by_genre(
    genre: str,
    database: Database = Depends(get_database),
) -> List[Dict[str, Any]]:
    return await database.run(catalog_service.list_shows_by_genre, genre)


@router.get(
    "/tvshow/{tvid}",
    responses={
        200: {"description": "Full tv_shows row"},
        400: {"description": "tvid is not found", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Get one show's detail record",
)
async def get_show(tvid: str, database: Database = Depends(get_database)) -> Dict[str, Any]:
    """
    Returns the show's row as a single object (not wrapped in an array).

    A missing tvid answers 400 with {"error": "tvid <id> is not found"};
    clients rely on 400 here, so it is not a 404.
    """
    return await database.run(catalog_service.get_show, tvid)
