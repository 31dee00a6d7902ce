"""
Leisure Catalog API — Catalog Service (Query Composition)
==========================================================

What:  Runs the catalog queries on a checked-out connection and shapes rows.
Why:   Keeps SQL execution and row mapping out of the HTTP layer.
How:   Each method receives the connection as its first argument, so route
       handlers call them through `Database.run(fn, *args)`, which owns
       checkout and release.
Who:   Called by the catalog route handlers.

Error Handling Strategy:
    Anything raised while querying is logged with its stack trace and
    re-raised as DatabaseError carrying the serialized driver error.
    ShowNotFoundError propagates unchanged.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncConnection

from leisure import queries
from leisure.exceptions import DatabaseError, ShowNotFoundError, describe_error

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Read-only operations over the genres and tv_shows tables.

    Stateless: the connection is passed in on every call.
    """

    async def list_genres(self, conn: AsyncConnection) -> List[Optional[str]]:
        """
        Distinct genre labels in ascending order (NULL comes through as None).

        Query plan:
            SELECT DISTINCT genre FROM genres ORDER BY genre ASC
        """
        try:
            result = await conn.execute(queries.SELECT_GENRES)
            return list(result.scalars().all())
        except Exception as e:
            raise self._database_error("listing genres", e)

    async def list_shows_by_genre(self, conn: AsyncConnection, genre: str) -> List[Dict[str, Any]]:
        """
        Shows tagged with `genre`, ascending by name.

        Two dependent queries on the same connection:
            1. SELECT tvid FROM genres WHERE genre LIKE :genre
            2. SELECT tvid, name FROM tv_shows WHERE tvid IN (...) ORDER BY name

        The second statement is built from the first one's rows, so it is
        only issued after the first has returned. `genre` is bound as a
        parameter and otherwise passed to LIKE untouched; `%` and `_`
        act as wildcards.

        Returns:
            List of {"tvid": ..., "name": ...}; empty when no show has the genre.
        """
        try:
            result = await conn.execute(queries.select_tvids_by_genre(genre))
            tvids = list(result.scalars().all())
            logger.debug("Genre %r matched %d tvids", genre, len(tvids))

            result = await conn.execute(queries.select_shows_by_tvids(tvids))
            return [dict(row) for row in result.mappings().all()]
        except Exception as e:
            raise self._database_error(f"listing shows for genre {genre!r}", e)

    async def get_show(self, conn: AsyncConnection, tvid: str) -> Dict[str, Any]:
        """
        Full tv_shows row for `tvid`.

        Query plan:
            SELECT * FROM tv_shows WHERE tvid = :tvid

        Raises:
            ShowNotFoundError: No row has this tvid (→ 400)
            DatabaseError: Query execution failed (→ 500)
        """
        try:
            result = await conn.execute(queries.select_show_detail(tvid))
            row = result.mappings().first()
        except Exception as e:
            raise self._database_error(f"fetching tvid {tvid!r}", e)

        if row is None:
            raise ShowNotFoundError(tvid)
        return dict(row)

    @staticmethod
    def _database_error(action: str, exc: Exception) -> DatabaseError:
        logger.error("Database error %s: %s", action, str(exc), exc_info=exc)
        return DatabaseError(
            message=f"Database error {action}",
            details=describe_error(exc),
            context={"error_type": type(exc).__name__},
        )


catalog_service = CatalogService()
