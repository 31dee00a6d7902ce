"""
Leisure Catalog API — SQL Statements
======================================

The four fixed, parameterized SELECTs the API issues against the external
`leisure` schema. Tables are declared as lightweight Core table clauses
(no ORM models, no metadata): this service reads the schema but does not own
it, and `tv_shows` detail rows are passed through column-for-column.

    genres(tvid, genre)
    tv_shows(tvid, name, ...)
"""

from typing import Sequence

from sqlalchemy import Select, column, literal_column, select, table

genres = table("genres", column("tvid"), column("genre"))
tv_shows = table("tv_shows", column("tvid"), column("name"))


# SELECT DISTINCT genre FROM genres ORDER BY genre ASC
SELECT_GENRES: Select = select(genres.c.genre).distinct().order_by(genres.c.genre.asc())


def select_tvids_by_genre(genre: str) -> Select:
    """SELECT tvid FROM genres WHERE genre LIKE :genre"""
    # Why LIKE and not "=": existing clients send patterns such as "Dra%".
    # The value is bound, never interpolated, so wildcards are the only
    # thing a caller controls.
    return select(genres.c.tvid).where(genres.c.genre.like(genre))


def select_shows_by_tvids(tvids: Sequence) -> Select:
    """
    SELECT tvid, name FROM tv_shows WHERE tvid IN (:tvids) ORDER BY name ASC

    An empty `tvids` renders SQLAlchemy's empty-set IN expression, which
    matches nothing, so the statement returns no rows instead of failing.
    """
    return (
        select(tv_shows.c.tvid, tv_shows.c.name)
        .where(tv_shows.c.tvid.in_(list(tvids)))
        .order_by(tv_shows.c.name.asc())
    )


def select_show_detail(tvid: str) -> Select:
    """SELECT * FROM tv_shows WHERE tvid = :tvid"""
    return select(literal_column("*")).select_from(tv_shows).where(tv_shows.c.tvid == tvid)
