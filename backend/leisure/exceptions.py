"""
Leisure Catalog API — Custom Exception Hierarchy
==================================================

What:  Application-specific exceptions and raw error serialization.
Why:   Global exception handlers (registered in main.py) map each type to a
       status code, so route handlers stay free of try/except blocks.

Exception Hierarchy:
    LeisureError (base)
    ├── ShowNotFoundError  → 400 Bad Request (existing clients expect 400)
    ├── DatabaseError      → 500 Internal Server Error
    └── StartupError       → process never starts serving

Error bodies carry the raw driver error (type, message, errno, failing SQL).
Existing clients read these fields, so they are returned as-is even though
they expose internal detail.
"""

from typing import Any, Dict, Optional

from sqlalchemy.exc import DBAPIError, StatementError


class LeisureError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional debug info (logged, not returned)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ShowNotFoundError(LeisureError):
    """
    Raised when GET /api/tvshow/{id} matches no row.

    HTTP: 400 Bad Request. Existing clients check for 400,
    so this is not changed to 404.
    """

    def __init__(self, tvid: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["tvid"] = tvid
        super().__init__(message=f"tvid {tvid} is not found", context=ctx)
        self.tvid = tvid


class DatabaseError(LeisureError):
    """
    Raised when a query fails during a request.

    What:    Any SQL error or connectivity loss while serving a request.
    HTTP:    500 Internal Server Error, body {"error": details}
    """

    def __init__(
        self,
        message: str = "A database error occurred.",
        details: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.details = details if details is not None else {"message": message}


class StartupError(LeisureError):
    """Raised by the lifespan when the startup ping against the database fails."""


def describe_error(exc: BaseException) -> Dict[str, Any]:
    """
    Serialize a raw exception into a JSON-safe dict for the response body.

    For SQLAlchemy DBAPI errors the wrapped driver exception is unpacked:
    MySQL drivers raise with args (errno, message).

    Example:
        {"type": "ProgrammingError", "errno": 1146,
         "message": "Table 'leisure.tv_shows' doesn't exist",
         "sql": "SELECT tvid, name FROM tv_shows ..."}
    """
    source: BaseException = exc
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        source = exc.orig

    details: Dict[str, Any] = {"type": type(source).__name__, "message": str(source)}

    args = getattr(source, "args", ())
    if len(args) >= 2 and isinstance(args[0], int):
        details["errno"] = args[0]
        details["message"] = str(args[1])

    if isinstance(exc, StatementError) and exc.statement:
        details["sql"] = exc.statement
    return details
