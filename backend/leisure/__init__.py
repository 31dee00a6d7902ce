"""
Leisure Catalog API — Application Package Initializer
======================================================

What: Marks the `leisure` directory as a Python package.
Why:  Enables module imports like `from leisure.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend is a thin read path over the `leisure` MySQL schema:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      Services (Query Composition)   │  ← Run queries, shape rows
    ├─────────────────────────────────────┤
    │      Queries & Schemas (Contract)   │  ← SQL statements + Pydantic
    ├─────────────────────────────────────┤
    │      Database (Connection Pool)     │  ← Scoped connection checkout
    └─────────────────────────────────────┘

    Nothing is written: every request checks out one pooled connection,
    runs one or two SELECTs and hands the connection back.
"""

__version__ = "1.0.0"
