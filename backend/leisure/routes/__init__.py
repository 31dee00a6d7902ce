# Routes package init
"""
Leisure Catalog API — API Routes Package
==========================================

Route Inventory:
    - catalog.py: GET /api/genres         (distinct genres)
                  GET /api/genre/{genre}  (shows of a genre)
                  GET /api/tvshow/{tvid}  (one show's full row)
    - health.py:  GET /health             (service health check)

Routes stay thin: take path parameters, hand a CatalogService method to
Database.run(), return the result. Error formatting lives in main.py.
"""
