# Services package init
"""
Leisure Catalog API — Services Layer
=====================================

Service Inventory:
    - CatalogService: genre listing, shows by genre, show detail

Services take a checked-out connection as their first argument and never
acquire or release connections themselves.
"""
