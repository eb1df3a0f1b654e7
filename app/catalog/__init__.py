"""
Catalog package for the title catalogue API.

This package contains the query engine (search, sort and suggestions
over the read-only catalogue), the schemas returned to clients and the
route definitions under ``/api/catalog``. The catalogue itself lives in
``app.storage`` and is loaded once from a JSON file.
"""

from .router import router as catalog_router  # noqa: F401
