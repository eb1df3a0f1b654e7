"""
View layer for the title catalogue.

Everything here is presentation logic over a query result: layout
projection (masonry, grid, list), the list-page view state, detail
lookup by URL path and the image preview overlay. The state models are
serializable and only change through pure transition functions.
"""

from .router import router as view_router  # noqa: F401
