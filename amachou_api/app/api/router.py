"""
Top‑level API router.

Aggregates the resource routers that are mounted under the API root
(``settings.api_prefix``).  When new resources are added, include
their routers here.
"""

from fastapi import APIRouter

from .endpoints import diseases

router = APIRouter()

router.include_router(diseases.router, tags=["diseases"])
# Search lives under ``/_search/<resource>`` rather than below the
# resource path, so it is mounted separately.
router.include_router(diseases.search_router, tags=["diseases"])
