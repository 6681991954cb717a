"""
API package containing the REST routers.

``router`` aggregates the resource routers; each resource lives in its
own module under ``endpoints``.
"""
