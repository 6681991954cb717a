"""
Endpoint subpackage.

Each module defines the APIRouter(s) for one resource.  The routers are
aggregated in ``api/router.py`` and mounted by the application.
"""
