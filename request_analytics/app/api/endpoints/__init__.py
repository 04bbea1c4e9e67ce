"""
Endpoint modules.

Each module defines an APIRouter for one group of routes; they are
aggregated in ``api/router.py``.
"""
