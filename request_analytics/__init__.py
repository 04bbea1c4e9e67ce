"""
Top‑level package for the Request Analytics service.

All functionality lives in submodules under ``app``; modules are
imported with fully qualified names such as
``request_analytics.app.main``.
"""

__all__ = []
