"""
API package containing the HTTP routes.

``router`` in ``api/router.py`` includes every endpoint module defined
in ``api/endpoints``.
"""
