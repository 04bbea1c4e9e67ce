"""
Shared‑secret authentication for ingestion routes.

Clients send the configured secret verbatim in the ``Authorization``
header.  The check is a plain string comparison; there are no tokens,
users or roles.
"""

import logging
from typing import Optional

from fastapi import Depends, Header

from .config import Settings
from .dependencies import get_settings
from .errors import Unauthorized


def require_auth_key(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Dependency that rejects requests without the shared secret.

    An unset secret rejects every request.
    """
    if not settings.auth_key or authorization != settings.auth_key:
        logging.getLogger(__name__).warning("Rejected ingestion request with invalid auth key")
        raise Unauthorized()
