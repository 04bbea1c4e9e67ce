"""
Country resolution for requests whose client does not know its own
country.

The edge proxy in front of the service normally annotates each
connection with the visitor's country (Cloudflare's ``CF-IPCountry``
header by default).  When that header is missing and an ipinfo token
is configured, the client IP is looked up at ipinfo.io instead.  Any
failure yields ``"unknown"`` rather than an error.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests
from fastapi import Request
from fastapi.concurrency import run_in_threadpool

UNKNOWN_COUNTRY = "unknown"
IPINFO_URL = "https://ipinfo.io/{ip}/country"

logger = logging.getLogger(__name__)


def client_ip(request: Request) -> Optional[str]:
    """Best guess at the visitor's IP address."""
    connecting_ip = request.headers.get("CF-Connecting-IP")
    if connecting_ip:
        return connecting_ip.strip()
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    if request.client:
        return request.client.host
    return None


class CountryResolver:
    """Derive a country code from connection metadata."""

    def __init__(self, header: str = "CF-IPCountry", ipinfo_token: str = "", timeout: float = 5.0) -> None:
        self.header = header
        self.ipinfo_token = ipinfo_token
        self.timeout = timeout

    async def resolve(self, request: Request) -> str:
        country = (request.headers.get(self.header) or "").strip()
        if country:
            return country
        ip = client_ip(request)
        if not ip or not self.ipinfo_token:
            return UNKNOWN_COUNTRY
        return await run_in_threadpool(self.lookup_country, ip)

    def lookup_country(self, ip: str) -> str:
        """Ask ipinfo.io for the country of ``ip``."""
        try:
            response = requests.get(
                IPINFO_URL.format(ip=ip),
                params={"token": self.ipinfo_token},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Country lookup for %s failed: %s", ip, exc)
            return UNKNOWN_COUNTRY
        if not response.ok:
            logger.warning("Country lookup for %s returned HTTP %s", ip, response.status_code)
            return UNKNOWN_COUNTRY
        # Plain-text body such as "DE\n".
        return response.text.strip() or UNKNOWN_COUNTRY
