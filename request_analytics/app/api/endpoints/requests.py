"""
Endpoints for recording and reading analytics events.

Ingestion routes require the shared secret in the ``Authorization``
header and answer with a plain ``Recorded``.  Read routes are public:
``/requests/get/count`` returns the number of stored records and any
other ``/requests/get*`` path returns a filtered page of records,
newest first.
"""

import logging
from typing import Any, List

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from request_analytics.app.core.dependencies import get_country_resolver, get_store
from request_analytics.app.core.errors import InvalidJSON
from request_analytics.app.core.security import require_auth_key
from request_analytics.app.schemas.record import CountResponse, Record
from request_analytics.app.services.geo_service import CountryResolver
from request_analytics.app.services.query import RecordQuery
from request_analytics.app.services.stores import RecordStore
from request_analytics.app.services.validator import IP_UNKNOWN_FIELDS, require_fields, validate

router = APIRouter()

logger = logging.getLogger(__name__)


async def read_json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as exc:
        raise InvalidJSON() from exc


@router.post("/record", response_class=PlainTextResponse, dependencies=[Depends(require_auth_key)])
async def record_request(request: Request, store: RecordStore = Depends(get_store)) -> str:
    """Store one event supplied entirely by the client."""
    record = validate(await read_json_body(request))
    await store.append(record)
    logger.info("Recorded %s %s%s at %s", record.method, record.domain, record.path, record.timestamp)
    return "Recorded"


@router.post("/record/ipunknown", response_class=PlainTextResponse, dependencies=[Depends(require_auth_key)])
async def record_request_ip_unknown(
    request: Request,
    store: RecordStore = Depends(get_store),
    resolver: CountryResolver = Depends(get_country_resolver),
) -> str:
    """Store one event whose country is derived from the connection.

    Any ``country`` sent in the body is ignored.
    """
    fields = await read_json_body(request)
    require_fields(fields, IP_UNKNOWN_FIELDS)
    country = await resolver.resolve(request)
    record = validate({**fields, "country": country})
    await store.append(record)
    logger.info("Recorded %s %s%s from %s", record.method, record.domain, record.path, country)
    return "Recorded"


@router.get("/get/count", response_model=CountResponse)
async def count_requests(store: RecordStore = Depends(get_store)) -> CountResponse:
    return CountResponse(count=await store.count())


# Matches /requests/get as well as any longer path starting with it.
@router.get("/get{suffix:path}", response_model=List[Record])
async def get_requests(request: Request, suffix: str, store: RecordStore = Depends(get_store)) -> List[Record]:
    """Return a filtered page of records.

    Query parameters: ``start`` and ``end`` (inclusive timestamp
    bounds), ``domain``, ``method``, ``path`` and ``country`` (exact
    matches), ``count`` (page size, at most 100) and ``offset``.
    """
    query = RecordQuery.from_params(request.query_params)
    return await store.query(query)
