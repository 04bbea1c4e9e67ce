"""
Validation of ingestion payloads.

``validate`` turns a decoded JSON body into a ``Record``.  All five
record fields are required and must be truthy: an absent key, an
empty string, ``0``, ``null`` and ``false`` all count as missing.

Values are not coerced, and types are checked more strictly than the
JSON alone would require: a timestamp must already be an integer (a
numeric string such as ``"1700000000"`` is rejected, not stored) and
the remaining fields must already be strings.  The timestamp must also
lie between 1 and ``MAX_TIMESTAMP``, the range an unbounded query
covers, so every backend accepts exactly the same records and every
stored record is visible to a query without bounds.
"""

from typing import Any, Iterable, Mapping

from request_analytics.app.core.errors import InvalidField, InvalidJSON, MissingField
from request_analytics.app.schemas.record import LEGACY_COUNTRY_FIELD, RECORD_FIELDS, Record
from request_analytics.app.services.query import MAX_TIMESTAMP

# Fields a client must send to /requests/record/ipunknown; the country
# is filled in by the server.
IP_UNKNOWN_FIELDS = ("timestamp", "domain", "method", "path")


def require_fields(fields: Any, names: Iterable[str]) -> None:
    """Raise ``MissingField`` unless every name maps to a truthy value."""
    if not isinstance(fields, Mapping):
        raise InvalidJSON()
    for name in names:
        if not fields.get(name):
            raise MissingField()


def validate(fields: Any) -> Record:
    """Validate a decoded payload and return the corresponding record."""
    if isinstance(fields, Mapping) and not fields.get("country") and fields.get(LEGACY_COUNTRY_FIELD):
        fields = {**fields, "country": fields[LEGACY_COUNTRY_FIELD]}
    require_fields(fields, RECORD_FIELDS)

    timestamp = fields["timestamp"]
    if isinstance(timestamp, bool) or not isinstance(timestamp, int):
        raise InvalidField()
    if not 0 < timestamp <= MAX_TIMESTAMP:
        raise InvalidField()
    for name in ("domain", "method", "path", "country"):
        if not isinstance(fields[name], str):
            raise InvalidField()

    return Record(**{name: fields[name] for name in RECORD_FIELDS})
