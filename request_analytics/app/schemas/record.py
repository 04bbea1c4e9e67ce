"""
Pydantic schemas for recorded requests.

A ``Record`` describes one logged HTTP access: when it happened (as
reported by the client), which site received it, the HTTP method and
path, and the visitor's country code.  Records are immutable once
created and carry no identifier; the table store keeps its row id to
itself.
"""

from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field

RECORD_FIELDS = ("timestamp", "domain", "method", "path", "country")

# Earlier deployments stored the country under this key.
LEGACY_COUNTRY_FIELD = "ipcountry"


class Record(BaseModel):
    """Schema for a single recorded request."""

    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(..., description="Client‑supplied event time")
    domain: str = Field(..., description="Site that received the request")
    method: str = Field(..., description="HTTP method of the original request")
    path: str = Field(..., description="Request path of the original request")
    country: str = Field(..., description="Country code of the visitor")

    @classmethod
    def from_stored(cls, data: Mapping[str, Any]) -> "Record":
        """Rebuild a record from a persisted mapping.

        Accepts the legacy ``ipcountry`` key when ``country`` is
        missing.  Raises ``pydantic.ValidationError`` if the mapping
        does not describe a record.
        """
        values: Dict[str, Any] = dict(data)
        if "country" not in values and LEGACY_COUNTRY_FIELD in values:
            values["country"] = values.pop(LEGACY_COUNTRY_FIELD)
        return cls(**{name: values.get(name) for name in RECORD_FIELDS})

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


class CountResponse(BaseModel):
    """Schema for the total number of stored records."""

    count: int
