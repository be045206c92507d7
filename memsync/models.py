from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence, Union
from pydantic import BaseModel, ConfigDict, Field

# Collection columns arrive either as JSON text (straight from SQLite) or as
# already-decoded structures (from callers that built the record themselves).
JsonListField = Union[str, Sequence[Any], Mapping[str, Any], None]

class OrderBy(str, Enum):
    DATE_DESC = "date_desc"
    DATE_ASC = "date_asc"

class SyncErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    LOOKUP_FAILURE = "lookup_failure"
    TRANSFORM_FAILURE = "transform_failure"
    DELEGATION_FAILURE = "delegation_failure"
    SERVICE_UNAVAILABLE = "service_unavailable"

@dataclass
class GetObservationsOptions:
    """Filters and ordering for a bulk observation lookup."""
    order_by: OrderBy = OrderBy.DATE_DESC
    limit: Optional[int] = None
    project: Optional[str] = None
    type: Union[str, List[str], None] = None

@dataclass
class ObservationRecord:
    """An observation row as read from the primary datastore."""
    id: int
    memory_session_id: Optional[str] = None
    project: Optional[str] = None
    type: Optional[str] = None
    title: Optional[str] = None
    subtitle: Optional[str] = None
    narrative: Optional[str] = None
    text: Optional[str] = None
    facts: JsonListField = None
    concepts: JsonListField = None
    files_read: JsonListField = None
    files_modified: JsonListField = None
    prompt_number: Optional[int] = None
    discovery_tokens: Optional[int] = None
    created_at: Optional[str] = None
    created_at_epoch: Optional[int] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ObservationRecord":
        """Build a record from a row or dict, ignoring unknown keys."""
        known = cls.__dataclass_fields__.keys()
        return cls(**{key: data[key] for key in known if key in data})

class StoredObservation(BaseModel):
    """Observation in the shape the Chroma indexer consumes."""
    id: int
    memory_session_id: Optional[str] = None
    project: Optional[str] = None
    text: Optional[str] = None
    type: Optional[str] = None
    title: Optional[str] = None
    subtitle: Optional[str] = None
    facts: str = "[]"
    narrative: Optional[str] = None
    concepts: str = "[]"
    files_read: str = "[]"
    files_modified: str = "[]"
    prompt_number: int = 0
    discovery_tokens: int = 0
    created_at: Optional[str] = None
    created_at_epoch: Optional[int] = None

class SyncResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    success: bool
    embedded_count: Optional[int] = Field(default=None, alias="embeddedCount")
    message: Optional[str] = None
    error_message: Optional[str] = Field(default=None, alias="errorMessage")
    error_kind: Optional[SyncErrorKind] = Field(default=None, alias="errorKind")

    def to_response(self) -> dict:
        """Wire form: camelCase keys, unset fields omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)
