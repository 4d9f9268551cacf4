from types import MappingProxyType
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class RequestDescriptor(BaseModel):
    """
    Immutable description of the HTTP request sent on every probe.
    """

    model_config = ConfigDict(frozen=True)

    method: str
    url: str
    headers: Mapping[str, str]
    body: Optional[bytes] = None

    @field_validator("headers", mode="after")
    @classmethod
    def _freeze_headers(cls, value):
        # Shared by every probe of a run, so no in-place edits
        return MappingProxyType(dict(value))

    def __repr__(self):
        return f"RequestDescriptor(method={self.method}, url={self.url})"
