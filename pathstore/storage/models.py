"""
Pydantic data models for stored resources.

MetaData is computed fresh on every stat call and never persisted; it only
describes what the filesystem reported at that moment.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DIRECTORY_MIME_TYPE = "inode/directory"
DEFAULT_MIME_TYPE = "application/octet-stream"


class MetaData(BaseModel):
    """Metadata describing one file or collection."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    path: str
    size: int = 0
    is_col: bool = Field(default=False, alias="isCol")
    mime_type: str = Field(default=DEFAULT_MIME_TYPE, alias="mimeType")
    checksum: str = ""
    checksum_type: str = Field(default="", alias="checksumType")
    modified: int = 0
    etag: str = ""
    children: list["MetaData"] = Field(default_factory=list)
    # reserved for xattrs or custom user data
    extra: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the public camelCase field names."""
        return self.model_dump(by_alias=True)

    def to_json(self, indent: int | None = None) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)


MetaData.model_rebuild()
