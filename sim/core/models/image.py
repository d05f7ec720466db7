"""Shared image record models."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

from sim.core.utils.constants import DEFAULT_CONTENT_TYPE
from sim.core.utils.time import parse_utc_iso


class ImageRecord(BaseModel):
    """Metadata record stored in the database that links to an image object in cloud storage."""

    model_config = ConfigDict(extra="ignore")

    id: StrictStr = Field(..., description="Unique image identifier, also the record key")
    created_at: StrictStr = Field(..., description="ISO-8601 creation timestamp (UTC)")
    etag: StrictStr = Field(..., description="ETag of the stored object")
    key: StrictStr = Field(..., description="Object key in cloud storage")
    name: StrictStr = Field(..., description="Name given during upload")
    size_in_bytes: int = Field(..., ge=0, description="Object size in bytes")
    storage: StrictStr = Field(..., description="Cloud storage holding the object, i.e. an S3 bucket")
    content_type: StrictStr = Field(DEFAULT_CONTENT_TYPE, description="MIME type of the object")

    @field_validator("created_at")
    @classmethod
    def validate_created_at(cls, value: str) -> str:
        parse_utc_iso(value)
        return value

    def to_summary(self) -> "ImageSummary":
        return ImageSummary(id=self.id, name=self.name, size_in_bytes=self.size_in_bytes)


class ImageSummary(BaseModel):
    """Summary view of an image returned by the list command."""

    id: StrictStr = Field(..., description="Unique image identifier")
    name: StrictStr = Field(..., description="Name given during upload")
    size_in_bytes: int = Field(..., description="Object size in bytes")


class StoredObject(BaseModel):
    """Object attributes reported by the object store after an upload."""

    etag: StrictStr
    content_length: int = Field(..., ge=0)
