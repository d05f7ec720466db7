"""Pydantic models for image upload request/response."""

from pydantic import BaseModel, ConfigDict, Field, FilePath, StrictStr, field_validator


class UploadImageRequest(BaseModel):
    """Validation model for image upload command."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file_path: FilePath = Field(..., description="Path to the image file")
    name: StrictStr = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Name for the image",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        """
        The name becomes the last segment of the object key, so it
        must not contain path separators.
        """
        if "/" in value or "\\" in value:
            raise ValueError("Image name must not contain path separators")

        return value


class UploadImageResponse(BaseModel):
    """Result of a successful image upload."""

    image_id: str = Field(..., description="Unique image ID")
    name: str = Field(..., description="Image name")
    key: str = Field(..., description="Object key in cloud storage")
    size_in_bytes: int = Field(..., description="Stored object size")

    @property
    def message(self) -> str:
        return f"Image uploaded successfully with id({self.image_id})"
