"""Pydantic models for download image request/response."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class DownloadImageRequest(BaseModel):
    """Validation model for download image command."""

    model_config = ConfigDict(str_strip_whitespace=True)

    image_id: StrictStr = Field(
        ...,
        min_length=1,
        description="Image ID to download",
    )
    file_path: Path = Field(..., description="Path to download the file into")

    @field_validator("file_path")
    @classmethod
    def validate_destination(cls, value: Path) -> Path:
        if not str(value).strip():
            raise ValueError("file path must not be empty")

        if value.is_dir():
            raise ValueError(f"'{value}' is a directory")

        parent = value.parent
        if not parent.is_dir():
            raise ValueError(f"Directory '{parent}' does not exist")

        return value


class DownloadImageResponse(BaseModel):
    """Result of a successful image download."""

    image_id: str
    file_path: Path
    size_in_bytes: int

    @property
    def message(self) -> str:
        return f"successfully downloaded file to: ({self.file_path})"
