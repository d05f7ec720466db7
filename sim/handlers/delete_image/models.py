"""Pydantic models for delete image request/response."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class DeleteImageRequest(BaseModel):
    """Validation model for delete image command."""

    model_config = ConfigDict(str_strip_whitespace=True)

    image_id: StrictStr = Field(
        ...,
        min_length=1,
        description="Image ID to delete",
    )


class DeleteImageResponse(BaseModel):
    """Result of a successful image deletion."""

    image_id: str = Field(..., description="Deleted image ID")
    key: str = Field(..., description="Object key that was deleted")
    deleted_at: str = Field(..., description="Deletion timestamp")

    @property
    def message(self) -> str:
        return f"Image ({self.image_id}) successfully deleted"
