"""Simple Image Manager package."""

__version__ = "1.0.0"
__description__ = (
    "CLI for managing image files in cloud storage backed by S3 and a document database"
)

__all__ = ["cli", "handlers", "core"]
