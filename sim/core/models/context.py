"""Dependencies shared by every command handler in one CLI invocation."""

from dataclasses import dataclass, field

from sim.core.models.config import AppConfig
from sim.core.repositories.metadata_repository import ImageMetadataRepository
from sim.core.repositories.storage_repository import ImageStorageRepository
from sim.core.utils.response import ResponseBuilder


@dataclass
class CommandContext:
    config: AppConfig
    storage: ImageStorageRepository | None
    metadata: ImageMetadataRepository | None
    output: ResponseBuilder = field(default_factory=ResponseBuilder)
