"""Domain layer - core business logic."""

from .errors import MissingColumnError, ProcessingError, SpreadsheetFormatError
from .models import (
    DispatchSummary,
    MappingType,
    PageRecord,
    ProcessingResult,
    SiteConfig,
    StakeholderMapping,
    UploadedFile,
)

__all__ = [
    "DispatchSummary",
    "MappingType",
    "MissingColumnError",
    "PageRecord",
    "ProcessingError",
    "ProcessingResult",
    "SiteConfig",
    "SpreadsheetFormatError",
    "StakeholderMapping",
    "UploadedFile",
]
