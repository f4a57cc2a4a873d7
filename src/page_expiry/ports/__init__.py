"""Ports - interfaces for external dependencies."""

from .email import EmailTransport
from .sites import SiteConfigStore, StakeholderMappingStore
from .spreadsheet import SpreadsheetReader

__all__ = [
    "EmailTransport",
    "SiteConfigStore",
    "SpreadsheetReader",
    "StakeholderMappingStore",
]
