"""Shared test fixtures."""

from datetime import datetime, timezone

import pytest

from page_expiry.adapters.stores import InMemoryConfigStore
from page_expiry.domain.models import (
    MappingType,
    PageRecord,
    SiteConfig,
    StakeholderMapping,
    UploadedFile,
)
from page_expiry.ports.spreadsheet import SpreadsheetReader

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


class FakeReader(SpreadsheetReader):
    """Returns preset rows regardless of the upload."""

    def __init__(self, rows: list[list[object]]) -> None:
        self.rows = rows

    def read_rows(self, upload: UploadedFile) -> list[list[object]]:
        return self.rows


def make_page(url: str = "/page", **overrides) -> PageRecord:
    fields = {
        "url": url,
        "domain": "www.example.com",
        "path": url,
        "created_date": "2020-01-01",
        "page_views": 0,
        "age_in_days": 1000,
        "age_in_years": 2.7,
        "is_expired": True,
        "is_low_engagement": False,
        "stakeholder": "owner@example.com",
    }
    fields.update(overrides)
    return PageRecord(**fields)


@pytest.fixture
def now() -> datetime:
    """Fixed processing instant."""
    return NOW


@pytest.fixture
def sample_site() -> SiteConfig:
    return SiteConfig(
        id="1",
        domain="www.example.com",
        name="Corporate",
        expiry_days=730,
        engagement_threshold=5,
        new_page_days=30,
        default_stakeholder="web@example.com",
    )


@pytest.fixture
def sample_mappings() -> list[StakeholderMapping]:
    return [
        StakeholderMapping(
            site_id="1",
            pattern="/blog/*",
            email="blog@example.com",
            type=MappingType.PATTERN,
            priority=50,
        ),
        StakeholderMapping(
            site_id="1",
            pattern="/blog/special",
            email="special@example.com",
            type=MappingType.EXACT,
            priority=100,
        ),
    ]


@pytest.fixture
def memory_store(
    sample_site: SiteConfig, sample_mappings: list[StakeholderMapping]
) -> InMemoryConfigStore:
    return InMemoryConfigStore(sites=[sample_site], mappings=sample_mappings)


@pytest.fixture
def page_factory():
    """Build PageRecords with sensible defaults."""
    return make_page


@pytest.fixture
def reader_factory():
    """Build readers returning the given rows."""
    return FakeReader
