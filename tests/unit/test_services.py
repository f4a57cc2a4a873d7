"""Unit tests for the processing and alert services."""

import asyncio
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from page_expiry.adapters.spreadsheet import PandasSpreadsheetReader
from page_expiry.adapters.stores import InMemoryConfigStore
from page_expiry.domain.errors import (
    MissingColumnError,
    ProcessingError,
    SpreadsheetFormatError,
)
from page_expiry.domain.models import DeliveryReceipt, PageSummary, SiteConfig, UploadedFile
from page_expiry.domain.services import AlertDispatcher, FileProcessor, summarize
from page_expiry.domain.stakeholders import StakeholderResolver
from page_expiry.ports.email import EmailTransport
from page_expiry.ports.sites import SiteConfigStore
from page_expiry.ports.spreadsheet import SpreadsheetReader

HEADER = ["URL", "Title", "Created", "Page Views"]
UPLOAD = UploadedFile(name="export.xlsx", content=b"")


def make_processor(reader, store, now: datetime, **kwargs) -> FileProcessor:
    resolver = StakeholderResolver(store, store, unmatched_address="corp@example.com")
    return FileProcessor(
        reader=reader, site_store=store, resolver=resolver, clock=lambda: now, **kwargs
    )


class TestFileProcessor:
    """Tests for FileProcessor.process_file."""

    def test_classifies_and_aggregates(
        self, reader_factory, memory_store: InMemoryConfigStore, now: datetime
    ) -> None:
        rows = [
            HEADER,
            ["https://www.example.com/blog/old", "Old post", "2020-01-01", 50],
            ["https://www.example.com/quiet", "Quiet", "2024-06-01", 2],
            ["https://www.example.com/new", None, "2025-01-01", 10],
        ]
        processor = make_processor(reader_factory(rows), memory_store, now)

        result = asyncio.run(processor.process_file(UPLOAD))

        assert result.file_name == "export.xlsx"
        assert result.upload_date == "2025-06-01"
        assert result.total_pages == 3
        assert result.expired_pages == 1
        assert result.low_engagement_pages == 1
        assert result.total_page_views == 62
        assert result.average_page_views == 20.7
        assert result.average_page_age == 831.3
        assert result.pages_over_2_years == 1
        assert (result.date_range.start, result.date_range.end) == ("2020-01-01", "2025-01-01")
        assert [p.path for p in result.expired_pages_data] == ["/blog/old"]
        assert [p.path for p in result.low_engagement_data] == ["/quiet"]

        old, quiet, new = result.all_pages_data
        assert old.title == "Old post"
        assert old.age_in_days == 1978
        assert old.age_in_years == 5.4
        assert old.stakeholder == "blog@example.com"
        assert quiet.stakeholder == "web@example.com"
        assert new.title is None
        assert new.category == "normal"

    def test_expired_page_not_counted_as_low_engagement(
        self, reader_factory, memory_store: InMemoryConfigStore, now: datetime
    ) -> None:
        rows = [HEADER, ["https://www.example.com/stale", "Stale", "2015-01-01", 0]]
        result = asyncio.run(
            make_processor(reader_factory(rows), memory_store, now).process_file(UPLOAD)
        )
        page = result.all_pages_data[0]
        assert page.is_expired and page.is_low_engagement
        assert result.expired_pages == 1
        assert result.low_engagement_pages == 0

    def test_header_only_file(
        self, reader_factory, memory_store: InMemoryConfigStore, now: datetime
    ) -> None:
        result = asyncio.run(
            make_processor(reader_factory([HEADER]), memory_store, now).process_file(UPLOAD)
        )
        assert result.total_pages == 0
        assert result.average_page_age == 0.0
        assert result.average_page_views == 0.0
        assert (result.date_range.start, result.date_range.end) == ("2025-06-01", "2025-06-01")

    def test_empty_file_rejected(
        self, reader_factory, memory_store: InMemoryConfigStore, now: datetime
    ) -> None:
        processor = make_processor(reader_factory([]), memory_store, now)
        with pytest.raises(SpreadsheetFormatError, match="header row"):
            asyncio.run(processor.process_file(UPLOAD))

    def test_missing_url_column(
        self, reader_factory, memory_store: InMemoryConfigStore, now: datetime
    ) -> None:
        rows = [["Title", "Views"], ["Home", 3]]
        processor = make_processor(reader_factory(rows), memory_store, now)
        with pytest.raises(MissingColumnError, match="Could not find URL column"):
            asyncio.run(processor.process_file(UPLOAD))

    def test_reader_failure_wrapped(self, memory_store: InMemoryConfigStore, now: datetime) -> None:
        reader = MagicMock(spec=SpreadsheetReader)
        reader.read_rows.side_effect = KeyError("sheet")
        processor = make_processor(reader, memory_store, now)
        with pytest.raises(SpreadsheetFormatError, match="export.xlsx"):
            asyncio.run(processor.process_file(UPLOAD))

    def test_unexpected_failure_wrapped(self, reader_factory, now: datetime) -> None:
        store = MagicMock(spec=SiteConfigStore)
        store.list_site_configurations = AsyncMock(side_effect=RuntimeError("boom"))
        processor = make_processor(reader_factory([HEADER]), store, now)
        with pytest.raises(ProcessingError, match="Failed to process file: boom"):
            asyncio.run(processor.process_file(UPLOAD))

    def test_rows_without_url_skipped(
        self, reader_factory, memory_store: InMemoryConfigStore, now: datetime
    ) -> None:
        rows = [
            HEADER,
            [None, "Orphan", "2020-01-01", 1],
            ["   ", "Blank", "2020-01-01", 1],
            ["https://www.example.com/a"],
        ]
        result = asyncio.run(
            make_processor(reader_factory(rows), memory_store, now).process_file(UPLOAD)
        )
        assert [p.url for p in result.all_pages_data] == ["https://www.example.com/a"]

    def test_short_row_uses_defaults(
        self, reader_factory, memory_store: InMemoryConfigStore, now: datetime
    ) -> None:
        rows = [HEADER, ["https://www.example.com/a"]]
        page = asyncio.run(
            make_processor(reader_factory(rows), memory_store, now).process_file(UPLOAD)
        ).all_pages_data[0]
        assert page.created_date == "2025-06-01"
        assert page.updated_date is None
        assert page.page_views == 0
        assert page.age_in_days == 0

    def test_updated_date_parsed_when_present(
        self, reader_factory, memory_store: InMemoryConfigStore, now: datetime
    ) -> None:
        rows = [
            ["Page URL", "Modified", "Created"],
            ["https://www.example.com/a", 44927, "2022-03-01"],
        ]
        page = asyncio.run(
            make_processor(reader_factory(rows), memory_store, now).process_file(UPLOAD)
        ).all_pages_data[0]
        assert page.updated_date == "2023-01-01"
        assert page.created_date == "2022-03-01"

    def test_unknown_domain_uses_default_thresholds(
        self, reader_factory, memory_store: InMemoryConfigStore, now: datetime
    ) -> None:
        rows = [HEADER, ["https://other.org/x", "X", "2023-05-01", 100]]
        page = asyncio.run(
            make_processor(reader_factory(rows), memory_store, now).process_file(UPLOAD)
        ).all_pages_data[0]
        assert page.is_expired
        assert page.stakeholder == "corp@example.com"

    def test_site_thresholds_applied(self, reader_factory, now: datetime) -> None:
        site = SiteConfig(
            id="9",
            domain="short.example.com",
            expiry_days=90,
            engagement_threshold=1000,
            default_stakeholder="short@example.com",
        )
        store = InMemoryConfigStore(sites=[site])
        rows = [HEADER, ["short.example.com/page", "P", "2025-01-01", 500]]
        page = asyncio.run(
            make_processor(reader_factory(rows), store, now).process_file(UPLOAD)
        ).all_pages_data[0]
        assert page.is_expired
        assert page.is_low_engagement
        assert page.stakeholder == "short@example.com"

    def test_csv_serial_dates_decoded(
        self, memory_store: InMemoryConfigStore, now: datetime
    ) -> None:
        upload = UploadedFile(
            name="export.csv",
            content=b"URL,Created,Views\nhttps://www.example.com/a,44927,12\n",
        )
        processor = make_processor(PandasSpreadsheetReader(), memory_store, now)

        page = asyncio.run(processor.process_file(upload)).all_pages_data[0]

        assert page.created_date == "2023-01-01"
        assert page.age_in_days == 882
        assert page.is_expired
        assert page.page_views == 12

    def test_relative_urls_reach_the_configured_site(
        self, reader_factory, sample_site: SiteConfig, now: datetime
    ) -> None:
        store = InMemoryConfigStore(sites=[sample_site])
        rows = [
            ["Page URL", "Created Date", "Page Views"],
            ["/about", "2020-01-01", 10],
            ["/new", "2025-01-01", 2],
            ["/ok", "2024-06-01", 50],
        ]

        result = asyncio.run(
            make_processor(reader_factory(rows), store, now).process_file(UPLOAD)
        )

        assert (result.total_pages, result.expired_pages, result.low_engagement_pages) == (3, 1, 1)
        about, new, ok = result.all_pages_data
        assert (about.domain, about.path) == ("", "/about")
        assert about.age_in_days == 1978
        assert about.is_expired
        assert new.age_in_days == 151
        assert new.is_low_engagement and not new.is_expired
        assert ok.age_in_days == 365
        assert not ok.is_expired and not ok.is_low_engagement
        assert {p.stakeholder for p in result.all_pages_data} == {"web@example.com"}

    def test_sites_read_once_per_run(
        self, reader_factory, sample_site: SiteConfig, now: datetime
    ) -> None:
        store = InMemoryConfigStore(sites=[sample_site])
        store.list_site_configurations = AsyncMock(return_value=[sample_site])
        rows = [HEADER] + [[f"https://www.example.com/{i}", "", "2020-01-01", 1] for i in range(4)]
        asyncio.run(make_processor(reader_factory(rows), store, now).process_file(UPLOAD))
        store.list_site_configurations.assert_awaited_once()


class TestSummarize:
    """Tests for summarize."""

    def test_partitions_are_disjoint_and_ordered(self, page_factory) -> None:
        pages = [
            page_factory("/a", is_expired=True, is_low_engagement=True),
            page_factory("/b", is_expired=False, is_low_engagement=True),
            page_factory("/c", is_expired=True),
            page_factory("/d", is_expired=False),
        ]
        result = summarize("f.csv", pages, "2025-06-01")
        assert [p.url for p in result.expired_pages_data] == ["/a", "/c"]
        assert [p.url for p in result.low_engagement_data] == ["/b"]
        assert [p.url for p in result.all_pages_data] == ["/a", "/b", "/c", "/d"]
        assert result.expired_pages + result.low_engagement_pages <= result.total_pages

    def test_over_two_years_inclusive(self, page_factory) -> None:
        pages = [page_factory("/a", age_in_years=2.0), page_factory("/b", age_in_years=1.9)]
        assert summarize("f.csv", pages, "2025-06-01").pages_over_2_years == 1

    def test_to_dict_uses_camel_case(self, page_factory) -> None:
        data = summarize("f.csv", [page_factory("/a")], "2025-06-01").to_dict()
        assert data["fileName"] == "f.csv"
        assert data["dateRange"] == {"start": "2020-01-01", "end": "2020-01-01"}
        assert data["expiredPagesData"][0]["url"] == "/a"


class TestAlertDispatcher:
    """Tests for AlertDispatcher.send_alerts."""

    def make_transport(self, *effects) -> MagicMock:
        transport = MagicMock(spec=EmailTransport)
        transport.send_expiry_alert = AsyncMock(side_effect=list(effects))
        return transport

    def test_failure_does_not_stop_batch(self, page_factory) -> None:
        ok = DeliveryReceipt(success=True, message="ok")
        transport = self.make_transport(ok, RuntimeError("smtp down"), ok)
        dispatcher = AlertDispatcher(transport, sleep=AsyncMock())
        pages = [page_factory("/1"), page_factory("/2"), page_factory("/3")]

        summary = asyncio.run(dispatcher.send_alerts(pages))

        assert (summary.sent, summary.failed) == (2, 1)
        assert [(r.page, r.status) for r in summary.results] == [
            ("/1", "sent"),
            ("/2", "failed"),
            ("/3", "sent"),
        ]
        assert summary.results[1].message == "smtp down"

    def test_unsuccessful_receipt_counts_as_failure(self, page_factory) -> None:
        transport = self.make_transport(DeliveryReceipt(success=False, message=""))
        summary = asyncio.run(
            AlertDispatcher(transport, sleep=AsyncMock()).send_alerts([page_factory("/1")])
        )
        assert summary.failed == 1
        assert summary.results[0].message == "Unknown error"

    def test_fallback_recipient(self, page_factory) -> None:
        transport = self.make_transport(DeliveryReceipt(success=True, message="ok"))
        dispatcher = AlertDispatcher(
            transport, fallback_address="fb@example.com", sleep=AsyncMock()
        )
        page = page_factory("/1", title="One", stakeholder=None)
        asyncio.run(dispatcher.send_alerts([page]))
        transport.send_expiry_alert.assert_awaited_once_with(
            "fb@example.com", PageSummary.from_page(page)
        )

    def test_throttles_after_each_page(self, page_factory) -> None:
        ok = DeliveryReceipt(success=True, message="ok")
        sleep = AsyncMock()
        transport = self.make_transport(ok, ok)
        dispatcher = AlertDispatcher(transport, delay_seconds=0.25, sleep=sleep)
        asyncio.run(dispatcher.send_alerts([page_factory("/1"), page_factory("/2")]))
        assert sleep.await_count == 2
        sleep.assert_awaited_with(0.25)

    def test_empty_batch(self) -> None:
        transport = self.make_transport()
        summary = asyncio.run(AlertDispatcher(transport, sleep=AsyncMock()).send_alerts([]))
        assert summary.to_dict() == {"sent": 0, "failed": 0, "results": []}
        transport.send_expiry_alert.assert_not_awaited()
