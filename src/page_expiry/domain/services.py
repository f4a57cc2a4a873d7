"""Domain services - orchestrate business logic."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Iterable, Sequence

from ..ports.email import EmailTransport
from ..ports.sites import SiteConfigStore
from ..ports.spreadsheet import SpreadsheetReader
from .classification import DEFAULT_SITE_CONFIG, calculate_age, classify, round1, site_for
from .columns import (
    CREATED,
    DEFAULT_COLUMN_RULES,
    TITLE,
    UPDATED,
    URL,
    VIEWS,
    ColumnRule,
    detect_columns,
)
from .errors import MissingColumnError, ProcessingError, SpreadsheetFormatError
from .models import (
    AlertOutcome,
    DateRange,
    DispatchSummary,
    PageRecord,
    PageSummary,
    ProcessingResult,
    SiteConfig,
    UploadedFile,
)
from .normalize import parse_date, parse_page_views, split_url
from .stakeholders import DEFAULT_FALLBACK_ADDRESS, StakeholderResolver

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _cell(row: Sequence[object], index: int | None) -> object:
    if index is None or index >= len(row):
        return None
    return row[index]


def _text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def summarize(
    file_name: str, pages: Sequence[PageRecord], today: str
) -> ProcessingResult:
    """Partition pages and compute aggregate statistics.

    Expired status takes precedence: an expired page is never also counted
    as low engagement.
    """
    expired = tuple(p for p in pages if p.is_expired)
    low_engagement = tuple(p for p in pages if p.is_low_engagement and not p.is_expired)
    total_views = sum(p.page_views for p in pages)
    count = len(pages)
    dates = sorted(p.created_date for p in pages)

    return ProcessingResult(
        file_name=file_name,
        upload_date=today,
        total_pages=count,
        expired_pages=len(expired),
        low_engagement_pages=len(low_engagement),
        total_page_views=total_views,
        date_range=DateRange(
            start=dates[0] if dates else today,
            end=dates[-1] if dates else today,
        ),
        average_page_age=round1(sum(p.age_in_days for p in pages) / count) if count else 0.0,
        average_page_views=round1(total_views / count) if count else 0.0,
        pages_over_2_years=sum(1 for p in pages if p.age_in_years >= 2),
        expired_pages_data=expired,
        low_engagement_data=low_engagement,
        all_pages_data=tuple(pages),
    )


class FileProcessor:
    """Turns an analytics export into a ProcessingResult."""

    def __init__(
        self,
        reader: SpreadsheetReader,
        site_store: SiteConfigStore,
        resolver: StakeholderResolver,
        column_rules: Iterable[ColumnRule] = DEFAULT_COLUMN_RULES,
        default_site: SiteConfig = DEFAULT_SITE_CONFIG,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.reader = reader
        self.site_store = site_store
        self.resolver = resolver
        self.column_rules = tuple(column_rules)
        self.default_site = default_site
        self.clock = clock

    async def process_file(self, upload: UploadedFile) -> ProcessingResult:
        """Process one uploaded spreadsheet.

        Pipeline:
            1. Read the first sheet
            2. Detect columns from the header row
            3. Snapshot site configurations
            4. Normalize, classify and resolve each row, in order
            5. Partition and aggregate

        Raises ProcessingError; no partial result is returned.
        """
        logger.info(f"Processing: {upload.name}")
        try:
            return await self._process(upload)
        except ProcessingError:
            raise
        except Exception as e:
            logger.exception(f"Processing failed: {e}")
            raise ProcessingError(f"Failed to process file: {e}") from e

    async def _process(self, upload: UploadedFile) -> ProcessingResult:
        now = self.clock()
        today = parse_date(None, now)  # missing dates default to today

        # 1. Read
        try:
            rows = self.reader.read_rows(upload)
        except SpreadsheetFormatError:
            raise
        except Exception as e:
            raise SpreadsheetFormatError(f"Failed to read spreadsheet {upload.name}: {e}") from e
        if not rows:
            raise SpreadsheetFormatError("File must contain a header row")

        # 2. Columns
        columns = detect_columns(rows[0], self.column_rules)
        for rule in self.column_rules:
            if rule.required and rule.role not in columns:
                raise MissingColumnError(rule.role, rule.synonyms)

        # 3. One snapshot for the whole run
        sites = await self.site_store.list_site_configurations()

        # 4. Rows
        pages: list[PageRecord] = []
        for row in rows[1:]:
            url = _text(_cell(row, columns[URL]))
            if url is None:
                continue
            pages.append(await self._process_row(row, url, columns, sites, now))

        # 5. Aggregate
        result = summarize(upload.name, pages, today)
        logger.info(
            f"Processed {result.total_pages} pages from {upload.name}: "
            f"{result.expired_pages} expired, {result.low_engagement_pages} low engagement"
        )
        return result

    async def _process_row(
        self,
        row: Sequence[object],
        url: str,
        columns: dict[str, int],
        sites: Sequence[SiteConfig],
        now: datetime,
    ) -> PageRecord:
        domain, path = split_url(url)
        site = site_for(domain, sites, self.default_site)

        created_date = parse_date(_cell(row, columns.get(CREATED)), now)
        raw_updated = _cell(row, columns.get(UPDATED))
        updated_date = parse_date(raw_updated, now) if _text(raw_updated) else None
        page_views = parse_page_views(_cell(row, columns.get(VIEWS)))

        age_in_days, age_in_years = calculate_age(created_date, now)
        is_expired, is_low_engagement = classify(age_in_days, page_views, site)
        stakeholder = await self.resolver.resolve(domain, path, sites)

        return PageRecord(
            url=url,
            domain=domain,
            path=path,
            title=_text(_cell(row, columns.get(TITLE))),
            created_date=created_date,
            updated_date=updated_date,
            page_views=page_views,
            age_in_days=age_in_days,
            age_in_years=age_in_years,
            is_expired=is_expired,
            is_low_engagement=is_low_engagement,
            stakeholder=stakeholder,
        )


class AlertDispatcher:
    """Sends one alert per page, sequentially, with a delay between sends."""

    def __init__(
        self,
        transport: EmailTransport,
        fallback_address: str = DEFAULT_FALLBACK_ADDRESS,
        delay_seconds: float = 0.1,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.transport = transport
        self.fallback_address = fallback_address
        self.delay_seconds = delay_seconds
        self.sleep = sleep

    async def send_alerts(self, pages: Iterable[PageRecord]) -> DispatchSummary:
        """Send expiry alerts; one page's failure never stops the batch."""
        summary = DispatchSummary()

        for page in pages:
            recipient = page.stakeholder or self.fallback_address
            try:
                receipt = await self.transport.send_expiry_alert(
                    recipient, PageSummary.from_page(page)
                )
            except Exception as e:
                logger.warning(f"Alert for {page.url} to {recipient} failed: {e}")
                summary.failed += 1
                summary.results.append(AlertOutcome(page.url, "failed", str(e)))
            else:
                if receipt.success:
                    summary.sent += 1
                    summary.results.append(AlertOutcome(page.url, "sent", receipt.message))
                    logger.info(f"Alert sent for {page.url} to {recipient}")
                else:
                    summary.failed += 1
                    message = receipt.message or "Unknown error"
                    summary.results.append(AlertOutcome(page.url, "failed", message))
                    logger.warning(f"Alert for {page.url} to {recipient} failed: {message}")

            # Throttle outbound mail
            await self.sleep(self.delay_seconds)

        logger.info(f"Alerts complete: {summary.sent} sent, {summary.failed} failed")
        return summary
