"""Domain models."""

from dataclasses import dataclass, field
from enum import Enum


class MappingType(str, Enum):
    """How a stakeholder mapping pattern is compared to a page path."""

    EXACT = "exact"
    PATTERN = "pattern"
    DEPARTMENT = "department"


@dataclass(frozen=True)
class SiteConfig:
    """Per-domain expiry and engagement policy."""

    domain: str
    expiry_days: int
    engagement_threshold: int
    default_stakeholder: str
    new_page_days: int = 30
    enabled: bool = True
    id: str = ""
    name: str = ""


@dataclass(frozen=True)
class StakeholderMapping:
    """Rule routing a URL path to a responsible email."""

    site_id: str
    pattern: str
    email: str
    type: MappingType = MappingType.PATTERN
    priority: int = 0
    is_active: bool = True
    id: str = ""


@dataclass(frozen=True)
class UploadedFile:
    """In-memory spreadsheet upload."""

    name: str
    content: bytes


@dataclass(frozen=True)
class PageRecord:
    """One processed row of the analytics export."""

    url: str
    domain: str
    path: str
    created_date: str  # ISO calendar date
    page_views: int
    age_in_days: int
    age_in_years: float
    is_expired: bool
    is_low_engagement: bool
    title: str | None = None
    updated_date: str | None = None
    stakeholder: str | None = None

    @property
    def category(self) -> str:
        if self.is_expired:
            return "expired"
        if self.is_low_engagement:
            return "low-engagement"
        return "normal"

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "title": self.title,
            "createdDate": self.created_date,
            "updatedDate": self.updated_date,
            "pageViews": self.page_views,
            "domain": self.domain,
            "path": self.path,
            "ageInDays": self.age_in_days,
            "ageInYears": self.age_in_years,
            "isExpired": self.is_expired,
            "isLowEngagement": self.is_low_engagement,
            "stakeholder": self.stakeholder,
        }


@dataclass(frozen=True)
class DateRange:
    start: str
    end: str


@dataclass(frozen=True)
class ProcessingResult:
    """Outcome of one processing run over an uploaded file."""

    file_name: str
    upload_date: str
    total_pages: int
    expired_pages: int
    low_engagement_pages: int
    total_page_views: int
    date_range: DateRange
    average_page_age: float
    average_page_views: float
    pages_over_2_years: int
    expired_pages_data: tuple[PageRecord, ...] = ()
    low_engagement_data: tuple[PageRecord, ...] = ()
    all_pages_data: tuple[PageRecord, ...] = ()

    @property
    def flagged_pages(self) -> tuple[PageRecord, ...]:
        """Expired pages followed by low-engagement pages."""
        return self.expired_pages_data + self.low_engagement_data

    def to_dict(self) -> dict:
        """Serialize using the field names consumed by the dashboard."""
        return {
            "fileName": self.file_name,
            "uploadDate": self.upload_date,
            "totalPages": self.total_pages,
            "expiredPages": self.expired_pages,
            "lowEngagementPages": self.low_engagement_pages,
            "totalPageViews": self.total_page_views,
            "dateRange": {"start": self.date_range.start, "end": self.date_range.end},
            "averagePageAge": self.average_page_age,
            "averagePageViews": self.average_page_views,
            "pagesOver2Years": self.pages_over_2_years,
            "expiredPagesData": [p.to_dict() for p in self.expired_pages_data],
            "lowEngagementData": [p.to_dict() for p in self.low_engagement_data],
            "allPagesData": [p.to_dict() for p in self.all_pages_data],
        }


@dataclass(frozen=True)
class PageSummary:
    """Page details handed to the email transport."""

    url: str
    title: str | None = None
    created_date: str | None = None
    updated_date: str | None = None
    page_views: int = 0

    @classmethod
    def from_page(cls, page: PageRecord) -> "PageSummary":
        return cls(
            url=page.url,
            title=page.title,
            created_date=page.created_date,
            updated_date=page.updated_date,
            page_views=page.page_views,
        )


@dataclass(frozen=True)
class DeliveryReceipt:
    success: bool
    message: str


@dataclass(frozen=True)
class AlertOutcome:
    page: str
    status: str  # "sent" or "failed"
    message: str


@dataclass
class DispatchSummary:
    """Tally of one alert batch."""

    sent: int = 0
    failed: int = 0
    results: list[AlertOutcome] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "sent": self.sent,
            "failed": self.failed,
            "results": [
                {"page": r.page, "status": r.status, "message": r.message}
                for r in self.results
            ],
        }
