"""Page age computation and expiry/engagement classification."""

import math
from datetime import date, datetime, timezone
from typing import Iterable

from .models import SiteConfig

# New pages get this long to accumulate traffic before engagement is judged
ENGAGEMENT_GRACE_DAYS = 30
DAYS_PER_YEAR = 365.25

DEFAULT_SITE_CONFIG = SiteConfig(
    domain="",
    expiry_days=730,
    engagement_threshold=5,
    new_page_days=30,
    default_stakeholder="",
    name="Default",
)


def round1(value: float) -> float:
    """Round half up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def calculate_age(created_date: str, now: datetime) -> tuple[int, float]:
    """Return (age_in_days, age_in_years) of a page created on an ISO date.

    Ages are negative for dates in the future.
    """
    created = datetime.combine(date.fromisoformat(created_date), datetime.min.time(), timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    age_in_days = math.floor((now - created).total_seconds() / 86400)
    return age_in_days, round1(age_in_days / DAYS_PER_YEAR)


def classify(age_in_days: int, page_views: int, site: SiteConfig) -> tuple[bool, bool]:
    """Return (is_expired, is_low_engagement).

    The two flags are independent; precedence is applied when results are
    partitioned.
    """
    is_expired = age_in_days > site.expiry_days
    is_low_engagement = (
        page_views < site.engagement_threshold and age_in_days > ENGAGEMENT_GRACE_DAYS
    )
    return is_expired, is_low_engagement


def domain_matches(domain: str, site: SiteConfig) -> bool:
    """Bidirectional substring match tolerating a ``www.`` prefix.

    Ambiguous when configured domains contain each other (``tr.com`` and
    ``legal.tr.com``); callers take the first match in store order.
    """
    return site.domain.replace("www.", "", 1) in domain or domain in site.domain


def find_site_config(domain: str, sites: Iterable[SiteConfig]) -> SiteConfig | None:
    return next((s for s in sites if domain_matches(domain, s)), None)


def site_for(
    domain: str, sites: Iterable[SiteConfig], default: SiteConfig = DEFAULT_SITE_CONFIG
) -> SiteConfig:
    """Return the matching site, or the default thresholds."""
    return find_site_config(domain, sites) or default
