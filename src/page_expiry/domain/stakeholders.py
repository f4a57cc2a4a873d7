"""Stakeholder resolution - route a page to a responsible email."""

import logging
import re
from typing import Sequence

from ..ports.sites import SiteConfigStore, StakeholderMappingStore
from .classification import find_site_config
from .models import MappingType, SiteConfig, StakeholderMapping

logger = logging.getLogger(__name__)

DEFAULT_UNMATCHED_ADDRESS = "corporate-web@example.com"
DEFAULT_FALLBACK_ADDRESS = "webmaster@example.com"


def wildcard_to_regex(pattern: str) -> re.Pattern:
    """Compile a ``*`` wildcard pattern; everything else is literal."""
    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")))


def matches_path(mapping: StakeholderMapping, path: str) -> bool:
    if mapping.type == MappingType.EXACT:
        return mapping.pattern == path
    if mapping.type == MappingType.PATTERN:
        return wildcard_to_regex(mapping.pattern).fullmatch(path) is not None
    # Department mappings route by organisation, not by path
    return False


class StakeholderResolver:
    """Finds the best stakeholder email for a domain and path.

    Resolution order:
        1. Site lookup by domain (none -> unmatched address)
        2. Active mappings, highest priority first
        3. Site default stakeholder

    Store failures yield the fallback address; resolve() never raises.
    """

    def __init__(
        self,
        site_store: SiteConfigStore,
        mapping_store: StakeholderMappingStore,
        unmatched_address: str = DEFAULT_UNMATCHED_ADDRESS,
        fallback_address: str = DEFAULT_FALLBACK_ADDRESS,
    ) -> None:
        self.site_store = site_store
        self.mapping_store = mapping_store
        self.unmatched_address = unmatched_address
        self.fallback_address = fallback_address

    async def resolve(
        self, domain: str, path: str, sites: Sequence[SiteConfig] | None = None
    ) -> str:
        """Return the stakeholder email for a page.

        ``sites`` is a configuration snapshot; when omitted the site store is
        queried.
        """
        try:
            if sites is None:
                sites = await self.site_store.list_site_configurations()
            site = find_site_config(domain, sites)
            if site is None:
                return self.unmatched_address

            mappings = await self.mapping_store.list_stakeholder_mappings(site.id)
            active = [m for m in mappings if m.is_active]
            # sorted() is stable, so equal priorities keep store order
            for mapping in sorted(active, key=lambda m: m.priority, reverse=True):
                if matches_path(mapping, path):
                    return mapping.email

            return site.default_stakeholder
        except Exception as e:
            logger.warning(f"Stakeholder lookup failed for {domain}{path}: {e}")
            return self.fallback_address
