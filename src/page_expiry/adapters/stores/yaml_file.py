"""Configuration store backed by a YAML file.

File layout::

    sites:
      - id: "1"
        domain: www.example.com
        expiry_days: 1095
        engagement_threshold: 10
        default_stakeholder: corporate-web@example.com
    mappings:
      - site_id: "1"
        pattern: /products/*
        email: product@example.com
        type: pattern
        priority: 100

When the file does not exist the built-in demo configuration is served.
"""

import logging
from pathlib import Path

import yaml

from ...domain.errors import ConfigStoreError
from ...domain.models import MappingType, SiteConfig, StakeholderMapping
from ...ports.sites import SiteConfigStore, StakeholderMappingStore

logger = logging.getLogger(__name__)

DEMO_SITES = [
    SiteConfig(
        id="1",
        domain="www.example.com",
        name="Corporate",
        expiry_days=1095,
        engagement_threshold=10,
        new_page_days=45,
        default_stakeholder="corporate-web@example.com",
    ),
    SiteConfig(
        id="2",
        domain="legal.example.com",
        name="Legal",
        expiry_days=365,
        engagement_threshold=15,
        new_page_days=60,
        default_stakeholder="legal-web@example.com",
    ),
    SiteConfig(
        id="3",
        domain="tax.example.com",
        name="Tax",
        expiry_days=365,
        engagement_threshold=8,
        new_page_days=30,
        default_stakeholder="tax-web@example.com",
    ),
]

DEMO_MAPPINGS = [
    StakeholderMapping(
        id="1",
        site_id=site.id,
        pattern="/products/*",
        email="product@example.com",
        type=MappingType.PATTERN,
        priority=100,
    )
    for site in DEMO_SITES
]


def _site_from_dict(data: dict) -> SiteConfig:
    return SiteConfig(
        id=str(data.get("id", "")),
        domain=str(data["domain"]),
        name=str(data.get("name", "")),
        enabled=bool(data.get("enabled", True)),
        expiry_days=int(data["expiry_days"]),
        engagement_threshold=int(data["engagement_threshold"]),
        new_page_days=int(data.get("new_page_days", 30)),
        default_stakeholder=str(data["default_stakeholder"]),
    )


def _mapping_from_dict(data: dict) -> StakeholderMapping:
    return StakeholderMapping(
        id=str(data.get("id", "")),
        site_id=str(data["site_id"]),
        pattern=str(data["pattern"]),
        email=str(data["email"]),
        type=MappingType(data.get("type", "pattern")),
        priority=int(data.get("priority", 0)),
        is_active=bool(data.get("is_active", True)),
    )


def site_to_dict(site: SiteConfig) -> dict:
    return {
        "id": site.id,
        "domain": site.domain,
        "name": site.name,
        "enabled": site.enabled,
        "expiry_days": site.expiry_days,
        "engagement_threshold": site.engagement_threshold,
        "new_page_days": site.new_page_days,
        "default_stakeholder": site.default_stakeholder,
    }


class YamlConfigStore(SiteConfigStore, StakeholderMappingStore):
    """Store implementation backed by a YAML file.

    The parsed file is cached and re-read only when its modification time
    changes, so per-row mapping lookups do not re-parse it.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._cache: tuple[int, list[SiteConfig], list[StakeholderMapping]] | None = None

    def _load(self) -> tuple[list[SiteConfig], list[StakeholderMapping]]:
        if not self.path.exists():
            logger.debug(f"No store at {self.path}, using demo configuration")
            return list(DEMO_SITES), list(DEMO_MAPPINGS)

        mtime = self.path.stat().st_mtime_ns
        if self._cache is not None and self._cache[0] == mtime:
            return list(self._cache[1]), list(self._cache[2])

        try:
            data = yaml.safe_load(self.path.read_text()) or {}
            sites = [_site_from_dict(s) for s in data.get("sites") or []]
            mappings = [_mapping_from_dict(m) for m in data.get("mappings") or []]
        except (yaml.YAMLError, KeyError, TypeError, ValueError, AttributeError) as e:
            raise ConfigStoreError(f"Invalid configuration store {self.path}: {e}") from e
        logger.debug(f"Loaded {len(sites)} sites and {len(mappings)} mappings from {self.path}")
        self._cache = (mtime, sites, mappings)
        return list(sites), list(mappings)

    async def list_site_configurations(self) -> list[SiteConfig]:
        sites, _ = self._load()
        return sites

    async def list_stakeholder_mappings(self, site_id: str) -> list[StakeholderMapping]:
        _, mappings = self._load()
        return [m for m in mappings if m.site_id == site_id and m.is_active]
