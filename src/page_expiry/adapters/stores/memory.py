"""In-memory configuration store."""

from typing import Iterable

from ...domain.models import SiteConfig, StakeholderMapping
from ...ports.sites import SiteConfigStore, StakeholderMappingStore


class InMemoryConfigStore(SiteConfigStore, StakeholderMappingStore):
    """Store implementation holding sites and mappings in lists."""

    def __init__(
        self,
        sites: Iterable[SiteConfig] = (),
        mappings: Iterable[StakeholderMapping] = (),
    ) -> None:
        self.sites = list(sites)
        self.mappings = list(mappings)

    async def list_site_configurations(self) -> list[SiteConfig]:
        return list(self.sites)

    async def list_stakeholder_mappings(self, site_id: str) -> list[StakeholderMapping]:
        return [m for m in self.mappings if m.site_id == site_id and m.is_active]
