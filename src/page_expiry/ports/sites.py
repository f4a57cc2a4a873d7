"""Configuration store ports - site policies and stakeholder mappings."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..domain.models import SiteConfig, StakeholderMapping


class SiteConfigStore(ABC):
    """Interface for reading per-domain site configurations."""

    @abstractmethod
    async def list_site_configurations(self) -> list["SiteConfig"]:
        """Return all site configurations in store order."""
        pass


class StakeholderMappingStore(ABC):
    """Interface for reading stakeholder mappings."""

    @abstractmethod
    async def list_stakeholder_mappings(self, site_id: str) -> list["StakeholderMapping"]:
        """Return the active mappings of a site, in any order."""
        pass
