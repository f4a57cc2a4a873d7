"""Configuration management using pydantic-settings."""

import tomllib
from enum import Enum
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.columns import ColumnRule, build_column_rules
from .domain.models import SiteConfig
from .domain.stakeholders import DEFAULT_FALLBACK_ADDRESS, DEFAULT_UNMATCHED_ADDRESS

DEFAULT_STORE = "~/.config/page-expiry/sites.yaml"
CONFIG_PATH = Path("~/.config/page-expiry/config.toml").expanduser()


class EmailProvider(str, Enum):
    """Available email transports."""

    SIMULATED = "simulated"
    SMTP = "smtp"
    SENDGRID = "sendgrid"


class EmailConfig(BaseSettings):
    """Email transport configuration."""

    provider: EmailProvider = EmailProvider.SIMULATED
    from_address: str = "noreply@example.com"
    from_name: str = "Page Expiry Alert System"
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    sendgrid_api_key: str = ""
    sendgrid_url: str = "https://api.sendgrid.com/v3/mail/send"
    timeout: float = 30.0


class StakeholderConfig(BaseSettings):
    unmatched_address: str = DEFAULT_UNMATCHED_ADDRESS
    fallback_address: str = DEFAULT_FALLBACK_ADDRESS


class ThresholdConfig(BaseSettings):
    """Thresholds for pages whose domain has no site configuration."""

    expiry_days: int = 730
    engagement_threshold: int = 5
    new_page_days: int = 30

    def default_site(self, stakeholder: str) -> SiteConfig:
        return SiteConfig(
            domain="",
            expiry_days=self.expiry_days,
            engagement_threshold=self.engagement_threshold,
            new_page_days=self.new_page_days,
            default_stakeholder=stakeholder,
            name="Default",
        )


class AlertConfig(BaseSettings):
    delay_seconds: float = 0.1


class StoreConfig(BaseSettings):
    path: Path = Path(DEFAULT_STORE).expanduser()

    @field_validator("path", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser()


class ColumnsConfig(BaseSettings):
    """Header synonyms per column role, overriding the built-in table."""

    synonyms: dict[str, list[str]] = {}

    def column_rules(self) -> tuple[ColumnRule, ...]:
        return build_column_rules(self.synonyms)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PAGE_EXPIRY_")

    email: EmailConfig = EmailConfig()
    stakeholders: StakeholderConfig = StakeholderConfig()
    thresholds: ThresholdConfig = ThresholdConfig()
    alerts: AlertConfig = AlertConfig()
    store: StoreConfig = StoreConfig()
    columns: ColumnsConfig = ColumnsConfig()


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings from TOML file, falling back to defaults."""
    path = config_path or CONFIG_PATH

    if path.exists():
        with open(path, "rb") as f:
            data = tomllib.load(f)

        return Settings(
            email=EmailConfig(**data.get("email", {})),
            stakeholders=StakeholderConfig(**data.get("stakeholders", {})),
            thresholds=ThresholdConfig(**data.get("thresholds", {})),
            alerts=AlertConfig(**data.get("alerts", {})),
            store=StoreConfig(**data.get("store", {})),
            columns=ColumnsConfig(**data.get("columns", {})),
        )

    return Settings()
