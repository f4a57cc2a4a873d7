"""Email adapters."""

from dataclasses import dataclass

from ...config import EmailConfig, EmailProvider
from .base import BaseEmailTransport
from .sendgrid import SendGridTransport
from .simulated import SimulatedTransport
from .smtp import SmtpTransport

__all__ = [
    "BaseEmailTransport",
    "SendGridTransport",
    "SimulatedTransport",
    "SmtpTransport",
    "TransportStatus",
    "create_email_transport",
    "describe_transport",
]


@dataclass(frozen=True)
class TransportStatus:
    configured: bool
    service: str
    reason: str


def create_email_transport(config: EmailConfig) -> BaseEmailTransport:
    """Create email transport based on configuration."""
    if config.provider == EmailProvider.SIMULATED:
        return SimulatedTransport()
    elif config.provider == EmailProvider.SMTP:
        return SmtpTransport(
            host=config.smtp_host,
            port=config.smtp_port,
            user=config.smtp_user,
            password=config.smtp_password,
            from_address=config.from_address,
            from_name=config.from_name,
            timeout=config.timeout,
        )
    elif config.provider == EmailProvider.SENDGRID:
        return SendGridTransport(
            api_key=config.sendgrid_api_key,
            from_address=config.from_address,
            from_name=config.from_name,
            url=config.sendgrid_url,
            timeout=config.timeout,
        )
    else:
        raise ValueError(f"Unknown email provider: {config.provider}")


def describe_transport(config: EmailConfig) -> TransportStatus:
    """Report whether real email delivery is configured."""
    if config.provider == EmailProvider.SMTP and config.smtp_host:
        return TransportStatus(True, "SMTP", "SMTP relay is configured")
    if config.provider == EmailProvider.SENDGRID and config.sendgrid_api_key:
        return TransportStatus(True, "SendGrid", "SendGrid API key is configured")
    if config.provider == EmailProvider.SIMULATED:
        reason = "No real email service configured - emails are only simulated"
    else:
        reason = f"{config.provider.value} selected but its credentials are missing"
    return TransportStatus(False, "Demo Mode", reason)
