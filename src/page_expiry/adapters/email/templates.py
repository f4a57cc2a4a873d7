"""Email templates for expiry alerts and test messages."""

import html
from dataclasses import dataclass
from datetime import datetime

from ...domain.models import PageSummary


@dataclass(frozen=True)
class EmailData:
    to_email: str
    subject: str
    html_body: str
    text_body: str


EXPIRY_ALERT_HTML = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <div style="background: #dc3545; color: white; padding: 20px; text-align: center;">
    <h1>Expired Page Review Required</h1>
    <p>Immediate attention needed for outdated content</p>
  </div>
  <div style="padding: 20px; background: #f9f9f9;">
    <p><strong>Alert:</strong> The following page has been identified as expired
    and requires review.</p>
    <h3>Page Details</h3>
    <table style="width: 100%; border-collapse: collapse;">
      <tr><td><strong>Page URL:</strong></td><td><a href="{url}">{url}</a></td></tr>
      <tr><td><strong>Page Title:</strong></td><td>{title}</td></tr>
      <tr><td><strong>Created Date:</strong></td><td>{created}</td></tr>
      <tr><td><strong>Last Updated:</strong></td><td>{updated}</td></tr>
      <tr><td><strong>Page Views:</strong></td><td>{views} (last 30 days)</td></tr>
    </table>
    <h3>Recommended Actions</h3>
    <ul>
      <li><strong>Review and Update:</strong> If the content is still relevant, update it with current information.</li>
      <li><strong>Archive or Remove:</strong> If the content is no longer needed, consider archiving or removing it.</li>
      <li><strong>Set Redirect:</strong> If removing the page, implement appropriate redirects to prevent broken links.</li>
    </ul>
  </div>
  <div style="text-align: center; color: #666; font-size: 12px; padding: 20px;">
    <p>This alert was generated by the Page Expiry Notification System</p>
    <p>You're receiving this because you're listed as the stakeholder for this page.</p>
  </div>
</div>
"""

EXPIRY_ALERT_TEXT = """\
Expired Page Review Required

Page URL:     {url}
Page Title:   {title}
Created Date: {created}
Last Updated: {updated}
Page Views:   {views} (last 30 days)

Recommended actions: review and update the page, archive or remove it,
or set a redirect if it is removed.
"""

TEST_EMAIL_HTML = """\
<h2>Test Email Successful</h2>
<p>This is a test email from the Page Expiry Notification System.</p>
<p>If you received this email, the email configuration is working correctly.</p>
<ul>
  <li><strong>Sent at:</strong> {sent_at}</li>
  <li><strong>Recipient:</strong> {recipient}</li>
  <li><strong>Service:</strong> {service}</li>
</ul>
"""

TEST_EMAIL_TEXT = """\
Test Email Successful

This is a test email from the Page Expiry Notification System.
Sent at: {sent_at}
Recipient: {recipient}
Service: {service}
"""


def expiry_alert_subject(summary: PageSummary) -> str:
    return f"Action Required: Expired Page Review - {summary.title or summary.url}"


def build_expiry_alert(recipient: str, summary: PageSummary) -> EmailData:
    fields = {
        "url": summary.url,
        "title": summary.title or "Not available",
        "created": summary.created_date or "Unknown",
        "updated": summary.updated_date or "Unknown",
        "views": summary.page_views,
    }
    escaped = {k: html.escape(str(v)) for k, v in fields.items()}
    return EmailData(
        to_email=recipient,
        subject=expiry_alert_subject(summary),
        html_body=EXPIRY_ALERT_HTML.format(**escaped),
        text_body=EXPIRY_ALERT_TEXT.format(**fields),
    )


def build_test_email(recipient: str, service: str, sent_at: datetime) -> EmailData:
    fields = {
        "sent_at": sent_at.strftime("%Y-%m-%d %H:%M:%S"),
        "recipient": recipient,
        "service": service,
    }
    escaped = {k: html.escape(v) for k, v in fields.items()}
    return EmailData(
        to_email=recipient,
        subject="Test Email - Page Expiry Notification System",
        html_body=TEST_EMAIL_HTML.format(**escaped),
        text_body=TEST_EMAIL_TEXT.format(**fields),
    )
