"""CLI entry point for page-expiry."""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Iterable

import click
import yaml

from .adapters.email import create_email_transport, describe_transport
from .adapters.spreadsheet import PandasSpreadsheetReader
from .adapters.stores import YamlConfigStore
from .adapters.stores.yaml_file import site_to_dict
from .config import Settings, load_settings
from .domain.errors import ConfigStoreError, ProcessingError
from .domain.models import PageRecord, ProcessingResult, UploadedFile
from .domain.services import AlertDispatcher, FileProcessor
from .domain.stakeholders import StakeholderResolver

logger = logging.getLogger(__name__)

CATEGORIES = ("expired", "low-engagement", "normal")
ALERT_SCOPES = ("expired", "flagged")


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def filter_pages(
    pages: Iterable[PageRecord], domain: str | None = None, category: str | None = None
) -> list[PageRecord]:
    """Select pages by exact domain and/or category."""
    return [
        p
        for p in pages
        if (domain is None or p.domain == domain)
        and (category is None or p.category == category)
    ]


def write_report(result: ProcessingResult, path: Path) -> None:
    """Write the full result as JSON (.json) or YAML (anything else)."""
    data = result.to_dict()
    if path.suffix.lower() == ".json":
        path.write_text(json.dumps(data, indent=2))
    else:
        path.write_text(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))


def build_processor(settings: Settings, store: YamlConfigStore) -> FileProcessor:
    resolver = StakeholderResolver(
        site_store=store,
        mapping_store=store,
        unmatched_address=settings.stakeholders.unmatched_address,
        fallback_address=settings.stakeholders.fallback_address,
    )
    return FileProcessor(
        reader=PandasSpreadsheetReader(),
        site_store=store,
        resolver=resolver,
        column_rules=settings.columns.column_rules(),
        default_site=settings.thresholds.default_site(settings.stakeholders.unmatched_address),
    )


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("-c", "--config", type=click.Path(exists=True), help="Config file path")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config: str | None) -> None:
    """Page expiry - flag stale and low-engagement pages in analytics exports."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else None


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--store", type=click.Path(path_type=Path), help="Site configuration YAML")
@click.option("--output", type=click.Path(path_type=Path), help="Write report (.yaml/.json)")
@click.option("--domain", help="Only list pages on this domain")
@click.option("--category", type=click.Choice(CATEGORIES), help="Only list pages in this category")
@click.option("--send-alerts", is_flag=True, help="Email stakeholders of flagged pages")
@click.option(
    "--alert-scope",
    type=click.Choice(ALERT_SCOPES),
    default="expired",
    show_default=True,
    help="Alert on expired pages only, or on low-engagement pages too",
)
@click.pass_context
def process(
    ctx: click.Context,
    file: Path,
    store: Path | None,
    output: Path | None,
    domain: str | None,
    category: str | None,
    send_alerts: bool,
    alert_scope: str,
) -> None:
    """Process an analytics export."""
    settings = load_settings(ctx.obj["config_path"])
    config_store = YamlConfigStore(store or settings.store.path)
    processor = build_processor(settings, config_store)

    upload = UploadedFile(name=file.name, content=file.read_bytes())
    try:
        result = asyncio.run(processor.process_file(upload))
    except ProcessingError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"file: {result.file_name}")
    click.echo(f"pages: {result.total_pages}")
    click.echo(f"expired: {result.expired_pages}")
    click.echo(f"low_engagement: {result.low_engagement_pages}")
    click.echo(f"total_views: {result.total_page_views}")
    click.echo(f"date_range: {result.date_range.start}..{result.date_range.end}")
    click.echo(f"average_age_days: {result.average_page_age}")
    click.echo(f"average_views: {result.average_page_views}")
    click.echo(f"over_2_years: {result.pages_over_2_years}")

    if domain or category:
        for page in filter_pages(result.all_pages_data, domain, category):
            click.echo(
                f"  [{page.category}] {page.url} "
                f"({page.age_in_days}d, {page.page_views} views) -> {page.stakeholder}"
            )

    if output:
        write_report(result, output)
        click.echo(f"report: {output}")

    if send_alerts:
        dispatcher = AlertDispatcher(
            transport=create_email_transport(settings.email),
            fallback_address=settings.stakeholders.fallback_address,
            delay_seconds=settings.alerts.delay_seconds,
        )
        pages = result.flagged_pages if alert_scope == "flagged" else result.expired_pages_data
        summary = asyncio.run(dispatcher.send_alerts(pages))
        for outcome in summary.results:
            mark = "✓" if outcome.status == "sent" else "✗"
            click.echo(f"{mark} {outcome.page}: {outcome.message}")
        click.echo(f"\nAlerts: {summary.sent} sent, {summary.failed} failed")


@cli.command("test-email")
@click.argument("recipient")
@click.pass_context
def test_email(ctx: click.Context, recipient: str) -> None:
    """Send a test email through the configured transport."""
    settings = load_settings(ctx.obj["config_path"])
    transport = create_email_transport(settings.email)
    try:
        receipt = asyncio.run(transport.send_test_email(recipient))
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(receipt.message)


@cli.command("email-status")
@click.pass_context
def email_status(ctx: click.Context) -> None:
    """Show whether real email delivery is configured."""
    settings = load_settings(ctx.obj["config_path"])
    status = describe_transport(settings.email)
    click.echo(f"configured: {status.configured}")
    click.echo(f"service: {status.service}")
    click.echo(f"reason: {status.reason}")


@cli.command()
@click.option("--store", type=click.Path(path_type=Path), help="Site configuration YAML")
@click.pass_context
def sites(ctx: click.Context, store: Path | None) -> None:
    """List configured sites and their stakeholder mappings."""
    settings = load_settings(ctx.obj["config_path"])
    config_store = YamlConfigStore(store or settings.store.path)

    async def collect() -> list[dict]:
        entries = []
        for site in await config_store.list_site_configurations():
            entry = site_to_dict(site)
            entry["mappings"] = [
                {"pattern": m.pattern, "email": m.email, "type": m.type.value, "priority": m.priority}
                for m in await config_store.list_stakeholder_mappings(site.id)
            ]
            entries.append(entry)
        return entries

    try:
        entries = asyncio.run(collect())
    except ConfigStoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(yaml.safe_dump(entries, default_flow_style=False, sort_keys=False))


if __name__ == "__main__":
    cli()
