# ABOUTME: Main CLI application entry point using asyncclick for native async support
# ABOUTME: Provides commands for resolving asset attributions and inspecting image info

import json as jsonlib

import asyncclick as click
from rich.console import Console
from rich.panel import Panel

from commons_attribution.api import CommonsApi
from commons_attribution.asset import Asset
from commons_attribution.config import get_config
from commons_attribution.errors import InvalidInput, LookupFailure
from commons_attribution.tracking import LoggingEventSink
from commons_attribution.utils.logging import (
    LoggingMode,
    configure_logging,
    get_logging_status,
    with_asset_context,
    with_operation_context,
)
from commons_attribution.utils.retry import lookup_retry
from commons_attribution.utils.rich_tables import (
    create_asset_table,
    create_image_info_table,
    create_logging_status_table,
    print_rich_table,
)

console = Console()


def format_attribution(asset: Asset) -> str:
    """Build the plain-text attribution line for reusing an asset."""
    attribution = asset.get_attribution()
    if attribution is not None:
        credit = attribution.get_text(" ", strip=True)
    else:
        credit = asset.get_authors(format="string")
    credit = credit or "Unknown author"
    url = asset.get_url()
    licence = asset.get_licence()

    parts = [f"{credit} ({url})" if url else credit, f"„{asset.get_title()}“"]
    if licence is None:
        parts.append("licence undetermined")
    else:
        parts.append(licence.url or licence.name)
    return ", ".join(parts)


def asset_to_dict(asset: Asset) -> dict:
    """Plain representation of an asset for JSON output."""
    licence = asset.get_licence()
    attribution = asset.get_attribution()
    return {
        "filename": asset.get_filename(),
        "prefixed_filename": asset.prefixed_filename,
        "title": asset.get_title(),
        "media_type": asset.get_media_type(),
        "url": asset.get_url(),
        "authors": [{"text": author.text, "html": author.html} for author in asset.get_authors()],
        "licence": licence.model_dump() if licence else None,
        "attribution": str(attribution) if attribution is not None else None,
        "attribution_text": format_attribution(asset),
    }


async def _resolve_asset(api: CommonsApi, filename: str) -> Asset:
    """Resolve an asset, retrying transient lookup failures as configured."""
    config = get_config()

    @lookup_retry(
        max_attempts=config.lookup_attempts, min_wait=config.retry_min_wait, max_wait=config.retry_max_wait
    )
    async def lookup() -> Asset:
        return await api.get_asset(filename)

    return await lookup()


def _report_failure(exc: Exception, json_output: bool) -> None:
    if json_output:
        click.echo(jsonlib.dumps({"error": str(exc), "error_type": type(exc).__name__}))
    else:
        console.print(f"[red]❌ {exc}[/red]")


@click.command(name="asset")
@click.argument("filename")
@click.option("--size", "-s", type=click.IntRange(min=1), help="Also show image info scaled to this width")
@click.option("--html", "show_html", is_flag=True, help="Show the markup of every credited author")
@click.pass_context
async def asset_command(ctx, filename: str, size: int | None, show_html: bool):
    """
    🖼️ Resolve the attribution of a file.

    FILENAME may be a bare filename, a prefixed filename (File:Foo.jpg) or a
    URL pointing at the file on a Wikimedia wiki.
    """
    json_output = ctx.obj["json_output"]
    event_sink = LoggingEventSink()
    event_sink.track_page_load("asset")

    with with_asset_context(filename) as logger:
        async with CommonsApi(event_sink=event_sink) as api:
            try:
                if json_output:
                    asset = await _resolve_asset(api, filename)
                else:
                    with console.status(f"🔎 Resolving {filename}", spinner="dots"):
                        asset = await _resolve_asset(api, filename)
                image_info = await asset.get_image_info(size) if size else None
            except (LookupFailure, InvalidInput) as exc:
                logger.warning("Asset lookup failed", error=str(exc), error_type=type(exc).__name__)
                _report_failure(exc, json_output)
                raise click.exceptions.Exit(1) from exc

        logger.info("Asset resolved", licence=asset.get_licence().id if asset.get_licence() else None)

        if json_output:
            result = asset_to_dict(asset)
            if image_info is not None:
                result["image_info"] = image_info.model_dump()
            click.echo(jsonlib.dumps(result, ensure_ascii=False))
            return

        print_rich_table(console, create_asset_table(asset))
        if show_html:
            for author in asset.get_authors():
                console.print(f"👤 {author.html}", markup=False)
        if image_info is not None:
            print_rich_table(console, create_image_info_table(image_info, size))
        console.print(Panel(format_attribution(asset), title="📋 Attribution", border_style="green"), markup=False)


@click.command(name="image-info")
@click.argument("filename")
@click.argument("size", type=click.IntRange(min=1))
@click.pass_context
async def image_info_command(ctx, filename: str, size: int):
    """
    📏 Show the image info of a file scaled to SIZE pixels width.
    """
    json_output = ctx.obj["json_output"]

    with with_asset_context(filename) as logger:
        async with CommonsApi() as api:
            try:
                asset = await _resolve_asset(api, filename)
                image_info = await asset.get_image_info(size)
            except (LookupFailure, InvalidInput) as exc:
                logger.warning("Image info lookup failed", error=str(exc), size=size)
                _report_failure(exc, json_output)
                raise click.exceptions.Exit(1) from exc

    if json_output:
        click.echo(jsonlib.dumps(image_info.model_dump()))
    else:
        print_rich_table(console, create_image_info_table(image_info, size))


def _initialize_logging(json_output: bool, log_level: str | None = None, log_file: str | None = None) -> None:
    """Initialize logging configuration."""
    config = get_config()
    mode = LoggingMode.PRODUCTION if json_output else LoggingMode.INTERACTIVE

    # Use config defaults when CLI parameters are not provided
    final_log_level = log_level or config.log_level
    final_log_file = log_file or (str(config.log_file) if config.log_file else None)

    configure_logging(mode=mode, log_level=final_log_level, log_file=final_log_file)


@click.command(name="logging-status")
def logging_status():
    """
    📊 Show current logging configuration and status.
    """
    with with_operation_context("logging-status") as logger:
        status = get_logging_status()
        logger.debug("Logging status collected", mode=status["mode"])

    logging_table = create_logging_status_table(status)
    print_rich_table(console, logging_table)


@click.group(invoke_without_command=True)
@click.option("--json", is_flag=True, help="Output JSON instead of rich tables")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--log-file", help="Custom log file path")
@click.pass_context
def app(ctx, json: bool, log_level: str | None, log_file: str | None):
    """
    ⚖️ Commons Attribution - licence notices for wiki media files

    Look up a file on Wikimedia Commons (or another Wikimedia wiki) and get its
    authors, licence and a ready-to-use attribution line.
    """
    # Store global options in context for commands to access
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json

    # Initialize logging once here instead of in each command
    _initialize_logging(json, log_level, log_file)

    # Show help if no command provided
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Add commands to the main group
app.add_command(asset_command)
app.add_command(image_info_command)
app.add_command(logging_status)


if __name__ == "__main__":
    app()
