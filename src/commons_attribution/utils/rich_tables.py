# ABOUTME: Rich table utilities for displaying resolved assets in the terminal
# ABOUTME: Provides pre-configured table generators for assets, image info and logging status

from typing import Any

from rich.box import ROUNDED
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from commons_attribution.asset import Asset, ImageInfo


def create_key_value_table(
    title: str,
    data: dict[str, str],
    title_style: str = "bold cyan",
    key_style: str = "bold blue",
    value_style: str = "green",
    box_style=ROUNDED,
) -> Table:
    """Create a two-column key-value table.

    Args:
        title: Table title with emoji/styling
        data: Dictionary of key-value pairs to display
        title_style: Style for the table title
        key_style: Style for the key column
        value_style: Style for the value column
        box_style: Border style for the table

    Returns:
        Formatted Rich table ready for printing
    """
    table = Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        box=box_style,
        show_header=True,
        header_style="bold magenta",
        border_style="cyan",
        title_justify="left",
        expand=False,
    )

    table.add_column("Field", style=key_style, width=None, no_wrap=False)
    table.add_column("Value", style=value_style, width=None, no_wrap=False)

    for key, value in data.items():
        table.add_row(key, str(value))

    return table


def create_asset_table(asset: Asset) -> Table:
    """Create the attribution overview of a resolved asset.

    Args:
        asset: The resolved asset

    Returns:
        Styled asset table
    """
    licence = asset.get_licence()
    attribution = asset.get_attribution()

    data = {
        "📄 File": escape(asset.get_filename()),
        "🏷️ Title": escape(asset.get_title()),
        "🎞️ Media Type": asset.get_media_type(),
        "👤 Authors": escape(asset.get_authors(format="string")) or "[yellow]No author identified[/yellow]",
        "⚖️ Licence": f"{licence.name} ({licence.id})" if licence else "[red]Undetermined[/red]",
        "🔗 URL": asset.get_url() or "N/A",
    }
    if licence and licence.url:
        data["📜 Licence Text"] = licence.url
    if attribution is not None:
        data["✍️ Requested Attribution"] = escape(attribution.get_text(" ", strip=True))

    return create_key_value_table(title="🖼️ Asset Attribution", data=data, value_style="white")


def create_image_info_table(image_info: ImageInfo, size: int) -> Table:
    """Create a table with the image information fetched for one width.

    Args:
        image_info: Image information returned by the API
        size: Requested width in pixels

    Returns:
        Styled image info table
    """
    data = {
        "📐 Requested Width": f"{size}px",
        "🖼️ Original": f"{image_info.width or '?'}×{image_info.height or '?'}",
        "🔗 Original URL": image_info.url,
    }
    if image_info.thumb_url:
        data["🔍 Scaled"] = f"{image_info.thumb_width or '?'}×{image_info.thumb_height or '?'}"
        data["🔗 Scaled URL"] = image_info.thumb_url
    if image_info.mime:
        data["🧾 MIME Type"] = image_info.mime

    return create_key_value_table(title="📏 Image Info", data=data, title_style="bold green", value_style="white")


def create_logging_status_table(status: dict[str, Any]) -> Table:
    """Create a logging configuration status table.

    Args:
        status: Logging status dictionary

    Returns:
        Styled logging configuration table
    """
    logging_data = {
        "🔧 Mode": status["mode"].title(),
        "📁 Log Directory": status["log_directory"] or "N/A (production mode)",
        "🔇 Suppressed Libraries": ", ".join(status["third_party_suppressed"]),
    }

    # Add log files if they exist
    if status["log_files"]["main"]:
        logging_data["📝 Main Log"] = status["log_files"]["main"]
    if status["log_files"]["json"]:
        logging_data["📊 JSON Log"] = status["log_files"]["json"]
    if status["log_files"]["errors"]:
        logging_data["🚨 Error Log"] = status["log_files"]["errors"]

    return create_key_value_table(
        title="🔍 Logging Configuration",
        data=logging_data,
        title_style="bold green",
        key_style="blue",
        value_style="white",
    )


def print_rich_table(console: Console, table: Table) -> None:
    """Print a rich table with consistent spacing and style.

    Args:
        console: Rich console instance
        table: Configured table to print
    """
    console.print()  # Add spacing before
    console.print(table)
    console.print()  # Add spacing after
