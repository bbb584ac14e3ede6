"""Command-line interface for sbom_attribution.

Provides the main entry point and subcommands for generating third-party
license attribution documents from an SBOM and managing the license text
cache.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from sbom_attribution.aggregator import IgnoreRules, build_index
from sbom_attribution.cache import LicenseTextCache
from sbom_attribution.config import Settings, load_settings
from sbom_attribution.models import AttributionReport
from sbom_attribution.normalizer import load_license_map
from sbom_attribution.report import assemble_report
from sbom_attribution.reporters import HtmlReporter, NoticeReporter
from sbom_attribution.resolvers import (
    LicenseListError,
    LicenseTextResolver,
    SPDXLicenseData,
)
from sbom_attribution.scanners import get_scanner

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNKNOWN_LICENSES = 2

app = typer.Typer(
    name="sbom-attribution",
    help="Generate third-party license attributions from a CycloneDX SBOM.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
)
logger = logging.getLogger("sbom_attribution")


def _setup_logging(verbose: bool) -> None:
    """Configure logging level based on verbosity flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.getLogger("sbom_attribution").setLevel(level)


async def _build_report(settings: Settings, verbose: bool) -> AttributionReport:
    """Load inputs, aggregate components and resolve license texts.

    Args:
        settings: Effective run settings.
        verbose: Whether to print verbose output.

    Returns:
        The assembled attribution report.

    Raises:
        FileNotFoundError: If the SBOM or license map does not exist.
        ValueError: If the SBOM, license map or an ignore pattern is invalid.
        LicenseListError: If the SPDX license list cannot be loaded.
    """
    scanner = get_scanner(settings.sbom_path)
    if verbose:
        console.print(f"[dim]Using scanner: {scanner.source_name}[/dim]")

    components = scanner.scan()
    license_map = load_license_map(settings.license_map_path)
    ignore = IgnoreRules(settings.ignore_patterns)

    spdx_data = SPDXLicenseData(version=settings.spdx_version)
    async with LicenseTextResolver(
        cache=LicenseTextCache(settings.licenses_dir),
        custom_dir=settings.custom_licenses_dir,
        spdx_data=spdx_data,
    ) as resolver:
        names = await spdx_data.load_names()
        index = build_index(components, license_map, ignore)
        if verbose:
            console.print(
                f"[dim]Indexed {len(index.by_purl)} packages "
                f"from {len(components)} SBOM entries[/dim]"
            )
        return await assemble_report(index, names, resolver)


async def _run_gen(settings: Settings, verbose: bool) -> int:
    """Async implementation of the gen command."""
    _setup_logging(verbose)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Resolving licenses...", total=None)

        try:
            report = await _build_report(settings, verbose)
        except (FileNotFoundError, ValueError, LicenseListError) as e:
            err_console.print(f"[red]Error:[/red] {e}")
            return EXIT_ERROR

        progress.update(task, completed=True)

    html_reporter = HtmlReporter(template_path=settings.html_template)
    notice_reporter = NoticeReporter(template_path=settings.notice_template)
    html_path = settings.out_dir / html_reporter.default_filename
    notice_path = settings.out_dir / notice_reporter.default_filename

    try:
        html_reporter.write(report, html_path)
        notice_reporter.write(report, notice_path)
    except Exception as e:
        err_console.print(f"[red]Error writing output:[/red] {e}")
        return EXIT_ERROR

    console.print(
        f"Found [bold]{len(report.licenses)}[/bold] licenses, "
        f"[bold]{len(report.notices)}[/bold] copyright notices"
    )

    unknown = report.unknown_license_ids
    if unknown:
        err_console.print(
            "[red]ERROR:[/red] Unknown license expressions found. "
            f"Add mappings in {settings.license_map_path}:"
        )
        for license_id in unknown:
            err_console.print(f"  - {license_id}")
        return EXIT_UNKNOWN_LICENSES

    console.print("[green]Wrote:[/green]")
    for path in (html_path, notice_path, settings.licenses_dir):
        console.print(f"  - {path}")
    return EXIT_OK


@app.command()
def gen(
    sbom: Annotated[
        Optional[Path],
        typer.Option(
            "--sbom",
            "-s",
            help="Path to the CycloneDX JSON SBOM",
        ),
    ] = None,
    license_map: Annotated[
        Optional[Path],
        typer.Option(
            "--license-map",
            "-m",
            help="JSON file mapping raw license expressions to license ids",
        ),
    ] = None,
    out_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--out-dir",
            "-o",
            help="Directory for THIRD_PARTY_LICENSES.html and NOTICE.md",
        ),
    ] = None,
    licenses_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--licenses-dir",
            help="License text cache directory",
        ),
    ] = None,
    custom_licenses_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--custom-licenses-dir",
            help="Directory with texts for LicenseRef- identifiers",
        ),
    ] = None,
    spdx_version: Annotated[
        Optional[str],
        typer.Option(
            "--spdx-version",
            envvar="SPDX_LICENSE_LIST_VERSION",
            help="Release tag of spdx/license-list-data",
        ),
    ] = None,
    ignore: Annotated[
        Optional[list[str]],
        typer.Option(
            "--ignore",
            "-i",
            help="Regular expression of package URLs to leave out (repeatable)",
        ),
    ] = None,
    html_template: Annotated[
        Optional[Path],
        typer.Option(
            "--html-template",
            help="Custom Jinja2 template for the HTML report",
            exists=True,
            readable=True,
        ),
    ] = None,
    notice_template: Annotated[
        Optional[Path],
        typer.Option(
            "--notice-template",
            help="Custom Jinja2 template for NOTICE.md",
            exists=True,
            readable=True,
        ),
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="TOML file with an [attribution] table",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output",
        ),
    ] = False,
) -> None:
    """Generate third-party license attribution documents.

    Reads the SBOM, normalizes and groups licenses, resolves license texts
    and writes THIRD_PARTY_LICENSES.html and NOTICE.md.

    Exit codes:
        0 - Documents generated
        1 - Inputs could not be loaded or output could not be written
        2 - Documents generated, but unknown license expressions need mappings
    """
    try:
        settings = load_settings(config).with_overrides(
            sbom_path=sbom,
            license_map_path=license_map,
            out_dir=out_dir,
            licenses_dir=licenses_dir,
            custom_licenses_dir=custom_licenses_dir,
            spdx_version=spdx_version,
            ignore_patterns=ignore or None,
            html_template=html_template,
            notice_template=notice_template,
        )
    except (FileNotFoundError, ValueError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=EXIT_ERROR)

    exit_code = asyncio.run(_run_gen(settings=settings, verbose=verbose))
    raise typer.Exit(code=exit_code)


@app.command()
def cache(
    action: Annotated[
        str,
        typer.Argument(help="Cache action: 'show' or 'clear'"),
    ],
    license_id: Annotated[
        Optional[str],
        typer.Argument(help="Specific license id to clear (optional)"),
    ] = None,
    licenses_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--licenses-dir",
            help="License text cache directory",
        ),
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="TOML file with an [attribution] table",
        ),
    ] = None,
) -> None:
    """Manage the license text cache.

    Actions:
        show  - Display cache location, entry count, and size
        clear - Remove all cached texts (or one license id)
    """
    try:
        settings = load_settings(config).with_overrides(licenses_dir=licenses_dir)
    except (FileNotFoundError, ValueError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=EXIT_ERROR)

    cache_instance = LicenseTextCache(settings.licenses_dir)

    if action == "show":
        info = cache_instance.info()
        console.print(f"[bold]Cache Location:[/bold] {info['path']}")
        console.print(f"[bold]Entries:[/bold] {info['count']}")
        console.print(f"[bold]Size:[/bold] {info['size_bytes'] / 1024:.1f} KB")

    elif action == "clear":
        if license_id:
            try:
                cache_instance.clear(license_id)
            except ValueError as e:
                err_console.print(f"[red]Error:[/red] {e}")
                raise typer.Exit(code=EXIT_ERROR)
            console.print(f"[green]Cleared cache for:[/green] {license_id}")
        else:
            removed = cache_instance.clear()
            console.print(f"[green]Cache cleared[/green] ({removed} entries)")

    else:
        err_console.print(f"[red]Unknown action:[/red] {action}")
        err_console.print("Valid actions: show, clear")
        raise typer.Exit(code=EXIT_ERROR)


if __name__ == "__main__":
    app()
