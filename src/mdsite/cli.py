"""CLI interface for mdsite."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from mdsite import __version__
from mdsite.builder.checker import Report
from mdsite.errors import BuildError, SiteLoadError
from mdsite.feature_logger import log_site_configuration
from mdsite.model.site_options import SiteOptions
from mdsite.pipeline import analyze_tree, build_site
from mdsite.ui.progress import ProgressReporter

app = typer.Typer(
    name="mdsite",
    help="Build and validate static sites from Markdown documentation trees.",
    no_args_is_help=True,
)

# Exit code for whole-run failures (missing root, unreadable file, bad options)
EXIT_FATAL = 2


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


def _options_or_exit(index: str, path_case: str, workers: int) -> SiteOptions:
    try:
        return SiteOptions.from_cli(index=index, path_case=path_case, workers=workers)
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(EXIT_FATAL) from exc


def _print_report(report: Report) -> None:
    for line in report.diagnostics():
        typer.echo(line)
    typer.echo(
        f"{len(report.unresolved)} unresolved link(s), "
        f"{len(report.orphans)} orphan(s), "
        f"{len(report.duplicate_slugs)} duplicate anchor(s)"
    )


IndexOption = Annotated[
    str,
    typer.Option("--index", help="Index document relative to ROOT; traversal starts here"),
]
PathCaseOption = Annotated[
    str,
    typer.Option(
        "--path-case",
        help="Document path comparison: 'sensitive' or 'insensitive'",
    ),
]
WorkersOption = Annotated[
    int,
    typer.Option("--workers", help="Number of threads used to read source files"),
]
ProgressOption = Annotated[
    bool,
    typer.Option("--progress/--no-progress", help="Show progress bars on stderr"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable debug logging"),
]
RootArgument = Annotated[
    Path,
    typer.Argument(help="Root directory of the Markdown source tree"),
]


@app.command()
def build(
    root: RootArgument,
    out_dir: Annotated[
        Path,
        typer.Argument(help="Output directory; regenerated in full on every run"),
    ],
    index: IndexOption = "README.md",
    path_case: PathCaseOption = "sensitive",
    workers: WorkersOption = 1,
    progress: ProgressOption = True,
    verbose: VerboseOption = False,
) -> None:
    """
    Build a static HTML site from a Markdown tree.

    Every diagnostic is printed as path:line: message. Exits 0 when all links
    resolve (orphans and duplicate anchors are warnings), 1 when any link is
    unresolved, 2 when the build could not run at all.

    Examples:

        # Build the docs folder into ./site
        mdsite build docs site

        # Use a different index and tolerate case differences in links
        mdsite build docs site --index index.md --path-case insensitive
    """
    _setup_logging(verbose)
    options = _options_or_exit(index, path_case, workers)
    log_site_configuration(options)

    try:
        with ProgressReporter(enabled=progress) as pr:
            result = build_site(root, out_dir, options, on_progress=pr.emit)
    except (SiteLoadError, BuildError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(EXIT_FATAL) from exc

    _print_report(result.report)
    if result.report.ok:
        typer.echo(f"Wrote {len(result.site.pages)} page(s) to {out_dir}")
    else:
        typer.echo(f"Build failed: wrote {len(result.site.pages)} page(s) to {out_dir}")
    raise typer.Exit(result.report.exit_code)


@app.command()
def check(
    root: RootArgument,
    index: IndexOption = "README.md",
    path_case: PathCaseOption = "sensitive",
    workers: WorkersOption = 1,
    progress: ProgressOption = True,
    verbose: VerboseOption = False,
) -> None:
    """Validate links and reachability without writing any output."""
    _setup_logging(verbose)
    options = _options_or_exit(index, path_case, workers)
    log_site_configuration(options)

    try:
        with ProgressReporter(enabled=progress) as pr:
            analysis = analyze_tree(root, options, on_progress=pr.emit)
    except (SiteLoadError, BuildError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(EXIT_FATAL) from exc

    _print_report(analysis.report)
    raise typer.Exit(analysis.report.exit_code)


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"mdsite version {__version__}")


def version_callback(value: bool) -> None:
    """Version callback for --version flag."""
    if value:
        typer.echo(f"mdsite version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """
    mdsite - Build and validate static sites from Markdown documentation trees.

    Loads every .md file under a root, resolves inline links and heading
    anchors, reports broken links and orphan pages, and renders a navigable
    HTML site with back-references.

    For detailed usage, run: mdsite build --help
    """
    pass


if __name__ == "__main__":  # pragma: no cover - executed only via `python -m`
    app()
