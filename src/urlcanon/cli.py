"""
urlcanon CLI - Command Line Interface

Canonicalise, repair and resolve URLs from the command line. URLs are taken
from the arguments or, when none are given, one per line from stdin.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from urlcanon.codec.canonicalizer import URLCanonicalizer
from urlcanon.core.config import load_settings
from urlcanon.core.exceptions import ConfigError, InvalidReference

# Version
__version__ = "0.1.0"

# Create CLI app
app = typer.Typer(
    name="urlcanon",
    help="urlcanon - URL canonicalisation for web archive lookups",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for output
console = Console()


# ============================================================================
# Helpers
# ============================================================================

def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def _build_canonicalizer(config: Optional[Path]) -> URLCanonicalizer:
    try:
        settings = load_settings(config)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)
    return URLCanonicalizer(settings=settings)


def _collect_urls(urls: Optional[List[str]]) -> List[str]:
    if urls:
        return urls
    return [line.strip() for line in sys.stdin if line.strip()]


def _emit(url: str) -> None:
    console.print(url, markup=False, highlight=False, soft_wrap=True)


# ============================================================================
# Commands
# ============================================================================

@app.command()
def canonicalise(
    urls: Optional[List[str]] = typer.Argument(
        None,
        help="URLs to canonicalise (read from stdin if omitted)",
    ),
    allow_high_order: bool = typer.Option(
        True,
        "--allow-high-order/--escape-high-order",
        help="Write non-ASCII characters raw instead of %-escaped",
    ),
    unambiguous: bool = typer.Option(
        True,
        "--unambiguous/--keep-escapes",
        help="Unescape %-escapes of characters that need no escaping",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Settings file",
        exists=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """
    Canonicalise URLs into lookup keys.
    """
    _setup_logging(verbose)
    canonicalizer = _build_canonicalizer(config)
    
    for url in _collect_urls(urls):
        _emit(canonicalizer.canonicalise(url, allow_high_order, unambiguous))


@app.command()
def fix(
    urls: Optional[List[str]] = typer.Argument(
        None,
        help="URLs to repair (read from stdin if omitted)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Settings file",
        exists=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """
    Repair faulty %-escapes, keeping existing valid escapes.
    """
    _setup_logging(verbose)
    canonicalizer = _build_canonicalizer(config)
    
    for url in _collect_urls(urls):
        _emit(canonicalizer.fix_errors(url))


@app.command()
def resolve(
    base: str = typer.Argument(..., help="Absolute base URL"),
    relative: str = typer.Argument(..., help="Reference to resolve"),
    normalise: bool = typer.Option(
        True,
        "--normalise/--no-normalise",
        help="Canonicalise the resolved URL",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Settings file",
        exists=True,
    ),
) -> None:
    """
    Resolve a relative reference against a base URL.
    """
    canonicalizer = _build_canonicalizer(config)
    
    try:
        resolved = canonicalizer.resolve_relative(base, relative, normalise)
    except InvalidReference as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)
    
    _emit(resolved)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold cyan]urlcanon[/bold cyan] version [yellow]{__version__}[/yellow]")


# ============================================================================
# Entry Point
# ============================================================================

def main() -> None:
    """Main entry point for CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
