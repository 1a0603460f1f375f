"""
Cognito UI - CLI Entry Point.

Diagnostic commands that open a page and show how a description resolves.

Configuration Priority:
    1. CLI arguments (--timeout, --visible, etc.)
    2. Environment variables (COGNITO__LOCATOR__TIMEOUT_MS, etc.)
    3. Config file (cognito.yaml)

Usage:
    cognito locate https://example.com "Login Button"
    cognito locate https://example.com "email address" --input
    cognito wait https://example.com "alert[Saved]" --state visible
"""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from cognito_ui import __version__
from cognito_ui.browsers.playwright_browser import PlaywrightBrowser
from cognito_ui.config import load_config
from cognito_ui.config.settings import Settings
from cognito_ui.core.smart_page import SmartPage
from cognito_ui.engine.strategies import LocatorResult
from cognito_ui.engine.waiter import ResolutionOptions, WaitState, controller_from_settings
from cognito_ui.exceptions import CognitoError
from cognito_ui.interfaces.browser import BrowserType
from cognito_ui.utils.logging import setup_logging

app = typer.Typer(
    name="cognito",
    help="Resolve human descriptions of page elements to live elements",
    add_completion=False,
)

console = Console()


def _load_settings(config: Optional[str], visible: bool, timeout: Optional[int], verbose: bool) -> Settings:
    overrides: dict = {}
    if visible:
        overrides["browser"] = {"headless": False}
    if timeout is not None:
        overrides["locator"] = {"timeout_ms": timeout}
    if verbose:
        overrides["logging"] = {"level": "DEBUG"}
    settings = load_config(config_path=config, **overrides)
    setup_logging(settings.logging.level, settings.logging.file, settings.logging.json_format)
    return settings


async def _with_page(settings: Settings, url: str, action):
    browser = PlaywrightBrowser()
    await browser.launch(
        headless=settings.browser.headless,
        browser_type=BrowserType(settings.browser.browser_type),
        slow_mo=settings.browser.slow_mo,
    )
    try:
        context_options = {
            "viewport": {
                "width": settings.browser.viewport_width,
                "height": settings.browser.viewport_height,
            },
            "ignore_https_errors": settings.browser.ignore_https_errors,
        }
        if settings.browser.user_agent:
            context_options["user_agent"] = settings.browser.user_agent
        page = await browser.new_page(**context_options)
        await page.goto(url, timeout=settings.browser.navigation_timeout_ms)
        return await action(page)
    finally:
        await browser.close()


def _print_result(description: str, result: LocatorResult, tag: str) -> None:
    table = Table(title=f'Resolved "{description}"', show_header=False)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    table.add_row("Strategy", result.strategy)
    table.add_row("Confidence", f"{result.confidence:.2f}")
    table.add_row("Element", f"<{tag}>")
    table.add_row("Matched text", result.matched_text or "-")
    table.add_row("Selector", result.selector or "-")
    console.print(table)


@app.command()
def locate(
    url: str = typer.Argument(..., help="Page to open"),
    description: str = typer.Argument(..., help='Element description, e.g. "Login Button" or "textbox[Email]"'),
    prefer_inputs: bool = typer.Option(False, "--input", "-i", help="Prefer input fields"),
    visible: bool = typer.Option(False, "--visible", "-v", help="Run with visible browser"),
    timeout: Optional[int] = typer.Option(None, "--timeout", "-t", help="Resolution budget in milliseconds"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to a YAML config file"),
    verbose: bool = typer.Option(False, "--verbose", help="Log every strategy attempt"),
):
    """Resolve a description on a page and show the match."""
    try:
        settings = _load_settings(config, visible, timeout, verbose)
    except CognitoError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    async def resolve(page):
        controller = controller_from_settings(page, settings.locator)
        options = ResolutionOptions.from_settings(settings.locator, prefer_inputs=prefer_inputs)
        result = await controller.resolve_with_retry(description, options)
        tag = await result.element.tag_name() if result else ""
        return result, tag

    try:
        result, tag = asyncio.run(_with_page(settings, url, resolve))
    except CognitoError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if result is None:
        console.print(f'[red]✗ No element matched "{description}"[/red]')
        raise typer.Exit(1)

    _print_result(description, result, tag)


@app.command()
def wait(
    url: str = typer.Argument(..., help="Page to open"),
    description: str = typer.Argument(..., help="Element description"),
    state: WaitState = typer.Option(WaitState.VISIBLE, "--state", "-s", help="State to wait for"),
    visible: bool = typer.Option(False, "--visible", "-v", help="Run with visible browser"),
    timeout: Optional[int] = typer.Option(None, "--timeout", "-t", help="Wait budget in milliseconds"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to a YAML config file"),
    verbose: bool = typer.Option(False, "--verbose", help="Log every poll"),
):
    """Wait until a described element reaches a state."""
    try:
        settings = _load_settings(config, visible, timeout, verbose)
    except CognitoError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    async def wait_for(page):
        smart = SmartPage(page, settings.locator)
        result = await smart.smart_wait(description, state)
        return result, await result.element.tag_name()

    try:
        result, tag = asyncio.run(_with_page(settings, url, wait_for))
    except CognitoError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Element is {state.value}[/green]")
    _print_result(description, result, tag)


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold]Cognito UI[/bold] v{__version__}")


if __name__ == "__main__":
    app()
