from __future__ import annotations

import importlib
import logging
import time
import traceback
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table
from playwright.sync_api import sync_playwright

from demoshop.config import Settings
from demoshop.factories import UserFactory
from demoshop.generator import DataGenerator
from demoshop.log import configure_logging
from demoshop.models import CreditCard, PayPal
from demoshop.query import Snapshot, count_cart_rows, extract_count, extract_price
from demoshop.scenarios import Scenario, ScenarioFactory, UnknownScenarioError

log = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, no_args_is_help=True)

console = Console()


@dataclass
class RunResult:
    """Outcome of one bot execution."""
    idx: int
    seed: int
    ok: bool
    duration_ms: int
    error: Optional[str] = None


def load_callable(target: str) -> Callable:
    """
    Loads a callable in the format "package.module:function",
    e.g. "examples.registration_bot:run".
    """
    # Validate the format early so a typo fails with a clear message.
    if ":" not in target:
        raise ValueError('Target must be in the form "module:function" (e.g. examples.registration_bot:run)')

    # Split into the module part and the function part.
    module_name, func_name = target.split(":", 1)
    # Import the module dynamically, like "import examples.registration_bot".
    module = importlib.import_module(module_name)

    # Look the function up by name and make sure it can be called.
    fn = getattr(module, func_name, None)
    if fn is None or not callable(fn):
        raise ValueError(f'Function "{func_name}" not found or not callable in module "{module_name}"')

    return fn


def run_once(bot_fn: Callable, settings: Settings, seed: int) -> Tuple[bool, int, Optional[str]]:
    """
    One bot execution in a fresh browser. The bot is called as
    `bot_fn(page, data, settings)` where `data` is a generator seeded with `seed`.
    """
    start = time.perf_counter()
    # Same seed, same test data: a failing run can be replayed.
    data = DataGenerator(seed=seed)

    try:
        with sync_playwright() as p:
            browser = p.chromium.launch(headless=settings.headless)
            context = browser.new_context(
                viewport={"width": settings.viewport_width, "height": settings.viewport_height},
            )
            page = context.new_page()
            # Shop pages can be slow; timeouts come from settings.
            page.set_default_timeout(settings.default_timeout_ms)
            page.set_default_navigation_timeout(settings.navigation_timeout_ms)

            # Close the browser even when the bot raises.
            try:
                bot_fn(page, data, settings)
            finally:
                context.close()
                browser.close()

        dur_ms = int((time.perf_counter() - start) * 1000)
        return True, dur_ms, None

    except Exception:
        # Any bot failure is a failed run, not a crash of the runner.
        dur_ms = int((time.perf_counter() - start) * 1000)
        err = traceback.format_exc(limit=20)
        log.debug("run with seed %d failed", seed)
        return False, dur_ms, err


def render_html(url: str, settings: Settings) -> str:
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=True)
        try:
            page = browser.new_page()
            page.goto(url, wait_until="domcontentloaded",
                      timeout=settings.navigation_timeout_ms)
            return page.content()
        finally:
            browser.close()


def scenario_rows(scenario: Scenario) -> List[Tuple[str, str]]:
    rows = [("Kind", scenario.kind.value), ("Description", scenario.description)]
    if scenario.user is not None:
        rows.append(("User", scenario.user.email))
    if scenario.valid_user is not None:
        rows.append(("Valid user", scenario.valid_user.email))
    for variant in scenario.invalid_users:
        u = variant.user
        rows.append((f"Invalid ({variant.defect.value})",
                     f"{u.email} / {u.password} / {u.confirm_password}"))
    order = scenario.order
    if order is not None:
        pm = order.payment_method
        if isinstance(pm, CreditCard):
            payment = f"card {pm.number} exp {pm.expiry_month}/{pm.expiry_year}"
        elif isinstance(pm, PayPal):
            payment = f"paypal {pm.email}"
        else:
            payment = str(pm)
        rows.append(("Payment", payment))
        rows.append(("Shipping", order.shipping_method.value))
        rows.append(("Ship to", f"{order.shipping_address.city}, {order.shipping_address.state} "
                                f"{order.shipping_address.zip_code}"))
        if order.is_guest is not None:
            rows.append(("Guest", "Yes" if order.is_guest else "No"))
        if order.express_checkout:
            rows.append(("Express checkout", "Yes"))
        if order.items:
            rows.append(("Items", str(len(order.items))))
    return rows


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (default: LOG_LEVEL env or INFO)",
    ),
):
    """Test data, page-state extraction and bot runs for the demo web shop."""
    configure_logging(log_level or Settings.from_env().log_level)


@app.command("run")
def run_cmd(
    target: str = typer.Argument(
        ...,
        help='Bot entrypoint in the format "module:function" (e.g. examples.registration_bot:run)',
    ),
    runs: int = typer.Option(
        1,
        "--runs",
        min=1,
        max=500,
        help="How many executions to perform",
    ),
    headless: Optional[bool] = typer.Option(
        None,
        "--headless/--headed",
        help="Run headless or show the browser (default from HEADLESS env)",
    ),
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        help="Shop base URL (default from BASE_URL env)",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Base seed for test data (each run uses seed + run_index)",
    ),
):
    """
    Run a Playwright sync bot against the shop and report pass/fail + duration.
    """
    bot_fn = load_callable(target)

    settings = Settings.from_env()
    overrides = {}
    if headless is not None and not settings.is_ci:
        overrides["headless"] = headless
    if base_url:
        overrides["base_url"] = base_url.rstrip("/")
    if overrides:
        settings = replace(settings, **overrides)

    base_seed = seed if seed is not None else (settings.seed if settings.seed is not None else 42)

    results: List[RunResult] = []
    for i in range(1, runs + 1):
        run_seed = base_seed + i
        ok, dur_ms, err = run_once(bot_fn, settings=settings, seed=run_seed)
        results.append(RunResult(idx=i, seed=run_seed, ok=ok, duration_ms=dur_ms, error=err))

        status = "[green]OK[/green]" if ok else "[red]FAIL[/red]"
        console.print(f"Run {i}/{runs}: {status} ({dur_ms} ms) seed={run_seed}")

    total = len(results)
    failures = [r for r in results if not r.ok]
    avg = int(sum(r.duration_ms for r in results) / total)

    table = Table(title="Demo shop - Report")
    table.add_column("Metric", style="bold")
    table.add_column("Value")

    table.add_row("Target", target)
    table.add_row("Base URL", settings.base_url)
    table.add_row("Runs", str(total))
    table.add_row("Passed", str(total - len(failures)))
    table.add_row("Failed", str(len(failures)))
    table.add_row("Avg duration", f"{avg} ms")
    table.add_row("Base seed", str(base_seed))

    console.print()
    console.print(table)

    if failures:
        first = failures[0]
        console.print("\n[bold red]Failures (first 1 shown):[/bold red]\n")
        console.print(f"[red]Run #{first.idx} (seed={first.seed}) failed[/red] after {first.duration_ms} ms\n")
        console.print(first.error)
        raise typer.Exit(code=1)


@app.command("scenario")
def scenario_cmd(
    kind: str = typer.Argument("happy_path", help="Scenario kind, e.g. registration_errors"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for reproducible data"),
    strict: bool = typer.Option(False, "--strict", help="Fail on unknown kinds instead of using happy_path"),
):
    """Print a generated test scenario."""
    factory = ScenarioFactory(DataGenerator(seed=seed), strict=strict)
    try:
        scenario = factory.create_scenario(kind)
    except UnknownScenarioError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=2)

    table = Table(title=f"Scenario: {scenario.kind.value}")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for name, value in scenario_rows(scenario):
        table.add_row(name, value)
    console.print(table)


@app.command("users")
def users_cmd(
    count: int = typer.Option(5, "--count", min=0, max=1000, help="How many users"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for reproducible data"),
):
    """Print generated registration users."""
    users = UserFactory(DataGenerator(seed=seed)).create_multiple(count)

    table = Table(title=f"Users ({len(users)})")
    for col in ("Gender", "First name", "Last name", "Email", "Password"):
        table.add_column(col)
    for u in users:
        table.add_row(u.gender.value, u.first_name, u.last_name, u.email, u.password)
    console.print(table)


@app.command("inspect")
def inspect_cmd(
    source: str = typer.Argument(..., help="HTML file path or http(s) URL"),
    field: str = typer.Option("total", "--field", help="Price to extract: total, subtotal or unit"),
):
    """Extract cart count, price and cart rows from a page."""
    if source.startswith(("http://", "https://")):
        html = render_html(source, Settings.from_env())
    else:
        path = Path(source)
        if not path.is_file():
            console.print(f"[red]No such file: {source}[/red]")
            raise typer.Exit(code=2)
        html = path.read_text(encoding="utf-8")

    snapshot = Snapshot.of(html)
    try:
        price = extract_price(snapshot, field)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=2)

    table = Table(title=f"Inspect: {source}")
    table.add_column("Value", style="bold")
    table.add_column("Extracted")
    table.add_row("Cart count", str(extract_count(snapshot)))
    table.add_row(f"Price ({field})", "-" if price is None else f"${price:,.2f}")
    table.add_row("Cart rows", str(count_cart_rows(snapshot)))
    console.print(table)


# Standard Python entrypoint so this file can be run directly:
#   python -m demoshop.runner scenario registration_errors --seed 1
if __name__ == "__main__":
    app()
