"""EasyQ command line interface."""

from __future__ import annotations

from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from .crypto import KeyDistributionOptions, generate_key, security_margin, verify_channel_security
from .errors import EasyQError, KeyGenerationFailedError
from .rng import generate_random_bytes, generate_random_int
from .search import (
    IterationStrategy,
    SamplingStrategy,
    SearchOptions,
    compute_iterations,
    make_plan,
    search,
    success_probability,
)

app = typer.Typer(help="EasyQ - quantum search, randomness and key distribution")
console = Console()


def _backend(seed: Optional[int]):
    from .backends.simulator import SimulatorBackend

    return SimulatorBackend(seed=seed)


@app.command()
def plan(
    size: int = typer.Option(..., "--size", "-n", help="Collection size (N)"),
    matches: int = typer.Option(1, "--matches", "-m", help="Estimated match count (M)"),
    factor: float = typer.Option(1.0, "--factor", help="Custom iteration factor"),
    offset: int = typer.Option(0, "--offset", help="Custom iteration offset"),
):
    """Show the iteration count of every strategy for N items and M matches."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Strategy")
    table.add_column("Iterations", justify="right")
    table.add_column("Ideal success", justify="right")

    for strategy in IterationStrategy:
        k = compute_iterations(size, matches, strategy, factor, offset)
        table.add_row(strategy.value, str(k), f"{success_probability(size, matches, k):.1%}")

    console.print(f"[bold blue]Iteration plan[/bold blue] N = {size}, M = {matches}")
    console.print(table)
    capped = make_plan(size, matches, SearchOptions(
        iteration_strategy=IterationStrategy.CUSTOM,
        custom_iteration_factor=factor,
        custom_iteration_offset=offset,
    ))
    console.print(f"Custom plan after safety cap: {capped.iterations} iterations")


@app.command("search")
def search_cmd(
    size: int = typer.Option(16, "--size", "-n", help="Search integers 0..N-1"),
    target: List[int] = typer.Option(..., "--target", "-t", help="Matching value (repeatable)"),
    strategy: IterationStrategy = typer.Option(IterationStrategy.OPTIMAL, "--strategy", "-s"),
    sampling: SamplingStrategy = typer.Option(SamplingStrategy.AUTO, "--sampling"),
    attempts: int = typer.Option(5, "--attempts", help="Maximum attempts"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Simulator seed"),
):
    """Run a Grover search over the integers 0..N-1 on the local simulator."""
    targets = frozenset(target)
    opts = SearchOptions(
        iteration_strategy=strategy,
        sampling_strategy=sampling,
        max_attempts=attempts,
        known_match_count=len(targets) if sampling is SamplingStrategy.USER_PROVIDED else None,
    )
    console.print(f"[bold blue]Searching[/bold blue] N = {size}, targets = {sorted(targets)}")

    try:
        results = search(list(range(size)), lambda x: x in targets, opts, _backend(seed))
    except EasyQError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)

    for result in results:
        console.print(f"[green]Found[/green] index {result.index}: {result.item}")


@app.command()
def random(
    length: int = typer.Option(16, "--bytes", "-b", help="Number of random bytes"),
    low: Optional[int] = typer.Option(None, "--min", help="Draw an integer from [min, max] instead"),
    high: Optional[int] = typer.Option(None, "--max"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Simulator seed"),
):
    """Generate random bytes or a random integer."""
    try:
        if low is not None or high is not None:
            if low is None or high is None:
                raise typer.BadParameter("--min and --max must be given together")
            console.print(generate_random_int(low, high, _backend(seed)))
        else:
            console.print(generate_random_bytes(length, _backend(seed)).hex())
    except EasyQError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)


@app.command()
def keygen(
    key_length: int = typer.Option(256, "--length", "-l", help="Key length in bits"),
    security_level: int = typer.Option(3, "--level", help="Security level (1-5)"),
    threshold: float = typer.Option(2.2, "--threshold", help="Minimum CHSH value"),
    show_key: bool = typer.Option(False, "--show-key", help="Print the key in hex"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Simulator seed"),
):
    """Generate a key with the E91 protocol."""
    opts = KeyDistributionOptions(
        key_length=key_length,
        security_level=security_level,
        security_threshold=threshold,
    )
    try:
        outcome = generate_key(opts, _backend(seed))
    except KeyGenerationFailedError as e:
        console.print(f"[bold red]Failed.[/bold red] {e.outcome.failure_reason}")
        _print_security(e.outcome.security_parameter, e.outcome.error_rate)
        raise typer.Exit(code=1)
    except EasyQError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)

    console.print(f"[bold green]Success![/bold green] {len(outcome.key)} key bytes")
    console.print(f"Entangled pairs: {outcome.entangled_pairs_created}")
    _print_security(outcome.security_parameter, outcome.error_rate)
    if show_key:
        console.print(f"Key: {outcome.key.hex()}")


@app.command()
def verify(
    security_level: int = typer.Option(3, "--level", help="Security level (1-5)"),
    threshold: float = typer.Option(2.2, "--threshold", help="Minimum CHSH value"),
    max_error_rate: float = typer.Option(0.12, "--max-error-rate"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Simulator seed"),
):
    """Probe the channel and report whether it is secure."""
    opts = KeyDistributionOptions(
        security_level=security_level,
        security_threshold=threshold,
        max_acceptable_error_rate=max_error_rate,
    )
    try:
        report = verify_channel_security(opts, _backend(seed))
    except EasyQError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)

    status = "[green]Secure[/green]" if report.is_secure else "[red]Insecure[/red]"
    console.print(f"Channel: {status}")
    _print_security(report.security_parameter, report.error_rate)
    if not report.is_secure:
        raise typer.Exit(code=2)


def _print_security(security_parameter: float, error_rate: float):
    """Print the security readings."""
    console.print(f"CHSH value: {security_parameter:.4f} (margin {security_margin(security_parameter):.1f}%)")
    console.print(f"Error rate: {error_rate:.2%}")


if __name__ == "__main__":
    app()
