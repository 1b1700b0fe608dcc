"""Typer CLI entry point for POM Validator."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax

from pom_validator.config import ValidatorConfig
from pom_validator.exceptions import PomValidatorError
from pom_validator.graph import detect_project_types
from pom_validator.models import ValidationIssue, ValidationResult
from pom_validator.pipeline import ValidationService, has_errors
from pom_validator.profiles import Profile, SeverityLevel
from pom_validator.remediation import FixReport, RemediationSession, auto_fix, run_interactive
from pom_validator.report import TOOL_NAME, TOOL_VERSION, render_results, to_json, write_json
from pom_validator.scanner import resolve_pom_path
from pom_validator.watch import ChangeKind, WatchEvent, Watcher

app = typer.Typer(add_completion=False, no_args_is_help=True, help="Validate Maven pom.xml files.")
console = Console()


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _fail(exc: Exception) -> typer.Exit:
    console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    return typer.Exit(code=1)


def _service(ctx: typer.Context, **overrides) -> ValidationService:
    config: ValidatorConfig = ctx.obj["config"]
    return ValidationService(config.with_overrides(**overrides))


@app.callback()
def main_callback(
    ctx: typer.Context,
    log_level: Annotated[
        Optional[str], typer.Option("--log-level", help="Logging level (default: $POMV_LOG_LEVEL or WARNING).")
    ] = None,
) -> None:
    """Validate Maven pom.xml files against structural and best-practice rules."""
    try:
        config = ValidatorConfig.from_env()
    except PomValidatorError as exc:
        raise _fail(exc) from None
    if log_level:
        config = config.with_overrides(log_level=log_level.upper())
    _setup_logging(config.log_level)
    ctx.obj = {"config": config}


@app.command()
def validate(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="A pom.xml file or a directory containing one.")] = Path("."),
    recursive: Annotated[bool, typer.Option("--recursive", "-r", help="Validate every pom.xml below PATH.")] = False,
    summary: Annotated[bool, typer.Option("--summary", "-s", help="Print only the summary.")] = False,
    output: Annotated[str, typer.Option("--output", "-o", help="Output format: console or json.")] = "console",
    output_file: Annotated[Optional[Path], typer.Option("--output-file", "-O", help="Write JSON output here.")] = None,
    severity: Annotated[
        Optional[str], typer.Option("--severity", "-S", help="Minimum severity: error, warning, info, all.")
    ] = None,
    profile: Annotated[
        Optional[str], typer.Option("--profile", "-p", help="Rule profile: strict, standard, minimal, custom.")
    ] = None,
    rule: Annotated[
        Optional[list[str]], typer.Option("--rule", help="Rule to run (implies the custom profile).")
    ] = None,
    exclude: Annotated[
        Optional[list[str]], typer.Option("--exclude", "-e", help="Skip POMs whose path contains this.")
    ] = None,
    include: Annotated[
        Optional[list[str]], typer.Option("--include", "-I", help="Only POMs whose path contains this.")
    ] = None,
    fail_fast: Annotated[
        Optional[bool], typer.Option("--fail-fast", help="Stop at the first POM with errors.")
    ] = None,
    order: Annotated[
        Optional[str], typer.Option("--order", help="Parent-first ordering: depth or topological.")
    ] = None,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Only report POMs with errors.")] = False,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable colored output.")] = False,
) -> None:
    """Validate POM files and exit non-zero if any has errors."""
    out = Console(no_color=True) if no_color else console
    try:
        if output not in ("console", "json"):
            raise PomValidatorError(f"Unknown output format '{output}' (expected console or json)")
        chosen_profile = Profile.parse(profile) if profile else None
        if rule and chosen_profile is None:
            chosen_profile = Profile.CUSTOM
        service = _service(
            ctx,
            severity=SeverityLevel.parse(severity) if severity else None,
            profile=chosen_profile,
            custom_rules=tuple(rule) if rule else None,
            fail_fast=fail_fast,
            parent_order=order.lower() if order else None,
        )
        results = service.validate_tree(
            path, recursive=recursive, exclude=exclude or (), include=include or ()
        )
    except PomValidatorError as exc:
        raise _fail(exc) from None

    if output == "json":
        if output_file is not None:
            write_json(results, output_file)
            if not quiet:
                out.print(f"[green]Wrote[/green] {output_file}")
        else:
            typer.echo(to_json(results))
    else:
        render_results(out, results, summary_only=summary, quiet=quiet, types=detect_project_types(results))

    if has_errors(results):
        raise typer.Exit(code=1)


def _print_fix_report(report: FixReport) -> None:
    if report.backup is not None:
        console.print(f"[dim]Backup: {report.backup}[/dim]")
    for issue in report.fixed:
        console.print(f"[green]✓ Fixed:[/green] {escape(issue.message)}")
    for issue in report.not_fixed:
        console.print(f"[yellow]✗ Not fixed:[/yellow] {escape(issue.message)}")
    if report.skipped:
        console.print(f"[dim]Skipped {len(report.skipped)} issue(s)[/dim]")

    after = report.after or report.before
    status = "[green]valid[/green]" if after.is_valid else "[red]invalid[/red]"
    console.print(
        f"After re-validation the POM is {status}: "
        f"{len(after.errors)} error(s), {len(after.warnings)} warning(s) remain"
    )
    if report.fixed and not report.verified:
        console.print("[yellow]Some fixed issues are still reported after re-validation.[/yellow]")


@app.command()
def fix(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="A pom.xml file or its directory.")] = Path("."),
    no_backup: Annotated[bool, typer.Option("--no-backup", help="Do not write <pom>.backup first.")] = False,
) -> None:
    """Apply every automatic fix, then re-validate."""
    try:
        pom = resolve_pom_path(path)
        service = _service(ctx, backup=False if no_backup else None)
        report = auto_fix(pom, service)
    except PomValidatorError as exc:
        raise _fail(exc) from None

    if not report.fixed and not report.not_fixed:
        console.print("[green]No auto-fixable issues found.[/green]")
    _print_fix_report(report)
    if report.residual_errors:
        raise typer.Exit(code=1)


def _choose(issue: ValidationIssue, position: int, total: int) -> str:
    color = {"error": "red", "warning": "yellow"}.get(issue.severity.value, "blue")
    body = escape(issue.message)
    if issue.has_suggestion():
        body += f"\n[dim]→ {escape(issue.suggestion)}[/dim]"
    console.print(Panel(body, title=f"Issue {position}/{total}", subtitle=issue.severity.value.upper(), border_style=color))
    return typer.prompt("[f]ix, [s]kip, [v]iew, [e]dit, [q]uit", default="s")


def _show(text: str) -> None:
    console.print(Syntax(text, "xml", line_numbers=True))


@app.command()
def interactive(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="A pom.xml file or its directory.")] = Path("."),
) -> None:
    """Walk through fixable issues one at a time."""
    try:
        pom = resolve_pom_path(path)
        session = RemediationSession(pom, _service(ctx))
        if session.done:
            console.print("[green]No fixable issues found.[/green]")
            return
        report = run_interactive(session, _choose, _show)
    except PomValidatorError as exc:
        raise _fail(exc) from None

    _print_fix_report(report)
    if report.backup is not None and typer.confirm("Remove backup file?", default=False):
        report.backup.unlink(missing_ok=True)
        console.print("[dim]Backup removed[/dim]")


def _status_line(path: Path, result: ValidationResult) -> str:
    if result.is_valid and not result.warnings:
        return f"[green]✓ {path} - valid (no issues)[/green]"
    if result.is_valid:
        return f"[yellow]⚠ {path} - valid with {len(result.warnings)} warning(s)[/yellow]"
    line = f"[red]✗ {path} - invalid ({len(result.errors)} errors, {len(result.warnings)} warnings)[/red]"
    return f"{line}\n    └─ {escape(result.errors[0].message)}"


def _print_event(event: WatchEvent) -> None:
    if event.kind is ChangeKind.DELETED:
        console.print(f"[yellow]POM deleted: {event.path}[/yellow]")
        return
    label = "New POM detected" if event.kind is ChangeKind.CREATED else "POM modified"
    console.print(f"[blue]{label}: {event.path}[/blue]")
    console.print(_status_line(event.path, event.result))


@app.command()
def watch(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Directory to watch.")] = Path("."),
    recursive: Annotated[bool, typer.Option("--recursive", "-r", help="Watch subdirectories too.")] = False,
    interval: Annotated[float, typer.Option("--interval", help="Seconds between polls.")] = 1.0,
) -> None:
    """Validate POMs continuously as they change (Ctrl+C to stop)."""
    try:
        service = _service(ctx)
    except PomValidatorError as exc:
        raise _fail(exc) from None
    watcher = Watcher(path, service, recursive=recursive, interval=interval, on_event=_print_event)
    try:
        console.print(f"[bold]Watching[/bold] {path.resolve()} ({'recursive' if recursive else 'single directory'})")
        for pom, result in watcher.initial().items():
            console.print(_status_line(pom, result))
        watcher.loop()
    except KeyboardInterrupt:
        watcher.stop()
        console.print("[dim]Stopped watching.[/dim]")
    except PomValidatorError as exc:
        raise _fail(exc) from None


@app.command()
def version() -> None:
    """Print the version."""
    console.print(f"[bold]{TOOL_NAME}[/bold] version [green]{TOOL_VERSION}[/green]")


def main() -> None:
    """Console-script entry point."""
    app()
