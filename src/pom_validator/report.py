"""JSON projection and Rich rendering of validation results."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from pom_validator.graph import ProjectType
from pom_validator.models import Severity, ValidationIssue, ValidationResult


TOOL_NAME = "POM Validator"
TOOL_VERSION = "1.0.0"

_STYLE = {
    Severity.ERROR: ("red", "✗"),
    Severity.WARNING: ("yellow", "⚠"),
    Severity.INFO: ("blue", "ℹ"),
}


class IssueEntry(BaseModel):
    message: str
    suggestion: str | None = None


class FileEntry(BaseModel):
    file: str
    valid: bool
    errors: list[IssueEntry]
    warnings: list[IssueEntry]
    infos: list[IssueEntry]


class Summary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    valid_count: int = Field(alias="validCount")
    invalid_count: int = Field(alias="invalidCount")
    total_errors: int = Field(alias="totalErrors")
    total_warnings: int = Field(alias="totalWarnings")
    total_infos: int = Field(alias="totalInfos")


class JsonReport(BaseModel):
    tool: str = TOOL_NAME
    version: str = TOOL_VERSION
    timestamp: str
    summary: Summary
    results: list[FileEntry]


def _entries(issues: list[ValidationIssue]) -> list[IssueEntry]:
    return [
        IssueEntry(message=i.message, suggestion=i.suggestion if i.has_suggestion() else None)
        for i in issues
    ]


def summarize(results: Mapping[Path, ValidationResult]) -> Summary:
    valid = sum(1 for r in results.values() if r.is_valid)
    return Summary(
        valid_count=valid,
        invalid_count=len(results) - valid,
        total_errors=sum(len(r.errors) for r in results.values()),
        total_warnings=sum(len(r.warnings) for r in results.values()),
        total_infos=sum(len(r.infos) for r in results.values()),
    )


def build_report(results: Mapping[Path, ValidationResult], *, now: datetime | None = None) -> JsonReport:
    """Project results into the machine-readable report, preserving their order."""
    return JsonReport(
        timestamp=(now or datetime.now()).isoformat(timespec="seconds"),
        summary=summarize(results),
        results=[
            FileEntry(
                file=str(path),
                valid=result.is_valid,
                errors=_entries(result.errors),
                warnings=_entries(result.warnings),
                infos=_entries(result.infos),
            )
            for path, result in results.items()
        ],
    )


def to_json(results: Mapping[Path, ValidationResult], *, now: datetime | None = None) -> str:
    return build_report(results, now=now).model_dump_json(by_alias=True, exclude_none=True, indent=2)


def write_json(results: Mapping[Path, ValidationResult], out: Path) -> Path:
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(to_json(results) + "\n", encoding="utf-8")
    return out


def build_result_tree(
    path: Path,
    result: ValidationResult,
    *,
    show_infos: bool = True,
    project_type: ProjectType | None = None,
) -> Tree:
    """Build a Rich Tree listing the issues of one POM.

    Args:
        path: POM the result belongs to.
        result: Its validation result.
        show_infos: Include INFO entries.
        project_type: Detected project type, shown next to the status.

    Returns:
        A Rich Tree object for rendering.
    """
    status = "[bold green]✓ VALID[/bold green]" if result.is_valid else "[bold red]✗ INVALID[/bold red]"
    label = f"[bold]{escape(str(path))}[/bold] {status}"
    if project_type is not None:
        label += f" [cyan]{project_type.description}[/cyan]"
    root = Tree(label)

    issues = result.errors + result.warnings + (result.infos if show_infos else [])
    if not issues:
        root.add("[dim]No issues found[/dim]")
        return root

    for issue in issues:
        color, mark = _STYLE[issue.severity]
        node = root.add(f"[{color}]{mark} {issue.severity.value.upper()}[/{color}] {escape(issue.message)}")
        if issue.has_suggestion():
            node.add(f"[dim]→ {escape(issue.suggestion)}[/dim]")
    return root


def build_summary_table(
    results: Mapping[Path, ValidationResult],
    types: Mapping[Path, ProjectType] | None = None,
) -> Table:
    table = Table(title="Validation summary")
    table.add_column("POM")
    if types is not None:
        table.add_column("Type", style="cyan")
    table.add_column("Status")
    table.add_column("Errors", justify="right", style="red")
    table.add_column("Warnings", justify="right", style="yellow")
    table.add_column("Infos", justify="right", style="blue")
    for path, result in results.items():
        status = "[green]valid[/green]" if result.is_valid else "[red]invalid[/red]"
        cells = [escape(str(path))]
        if types is not None:
            kind = types.get(path)
            cells.append(kind.description if kind else "")
        cells += [status, str(len(result.errors)), str(len(result.warnings)), str(len(result.infos))]
        table.add_row(*cells)
    return table


def render_results(
    console: Console,
    results: Mapping[Path, ValidationResult],
    *,
    summary_only: bool = False,
    quiet: bool = False,
    types: Mapping[Path, ProjectType] | None = None,
) -> None:
    """Print results to the console.

    Quiet mode prints only POMs with errors and hides infos; summary-only mode
    prints just the summary. With `types`, the detected project structure is
    listed first and each POM is labelled with its type.
    """
    if types and not quiet:
        console.print("[dim]Project structure detected:[/dim]")
        for kind, count in Counter(types.values()).items():
            suffix = f" ({count})" if count > 1 else ""
            console.print(f"  [cyan]{kind.description}{suffix}[/cyan]")

    types = types or {}
    if not summary_only:
        for path, result in results.items():
            if quiet and result.is_valid:
                continue
            console.print(
                build_result_tree(path, result, show_infos=not quiet, project_type=types.get(path))
            )

    if len(results) > 1 or summary_only:
        console.print(build_summary_table(results, types or None))

    summary = summarize(results)
    if quiet and not summary.invalid_count:
        return
    console.print(
        f"[bold]{len(results)}[/bold] POM(s): "
        f"[green]{summary.valid_count} valid[/green], [red]{summary.invalid_count} invalid[/red] "
        f"([red]{summary.total_errors} errors[/red], "
        f"[yellow]{summary.total_warnings} warnings[/yellow], "
        f"[blue]{summary.total_infos} infos[/blue])"
    )
