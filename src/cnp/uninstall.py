"""Remove unused dependencies with the project's package manager.

Exactly one mode applies per run:

- ``REPORT``: no action, tell the user which flag to pass.
- ``DRY_RUN``: list what would be removed; never runs a command.
- ``INTERACTIVE``: the user picks the dependencies to remove.
- ``ALL``: a single yes/no confirmation covers every unused dependency.

After at least one successful removal ``node_modules`` is deleted and the
package manager's install command is run. A failed removal or reinstall is
reported but never raised.
"""

from __future__ import annotations

import enum
import re
import shutil
import subprocess
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path

import structlog
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.prompt import Confirm, Prompt

from .errors import UnsupportedPackageManagerError
from .package_manager import detect_package_manager, install_command, remove_command

log = structlog.get_logger("cnp.uninstall")

Runner = Callable[..., "subprocess.CompletedProcess[str]"]
Selector = Callable[[list[str], str], list[str]]
Confirmer = Callable[[list[str]], bool]

_SELECTION_SPLIT_RE = re.compile(r"[,\s]+")


class UninstallMode(enum.Enum):
    REPORT = "report"
    DRY_RUN = "dry-run"
    INTERACTIVE = "interactive"
    ALL = "all"

    @classmethod
    def from_flags(cls, *, dry_run: bool = False, interactive: bool = False, all_: bool = False) -> UninstallMode:
        if dry_run:
            return cls.DRY_RUN
        if interactive:
            return cls.INTERACTIVE
        if all_:
            return cls.ALL
        return cls.REPORT


@dataclass(slots=True)
class UninstallOutcome:
    """What happened to the unused dependencies in one run."""

    mode: UninstallMode
    selected: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    reinstalled: bool | None = None


def parse_selection(answer: str, candidates: list[str]) -> list[str]:
    """Turn a selection answer into dependency names.

    Accepts ``all``, ``none`` (or empty), and 1-based numbers or ranges
    separated by commas or spaces, e.g. ``1, 3-4``.

    Raises:
        ValueError: on an unknown token or an out-of-range number.
    """
    text = answer.strip().lower()
    if text in {"", "none", "n"}:
        return []
    if text in {"all", "a", "*"}:
        return list(candidates)

    picked: list[str] = []
    for token in _SELECTION_SPLIT_RE.split(text):
        if not token:
            continue
        start_text, _, end_text = token.partition("-")
        if not start_text.isdigit() or (end_text and not end_text.isdigit()):
            raise ValueError(f"Invalid selection: {token!r}")
        start = int(start_text)
        end = int(end_text) if end_text else start
        if start < 1 or end > len(candidates) or start > end:
            raise ValueError(f"Selection out of range: {token!r}")
        for index in range(start, end + 1):
            name = candidates[index - 1]
            if name not in picked:
                picked.append(name)
    return picked


def select_dependencies(candidates: list[str], default: str = "none", *, console: Console) -> list[str]:
    """Prompt the user to pick dependencies to delete; ``default`` is none or all."""
    console.print("\n[bold cyan]Select dependencies to delete:[/]")
    for index, name in enumerate(candidates, start=1):
        console.print(f"  [cyan]{index:>2}[/]) {escape(name)}")

    while True:
        answer = Prompt.ask(
            "Numbers or ranges separated by commas, 'all' or 'none'",
            console=console,
            default=default,
        )
        try:
            return parse_selection(answer, candidates)
        except ValueError as exc:
            console.print(f"[red]{escape(str(exc))}[/]")


def confirm_all(candidates: list[str], *, console: Console) -> bool:
    return Confirm.ask(
        f"[yellow]Confirm deletion of all {len(candidates)} unused dependencies?[/]",
        console=console,
        default=False,
    )


def uninstall_dependency(root: Path, dependency: str, manager: str, runner: Runner = subprocess.run) -> bool:
    """Run the package manager's remove command; return True on success."""
    try:
        cmd = remove_command(manager, dependency)
    except UnsupportedPackageManagerError as exc:
        log.error("uninstall.unsupported_manager", dependency=dependency, error=str(exc))
        return False

    try:
        completed = runner(cmd, cwd=root, capture_output=True, text=True, check=False)
    except OSError as exc:
        log.warning("uninstall.failed", dependency=dependency, command=cmd, error=str(exc))
        return False

    if completed.returncode != 0:
        log.warning(
            "uninstall.failed",
            dependency=dependency,
            command=cmd,
            returncode=completed.returncode,
            stderr=(completed.stderr or "").strip()[-500:],
        )
        return False
    return True


def reinstall_modules(root: Path, manager: str, console: Console, runner: Runner = subprocess.run) -> bool:
    """Delete ``node_modules`` and reinstall; return True on success."""
    node_modules = root / "node_modules"
    with console.status("Reinstalling node_modules..."):
        if node_modules.exists():
            try:
                shutil.rmtree(node_modules)
            except OSError as exc:
                console.print(f"[red]Failed to remove node_modules: {escape(str(exc))}[/]")
                return False

        cmd = install_command(manager)
        try:
            completed = runner(cmd, cwd=root, capture_output=True, text=True, check=False)
        except OSError as exc:
            log.warning("reinstall.failed", command=cmd, error=str(exc))
            completed = None

    if completed is None or completed.returncode != 0:
        console.print("[red]Failed to reinstall dependencies[/]")
        return False

    console.print("[green]Reinstallation successful![/]")
    return True


def _print_dry_run(candidates: Iterable[str], console: Console) -> None:
    console.print("\n[bold yellow]Dry-run mode: No changes will be made.[/]")
    console.print("[yellow]Would delete:[/]")
    for name in candidates:
        console.print(f"- [yellow]{escape(name)}[/]")


def handle_unused_dependencies(
    root: Path,
    unused: Iterable[str],
    mode: UninstallMode,
    console: Console,
    *,
    manager: str | None = None,
    runner: Runner = subprocess.run,
    select: Selector | None = None,
    confirm: Confirmer | None = None,
    interactive_default: str = "none",
) -> UninstallOutcome:
    """Act on ``unused`` according to ``mode`` and return what happened."""
    candidates = sorted(set(unused))
    outcome = UninstallOutcome(mode=mode)
    if not candidates:
        return outcome

    if mode is UninstallMode.REPORT:
        console.print(
            "\n[dim]Pass --dry-run to preview, -i/--interactive to choose, "
            "or -a/--all to remove every unused dependency.[/]"
        )
        return outcome

    if mode is UninstallMode.DRY_RUN:
        _print_dry_run(candidates, console)
        outcome.selected = candidates
        return outcome

    if mode is UninstallMode.INTERACTIVE:
        select = select or partial(select_dependencies, console=console)
        to_delete = [name for name in select(candidates, interactive_default) if name in candidates]
    else:
        confirm = confirm or partial(confirm_all, console=console)
        to_delete = candidates if confirm(candidates) else []

    outcome.selected = to_delete
    if not to_delete:
        console.print("\n[bold yellow]No dependencies selected for deletion.[/]")
        return outcome

    manager = manager or detect_package_manager(root)
    progress = Progress(
        SpinnerColumn(style="green"),
        BarColumn(complete_style="cyan", finished_style="blue"),
        MofNCompleteColumn(),
        TextColumn("{task.description}"),
        console=console,
    )
    with progress:
        task = progress.add_task("Deleting dependencies...", total=len(to_delete))
        for name in to_delete:
            if uninstall_dependency(root, name, manager, runner):
                outcome.removed.append(name)
                progress.update(task, advance=1, description=f"[green]Deleted: {escape(name)}[/]")
            else:
                outcome.failed.append(name)
                progress.update(task, advance=1, description=f"[red]Failed to delete: {escape(name)}[/]")
        progress.update(task, description="[green]Deletion complete![/]")

    for name in outcome.failed:
        console.print(f"[red]Failed to delete: {escape(name)}[/]")

    if outcome.removed:
        outcome.reinstalled = reinstall_modules(root, manager, console, runner)
    return outcome
