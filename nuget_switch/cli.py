"""Command-line interface for NuGet Switch."""

import functools
import os
import sys
from contextlib import contextmanager
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from nuget_switch import __version__
from nuget_switch.config import Settings, configure_settings, get_settings
from nuget_switch.core.exceptions import NuGetSwitchError, OperationError
from nuget_switch.core.session import WorkspaceSession
from nuget_switch.git.operations import GitOperations
from nuget_switch.utils.json_utils import JsonHandler
from nuget_switch.utils.logging import setup_logging

console = Console(soft_wrap=True)


class ConsoleSelectionProvider:
    """Asks for solution and library paths on the terminal."""

    def choose_solution(self) -> str | None:
        candidates = sorted(Path.cwd().glob("*.sln"))
        default = str(candidates[0]) if len(candidates) == 1 else None
        answer = click.prompt("Solution file", default=default, show_default=bool(default))
        return answer.strip() or None

    def choose_libraries(self, start_folder: Path) -> list[str] | None:
        answer = click.prompt(
            f"Library paths, separated by ';' (relative to {start_folder})",
            default="",
            show_default=False,
        )
        paths = [p.strip() for p in answer.split(";") if p.strip()]
        return [os.path.normpath(os.path.join(start_folder, p)) for p in paths] or None


def print_status(messages: list[str]) -> None:
    """Print status lines returned by an operation."""
    for message in messages:
        console.print(message.expandtabs(4), highlight=False, markup=False)


def handle_errors(func):
    """Print status lines and the error of a failed command, then exit 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except OperationError as e:
            print_status(e.messages)
            for failure in e.failures:
                console.print(f"[red]{failure}[/red]", highlight=False)
            console.print(f"[red][FAIL][/red] {e.message}", highlight=False)
            sys.exit(1)
        except NuGetSwitchError as e:
            console.print(f"[red][FAIL][/red] {e.message}", highlight=False)
            sys.exit(1)

    return wrapper


@contextmanager
def open_session(solution: str | None):
    """Open a session for a command and save the workspace document on exit."""
    session = WorkspaceSession(
        provider=ConsoleSelectionProvider(),
        settings=get_settings().workspace,
    )
    for message in session.open(solution):
        console.print(f"[dim]{message}[/dim]", highlight=False)
    if not session.is_open:
        sys.exit(0)

    try:
        yield session
    finally:
        for message in session.close():
            console.print(f"[dim]{message}[/dim]", highlight=False)


solution_argument = click.argument(
    "solution",
    required=False,
    type=click.Path(exists=True, dir_okay=False),
)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write a DEBUG log to this file",
)
def main(verbose: bool, log_file: Path | None):
    """Switch NuGet package references to local DLL references and back."""
    settings = Settings.from_env()
    overrides = {}
    if verbose:
        overrides["level"] = "DEBUG"
    if log_file:
        overrides["file"] = log_file
    if overrides:
        settings.logging = settings.logging.model_copy(update=overrides)
    configure_settings(settings)

    setup_logging(
        level=settings.logging.level,
        log_format=settings.logging.format,
        log_file=settings.logging.file,
        rich_console=settings.logging.rich_console,
    )


@main.command()
@solution_argument
@click.option("--json", "as_json", is_flag=True, help="Print packages and selections as JSON")
@handle_errors
def packages(solution: str | None, as_json: bool):
    """
    List the NuGet packages of a solution and the libraries selected for them.

    SOLUTION: Path to the .sln file
    """
    with open_session(solution) as session:
        if as_json:
            data = {
                package_id: session.libraries(package_id)
                for package_id in session.package_ids
            }
            click.echo(JsonHandler.dumps(data, pretty=True))
            return

        table = Table(title="NuGet Packages", show_header=True)
        table.add_column("Package", style="cyan")
        table.add_column("Projects", justify="right")
        table.add_column("Selected libraries", style="white")

        for package_id in session.package_ids:
            used_by = sum(
                1
                for project in session.solution.projects
                if any(p.package_id == package_id for p in project.packages)
            )
            libraries = session.libraries(package_id)
            table.add_row(package_id, str(used_by), "\n".join(libraries) or "-")

        console.print(table)


@main.command()
@solution_argument
@handle_errors
def projects(solution: str | None):
    """
    List the projects of a solution.

    SOLUTION: Path to the .sln file
    """
    with open_session(solution) as session:
        table = Table(title="Projects", show_header=True)
        table.add_column("Project", style="cyan")
        table.add_column("Path")
        table.add_column("Packages", justify="right")

        for project in session.solution.projects:
            table.add_row(project.name, project.path, str(len(project.packages)))

        console.print(table)


@main.command()
@click.argument("package_id")
@click.argument("libraries", nargs=-1, type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option("--solution", "-s", type=click.Path(exists=True, dir_okay=False), help="Path to the .sln file")
@handle_errors
def add(package_id: str, libraries: tuple[str, ...], solution: str | None):
    """
    Select local libraries to use instead of a NuGet package.

    PACKAGE_ID: NuGet package id
    LIBRARIES: Local DLL files (prompted for when omitted)
    """
    with open_session(solution) as session:
        added = session.add_local_references(package_id, list(libraries) or None)
        for path in added:
            console.print(f"[green][OK][/green] {path}", highlight=False)
        if not added:
            console.print("[yellow]No new libraries added[/yellow]")


@main.command()
@click.argument("package_id")
@click.argument("libraries", nargs=-1, required=True)
@click.option("--solution", "-s", type=click.Path(exists=True, dir_okay=False), help="Path to the .sln file")
@handle_errors
def remove(package_id: str, libraries: tuple[str, ...], solution: str | None):
    """
    Remove selected libraries from a package.

    PACKAGE_ID: NuGet package id
    LIBRARIES: Library paths exactly as listed by the packages command
    """
    with open_session(solution) as session:
        session.remove_libraries(package_id, list(libraries))
        console.print(f"[green][OK][/green] Updated selections for {package_id}")


@main.command()
@solution_argument
@handle_errors
def switch(solution: str | None):
    """
    Replace package references with the selected local libraries.

    SOLUTION: Path to the .sln file
    """
    with open_session(solution) as session:
        if not session.can_switch:
            console.print("[yellow]No libraries selected, nothing to switch[/yellow]")
            return

        with console.status("Switching package references..."):
            messages = session.switch()

        print_status(messages)
        console.print(Panel("Switch complete", style="green", expand=False))


@main.command()
@solution_argument
@handle_errors
def clean(solution: str | None):
    """
    Delete the obj folder of every project in the solution.

    SOLUTION: Path to the .sln file
    """
    with open_session(solution) as session:
        with console.status("Deleting obj folders..."):
            messages = session.delete_obj_folders()
        print_status(messages)


@main.command("git-status")
@solution_argument
@handle_errors
def git_status(solution: str | None):
    """
    List project files modified in the solution's Git repository.

    SOLUTION: Path to the .sln file
    """
    with open_session(solution) as session:
        git_ops = GitOperations.discover(session.solution.folder)
        if git_ops is None:
            console.print(f"[yellow]No Git repository found in the solution folder: {session.solution.folder}[/yellow]")
            return

        modified = git_ops.modified_project_files()
        if not modified:
            console.print("[green]No modified project files[/green]")
            return

        console.print(f"[bold]Modified project files ({len(modified)}):[/bold]")
        for path in modified:
            console.print(f"  -{path}", highlight=False)


@main.command("git-revert")
@solution_argument
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@handle_errors
def git_revert(solution: str | None, yes: bool):
    """
    Revert modified project files to HEAD.

    SOLUTION: Path to the .sln file
    """
    with open_session(solution) as session:
        git_ops = GitOperations.discover(session.solution.folder)
        if git_ops is None:
            console.print(f"[yellow]No Git repository found in the solution folder: {session.solution.folder}[/yellow]")
            return

        modified = git_ops.modified_project_files()
        if not modified:
            console.print("[green]No modified project files[/green]")
            return

        if not yes:
            click.confirm(f"Revert {len(modified)} modified project files to HEAD?", abort=True)

        count = git_ops.revert(modified)
        session.reload()
        console.print(f"[green][OK][/green] Reverted {count} modified project files to HEAD.")


if __name__ == "__main__":
    main()
