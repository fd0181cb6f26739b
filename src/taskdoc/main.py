"""CLI entrypoint for taskdoc."""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

import rich_click as click

from taskdoc import __version__
from taskdoc.config import ConfigurationError
from taskdoc.controllers import CheckCommand, HelpCliController, ShowHelpCommand

click.rich_click.USE_MARKDOWN = True
HELP_CONTROLLER = HelpCliController()


def _source_options(command: Callable) -> Callable:
    options = [
        click.option(
            "--tasks-dir",
            type=click.Path(path_type=Path, file_okay=False),
            default=None,
            help="Directory with task definition files. Defaults to TASKDOC_TASKS_DIR.",
        ),
        click.option(
            "--namespace",
            default=None,
            help="Namespace prefixed to task class identifiers. Defaults to TASKDOC_NAMESPACE.",
        ),
        click.option(
            "--annotations-adapter",
            default=None,
            help="Annotations storage adapter: memory or stream.",
        ),
        click.option(
            "--annotations-dir",
            type=click.Path(path_type=Path, file_okay=False),
            default=None,
            help="Cache directory used by the stream adapter.",
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command


@click.group()
@click.version_option(version=__version__, prog_name="taskdoc")
def taskdoc() -> None:
    """Annotation-driven help for task consoles."""


@taskdoc.command("show")
@click.argument("task", required=False)
@_source_options
@click.option("--app-name", default=None, help="Application name shown in the banner.")
@click.option("--app-version", default=None, help="Application version shown in the banner.")
def show(  # noqa: PLR0913
    task: str | None,
    tasks_dir: Path | None,
    namespace: str | None,
    annotations_adapter: str | None,
    annotations_dir: Path | None,
    app_name: str | None,
    app_version: str | None,
) -> None:
    """Print the task list, or the actions and parameters of TASK."""

    with _configuration_errors():
        lines = HELP_CONTROLLER.show(
            ShowHelpCommand(
                tasks_dir=tasks_dir,
                namespace=namespace,
                annotations_adapter=annotations_adapter,
                annotations_dir=annotations_dir,
                app_name=app_name,
                app_version=app_version,
                task=task,
            ),
        )
    _emit_lines(lines)


@taskdoc.command("check")
@_source_options
@click.option(
    "--strict/--no-strict",
    default=False,
    show_default=True,
    help="Exit with an error when any task or action lacks documentation.",
)
def check(
    tasks_dir: Path | None,
    namespace: str | None,
    annotations_adapter: str | None,
    annotations_dir: Path | None,
    strict: bool,
) -> None:
    """Report tasks and actions without description annotations."""

    with _configuration_errors():
        result = HELP_CONTROLLER.check(
            CheckCommand(
                tasks_dir=tasks_dir,
                namespace=namespace,
                annotations_adapter=annotations_adapter,
                annotations_dir=annotations_dir,
                strict=strict,
            ),
        )
    _emit_lines(result.lines)
    if not result.success:
        raise click.ClickException("Task documentation is incomplete.")


@contextmanager
def _configuration_errors() -> Iterator[None]:
    try:
        yield
    except ConfigurationError as error:
        raise click.ClickException(str(error)) from error


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    taskdoc()
