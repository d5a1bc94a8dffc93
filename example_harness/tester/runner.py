"""Example test execution orchestrator.

For every selected example:

- **Instantiate** -- delete any previous component directory, then render the
  example into a fresh one.
- **Instructions** -- render the example's setup instructions and run every
  line indented by two spaces as a shell command inside the component
  directory.  Other lines are only printed.

Per-example failures are recorded as strings on :class:`ExampleResult` and
never stop the run.  Results are collected into :class:`ExampleRunSummary`.
"""

from __future__ import annotations

import re
import shutil
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from rich.markup import escape

from ..catalog.models import (
    ComponentName,
    Example,
    ExampleParameters,
    PackageName,
    TargetExistsResolveMode,
)
from ..catalog.registry import ExampleCatalog
from ..config import HarnessConfig
from ..errors import CommandError, InstantiationError, InvalidFilterError
from ..utils import (
    console,
    format_duration,
    print_error,
    print_field,
    print_header,
    print_info,
    print_rule,
    print_success,
    print_warning,
)
from .results import ExampleResult, ExampleRunSummary

COMMAND_INDENT = "  "


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


def compile_filter(pattern: Optional[str]) -> Optional[re.Pattern[str]]:
    """Compile the ``--filter`` pattern.

    Raises:
        InvalidFilterError: If *pattern* is not a valid regular expression.
    """
    if pattern is None:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidFilterError(f"failed to compile regex '{pattern}': {exc}") from exc


def select_examples(
    examples: Iterable[Example], name_filter: Optional[re.Pattern[str]]
) -> list[Example]:
    """Return the examples whose name contains a match for *name_filter*, in order."""
    if name_filter is None:
        return list(examples)
    return [example for example in examples if name_filter.search(example.name)]


# ---------------------------------------------------------------------------
# Instructions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InstructionLine:
    """One line of rendered instructions."""

    text: str
    executable: bool

    @property
    def command(self) -> str:
        """The shell command of an executable line."""
        return self.text.strip()


def parse_instructions(text: str) -> list[InstructionLine]:
    """Split instructions into lines; two-space indented lines are commands."""
    return [
        InstructionLine(text=line, executable=line.startswith(COMMAND_INDENT))
        for line in text.splitlines()
    ]


def run_command(command: str, args: list[str], cwd: Path) -> None:
    """Run *command* with *args* in *cwd*, inheriting stdout and stderr.

    Raises:
        CommandError: If the process cannot be started, exits non-zero, or is
            killed by a signal.
    """
    command_formatted = f"{command} {' '.join(args)}"
    console.print(
        f"Running [blue]{escape(command_formatted)}[/blue] in [blue]{escape(str(cwd))}[/blue]"
    )

    try:
        completed = subprocess.run([command, *args], cwd=cwd, check=False)
    except OSError as exc:
        raise CommandError(f"{command_formatted} failed: {exc}", command=command_formatted) from exc

    code = completed.returncode
    if code == 0:
        return
    if code < 0:
        raise CommandError(f"{command_formatted} failed: terminated", command=command_formatted)
    raise CommandError(
        f"{command_formatted} failed: non-zero exit code: {code}",
        command=command_formatted,
    )


# ---------------------------------------------------------------------------
# ExampleTestRunner
# ---------------------------------------------------------------------------


class ExampleTestRunner:
    """Generates and tests standalone examples one after another.

    Parameters
    ----------
    catalog:
        Source of examples, instantiation and instruction rendering.
    config:
        Harness configuration; ``examples_target_path`` is where component
        directories are created.
    skip_instantiate:
        Do not delete or instantiate component directories.
    skip_instructions:
        Do not render or run instructions.
    """

    def __init__(
        self,
        catalog: ExampleCatalog,
        config: HarnessConfig | None = None,
        *,
        skip_instantiate: bool = False,
        skip_instructions: bool = False,
    ) -> None:
        self.catalog = catalog
        self.config = config or HarnessConfig()
        self.skip_instantiate = skip_instantiate
        self.skip_instructions = skip_instructions

    # -- Public API ----------------------------------------------------------

    def run(self, name_filter: Optional[re.Pattern[str]] = None) -> ExampleRunSummary:
        """Test every standalone example matching *name_filter* and report."""
        examples = select_examples(self.catalog.standalone_examples(), name_filter)
        if not examples:
            print_warning("No examples selected")
        summary = ExampleRunSummary(
            metadata={
                "filter": name_filter.pattern if name_filter else None,
                "target_path": str(self.config.examples_target_path),
                "skip_instantiate": self.skip_instantiate,
                "skip_instructions": self.skip_instructions,
            }
        )

        for example in examples:
            start = time.monotonic()
            error = self.test_example(example)
            if error is not None:
                print_error(error)
            summary.results.append(
                ExampleResult(
                    example=example,
                    error=error,
                    duration_seconds=round(time.monotonic() - start, 3),
                )
            )

        self.print_report(summary)
        return summary

    def test_example(self, example: Example) -> Optional[str]:
        """Instantiate *example* and run its instructions.

        Returns:
            ``None`` on success, otherwise a description of what failed.
        """
        console.print()
        print_header("Generating and testing:", example.name)

        target_path = self.config.examples_target_path
        component_name = ComponentName(example.name + self.config.component_suffix)
        package_name = PackageName.from_string(self.config.package_name)
        if package_name is None:
            return "failed to create package name"
        component_path = self.config.component_path(example.name)

        print_field("Target path", target_path)
        print_field("Component name", component_name)
        print_field("Package name", package_name)
        print_field("Component path", component_path)

        parameters = ExampleParameters(
            component_name=component_name,
            package_name=package_name,
            target_path=component_path,
        )

        if self.skip_instantiate:
            console.print("Skipping instantiate")
        else:
            error = self._instantiate(example, parameters)
            if error is not None:
                return error

        if self.skip_instructions:
            console.print("Skipping instructions\n")
        else:
            console.print("Executing instructions\n")
            try:
                instructions = self.catalog.render_instructions(example, parameters)
            except (InstantiationError, OSError) as exc:
                return f"render instructions failed: {exc}"
            try:
                self._run_instructions(instructions, component_path)
            except CommandError as exc:
                return str(exc)
            console.print("Successfully executed instructions\n")

        return None

    # -- Phases --------------------------------------------------------------

    def _instantiate(self, example: Example, parameters: ExampleParameters) -> Optional[str]:
        console.print("Instantiating")
        component_path = parameters.target_path

        if component_path.exists():
            console.print(f"Deleting [blue]{escape(str(component_path))}[/blue]")
            try:
                shutil.rmtree(component_path)
            except OSError as exc:
                return f"remove dir all failed: {exc}"

        try:
            self.catalog.instantiate(example, parameters, TargetExistsResolveMode.FAIL)
        except (InstantiationError, OSError) as exc:
            return f"instantiate failed: {exc}"

        console.print("Successfully instantiated the example")
        return None

    def _run_instructions(self, instructions: str, component_path: Path) -> None:
        for line in parse_instructions(instructions):
            if line.executable:
                run_command(self.config.shell, ["-c", line.command], component_path)
            else:
                print_info(line.text)

    # -- Reporting -----------------------------------------------------------

    @staticmethod
    def print_report(summary: ExampleRunSummary) -> None:
        """Print one line per example: bold name, then OK or the failure."""
        print_rule()
        for result in summary.results:
            name = f"[bold]{escape(result.example.name)}[/bold]"
            if result.passed:
                console.print(f"{name}: [bright_green]OK[/bright_green]")
            else:
                console.print(
                    f"{name}: [bright_red]Failed[/bright_red]\n[red]{escape(result.error or '')}[/red]"
                )
        console.print()

        if summary.results and summary.all_passed:
            print_success(f"All {len(summary.results)} examples passed")
        elif summary.results:
            print_error(f"{summary.failed_count} of {len(summary.results)} examples failed")

        if summary.results:
            total = sum(result.duration_seconds for result in summary.results)
            console.print(f"[dim]Total time: {format_duration(total)}[/dim]")
