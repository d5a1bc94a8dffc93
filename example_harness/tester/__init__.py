"""Example harness -- Tester module.

Provides the example test runner, the composable app component loop and the
result models they report with.

Public API
----------
.. autoclass:: ExampleTestRunner
.. autoclass:: AppComponentLoop
.. autoclass:: ExampleResult
.. autoclass:: ExampleRunSummary
"""

from .app_loop import AppComponentLoop
from .results import ExampleResult, ExampleRunSummary
from .runner import (
    ExampleTestRunner,
    InstructionLine,
    compile_filter,
    parse_instructions,
    run_command,
    select_examples,
)

__all__ = [
    # Runner
    "ExampleTestRunner",
    "InstructionLine",
    "compile_filter",
    "parse_instructions",
    "run_command",
    "select_examples",
    # App loop
    "AppComponentLoop",
    # Results
    "ExampleResult",
    "ExampleRunSummary",
]
