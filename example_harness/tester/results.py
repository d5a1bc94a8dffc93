"""Example test results collection, aggregation, and reporting.

Provides Pydantic v2 models for the outcome of a single example run and the
ordered summary of a whole ``examples`` invocation.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field

from ..catalog.models import Example


# ---------------------------------------------------------------------------
# Per-example result
# ---------------------------------------------------------------------------

class ExampleResult(BaseModel):
    """Outcome of generating and testing one example."""

    example: Example
    error: Optional[str] = Field(default=None, description="None on success, else what failed")
    duration_seconds: float = Field(default=0.0, ge=0.0)

    @computed_field  # type: ignore[misc]
    @property
    def passed(self) -> bool:
        """True when every non-skipped phase succeeded."""
        return self.error is None


# ---------------------------------------------------------------------------
# Run summary
# ---------------------------------------------------------------------------

class ExampleRunSummary(BaseModel):
    """Results of an ``examples`` run, in the order the examples were tested."""

    results: list[ExampleResult] = Field(default_factory=list)
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="ISO-8601 timestamp of when the run started",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Run options (filter, target path, skip flags)",
    )

    @computed_field  # type: ignore[misc]
    @property
    def all_passed(self) -> bool:
        """True when no example failed (also for an empty run)."""
        return all(result.passed for result in self.results)

    @computed_field  # type: ignore[misc]
    @property
    def failed_count(self) -> int:
        return sum(1 for result in self.results if not result.passed)

    @property
    def exit_code(self) -> int:
        """Process exit code: 1 if any example failed, 0 otherwise."""
        return 0 if self.all_passed else 1

    # -- Serialisation helpers -----------------------------------------------

    def to_json(self, indent: int = 2) -> str:
        """Serialise the full results to a JSON string."""
        return self.model_dump_json(indent=indent)

    def save(self, path: Path) -> None:
        """Persist results to a JSON file, creating parent directories as needed."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")
