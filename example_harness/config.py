"""Example harness configuration.

Centralised, typed configuration for both harness modes. All settings use
Pydantic v2 models so they are validated at construction time. The CLI is the
only source of values; nothing is read from the environment or config files.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class HarnessConfig(BaseModel):
    """Global example harness configuration.

    Instances are created once by the CLI entry point and then passed to the
    example runner and the app component loop.
    """

    catalog_dir: Path = Field(default=Path("templates"), description="Root of the example catalog")

    # Examples mode
    examples_target_path: Path = Field(default=Path("examples-test"))
    component_suffix: str = Field(default="-comp", min_length=1)
    package_name: str = Field(
        default="golemx:componentx",
        description="Package identifier every standalone example is instantiated with",
    )
    shell: str = Field(default="bash", min_length=1)

    # App mode
    app_target_path: Path = Field(default=Path("examples"))
    app_subdir: str = Field(default="app-default", min_length=1)
    app_iterations: int = Field(default=4, ge=1, description="Components added per language")
    app_name_prefix: str = Field(default="app:comp-")
    name_alphabet: str = Field(default="abcdefgh", min_length=1)
    name_length: int = Field(default=10, ge=1)

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def app_target_dir(self) -> Path:
        """Directory the composable app components are added to."""
        return self.app_target_path / self.app_subdir

    def component_path(self, example_name: str) -> Path:
        """Directory a standalone example is instantiated into."""
        return self.examples_target_path / f"{example_name}{self.component_suffix}"
