"""Pydantic models describing examples and their instantiation parameters."""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_APP_GROUP = "default"

_PACKAGE_PART = re.compile(r"^[a-z][a-z0-9-]*$")


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------


class ComponentName(BaseModel):
    """Name of the component an example is instantiated as."""

    model_config = ConfigDict(frozen=True)

    value: str

    def __init__(self, value: str, **data: Any) -> None:
        super().__init__(value=value, **data)

    def as_string(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


class PackageName(BaseModel):
    """A ``namespace:name`` package identifier."""

    model_config = ConfigDict(frozen=True)

    namespace: str = Field(..., pattern=_PACKAGE_PART.pattern)
    name: str = Field(..., pattern=_PACKAGE_PART.pattern)

    @classmethod
    def from_string(cls, text: str) -> Optional["PackageName"]:
        """Parse ``namespace:name``; returns ``None`` when *text* is not valid.

        Both parts must be lowercase kebab-case words starting with a letter.
        """
        parts = text.split(":")
        if len(parts) != 2:
            return None
        namespace, name = parts
        if not _PACKAGE_PART.match(namespace) or not _PACKAGE_PART.match(name):
            return None
        return cls(namespace=namespace, name=name)

    def to_directory_name(self) -> str:
        """Filesystem friendly form, ``namespace-name``."""
        return f"{self.namespace}-{self.name}"

    def __str__(self) -> str:
        return f"{self.namespace}:{self.name}"


# ---------------------------------------------------------------------------
# Examples
# ---------------------------------------------------------------------------


class TargetExistsResolveMode(str, Enum):
    """What instantiation does when the target already exists."""

    FAIL = "fail"
    MERGE_OR_SKIP = "merge_or_skip"
    MERGE_OR_FAIL = "merge_or_fail"


class Example(BaseModel):
    """An instantiable example template discovered in the catalog."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Display name, the template directory name")
    language: str = Field(..., min_length=1)
    description: str = Field(default="")
    template_dir: Path
    instructions_file: Optional[str] = Field(
        default=None,
        description="Instructions template relative to template_dir",
    )
    app_common_group: Optional[str] = None
    app_component_group: Optional[str] = None

    @property
    def is_standalone(self) -> bool:
        """True when the example belongs to no composable app group."""
        return self.app_common_group is None and self.app_component_group is None

    def __str__(self) -> str:
        return self.name


class ComposableAppExample(BaseModel):
    """Templates making up one composable app group."""

    common: Optional[Example] = None
    components: list[Example] = Field(default_factory=list)


class ExampleParameters(BaseModel):
    """Values an example is instantiated and its instructions rendered with."""

    model_config = ConfigDict(frozen=True)

    component_name: ComponentName
    package_name: PackageName
    target_path: Path

    def template_context(self, example: Example) -> dict[str, Any]:
        """Return the variables exposed to the example's templates."""
        return {
            "component_name": self.component_name.as_string(),
            "package_name": str(self.package_name),
            "package_namespace": self.package_name.namespace,
            "package_short_name": self.package_name.name,
            "example_name": example.name,
            "language": example.language,
        }
