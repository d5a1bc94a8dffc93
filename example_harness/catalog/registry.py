"""Example catalog: discovery, instantiation and instruction rendering.

The harness only talks to a catalog through the :class:`ExampleCatalog`
protocol.  :class:`DirectoryCatalog` implements it on top of a directory of
example templates::

    <catalog>/
      <language>/
        INSTRUCTIONS            optional language-wide instructions template
        <example>/
          metadata.json
          ...template files...

``metadata.json`` fields (all optional)::

    {
      "description": "Minimal HTTP component",
      "instructions": "INSTRUCTIONS",
      "app_common_group": "default",
      "app_component_group": "default"
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import CatalogError
from .models import (
    ComponentName,
    ComposableAppExample,
    Example,
    ExampleParameters,
    PackageName,
    TargetExistsResolveMode,
)
from .templates import TemplateRenderer

METADATA_FILE = "metadata.json"
INSTRUCTIONS_FILE = "INSTRUCTIONS"
COMPONENTS_DIR = "components"


class ExampleCatalog(Protocol):
    """Operations the harness needs from an example catalog."""

    def standalone_examples(self) -> list[Example]: ...

    def composable_app_examples(self) -> dict[str, dict[str, ComposableAppExample]]: ...

    def instantiate(
        self,
        example: Example,
        parameters: ExampleParameters,
        mode: TargetExistsResolveMode,
    ) -> list[Path]: ...

    def render_instructions(self, example: Example, parameters: ExampleParameters) -> str: ...

    def add_component_by_example(
        self,
        common: Optional[Example],
        component: Example,
        target_path: Path,
        package_name: PackageName,
    ) -> list[Path]: ...


class ExampleMetadata(BaseModel):
    """Contents of an example's ``metadata.json``."""

    model_config = ConfigDict(extra="ignore")

    description: str = Field(default="")
    instructions: Optional[str] = Field(default=None)
    app_common_group: Optional[str] = Field(default=None, min_length=1)
    app_component_group: Optional[str] = Field(default=None, min_length=1)


# ---------------------------------------------------------------------------
# DirectoryCatalog
# ---------------------------------------------------------------------------


class DirectoryCatalog:
    """Example catalog backed by a directory of templates.

    Examples are discovered lazily on first access and cached; discovery
    order is sorted by language then example directory name.
    """

    def __init__(self, root: str | Path, renderer: TemplateRenderer | None = None) -> None:
        self.root = Path(root)
        self.renderer = renderer or TemplateRenderer()
        self._examples: list[Example] | None = None

    # -- Discovery -----------------------------------------------------------

    def all_examples(self) -> list[Example]:
        """Every example in the catalog, standalone and composable."""
        if self._examples is None:
            self._examples = self._discover()
        return list(self._examples)

    def standalone_examples(self) -> list[Example]:
        return [example for example in self.all_examples() if example.is_standalone]

    def composable_app_examples(self) -> dict[str, dict[str, ComposableAppExample]]:
        """Composable app templates grouped by language, then group name."""
        apps: dict[str, dict[str, ComposableAppExample]] = {}
        for example in self.all_examples():
            if example.is_standalone:
                continue
            group_name = example.app_common_group or example.app_component_group
            groups = apps.setdefault(example.language, {})
            group = groups.setdefault(group_name, ComposableAppExample())
            if example.app_common_group is not None:
                if group.common is not None:
                    raise CatalogError(
                        f"Group '{group_name}' for '{example.language}' has more than one "
                        f"common template: {group.common.name}, {example.name}"
                    )
                group.common = example
            else:
                group.components.append(example)
        return apps

    def _discover(self) -> list[Example]:
        if not self.root.is_dir():
            raise CatalogError(f"Example catalog not found: {self.root}")

        examples: list[Example] = []
        for language_dir in sorted(p for p in self.root.iterdir() if p.is_dir()):
            for example_dir in sorted(p for p in language_dir.iterdir() if p.is_dir()):
                metadata_path = example_dir / METADATA_FILE
                if metadata_path.is_file():
                    examples.append(self._load_example(language_dir.name, example_dir, metadata_path))
        return examples

    @staticmethod
    def _load_example(language: str, example_dir: Path, metadata_path: Path) -> Example:
        try:
            raw = json.loads(metadata_path.read_text(encoding="utf-8"))
            metadata = ExampleMetadata.model_validate(raw)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
            raise CatalogError(f"Invalid example metadata {metadata_path}: {exc}") from exc

        if metadata.app_common_group and metadata.app_component_group:
            raise CatalogError(
                f"Example {example_dir.name} cannot be both a common and a component template"
            )

        return Example(
            name=example_dir.name,
            language=language,
            description=metadata.description,
            template_dir=example_dir,
            instructions_file=metadata.instructions,
            app_common_group=metadata.app_common_group,
            app_component_group=metadata.app_component_group,
        )

    # -- Instantiation -------------------------------------------------------

    def instantiate(
        self,
        example: Example,
        parameters: ExampleParameters,
        mode: TargetExistsResolveMode,
    ) -> list[Path]:
        """Render *example* into ``parameters.target_path``.

        Returns:
            The written file paths.

        Raises:
            InstantiationError: If the target conflicts with *mode* or a
                template cannot be rendered.
        """
        return self.renderer.render_tree(
            example.template_dir,
            parameters.target_path,
            parameters.template_context(example),
            mode=mode,
            exclude=self._excluded_files(example),
        )

    def render_instructions(self, example: Example, parameters: ExampleParameters) -> str:
        """Render the example's setup instructions.

        Uses the example's own instructions file when its metadata names one
        or an ``INSTRUCTIONS`` file sits next to it, otherwise the language
        level ``INSTRUCTIONS``.  Returns ``""`` when neither exists.
        """
        candidates = [
            example.template_dir / (example.instructions_file or INSTRUCTIONS_FILE),
            example.template_dir.parent / INSTRUCTIONS_FILE,
        ]
        for path in candidates:
            if path.is_file():
                return self.renderer.render_file(path, parameters.template_context(example))
        return ""

    def add_component_by_example(
        self,
        common: Optional[Example],
        component: Example,
        target_path: Path,
        package_name: PackageName,
    ) -> list[Path]:
        """Add a component to the composable app at *target_path*.

        The common template is merged into the app root, keeping files that
        already exist.  The component template is rendered into
        ``components/<namespace>-<name>`` and must not exist yet.
        """
        written: list[Path] = []
        if common is not None:
            written.extend(
                self.instantiate(
                    common,
                    _app_parameters(package_name, target_path),
                    TargetExistsResolveMode.MERGE_OR_SKIP,
                )
            )

        component_dir = target_path / COMPONENTS_DIR / package_name.to_directory_name()
        written.extend(
            self.instantiate(
                component,
                _app_parameters(package_name, component_dir),
                TargetExistsResolveMode.FAIL,
            )
        )
        return written

    @staticmethod
    def _excluded_files(example: Example) -> list[str]:
        return [METADATA_FILE, example.instructions_file or INSTRUCTIONS_FILE]


def _app_parameters(package_name: PackageName, target_path: Path) -> ExampleParameters:
    return ExampleParameters(
        component_name=ComponentName(str(package_name)),
        package_name=package_name,
        target_path=target_path,
    )
