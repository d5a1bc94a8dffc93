"""Composable app component add loop.

For each language's default composable app group, adds a fixed number of
freshly named components to one shared app directory.  Unlike the example
runner there is no per-iteration recovery: the first error aborts the run.
"""

from __future__ import annotations

import random
from pathlib import Path

from rich.markup import escape

from ..catalog.models import DEFAULT_APP_GROUP, ComposableAppExample, PackageName
from ..catalog.registry import ExampleCatalog
from ..config import HarnessConfig
from ..errors import CatalogShapeError, HarnessError
from ..utils import console, print_header, random_identifier


class AppComponentLoop:
    """Adds generated components to the composable app of every language.

    Parameters
    ----------
    catalog:
        Source of composable app examples and the add-component operation.
    config:
        Harness configuration; ``app_target_dir`` is the shared app directory.
    rng:
        Random source for component names.  Defaults to the ``random`` module.
    """

    def __init__(
        self,
        catalog: ExampleCatalog,
        config: HarnessConfig | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self.catalog = catalog
        self.config = config or HarnessConfig()
        self.rng = rng

    @property
    def target_path(self) -> Path:
        return self.config.app_target_dir

    def run(self) -> dict[str, list[PackageName]]:
        """Add components for every language.

        Returns:
            The package names added, per language, in the order they were added.

        Raises:
            CatalogShapeError: If a language has no usable default group.
            HarnessError: If a generated name is not a valid package name.
            OSError / InstantiationError: From the add-component operation.
        """
        added: dict[str, list[PackageName]] = {}

        for language, groups in self.catalog.composable_app_examples().items():
            console.print(f"Testing language [blue]{escape(language)}[/blue]")
            default_group = self._default_group(language, groups)
            component_example = default_group.components[0]

            added[language] = []
            for _ in range(self.config.app_iterations):
                package_name = self.new_package_name()
                print_header("Adding component", f"{package_name} ({language})")
                self.catalog.add_component_by_example(
                    default_group.common,
                    component_example,
                    self.target_path,
                    package_name,
                )
                added[language].append(package_name)

        return added

    def new_package_name(self) -> PackageName:
        """Generate a random component package name, e.g. ``app:comp-hbadgfceah``."""
        identifier = random_identifier(self.config.name_length, self.config.name_alphabet, self.rng)
        component_name = f"{self.config.app_name_prefix}{identifier}"
        package_name = PackageName.from_string(component_name)
        if package_name is None:
            raise HarnessError(f"Generated component name is not a valid package name: {component_name}")
        return package_name

    @staticmethod
    def _default_group(
        language: str, groups: dict[str, ComposableAppExample]
    ) -> ComposableAppExample:
        group = groups.get(DEFAULT_APP_GROUP)
        if group is None:
            raise CatalogShapeError(
                language,
                f"no '{DEFAULT_APP_GROUP}' group (found: {', '.join(sorted(groups)) or 'none'})",
            )
        if len(group.components) != 1:
            raise CatalogShapeError(
                language,
                f"the '{DEFAULT_APP_GROUP}' group must contain exactly one component template, "
                f"found {len(group.components)}",
            )
        return group
