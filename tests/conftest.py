"""Shared pytest fixtures for the example harness test suite.

Provides reusable fixtures for:
- An on-disk example catalog with standalone and composable app templates
- An in-memory catalog double that records every call
- Harness configuration pointing at temporary directories
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import pytest

from example_harness.catalog.models import (
    ComposableAppExample,
    Example,
    ExampleParameters,
    PackageName,
    TargetExistsResolveMode,
)
from example_harness.config import HarnessConfig


# ---------------------------------------------------------------------------
# On-disk catalog
# ---------------------------------------------------------------------------

def write_example(
    catalog_root: Path,
    language: str,
    name: str,
    files: dict[str, str],
    metadata: Optional[dict[str, Any]] = None,
) -> Path:
    """Create ``<catalog_root>/<language>/<name>`` with a metadata file and *files*."""
    example_dir = catalog_root / language / name
    example_dir.mkdir(parents=True, exist_ok=True)
    (example_dir / "metadata.json").write_text(json.dumps(metadata or {}), encoding="utf-8")
    for relative, content in files.items():
        path = example_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return example_dir


@pytest.fixture
def catalog_dir(tmp_path: Path) -> Path:
    """A catalog with two languages, standalone examples and a default app group.

    Layout::

        python/INSTRUCTIONS
        python/minimal/            standalone, uses the language INSTRUCTIONS
        python/failing/            standalone, own STEPS file that exits 3
        python/app-common/         common template of the default group
        python/app-component/      component template of the default group
        rust/rust-minimal/         standalone, no instructions at all
        rust/app-component/        component template of the default group
    """
    root = tmp_path / "catalog"
    root.mkdir()

    (root / "python").mkdir()
    (root / "python" / "INSTRUCTIONS").write_text(
        "Build {{ component_name }}\n"
        "  echo building {{ package_name }}\n"
        "  touch built.txt\n",
        encoding="utf-8",
    )
    write_example(
        root,
        "python",
        "minimal",
        {
            "README.md.j2": "# {{ component_name }}\n\nPackage {{ package_name }}\n",
            "src/{{ package_short_name }}/__init__.py": "VERSION = '{{ not rendered }}'\n",
            "src/{{ package_short_name }}/main.py.j2": "NAME = '{{ component_name | snake_case }}'\n",
        },
        {"description": "Smallest possible component"},
    )
    write_example(
        root,
        "python",
        "failing",
        {
            "STEPS": "Run the checks\n  exit 3\n  touch never.txt\n",
            "main.py": "print('hello')\n",
        },
        {"instructions": "STEPS"},
    )
    write_example(
        root,
        "python",
        "app-common",
        {"app.yaml.j2": "language: {{ language }}\n"},
        {"app_common_group": "default"},
    )
    write_example(
        root,
        "python",
        "app-component",
        {"component.txt.j2": "{{ package_name }}\n"},
        {"app_component_group": "default"},
    )

    write_example(root, "rust", "rust-minimal", {"Cargo.toml.j2": 'name = "{{ component_name }}"\n'})
    write_example(
        root,
        "rust",
        "app-component",
        {"lib.rs.j2": "// {{ package_name }}\n"},
        {"app_component_group": "default"},
    )
    return root


@pytest.fixture
def harness_config(tmp_path: Path, catalog_dir: Path) -> HarnessConfig:
    """Configuration whose target paths live under ``tmp_path``."""
    return HarnessConfig(
        catalog_dir=catalog_dir,
        examples_target_path=tmp_path / "examples-test",
        app_target_path=tmp_path / "examples",
    )


# ---------------------------------------------------------------------------
# In-memory catalog
# ---------------------------------------------------------------------------

def make_example(name: str, language: str = "python", **kwargs: Any) -> Example:
    return Example(name=name, language=language, template_dir=Path("/nonexistent") / name, **kwargs)


class FakeCatalog:
    """Catalog double: instantiation creates the directory, calls are recorded."""

    def __init__(
        self,
        examples: list[Example],
        instructions: Optional[dict[str, str]] = None,
        apps: Optional[dict[str, dict[str, ComposableAppExample]]] = None,
    ) -> None:
        self.examples = examples
        self.instructions = instructions or {}
        self.apps = apps or {}
        self.instantiated: list[tuple[str, ExampleParameters, TargetExistsResolveMode]] = []
        self.rendered: list[str] = []
        self.added: list[tuple[Optional[Example], Example, Path, PackageName]] = []
        self.instantiate_error: Optional[Exception] = None

    def standalone_examples(self) -> list[Example]:
        return list(self.examples)

    def composable_app_examples(self) -> dict[str, dict[str, ComposableAppExample]]:
        return self.apps

    def instantiate(
        self,
        example: Example,
        parameters: ExampleParameters,
        mode: TargetExistsResolveMode,
    ) -> list[Path]:
        self.instantiated.append((example.name, parameters, mode))
        if self.instantiate_error is not None:
            raise self.instantiate_error
        parameters.target_path.mkdir(parents=True)
        marker = parameters.target_path / "generated.txt"
        marker.write_text(example.name, encoding="utf-8")
        return [marker]

    def render_instructions(self, example: Example, parameters: ExampleParameters) -> str:
        self.rendered.append(example.name)
        return self.instructions.get(example.name, "")

    def add_component_by_example(
        self,
        common: Optional[Example],
        component: Example,
        target_path: Path,
        package_name: PackageName,
    ) -> list[Path]:
        self.added.append((common, component, target_path, package_name))
        return []


@pytest.fixture
def fake_catalog_factory():
    """Factory fixture building :class:`FakeCatalog` instances.

    Usage::

        def test_something(fake_catalog_factory):
            catalog = fake_catalog_factory(["a", "b"], instructions={"a": "  true\n"})
    """

    def factory(
        names: list[str],
        instructions: Optional[dict[str, str]] = None,
        apps: Optional[dict[str, dict[str, ComposableAppExample]]] = None,
    ) -> FakeCatalog:
        return FakeCatalog([make_example(name) for name in names], instructions, apps)

    return factory


@pytest.fixture
def example_factory():
    """Factory fixture building :class:`Example` descriptors without a template dir."""
    return make_example


@pytest.fixture
def example_writer():
    """Expose :func:`write_example` to tests that add examples to a catalog."""
    return write_example
