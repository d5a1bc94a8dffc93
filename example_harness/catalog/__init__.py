"""Example harness catalog -- discovers and renders example templates.

Quick usage::

    from example_harness.catalog import DirectoryCatalog

    catalog = DirectoryCatalog("templates")
    for example in catalog.standalone_examples():
        print(example.name)
"""

from .models import (
    DEFAULT_APP_GROUP,
    ComponentName,
    ComposableAppExample,
    Example,
    ExampleParameters,
    PackageName,
    TargetExistsResolveMode,
)
from .registry import DirectoryCatalog, ExampleCatalog
from .templates import TemplateRenderer

__all__ = [
    "DEFAULT_APP_GROUP",
    "ComponentName",
    "ComposableAppExample",
    "DirectoryCatalog",
    "Example",
    "ExampleCatalog",
    "ExampleParameters",
    "PackageName",
    "TargetExistsResolveMode",
    "TemplateRenderer",
]
