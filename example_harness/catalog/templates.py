"""Jinja2 template rendering for example instantiation.

Provides the TemplateRenderer class which renders an example's template
directory into a target directory.  Files ending in ``.j2`` are rendered with
the example context and written without the suffix; every other file is copied
byte for byte.  Path segments are rendered as well so a directory named
``{{ component_name }}`` takes the component's name.
"""

from __future__ import annotations

import re
import shutil
from pathlib import Path
from typing import Any, Iterable

from jinja2 import Environment, StrictUndefined, TemplateError, select_autoescape

from ..errors import InstantiationError
from .models import TargetExistsResolveMode

TEMPLATE_SUFFIX = ".j2"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders example template directories with Jinja2.

    Undefined variables are errors rather than empty strings, so a template
    referring to a name the context does not provide fails instantiation.
    """

    def __init__(self) -> None:
        self.env = Environment(
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self.env.filters["slugify"] = _slugify_filter
        self.env.filters["pascal_case"] = _pascal_case_filter
        self.env.filters["snake_case"] = _snake_case_filter
        self.env.filters["camel_case"] = _camel_case_filter

    # -- String rendering ----------------------------------------------------

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context.

        Raises:
            InstantiationError: If the template is malformed or refers to an
                undefined variable.
        """
        try:
            template = self.env.from_string(template_string)
            return template.render(**context)
        except TemplateError as exc:
            raise InstantiationError(f"template error: {exc}") from exc

    def render_file(self, template_path: Path, context: dict[str, Any]) -> str:
        """Read and render a single template file."""
        try:
            text = template_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise InstantiationError(f"cannot read {template_path}: {exc}") from exc
        return self.render_string(text, context)

    # -- Tree rendering ------------------------------------------------------

    def render_tree(
        self,
        template_dir: Path,
        output_dir: Path,
        context: dict[str, Any],
        *,
        mode: TargetExistsResolveMode = TargetExistsResolveMode.FAIL,
        exclude: Iterable[str] = (),
    ) -> list[Path]:
        """Render every file under *template_dir* into *output_dir*.

        Args:
            template_dir: Directory holding the template files.
            output_dir: Target directory; created when missing.
            context: Template context variables.
            mode: Behaviour when *output_dir* or one of its files exists.
            exclude: Paths, relative to *template_dir*, that are never written
                (e.g. ``metadata.json``).

        Returns:
            List of written file paths, in sorted template order.

        Raises:
            InstantiationError: If the target exists under ``FAIL``, a file
                exists under ``MERGE_OR_FAIL``, or rendering fails.
        """
        if mode is TargetExistsResolveMode.FAIL and output_dir.exists():
            raise InstantiationError(f"target directory already exists: {output_dir}")

        excluded = {Path(item) for item in exclude}
        written: list[Path] = []

        for source in sorted(template_dir.rglob("*")):
            rel = source.relative_to(template_dir)
            if rel in excluded or source.is_dir():
                continue

            destination = output_dir / self._render_relative_path(rel, context)
            if destination.exists():
                if mode is TargetExistsResolveMode.MERGE_OR_SKIP:
                    continue
                raise InstantiationError(f"file already exists: {destination}")

            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                if source.name.endswith(TEMPLATE_SUFFIX):
                    content = self.render_file(source, context)
                    destination.write_text(content, encoding="utf-8")
                else:
                    shutil.copyfile(source, destination)
            except OSError as exc:
                raise InstantiationError(f"cannot write {destination}: {exc}") from exc
            written.append(destination)

        if not written and not output_dir.exists():
            # Empty templates still produce their target directory.
            try:
                output_dir.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise InstantiationError(f"cannot create {output_dir}: {exc}") from exc

        return written

    def _render_relative_path(self, rel: Path, context: dict[str, Any]) -> Path:
        parts = [self.render_string(part, context) for part in rel.parts]
        last = parts[-1]
        if last.endswith(TEMPLATE_SUFFIX):
            parts[-1] = last[: -len(TEMPLATE_SUFFIX)]
        return Path(*parts)


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------


def _slugify_filter(value: str) -> str:
    """Convert a string to a URL/filename-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower().strip())
    return slug.strip("-")


def _pascal_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    parts = re.split(r"[-_:\s]+", value)
    return "".join(word.capitalize() for word in parts if word)


def _snake_case_filter(value: str) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``some_thing``."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", value)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[-:\s]+", "_", s2).lower()


def _camel_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``someThing``."""
    pascal = _pascal_case_filter(value)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""
