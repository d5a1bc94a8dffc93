"""Tests for the Jinja2 template renderer (example_harness.catalog.templates).

Covers:
- String rendering, custom filters, undefined variables
- Tree rendering: .j2 suffix handling, verbatim copies, rendered path segments
- Target exists resolve modes (FAIL, MERGE_OR_SKIP, MERGE_OR_FAIL)
- Excluded files
"""

from __future__ import annotations

from pathlib import Path

import pytest

from example_harness.catalog.models import TargetExistsResolveMode
from example_harness.catalog.templates import (
    TemplateRenderer,
    _camel_case_filter,
    _pascal_case_filter,
    _slugify_filter,
    _snake_case_filter,
)
from example_harness.errors import InstantiationError

pytestmark = pytest.mark.unit


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    root = tmp_path / "template"
    (root / "src" / "{{ package_short_name }}").mkdir(parents=True)
    (root / "README.md.j2").write_text("# {{ component_name }}\n", encoding="utf-8")
    (root / "static.txt").write_text("{{ untouched }}\n", encoding="utf-8")
    (root / "src" / "{{ package_short_name }}" / "lib.py.j2").write_text(
        "NAME = '{{ component_name | snake_case }}'\n", encoding="utf-8"
    )
    (root / "metadata.json").write_text("{}", encoding="utf-8")
    return root


CONTEXT = {"component_name": "my-comp", "package_short_name": "componentx"}


# ---------------------------------------------------------------------------
# String rendering
# ---------------------------------------------------------------------------


class TestRenderString:
    def test_simple(self, renderer: TemplateRenderer):
        assert renderer.render_string("Hello {{ name }}", {"name": "World"}) == "Hello World"

    def test_keeps_trailing_newline(self, renderer: TemplateRenderer):
        assert renderer.render_string("line\n", {}) == "line\n"

    def test_undefined_variable_is_an_error(self, renderer: TemplateRenderer):
        with pytest.raises(InstantiationError, match="template error"):
            renderer.render_string("{{ missing }}", {})

    def test_syntax_error(self, renderer: TemplateRenderer):
        with pytest.raises(InstantiationError):
            renderer.render_string("{% if %}", {})

    def test_filters_registered(self, renderer: TemplateRenderer):
        rendered = renderer.render_string(
            "{{ n | slugify }} {{ n | pascal_case }} {{ n | snake_case }} {{ n | camel_case }}",
            {"n": "my-comp"},
        )
        assert rendered == "my-comp MyComp my_comp myComp"


class TestFilters:
    def test_slugify(self):
        assert _slugify_filter("Hello World!") == "hello-world"

    def test_pascal_case_with_package_separator(self):
        assert _pascal_case_filter("app:comp-abc") == "AppCompAbc"

    def test_snake_case(self):
        assert _snake_case_filter("SomeThing") == "some_thing"
        assert _snake_case_filter("app:comp-abc") == "app_comp_abc"

    def test_camel_case_empty(self):
        assert _camel_case_filter("") == ""


# ---------------------------------------------------------------------------
# Tree rendering
# ---------------------------------------------------------------------------


class TestRenderTree:
    def test_renders_and_copies(self, renderer: TemplateRenderer, template_dir: Path, tmp_path: Path):
        out = tmp_path / "out"
        written = renderer.render_tree(template_dir, out, CONTEXT, exclude=["metadata.json"])

        assert (out / "README.md").read_text() == "# my-comp\n"
        assert (out / "static.txt").read_text() == "{{ untouched }}\n"
        assert (out / "src" / "componentx" / "lib.py").read_text() == "NAME = 'my_comp'\n"
        assert not (out / "metadata.json").exists()
        assert not (out / "README.md.j2").exists()
        assert len(written) == 3

    def test_fail_mode_rejects_existing_target(
        self, renderer: TemplateRenderer, template_dir: Path, tmp_path: Path
    ):
        out = tmp_path / "out"
        out.mkdir()
        with pytest.raises(InstantiationError, match="already exists"):
            renderer.render_tree(template_dir, out, CONTEXT)

    def test_merge_or_skip_keeps_existing_files(
        self, renderer: TemplateRenderer, template_dir: Path, tmp_path: Path
    ):
        out = tmp_path / "out"
        out.mkdir()
        (out / "README.md").write_text("mine\n")

        written = renderer.render_tree(
            template_dir,
            out,
            CONTEXT,
            mode=TargetExistsResolveMode.MERGE_OR_SKIP,
            exclude=["metadata.json"],
        )

        assert (out / "README.md").read_text() == "mine\n"
        assert out / "README.md" not in written
        assert (out / "static.txt").exists()

    def test_merge_or_fail_rejects_existing_file(
        self, renderer: TemplateRenderer, template_dir: Path, tmp_path: Path
    ):
        out = tmp_path / "out"
        out.mkdir()
        (out / "static.txt").write_text("mine\n")

        with pytest.raises(InstantiationError, match="file already exists"):
            renderer.render_tree(
                template_dir, out, CONTEXT, mode=TargetExistsResolveMode.MERGE_OR_FAIL
            )

    def test_merge_or_fail_into_empty_directory(
        self, renderer: TemplateRenderer, template_dir: Path, tmp_path: Path
    ):
        out = tmp_path / "out"
        out.mkdir()
        written = renderer.render_tree(
            template_dir, out, CONTEXT, mode=TargetExistsResolveMode.MERGE_OR_FAIL
        )
        assert (out / "metadata.json").exists()
        assert len(written) == 4

    def test_empty_template_creates_target(self, renderer: TemplateRenderer, tmp_path: Path):
        template = tmp_path / "empty"
        template.mkdir()
        out = tmp_path / "out"

        assert renderer.render_tree(template, out, {}) == []
        assert out.is_dir()

    def test_undefined_variable_in_file(self, renderer: TemplateRenderer, tmp_path: Path):
        template = tmp_path / "broken"
        template.mkdir()
        (template / "a.txt.j2").write_text("{{ nope }}")

        with pytest.raises(InstantiationError):
            renderer.render_tree(template, tmp_path / "out", {})

    def test_non_utf8_template_is_an_instantiation_error(
        self, renderer: TemplateRenderer, tmp_path: Path
    ):
        template = tmp_path / "binary"
        template.mkdir()
        (template / "x.txt.j2").write_bytes(b"\xff\xfe bad")

        with pytest.raises(InstantiationError, match="cannot read .*x.txt.j2"):
            renderer.render_tree(template, tmp_path / "out", {})


class TestRenderFile:
    def test_non_utf8_file(self, renderer: TemplateRenderer, tmp_path: Path):
        path = tmp_path / "INSTRUCTIONS"
        path.write_bytes(b"\xff\xfe  echo hi\n")

        with pytest.raises(InstantiationError, match="cannot read"):
            renderer.render_file(path, {})

    def test_missing_file(self, renderer: TemplateRenderer, tmp_path: Path):
        with pytest.raises(InstantiationError, match="cannot read"):
            renderer.render_file(tmp_path / "missing", {})
