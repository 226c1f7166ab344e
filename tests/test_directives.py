"""
Tests for yogini.directives
===========================

Test Organization
-----------------
- TestParseSegment: Marker detection on single names
- TestResolveRecord: Destination paths and processing directives
- TestIterTemplateFiles: Tree discovery
"""

import inspect
from pathlib import Path

import pytest

from yogini.directives import (
    Condition,
    Segment,
    iter_template_files,
    parse_segment,
    resolve_record,
)
from yogini.errors import DirectiveParseError
from yogini.models import ProcessingDirective
from yogini.viewdata import build_view_data


@pytest.fixture
def context():
    """View data with a project name and a package name."""
    return build_view_data({"projectName": "widget", "name": "my-widget"})


# =============================================================================
# parse_segment Tests
# =============================================================================

class TestParseSegment:
    """Tests for parse_segment."""

    def test_plain_name(self) -> None:
        """Names without a marker pass through."""
        assert parse_segment("README.md") == Segment("README.md", False)

    def test_marker_is_stripped(self) -> None:
        """The leading {} marker is removed and reported."""
        assert parse_segment("{}README.md") == Segment("README.md", True)

    def test_jinja_token_is_not_a_marker(self) -> None:
        """A leading {{ belongs to a variable, not a directive."""
        assert parse_segment("{{name}}.txt") == Segment("{{name}}.txt", False)

    def test_marker_before_variable(self) -> None:
        """A marker followed by a variable keeps the variable."""
        assert parse_segment("{}{{name}}.txt") == Segment("{{name}}.txt", True)

    def test_include_condition(self) -> None:
        segment = parse_segment("{+tests}conftest.py")

        assert segment.name == "conftest.py"
        assert segment.marked is False
        assert segment.conditions == (Condition("tests", True),)

    def test_exclude_condition(self) -> None:
        segment = parse_segment("{-typed}setup.cfg")

        assert segment.conditions == (Condition("typed", False),)

    def test_conditions_combine_with_marker(self) -> None:
        """Prefixes may be stacked in any order."""
        segment = parse_segment("{+tests}{}{-slim}{{name}}_test.py")

        assert segment.name == "{{name}}_test.py"
        assert segment.marked is True
        assert segment.conditions == (Condition("tests", True), Condition("slim", False))

    def test_condition_str(self) -> None:
        assert str(Condition("tests", True)) == "{+tests}"
        assert str(Condition("tests", False)) == "{-tests}"

    def test_unterminated_marker(self) -> None:
        """An opening brace without a closing one is an error."""
        with pytest.raises(DirectiveParseError, match="unterminated"):
            parse_segment("{README.md")

    @pytest.mark.parametrize("segment", ["{flag}README.md", "{+}README.md", "{+a b}x", "{!x}y"])
    def test_unsupported_directive(self, segment: str) -> None:
        """Only {}, {+key} and {-key} are recognized."""
        with pytest.raises(DirectiveParseError, match="unsupported"):
            parse_segment(segment)

    def test_repeated_marker(self) -> None:
        with pytest.raises(DirectiveParseError, match="repeated"):
            parse_segment("{}{}README.md")

    @pytest.mark.parametrize("segment", ["{}", "{+tests}", "{+tests}{}"])
    def test_prefix_without_name(self, segment: str) -> None:
        """A bare prefix is not a file name."""
        with pytest.raises(DirectiveParseError, match="not followed"):
            parse_segment(segment)


# =============================================================================
# resolve_record Tests
# =============================================================================

class TestResolveRecord:
    """Tests for resolve_record."""

    def test_substitutes_variable(self, template_dir: Path, context) -> None:
        """Marker removed, token replaced by its bound value."""
        source = template_dir / "{}{{projectName}}.txt"
        record = resolve_record(template_dir, source, context)

        assert record.target == Path("widget.txt")
        assert record.directive is ProcessingDirective.RENDER
        assert record.source == source

    def test_unmarked_name_is_verbatim(self, template_dir: Path, context) -> None:
        """Tokens in unmarked names are left alone and contents copied."""
        source = template_dir / "{{projectName}}.txt"
        record = resolve_record(template_dir, source, context)

        assert record.target == Path("{{projectName}}.txt")
        assert record.directive is ProcessingDirective.COPY

    def test_missing_variable_fails(self, template_dir: Path) -> None:
        """A variable absent from the view data cannot be resolved."""
        source = template_dir / "{}{{projectName}}.txt"

        with pytest.raises(DirectiveParseError) as excinfo:
            resolve_record(template_dir, source, build_view_data({}))

        assert excinfo.value.path == source

    def test_marked_directory(self, template_dir: Path, context) -> None:
        """Directory names can be templates too."""
        source = template_dir / "{}{{package_name}}" / "{}__init__.py"
        record = resolve_record(template_dir, source, context)

        assert record.target == Path("my_widget") / "__init__.py"
        assert record.directive is ProcessingDirective.RENDER

    def test_directive_comes_from_file_name(self, template_dir: Path, context) -> None:
        """An unmarked file inside a marked directory is copied."""
        source = template_dir / "{}{{package_name}}" / "data.bin"
        record = resolve_record(template_dir, source, context)

        assert record.target == Path("my_widget") / "data.bin"
        assert record.directive is ProcessingDirective.COPY

    def test_empty_render_fails(self, template_dir: Path) -> None:
        """A name may not render to nothing."""
        source = template_dir / "{}{{blank}}"

        with pytest.raises(DirectiveParseError, match="invalid path segment"):
            resolve_record(template_dir, source, build_view_data({"blank": ""}))

    def test_separator_in_render_fails(self, template_dir: Path) -> None:
        """A rendered name may not escape into other directories."""
        source = template_dir / "{}{{where}}.txt"

        with pytest.raises(DirectiveParseError):
            resolve_record(template_dir, source, build_view_data({"where": "../evil"}))

    def test_helpers_available_in_names(self, template_dir: Path, context) -> None:
        """Built-in helpers can be used in file names."""
        source = template_dir / "{}{{camelize(name)}}.js"
        record = resolve_record(template_dir, source, context)

        assert record.target == Path("myWidget.js")

    def test_special_characters_not_escaped(self, template_dir: Path) -> None:
        """Rendered names are plain text, not HTML."""
        source = template_dir / "{}{{stem}}.txt"
        record = resolve_record(template_dir, source, build_view_data({"stem": "a&b'c"}))

        assert record.target == Path("a&b'c.txt")

    def test_condition_met(self, template_dir: Path) -> None:
        source = template_dir / "{+tests}tests" / "{+tests}{}conftest.py"
        record = resolve_record(template_dir, source, build_view_data({"tests": True}))

        assert record.target == Path("tests") / "conftest.py"
        assert record.directive is ProcessingDirective.RENDER

    def test_condition_failed_on_file(self, template_dir: Path) -> None:
        source = template_dir / "{-typed}setup.cfg"

        assert resolve_record(template_dir, source, build_view_data({"typed": True})) is None

    def test_condition_failed_on_directory(self, template_dir: Path) -> None:
        """A failing condition anywhere in the path excludes the file."""
        source = template_dir / "{+docs}docs" / "index.md"

        assert resolve_record(template_dir, source, build_view_data({"docs": ""})) is None

    def test_condition_on_undefined_variable(self, template_dir: Path) -> None:
        source = template_dir / "{+tests}conftest.py"

        with pytest.raises(DirectiveParseError, match="undefined variable 'tests'"):
            resolve_record(template_dir, source, build_view_data({}))


# =============================================================================
# iter_template_files Tests
# =============================================================================

class TestIterTemplateFiles:
    """Tests for iter_template_files."""

    def test_is_lazy(self, template_dir: Path, context) -> None:
        """Discovery returns a generator."""
        assert inspect.isgenerator(iter_template_files(template_dir, context))

    def test_one_record_per_file(self, template_dir: Path, make_tree, context) -> None:
        """N files produce N records with unique destinations."""
        make_tree(template_dir, {
            "{}README.md": "x",
            "LICENSE": "x",
            "docs/index.md": "x",
            "{}{{package_name}}/{}__init__.py": "x",
            "{}{{package_name}}/core.py": "x",
        })

        records = list(iter_template_files(template_dir, context))
        targets = {record.target for record in records}

        assert len(records) == 5
        assert len(targets) == 5
        assert targets == {
            Path("README.md"),
            Path("LICENSE"),
            Path("docs/index.md"),
            Path("my_widget/__init__.py"),
            Path("my_widget/core.py"),
        }

    def test_hidden_files_skipped_by_default(
        self, template_dir: Path, make_tree, context
    ) -> None:
        """Dotfiles and dot-directories are not discovered unless enabled."""
        make_tree(template_dir, {
            "visible.txt": "x",
            ".env": "x",
            ".github/workflows/ci.yml": "x",
            "{}.gitignore": "x",
        })

        targets = {r.target for r in iter_template_files(template_dir, context)}

        assert targets == {Path("visible.txt"), Path(".gitignore")}

    def test_hidden_files_included_when_enabled(
        self, template_dir: Path, make_tree, context
    ) -> None:
        """include_hidden discovers dotfiles too."""
        make_tree(template_dir, {
            "visible.txt": "x",
            ".env": "x",
            ".github/workflows/ci.yml": "x",
        })

        targets = {
            r.target
            for r in iter_template_files(template_dir, context, include_hidden=True)
        }

        assert targets == {
            Path("visible.txt"),
            Path(".env"),
            Path(".github/workflows/ci.yml"),
        }

    def test_colliding_destinations_fail(
        self, template_dir: Path, make_tree
    ) -> None:
        """Two sources resolving to one destination are rejected."""
        make_tree(template_dir, {"a.txt": "x", "{}{{stem}}.txt": "y"})

        with pytest.raises(DirectiveParseError, match="already produced"):
            list(iter_template_files(template_dir, build_view_data({"stem": "a"})))

    @pytest.mark.parametrize(
        ("answers", "expected"),
        [
            (
                {"tests": True, "typed": False},
                {"README.md", "setup.cfg", "tests/conftest.py", "tests/test_core.py"},
            ),
            ({"tests": False, "typed": True}, {"README.md"}),
        ],
    )
    def test_conditional_entries(
        self, template_dir: Path, make_tree, answers, expected
    ) -> None:
        """{+key} keeps entries when key is truthy, {-key} when it is falsy."""
        make_tree(template_dir, {
            "README.md": "x",
            "{-typed}setup.cfg": "x",
            "{+tests}tests/{}conftest.py": "x",
            "{+tests}tests/test_core.py": "x",
        })

        records = iter_template_files(template_dir, build_view_data(answers))

        assert {record.target.as_posix() for record in records} == expected

    def test_excluded_directory_is_not_entered(
        self, template_dir: Path, make_tree
    ) -> None:
        """Nothing below a pruned directory is parsed."""
        make_tree(template_dir, {"{+docs}docs/{broken.md": "x", "README.md": "x"})

        records = list(iter_template_files(template_dir, build_view_data({"docs": False})))

        assert [record.target for record in records] == [Path("README.md")]

    def test_alternatives_do_not_collide(self, template_dir: Path, make_tree) -> None:
        """Mutually exclusive variants may share a destination."""
        make_tree(template_dir, {"{+cli}main.py": "cli", "{-cli}main.py": "lib"})

        records = list(iter_template_files(template_dir, build_view_data({"cli": True})))

        assert [record.source.name for record in records] == ["{+cli}main.py"]

    def test_malformed_marker_aborts(self, template_dir: Path, make_tree, context) -> None:
        """A bad directive stops the stream."""
        make_tree(template_dir, {"{oops.txt": "x"})

        with pytest.raises(DirectiveParseError, match="unterminated"):
            list(iter_template_files(template_dir, context))

    def test_does_not_read_contents(self, template_dir: Path, make_tree, context) -> None:
        """Binary contents behind a marked name do not matter for discovery."""
        make_tree(template_dir, {"{}image.png": b"\x89PNG\r\n\x1a\n\xff\xfe"})

        records = list(iter_template_files(template_dir, context))

        assert records[0].target == Path("image.png")
