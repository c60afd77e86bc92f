"""Unit tests for glob pattern rules."""

from pathlib import Path

import pytest
from rebackup.rules.glob_patterns import (
    EXCLUDE_RULE,
    INCLUDE_ABSOLUTE_RULE,
    INCLUDE_RULE,
    InvalidPatternError,
    expand_globstar,
    make_pattern_filters,
    make_pattern_rule,
    relative_item_path,
    validate_pattern,
)
from rebackup.walker.config import WalkerConfig
from rebackup.walker.engine import walk
from rebackup.walker.models import RuleResultType, exclude_item


class TestValidatePattern:
    """Tests for validate_pattern."""

    @pytest.mark.parametrize(
        "pattern",
        ["*.txt", "docs/*", "**/cache", "a/**/b", "[abc].md", "[!.]*", "[]]x", "file?.log"],
    )
    def test_valid_patterns(self, pattern: str) -> None:
        """Well formed patterns are accepted."""
        validate_pattern(pattern)

    def test_empty_pattern(self) -> None:
        """Empty patterns are rejected."""
        with pytest.raises(InvalidPatternError, match="empty"):
            validate_pattern("")

    def test_unclosed_class(self) -> None:
        """Unclosed character classes are rejected."""
        with pytest.raises(InvalidPatternError, match="unclosed character class"):
            validate_pattern("file[abc")

    @pytest.mark.parametrize("pattern", ["a**", "***", "x/**b/y"])
    def test_partial_double_star(self, pattern: str) -> None:
        """'**' must be a whole path component."""
        with pytest.raises(InvalidPatternError, match="whole path component"):
            validate_pattern(pattern)


class TestExpandGlobstar:
    """Tests for expand_globstar."""

    def test_plain_pattern_unchanged(self) -> None:
        """Patterns without '**' components expand to themselves."""
        assert expand_globstar("docs/*.md") == ["docs/*.md"]

    def test_leading_double_star(self) -> None:
        """A leading '**/' may also match nothing."""
        assert expand_globstar("**/a.txt") == ["**/a.txt", "a.txt"]

    def test_inner_double_star(self) -> None:
        """Inner '**/' components may collapse."""
        assert expand_globstar("a/**/b") == ["a/**/b", "a/b"]

    def test_trailing_double_star_kept(self) -> None:
        """A trailing '**' is left as is."""
        assert expand_globstar("a/**") == ["a/**"]


class TestRelativeItemPath:
    """Tests for relative_item_path."""

    def test_item_under_source(self) -> None:
        """Items under the source are rendered relative with forward slashes."""
        assert relative_item_path(Path("/src/docs/a.md"), Path("/src")) == "docs/a.md"

    def test_item_outside_source(self) -> None:
        """Items outside the source are rendered in full."""
        assert relative_item_path(Path("/other/a.md"), Path("/src")) == "/other/a.md"


class TestMakePatternRule:
    """Tests for make_pattern_rule."""

    def test_rule_metadata(self) -> None:
        """The rule carries its name and pattern description."""
        rule = make_pattern_rule(EXCLUDE_RULE, exclude_item(), "*.log")

        assert rule.name == EXCLUDE_RULE
        assert rule.description == "Pattern: *.log"
        assert rule.only_for is None

    def test_matches_relative_path(self) -> None:
        """Patterns match the path relative to the source."""
        rule = make_pattern_rule(EXCLUDE_RULE, exclude_item(), "docs/*.md")
        source = Path("/src")

        assert rule.matches(Path("/src/docs/a.md"), WalkerConfig(), source) is True
        assert rule.matches(Path("/src/a.md"), WalkerConfig(), source) is False

    def test_star_crosses_separators(self) -> None:
        """'*' also matches across directories."""
        rule = make_pattern_rule(EXCLUDE_RULE, exclude_item(), "*.log")

        assert rule.matches(Path("/src/a/b/c.log"), WalkerConfig(), Path("/src")) is True

    @pytest.mark.parametrize("relative", ["a.txt", "src/a.txt", "x/y/a.txt"])
    def test_leading_double_star_matches_any_depth(self, relative: str) -> None:
        """'**/name' matches the name at the root and below."""
        rule = make_pattern_rule(EXCLUDE_RULE, exclude_item(), "**/a.txt")

        assert rule.matches(Path("/src") / relative, WalkerConfig(), Path("/src")) is True

    def test_inner_double_star_matches_zero_directories(self) -> None:
        """'a/**/b' matches 'a/b' as well as deeper paths."""
        rule = make_pattern_rule(EXCLUDE_RULE, exclude_item(), "a/**/b")
        source = Path("/src")

        assert rule.matches(Path("/src/a/b"), WalkerConfig(), source) is True
        assert rule.matches(Path("/src/a/x/y/b"), WalkerConfig(), source) is True
        assert rule.matches(Path("/src/c/b"), WalkerConfig(), source) is False

    def test_double_star_does_not_match_partial_names(self) -> None:
        """'**/name' does not match names that only end with it."""
        rule = make_pattern_rule(EXCLUDE_RULE, exclude_item(), "**/node_modules")
        source = Path("/src")

        assert rule.matches(Path("/src/node_modules"), WalkerConfig(), source) is True
        assert rule.matches(Path("/src/my_node_modules"), WalkerConfig(), source) is False

    def test_case_sensitive(self) -> None:
        """Matching is case-sensitive."""
        rule = make_pattern_rule(EXCLUDE_RULE, exclude_item(), "*.LOG")

        assert rule.matches(Path("/src/c.log"), WalkerConfig(), Path("/src")) is False

    def test_action_returns_result(self) -> None:
        """The action returns the configured result."""
        rule = make_pattern_rule(EXCLUDE_RULE, exclude_item(), "*")

        result = rule.action(Path("/src/a"), WalkerConfig(), Path("/src"))

        assert result.result_type == RuleResultType.EXCLUDE_ITEM

    def test_invalid_pattern_rejected(self) -> None:
        """Malformed patterns fail at rule creation."""
        with pytest.raises(InvalidPatternError):
            make_pattern_rule(EXCLUDE_RULE, exclude_item(), "[oops")


class TestMakePatternFilters:
    """Tests for make_pattern_filters."""

    def test_order_and_names(self) -> None:
        """Absolute includes come first, then includes, then excludes."""
        rules = make_pattern_filters(
            include_absolute=["keep/*"],
            include_only=["*.md"],
            exclude=["*.log", "tmp"],
        )

        assert [rule.name for rule in rules] == [
            INCLUDE_ABSOLUTE_RULE,
            INCLUDE_RULE,
            EXCLUDE_RULE,
            EXCLUDE_RULE,
        ]

    def test_no_patterns(self) -> None:
        """No patterns give no rules."""
        assert make_pattern_filters() == []

    def test_exclude_in_walk(self, sample_tree: Path) -> None:
        """Exclude patterns drop matching items from a walk."""
        config = WalkerConfig.from_rules(make_pattern_filters(exclude=["*.log", "b"]))

        items = walk(sample_tree, config)

        assert set(items) == {
            sample_tree / "a.txt",
            sample_tree / "docs" / "readme.md",
            sample_tree / "docs" / "deep" / "c.txt",
        }

    def test_absolute_include_shields_from_exclude(self, sample_tree: Path) -> None:
        """An absolute include protects matching items from later excludes."""
        config = WalkerConfig.from_rules(
            make_pattern_filters(include_absolute=["docs/notes.log"], exclude=["*.log"])
        )

        items = walk(sample_tree, config)

        assert sample_tree / "docs" / "notes.log" in items

    def test_double_star_exclude_in_walk(self, sample_tree: Path) -> None:
        """A '**/' exclusion drops matching items at every depth."""
        (sample_tree / "docs" / "a.txt").write_text("nested")
        config = WalkerConfig.from_rules(make_pattern_filters(exclude=["**/a.txt"]))

        items = walk(sample_tree, config)

        assert sample_tree / "a.txt" not in items
        assert sample_tree / "docs" / "a.txt" not in items
        assert sample_tree / "docs" / "readme.md" in items
