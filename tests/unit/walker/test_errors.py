"""Unit tests for rule failure reasons."""

import pytest
from rebackup.walker.errors import RuleDomainFailure, RuleFailure, RuleIOFailure


class TestRuleFailure:
    """Tests for RuleFailure and its variants."""

    def test_base_is_abstract(self) -> None:
        """The base class cannot be instantiated on its own."""
        with pytest.raises(TypeError):
            RuleFailure()  # type: ignore[abstract]

    def test_io_failure_str(self) -> None:
        """I/O failures render their OSError."""
        failure = RuleIOFailure(PermissionError("denied"))

        assert isinstance(failure, RuleFailure)
        assert str(failure) == "denied"

    def test_domain_failure_str(self) -> None:
        """Domain failures render their message."""
        assert str(RuleDomainFailure("bad item")) == "bad item"
