"""Tests for signal extraction and the red-flag catalog."""

from __future__ import annotations

import pytest

from bountyscout.config import SignalsConfig
from bountyscout.extract.patterns import (
    CRITICAL,
    RED_FLAG_CATALOG,
    combine_text,
    find_text_red_flags,
    flag_by_name,
    is_critical,
)
from bountyscout.extract.signals import SignalBundle, extract_signals


class TestRedFlagCatalog:
    """Tests for the red-flag configuration table."""

    def test_catalog_order(self) -> None:
        """Catalog lists flags in reporting order."""
        assert [flag.name for flag in RED_FLAG_CATALOG] == [
            "vague_requirements",
            "multi_repository",
            "domain_expertise",
            "maintainer_coordination",
            "aesthetic_subjectivity",
            "architecture_change",
            "insufficient_detail",
            "low_reward_for_scope",
        ]

    def test_critical_flags(self) -> None:
        """Vague, multi-repo and domain-expertise flags are critical."""
        critical = {flag.name for flag in RED_FLAG_CATALOG if flag.category == CRITICAL}
        assert critical == {"vague_requirements", "multi_repository", "domain_expertise"}

    def test_is_critical_by_message(self) -> None:
        assert is_critical("Multi-repository integration required")
        assert not is_critical("Insufficient requirement details")

    def test_flag_by_name(self) -> None:
        assert flag_by_name("domain_expertise").message == "Requires domain expertise"
        with pytest.raises(KeyError):
            flag_by_name("does_not_exist")

    @pytest.mark.parametrize(
        ("text", "flag_name"),
        [
            ("this could somehow work", "vague_requirements"),
            ("changes across every repo", "multi_repository"),
            ("needs a database specialist", "domain_expertise"),
            ("close coordination with the team", "maintainer_coordination"),
            ("make it visually appealing", "aesthetic_subjectivity"),
            ("touches the build pipeline", "architecture_change"),
        ],
    )
    def test_trigger_phrases(self, text: str, flag_name: str) -> None:
        """Each text flag fires on its trigger phrase."""
        assert flag_by_name(flag_name).message in find_text_red_flags(text)

    def test_no_flags_in_plain_text(self) -> None:
        assert find_text_red_flags("fix the off by one error in the pager") == []


class TestCombineText:
    """Tests for text normalization."""

    def test_lowercases_and_joins(self) -> None:
        assert combine_text("Fix BUG", "In Parser") == "fix bug in parser"

    def test_handles_empty(self) -> None:
        assert combine_text("", "") == " "


class TestExtractSignals:
    """Tests for extract_signals."""

    def test_well_defined_issue(self, well_defined_issue) -> None:
        """A clear issue yields positive signals and no red flags."""
        title, body = well_defined_issue
        bundle = extract_signals(title, body)

        assert bundle.has_code_examples
        assert bundle.has_specific_requirements
        assert bundle.is_well_defined
        assert not bundle.mentions_integration
        assert not bundle.mentions_architecture
        assert not bundle.has_subjective_criteria
        assert not bundle.mentions_implementation_work
        assert bundle.red_flags == ()

    def test_empty_body_is_insufficient(self) -> None:
        """Empty bodies are valid input and flag insufficient detail."""
        bundle = extract_signals("Fix bug", "")

        assert bundle.red_flags == ("Insufficient requirement details",)
        assert not bundle.is_well_defined
        assert not bundle.has_specific_requirements
        assert bundle.estimated_word_count == 2

    def test_none_body_treated_as_empty(self) -> None:
        bundle = extract_signals("Fix bug", None)  # type: ignore[arg-type]
        assert "Insufficient requirement details" in bundle.red_flags

    def test_flags_keep_catalog_order(self) -> None:
        """Multiple flags are reported in catalog order."""
        bundle = extract_signals(
            "Maybe refactor",
            "We should possibly refactor the workflow across several repos.",
        )
        assert bundle.red_flags == (
            "Vague requirements with uncertainty indicators",
            "Multi-repository integration required",
            "System architecture changes required",
            "Insufficient requirement details",
        )
        assert bundle.mentions_architecture
        assert bundle.mentions_integration

    def test_case_insensitive(self) -> None:
        bundle = extract_signals("MAYBE Fix This", "x" * 150)
        assert "Vague requirements with uncertainty indicators" in bundle.red_flags

    def test_long_body_without_structure_not_well_defined(self) -> None:
        """Length alone does not make an issue well-defined."""
        bundle = extract_signals("Fix bug", "word " * 100)
        assert not bundle.is_well_defined

    def test_structure_words_need_long_body(self) -> None:
        bundle = extract_signals("Fix bug", "step one: reproduce")
        assert not bundle.is_well_defined

    def test_custom_thresholds(self) -> None:
        """Length thresholds come from configuration."""
        config = SignalsConfig(min_body_length=10, well_defined_body_length=5)
        bundle = extract_signals("Fix bug", "see the step list")
        custom = extract_signals("Fix bug", "see the step list", config)

        assert "Insufficient requirement details" in bundle.red_flags
        assert "Insufficient requirement details" not in custom.red_flags
        assert custom.is_well_defined

    def test_deterministic(self, well_defined_issue) -> None:
        title, body = well_defined_issue
        assert extract_signals(title, body) == extract_signals(title, body)

    def test_bundle_is_immutable(self) -> None:
        bundle = extract_signals("Fix bug", "")
        with pytest.raises(AttributeError):
            bundle.red_flags = ()  # type: ignore[misc]
        assert isinstance(bundle, SignalBundle)
