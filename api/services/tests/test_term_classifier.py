"""Tests for search term classification."""

import pytest

from api.models.search import SearchType
from api.services.reference_data import (
    DEFAULT_REFERENCE_PATH,
    ReferenceData,
    load_reference_data,
)
from api.services.term_classifier import TermClassifier


@pytest.fixture(scope="module")
def reference():
    """Bundled reference data."""
    return load_reference_data(DEFAULT_REFERENCE_PATH)


@pytest.fixture
def classifier(reference):
    """Classifier with the default exact-match rules."""
    return TermClassifier(reference)


class TestAmbiguousTerms:
    """Tests for terms listed as ambiguous."""

    def test_ambiguous_without_choice(self, classifier):
        """Ambiguous term with no choice returns the candidate categories."""
        result = classifier.classify("argentina")
        assert result.search_type == SearchType.AMBIGUOUS
        assert result.options == ["country", "artist"]
        assert result.term == "argentina"

    def test_ambiguous_is_case_and_space_insensitive(self, classifier):
        """Lookup uses the trimmed, case-folded term."""
        result = classifier.classify("  ARGENTINA ")
        assert result.search_type == SearchType.AMBIGUOUS

    def test_choice_resolves_ambiguity(self, classifier):
        """A disambiguation choice is used directly."""
        result = classifier.classify("argentina", SearchType.ARTIST)
        assert result.search_type == SearchType.ARTIST

    def test_ambiguous_choice_is_ignored(self, classifier):
        """Choosing 'ambiguous' is the same as not choosing."""
        result = classifier.classify("granaino", SearchType.AMBIGUOUS)
        assert result.search_type == SearchType.AMBIGUOUS
        assert result.options == ["city", "artist"]


class TestLocationTerms:
    """Tests for city and country detection."""

    def test_city(self, classifier):
        """Known city classifies as CITY."""
        assert classifier.classify("Madrid").search_type == SearchType.CITY

    def test_city_case_insensitive(self, classifier):
        """City match ignores case, keeps accents."""
        assert classifier.classify("málaga").search_type == SearchType.CITY
        assert classifier.classify("MÁLAGA").search_type == SearchType.CITY

    def test_multi_word_city(self, classifier):
        """Multi-word names match exactly."""
        result = classifier.classify("morón de la frontera")
        assert result.search_type == SearchType.CITY

    def test_country(self, classifier):
        """Known country classifies as COUNTRY."""
        assert classifier.classify("Francia").search_type == SearchType.COUNTRY

    def test_partial_country_is_text_by_default(self, classifier):
        """Substring of a country name is plain text without the loose flag."""
        assert classifier.classify("corea").search_type == SearchType.TEXT

    def test_partial_country_with_loose_match(self, reference):
        """Loose matching accepts a term contained in a country name."""
        classifier = TermClassifier(reference, loose_country_match=True)
        assert classifier.classify("corea").search_type == SearchType.COUNTRY

    def test_loose_match_carries_full_country_name(self, reference):
        """The matched reference name is kept for the country filter."""
        classifier = TermClassifier(reference, loose_country_match=True)
        result = classifier.classify("espa")
        assert result.search_type == SearchType.COUNTRY
        assert result.term == "espa"
        assert result.matched_values == ["España"]

    def test_exact_country_has_no_matched_names(self, classifier):
        assert classifier.classify("Francia").matched_values == []

    def test_city_checked_before_country(self):
        """A name in both lists classifies as CITY."""
        reference = ReferenceData.from_dict(
            {"cities": ["Córdoba"], "countries": ["Córdoba", "Argentina"]}
        )
        classifier = TermClassifier(reference, loose_country_match=True)
        assert classifier.classify("córdoba").search_type == SearchType.CITY

    def test_exact_city_before_country_substring(self):
        """Exact equality is evaluated before containment."""
        reference = ReferenceData.from_dict({"cities": ["Sur"], "countries": ["Corea del Sur"]})
        classifier = TermClassifier(reference, loose_country_match=True)
        assert classifier.classify("sur").search_type == SearchType.CITY
        assert classifier.classify("del sur").search_type == SearchType.COUNTRY


class TestTextTerms:
    """Tests for the fallback classification."""

    def test_unknown_term_is_text(self, classifier):
        """Unknown terms run as full-text search."""
        result = classifier.classify("Camarón")
        assert result.search_type == SearchType.TEXT
        assert result.term == "Camarón"

    def test_choice_overrides_city(self, classifier):
        """Explicit artist choice wins over the city list."""
        result = classifier.classify("Granada", SearchType.ARTIST)
        assert result.search_type == SearchType.ARTIST

    def test_classification_is_deterministic(self, classifier):
        """Same input always gives the same classification."""
        first = classifier.classify("Sevilla")
        second = classifier.classify("Sevilla")
        assert first == second
