"""
Term classification for event search.

Decides whether a free-text search term names a city, a country, an
artist, or should run as fuzzy full-text search. Classification is a
pure function of the term, the caller's disambiguation choice and the
reference data.

Precedence:
1. Known-ambiguous term without a choice -> AMBIGUOUS
2. Caller's disambiguation choice
3. Exact city/province match -> CITY
4. Exact country match -> COUNTRY
5. Term contained in a country name (only with ``loose_country_match``) -> COUNTRY
6. TEXT
"""

import logging

from api.models.search import Classification, SearchType
from api.services.reference_data import ReferenceData, normalize_term

logger = logging.getLogger(__name__)


class TermClassifier:
    """Classify search terms against reference data."""

    def __init__(self, reference: ReferenceData, loose_country_match: bool = False):
        self.reference = reference
        self.loose_country_match = loose_country_match

    def classify(
        self,
        term: str,
        preferred_option: SearchType | None = None,
    ) -> Classification:
        """Classify a search term.

        Args:
            term: Raw search string as entered by the user
            preferred_option: Disambiguation choice supplied on a repeat request

        Returns:
            Classification with the search type and the original term
        """
        normalized = normalize_term(term)
        if preferred_option == SearchType.AMBIGUOUS:
            preferred_option = None

        options = self.reference.ambiguity_options(normalized)
        if options and preferred_option is None:
            logger.debug("[Classify] Ambiguous term=%s options=%s", term, options)
            return Classification(
                search_type=SearchType.AMBIGUOUS,
                term=term,
                options=list(options),
            )

        matched: list[str] = []
        if preferred_option is not None:
            search_type = preferred_option
        elif self.reference.is_city(normalized):
            search_type = SearchType.CITY
        elif self.reference.is_country(normalized):
            search_type = SearchType.COUNTRY
        elif self.loose_country_match and self.reference.is_part_of_country(normalized):
            # The stored country is the full name, not the fragment typed
            search_type = SearchType.COUNTRY
            matched = self.reference.countries_containing(normalized)
        else:
            search_type = SearchType.TEXT

        logger.debug("[Classify] term=%s type=%s", term, search_type.value)
        return Classification(search_type=search_type, term=term, matched_values=matched)
