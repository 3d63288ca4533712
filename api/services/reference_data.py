"""
Reference lists used to classify search terms.

Cities, countries and known-ambiguous terms live in one versioned JSON
file (``api/data/reference_terms.json``). It is loaded once per process;
``REFERENCE_DATA_PATH`` points to an alternative file.
"""

import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

from api.config import get_settings

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_PATH = Path(__file__).parent.parent / "data" / "reference_terms.json"


def normalize_term(term: str) -> str:
    """Trim and case-fold a term for comparison."""
    return term.strip().casefold()


@dataclass(frozen=True)
class ReferenceData:
    """Known cities, countries and ambiguous terms."""

    version: str
    cities: tuple[str, ...]
    countries: tuple[str, ...]
    ambiguous_terms: dict[str, tuple[str, ...]] = field(default_factory=dict)
    _city_keys: frozenset[str] = field(init=False, repr=False, compare=False)
    _country_keys: tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Lookup keys are derived once; the instance is frozen afterwards
        object.__setattr__(self, "_city_keys", frozenset(normalize_term(c) for c in self.cities))
        object.__setattr__(
            self, "_country_keys", tuple(normalize_term(c) for c in self.countries)
        )

    def is_city(self, normalized: str) -> bool:
        return normalized in self._city_keys

    def is_country(self, normalized: str) -> bool:
        return normalized in self._country_keys

    def is_part_of_country(self, normalized: str) -> bool:
        """Check if the term is contained in any known country name."""
        return any(normalized in country for country in self._country_keys)

    def countries_containing(self, normalized: str) -> list[str]:
        """Canonical names of the countries whose name contains the term."""
        return [
            name
            for name, key in zip(self.countries, self._country_keys)
            if normalized in key
        ]

    def ambiguity_options(self, normalized: str) -> tuple[str, ...] | None:
        return self.ambiguous_terms.get(normalized)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReferenceData":
        """Build reference data from the parsed JSON document.

        Raises:
            ValueError: If a required section is missing or has the wrong shape
        """
        try:
            cities = tuple(str(c) for c in data["cities"])
            countries = tuple(str(c) for c in data["countries"])
            ambiguous = {
                normalize_term(term): tuple(str(o) for o in options)
                for term, options in data.get("ambiguous_terms", {}).items()
            }
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Malformed reference data: {e}") from e

        return cls(
            version=str(data.get("version", "unversioned")),
            cities=cities,
            countries=countries,
            ambiguous_terms=ambiguous,
        )


def load_reference_data(path: str | Path) -> ReferenceData:
    """Load reference data from a JSON file."""
    path = Path(path)
    with path.open(encoding="utf-8") as f:
        data = json.load(f)

    reference = ReferenceData.from_dict(data)
    logger.info(
        "Loaded reference data %s: %d cities, %d countries, %d ambiguous terms",
        reference.version,
        len(reference.cities),
        len(reference.countries),
        len(reference.ambiguous_terms),
    )
    return reference


@lru_cache
def get_reference_data() -> ReferenceData:
    """Get the process-wide reference data."""
    settings = get_settings()
    return load_reference_data(settings.reference_data_path or DEFAULT_REFERENCE_PATH)
