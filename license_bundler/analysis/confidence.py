"""Confidence scoring of license texts against license templates.

Compares word frequencies rather than exact text, so license files with
filled-in placeholders (names, years, addresses) still score as a match.
"""

from __future__ import annotations

import re
from collections import Counter
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from license_bundler.models.license import License

# Score thresholds (errors / template words)
HIGH_CONFIDENCE_LIMIT = 0.10
LOW_CONFIDENCE_LIMIT = 0.15

_WORD = re.compile(r"\w+")


class Confidence(str, Enum):
    """How well a license text matches the expected license.

    Confident > SemiConfident > Unsure > NoTemplate > MissingLicenseFile
    form an ordered scale. MultiplePossibleLicenseFiles and
    UnspecifiedLicenseInPackage are informational and not ordered.
    """

    CONFIDENT = "Confident"
    SEMI_CONFIDENT = "SemiConfident"
    UNSURE = "Unsure"
    NO_TEMPLATE = "NoTemplate"
    MISSING_LICENSE_FILE = "MissingLicenseFile"
    MULTIPLE_POSSIBLE_LICENSE_FILES = "MultiplePossibleLicenseFiles"
    UNSPECIFIED_LICENSE_IN_PACKAGE = "UnspecifiedLicenseInPackage"

    @property
    def is_tier(self) -> bool:
        """True if this confidence is part of the ordered scale."""
        return self in _TIER_RANKS

    @property
    def rank(self) -> int:
        """Position on the ordered scale, 0 being the best.

        Raises:
            ValueError: For informational confidences.
        """
        try:
            return _TIER_RANKS[self]
        except KeyError:
            raise ValueError(
                f"{self.value} is not an ordered confidence tier"
            ) from None

    def outranks(self, other: Confidence) -> bool:
        """True if this confidence is strictly better than ``other``."""
        return self.rank < other.rank


_TIER_RANKS: dict[Confidence, int] = {
    Confidence.CONFIDENT: 0,
    Confidence.SEMI_CONFIDENT: 1,
    Confidence.UNSURE: 2,
    Confidence.NO_TEMPLATE: 3,
    Confidence.MISSING_LICENSE_FILE: 4,
}


class LicenseText(BaseModel):
    """A candidate license text found in a package."""

    model_config = {"extra": "forbid"}

    path: Path = Field(description="File the text was read from")
    text: str = Field(description="Full file contents")
    confidence: Confidence = Field(description="Match against the expected license")


def word_frequencies(text: str) -> Counter[str]:
    """Count case-folded words in a text."""
    return Counter(word.lower() for word in _WORD.findall(text))


def compare_frequencies(text_freq: Counter[str], template_freq: Counter[str]) -> int:
    """Count word errors between a text and a template.

    Each template word contributes the difference between its template and
    text counts; each word missing from the template contributes its full
    count.
    """
    errors = 0
    for word, count in template_freq.items():
        errors += abs(text_freq.get(word, 0) - count)
    for word, count in text_freq.items():
        if word not in template_freq:
            errors += count
    return errors


def check_against_template(text: str, license: License) -> Confidence:
    """Score a text against the template(s) of a license.

    Args:
        text: Candidate license text.
        license: Expected license. For a multiple license the member
            templates are combined.

    Returns:
        Confident, SemiConfident or Unsure, or NoTemplate if the license
        (or any member of a multiple license) has no template.
    """
    if license.is_multiple:
        template_freq: Counter[str] = Counter()
        for member in license.members:
            template = member.template
            if template is None:
                return Confidence.NO_TEMPLATE
            template_freq.update(word_frequencies(template))
    else:
        template = license.template
        if template is None:
            return Confidence.NO_TEMPLATE
        template_freq = word_frequencies(template)

    total = sum(template_freq.values())
    if total == 0:
        return Confidence.NO_TEMPLATE

    score = compare_frequencies(word_frequencies(text), template_freq) / total
    if score < HIGH_CONFIDENCE_LIMIT:
        return Confidence.CONFIDENT
    if score < LOW_CONFIDENCE_LIMIT:
        return Confidence.SEMI_CONFIDENT
    return Confidence.UNSURE
