"""Best candidate selection among discovered license texts."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from license_bundler.analysis.confidence import Confidence, LicenseText

# Tiers in priority order; MissingLicenseFile is the result when all are empty
SELECTION_TIERS = (
    Confidence.CONFIDENT,
    Confidence.SEMI_CONFIDENT,
    Confidence.UNSURE,
    Confidence.NO_TEMPLATE,
)


class ChoiceKind(str, Enum):
    """Outcome of a selection."""

    SINGLE = "single"
    MULTIPLE = "multiple"
    NONE = "none"


class BestChoice(BaseModel):
    """The selected candidate(s) for one license.

    ``multiple`` means several candidates share the best tier; they are all
    kept so the ambiguity can be reported.
    """

    model_config = {"extra": "forbid"}

    kind: ChoiceKind = Field(description="Single, ambiguous or nothing found")
    texts: list[LicenseText] = Field(
        default_factory=list, description="Candidates at the chosen tier"
    )
    confidence: Confidence = Field(description="Tier of the chosen candidates")

    @property
    def text(self) -> Optional[LicenseText]:
        """The first candidate, or None when nothing was found."""
        return self.texts[0] if self.texts else None


def choose(texts: list[LicenseText]) -> BestChoice:
    """Choose the highest confidence candidate(s).

    Args:
        texts: Candidates for a single license.

    Returns:
        A single choice when the best tier has one candidate, a multiple
        choice when it has several, or none at MissingLicenseFile.
    """
    for tier in SELECTION_TIERS:
        matches = [text for text in texts if text.confidence == tier]
        if len(matches) == 1:
            return BestChoice(kind=ChoiceKind.SINGLE, texts=matches, confidence=tier)
        if matches:
            return BestChoice(kind=ChoiceKind.MULTIPLE, texts=matches, confidence=tier)
    return BestChoice(
        kind=ChoiceKind.NONE, confidence=Confidence.MISSING_LICENSE_FILE
    )
