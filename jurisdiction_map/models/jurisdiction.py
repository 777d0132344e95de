"""Jurisdiction status models returned to the map front-end."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class LeagueStatus(str, Enum):
    """Display tier derived from the filing date."""
    PREMIER = "Premier"
    STANDARD = "Standard"
    BASIC = "Basic"


class PayloadShape(str, Enum):
    """Accepted top-level payload shapes."""
    JURISDICTION_STATUS = "jurisdiction_status"
    PATENT_APPLICATIONS = "patent_applications"
    PUBCHEM_ENVELOPE = "pubchem_envelope"


class JurisdictionStatus(BaseModel):
    """Activity of one jurisdiction (country or regional office)."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    country: str
    league_status: str = Field(alias="leagueStatus")
    active: bool
    # Regional office that activated this record; not part of the wire format
    via_office: Optional[str] = Field(default=None, exclude=True)


class ErrorDetail(BaseModel):
    """One rejected element or field."""
    path: str
    message: str


class ValidationReport(BaseModel):
    """Outcome of validating a payload element by element.

    ``shape`` is None when the payload was rejected before a shape could be
    detected, e.g. an empty array.
    """
    shape: Optional[PayloadShape] = None
    valid: int = 0
    invalid: int = 0
    empty: int = 0
    duplicate: int = 0
    skipped_patents: int = 0
    details: List[ErrorDetail] = Field(default_factory=list)

    @property
    def rejected(self) -> int:
        return self.invalid + self.empty + self.duplicate


class ErrorResponse(BaseModel):
    """Structured error body returned by the API."""
    error: str
    message: str
    details: List[ErrorDetail] = Field(default_factory=list)


class CollectionStats(BaseModel):
    """Summary counts for the stored collection."""
    total: int
    active: int
    inactive: int
    premier: int
    standard: int
    basic: int


class ApplicationStats(BaseModel):
    """Summary counts for the applications of the stored compound."""
    total: int
    active: int
    inactive: int


class TooltipInfo(BaseModel):
    """Hover information for a single jurisdiction on the map."""
    code: str
    name: str
    active: bool
    via_regional_office: bool = False
    league_status: str = ""
