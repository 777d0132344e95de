"""Patent data models for the jurisdiction map."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class LegalStatus(str, Enum):
    """Legal status of a single patent application."""
    ACTIVE = "active"
    NOT_ACTIVE = "not_active"


class PatentApplication(BaseModel):
    """Model for one national or regional patent application."""
    model_config = ConfigDict(frozen=True)

    application_number: str = ""
    country_code: str
    filing_date: str = ""
    legal_status: LegalStatus


class Patent(BaseModel):
    """Model for a patent grouping one or more applications."""
    patent_id: Optional[str] = None
    patent_number: Optional[str] = None
    country_code: Optional[str] = None
    country_name: Optional[str] = None
    patent_status: Optional[str] = None
    expiration_date: Optional[str] = None
    kind_code: Optional[str] = None
    source: Optional[str] = None
    url: Optional[str] = None
    applications: List[PatentApplication] = Field(default_factory=list)


class CurrentCompound(BaseModel):
    """Model for the compound the patents were retrieved for."""
    cid: int
    recordTitle: str
    smile: Optional[str] = None


class SimilarCompound(BaseModel):
    """Model for a structurally similar compound."""
    cid: int
    iupacName: Optional[str] = None
    recordTitle: Optional[str] = None
    similarity_score: float = 0.0
    smile: Optional[str] = None


class PubChemResults(BaseModel):
    """Model for the PubChem section of the chemistry API response."""
    currentCompound: Optional[CurrentCompound] = None
    patents: List[Patent] = Field(default_factory=list)
    similarCompound: List[SimilarCompound] = Field(default_factory=list)


class CompoundData(BaseModel):
    """Model for the complete chemistry API response envelope."""
    pubchemResults: PubChemResults
    success: bool = True
