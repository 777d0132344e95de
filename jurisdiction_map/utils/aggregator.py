"""Aggregation of patent applications into per-jurisdiction status."""

from typing import Dict, Iterable, List, Optional

import structlog

from ..models.jurisdiction import JurisdictionStatus
from ..models.patent import LegalStatus, PatentApplication
from .normalizer import JurisdictionNormalizer
from .regional_offices import get_members, is_regional_office

logger = structlog.get_logger(__name__)


class JurisdictionAggregator:
    """Collapses applications into one status record per jurisdiction.

    Activation is sticky: once an application marks a jurisdiction active,
    later applications for the same code cannot make it inactive again. An
    active regional office (e.g. ``EP``) activates each of its members that
    has no explicit record of its own.
    """

    def __init__(self, normalizer: Optional[JurisdictionNormalizer] = None):
        self.normalizer = normalizer or JurisdictionNormalizer()

    def classify(self, application: PatentApplication) -> str:
        return self.normalizer.classify_league_status(application.filing_date).value

    def aggregate(self, applications: Iterable[PatentApplication]) -> List[JurisdictionStatus]:
        records: Dict[str, dict] = {}

        for application in applications:
            code = application.country_code
            existing = records.get(code)
            if existing is not None and existing["active"]:
                continue

            records[code] = {
                "active": application.legal_status == LegalStatus.ACTIVE,
                "league_status": self.classify(application),
            }

        expanded = self._expand_regional_offices(records)

        logger.debug("Applications aggregated",
                     jurisdictions=len(records),
                     expanded=expanded)

        return [
            JurisdictionStatus(country=code, league_status=record["league_status"],
                               active=record["active"], via_office=record.get("via_office"))
            for code, record in records.items()
        ]

    def _expand_regional_offices(self, records: Dict[str, dict]) -> int:
        """Activate members of active regional offices that have no explicit record."""
        expanded = 0
        offices = [
            (code, record) for code, record in records.items()
            if is_regional_office(code) and record["active"]
        ]

        for office, record in offices:
            for member in get_members(office):
                if member in records:
                    continue
                records[member] = {
                    "active": True,
                    "league_status": record["league_status"],
                    "via_office": office,
                }
                expanded += 1

        return expanded
