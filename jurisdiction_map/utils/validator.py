"""Per-element validation of detected payloads."""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

import structlog

from ..models.jurisdiction import (
    ErrorDetail, JurisdictionStatus, PayloadShape, ValidationReport
)
from ..models.patent import LegalStatus, PatentApplication
from .errors import NoValidData
from .normalizer import JurisdictionNormalizer
from .shape_detector import DetectedPayload

logger = structlog.get_logger(__name__)

LEGAL_STATUSES = {status.value for status in LegalStatus}


@dataclass
class ValidatedPayload:
    """Valid elements of a payload together with its report.

    Exactly one of ``statuses`` or ``applications`` is filled, depending on
    the detected shape.
    """
    report: ValidationReport
    statuses: List[JurisdictionStatus] = field(default_factory=list)
    applications: List[PatentApplication] = field(default_factory=list)


def check_jurisdiction_status(item: Any) -> Optional[Tuple[str, str]]:
    """Return the offending field and why, or None for a valid jurisdiction status.

    The field is empty when the element itself is not an object.
    """
    if not isinstance(item, dict):
        return "", "must be an object"
    country = item.get("country")
    if not isinstance(country, str) or not country.strip():
        return "country", "must be a non-empty string"
    if not isinstance(item.get("leagueStatus"), str):
        return "leagueStatus", "must be a string"
    if not isinstance(item.get("active"), bool):
        return "active", "must be a boolean"
    return None


def check_application(item: Any) -> Optional[Tuple[str, str]]:
    """Return the offending field and why, or None for a valid patent application."""
    if not isinstance(item, dict):
        return "", "must be an object"
    code = item.get("country_code")
    if not isinstance(code, str) or not code.strip():
        return "country_code", "must be a non-empty string"
    if item.get("legal_status") not in LEGAL_STATUSES:
        return "legal_status", f"must be one of {sorted(LEGAL_STATUSES)}"
    return None


def field_detail(path: str, problem: Tuple[str, str]) -> ErrorDetail:
    name, message = problem
    return ErrorDetail(path=f"{path}.{name}" if name else path, message=message)


class PayloadValidator:
    """Validator that filters each payload shape down to usable elements."""

    def __init__(self, normalizer: Optional[JurisdictionNormalizer] = None):
        self.normalizer = normalizer or JurisdictionNormalizer()

    def validate(self, detected: DetectedPayload) -> ValidatedPayload:
        """Validate a detected payload, failing when nothing usable remains."""
        if detected.shape == PayloadShape.JURISDICTION_STATUS:
            result = self.validate_statuses(detected.payload)
        elif detected.shape == PayloadShape.PATENT_APPLICATIONS:
            result = self.validate_applications(detected.payload)
        else:
            result = self.extract_envelope(detected.payload)

        report = result.report
        logger.info("Payload validated",
                    shape=report.shape.value,
                    valid=report.valid,
                    invalid=report.invalid,
                    empty=report.empty,
                    duplicate=report.duplicate,
                    skipped_patents=report.skipped_patents)

        if report.valid == 0:
            raise NoValidData(report)
        return result

    def validate_statuses(self, items: List[Any]) -> ValidatedPayload:
        """Keep well-formed jurisdiction statuses; the first of each country wins."""
        report = ValidationReport(shape=PayloadShape.JURISDICTION_STATUS)
        statuses = []
        seen = set()

        for index, item in enumerate(items):
            path = f"[{index}]"
            if isinstance(item, dict) and not item:
                report.empty += 1
                report.details.append(ErrorDetail(path=path, message="empty object"))
                continue

            problem = check_jurisdiction_status(item)
            if problem:
                report.invalid += 1
                report.details.append(field_detail(path, problem))
                continue

            key = self.normalizer.country_key(item["country"])
            if key in seen:
                report.duplicate += 1
                report.details.append(ErrorDetail(
                    path=f"{path}.country",
                    message=f"duplicate country '{item['country'].strip()}'"
                ))
                continue

            seen.add(key)
            statuses.append(JurisdictionStatus(
                country=self.normalizer.normalize_country_name(item["country"]),
                league_status=item["leagueStatus"],
                active=item["active"],
            ))

        report.valid = len(statuses)
        return ValidatedPayload(report=report, statuses=statuses)

    def validate_applications(self, items: List[Any], prefix: str = "",
                              report: Optional[ValidationReport] = None) -> ValidatedPayload:
        """Keep well-formed patent applications, in input order."""
        if report is None:
            report = ValidationReport(shape=PayloadShape.PATENT_APPLICATIONS)
        applications = []

        for index, item in enumerate(items):
            path = f"{prefix}[{index}]"
            if isinstance(item, dict) and not item:
                report.empty += 1
                report.details.append(ErrorDetail(path=path, message="empty object"))
                continue

            problem = check_application(item)
            if problem:
                report.invalid += 1
                report.details.append(field_detail(path, problem))
                continue

            applications.append(PatentApplication(
                application_number=str(item.get("application_number") or ""),
                country_code=self.normalizer.normalize_country_code(item["country_code"]),
                filing_date=item["filing_date"] if isinstance(item.get("filing_date"), str) else "",
                legal_status=item["legal_status"],
            ))

        report.valid += len(applications)
        return ValidatedPayload(report=report, applications=applications)

    def extract_envelope(self, envelope: dict) -> ValidatedPayload:
        """Flatten pubchemResults.patents[*].applications[*] into one list."""
        report = ValidationReport(shape=PayloadShape.PUBCHEM_ENVELOPE)
        patents = (envelope.get("pubchemResults") or {}).get("patents")
        applications = []

        if not isinstance(patents, list):
            report.details.append(ErrorDetail(
                path="pubchemResults.patents", message="must be an array"
            ))
            return ValidatedPayload(report=report)

        for index, patent in enumerate(patents):
            path = f"pubchemResults.patents[{index}]"
            patent_applications = patent.get("applications") if isinstance(patent, dict) else None
            if not isinstance(patent_applications, list):
                report.skipped_patents += 1
                report.details.append(ErrorDetail(
                    path=f"{path}.applications", message="missing or not an array"
                ))
                continue

            result = self.validate_applications(
                patent_applications, prefix=f"{path}.applications", report=report
            )
            applications.extend(result.applications)

        return ValidatedPayload(report=report, applications=applications)
