"""Error taxonomy for the jurisdiction pipeline."""

from typing import List, Optional

from ..models.jurisdiction import ErrorDetail, ErrorResponse, ValidationReport

ACCEPTED_SHAPES = (
    "an array of {country, leagueStatus, active} objects, "
    "an array of {country_code, legal_status} patent applications, "
    "or a {pubchemResults: {patents: [...]}} envelope"
)


class JurisdictionMapError(Exception):
    """Base class for errors reported to API callers."""

    error = "JurisdictionMapError"
    status_code = 500

    def __init__(self, message: str, details: Optional[List[ErrorDetail]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or []

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.error, message=self.message, details=self.details)


class MalformedInput(JurisdictionMapError):
    """Payload is not JSON, or not a JSON object or array."""

    error = "MalformedInput"
    status_code = 400


class UnrecognizedShape(JurisdictionMapError):
    """Payload structure matches none of the accepted shapes."""

    error = "UnrecognizedShape"
    status_code = 400

    def __init__(self, reason: str, details: Optional[List[ErrorDetail]] = None):
        super().__init__(f"{reason}; expected {ACCEPTED_SHAPES}", details)


class ValidationFailure(JurisdictionMapError):
    """Some elements were rejected; carries the validation report."""

    error = "ValidationFailure"
    status_code = 400

    def __init__(self, message: str, report: ValidationReport):
        super().__init__(message, list(report.details))
        self.report = report


class NoValidData(ValidationFailure):
    """Validation left nothing usable; existing state must not change."""

    error = "NoValidData"

    def __init__(self, report: ValidationReport):
        super().__init__(
            f"No valid elements found (invalid={report.invalid}, "
            f"empty={report.empty}, duplicate={report.duplicate}, "
            f"skipped_patents={report.skipped_patents})",
            report,
        )


class UpstreamFetchFailure(JurisdictionMapError):
    """The upstream chemistry API could not deliver a payload."""

    error = "UpstreamFetchFailure"
    status_code = 502
