"""Shape detection for incoming jurisdiction payloads."""

import json
from dataclasses import dataclass
from typing import Any, Union

import structlog

from ..models.jurisdiction import PayloadShape, ValidationReport
from .errors import MalformedInput, NoValidData, UnrecognizedShape

logger = structlog.get_logger(__name__)

APPLICATION_KEYS = ("country_code", "legal_status")
STATUS_KEYS = ("country", "leagueStatus")


@dataclass(frozen=True)
class DetectedPayload:
    """A payload tagged with the shape it was recognized as."""
    shape: PayloadShape
    payload: Any


def parse_json(raw: Union[str, bytes]) -> Any:
    """Parse a raw request body, rejecting anything that is not JSON."""
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedInput(f"Payload is not valid JSON: {e}")


def detect_shape(value: Any) -> DetectedPayload:
    """Classify a parsed JSON value into one of the accepted shapes.

    Only the first element of an array is inspected; later elements are
    left to per-element validation.
    """
    if isinstance(value, list):
        if not value:
            raise NoValidData(ValidationReport())

        first = value[0]
        if not isinstance(first, dict):
            raise UnrecognizedShape("First array element is not an object")

        if all(key in first for key in APPLICATION_KEYS):
            shape = PayloadShape.PATENT_APPLICATIONS
        elif all(key in first for key in STATUS_KEYS):
            shape = PayloadShape.JURISDICTION_STATUS
        else:
            raise UnrecognizedShape(
                f"First array element has unrecognized keys {sorted(first)}"
            )

    elif isinstance(value, dict):
        results = value.get("pubchemResults")
        if not isinstance(results, dict) or "patents" not in results:
            raise UnrecognizedShape("Object has no pubchemResults.patents")
        shape = PayloadShape.PUBCHEM_ENVELOPE

    else:
        raise MalformedInput(
            f"Payload must be a JSON object or array, got {type(value).__name__}"
        )

    logger.debug("Payload shape detected", shape=shape.value)
    return DetectedPayload(shape=shape, payload=value)
