"""Jurisdiction normalizer for standardizing loosely typed patent fields."""

import re
from datetime import date, datetime
from typing import Any, Optional

import structlog

from ..models.jurisdiction import LeagueStatus
from .regional_offices import get_display_name

logger = structlog.get_logger(__name__)

PREMIER_FROM_YEAR = 2015
STANDARD_FROM_YEAR = 2010


class JurisdictionNormalizer:
    """Normalizer for jurisdiction codes, names and filing dates."""

    def __init__(self):
        # Accepted filing date layouts, tried in order
        self.date_formats = [
            '%Y-%m-%d',
            '%Y/%m/%d',
            '%Y%m%d',
            '%Y-%m-%dT%H:%M:%S',
            '%Y-%m-%dT%H:%M:%SZ',
            '%B %d, %Y',
            '%b %d, %Y',
            '%d %B %Y',
            '%d %b %Y',
        ]

    def normalize_country_code(self, code: Any) -> Optional[str]:
        """Normalize a jurisdiction code to trimmed upper case."""
        if not isinstance(code, str):
            return None

        normalized = re.sub(r'\s+', '', code).upper()
        return normalized or None

    def normalize_country_name(self, name: Any) -> Optional[str]:
        """Normalize a free-text jurisdiction name."""
        if not isinstance(name, str):
            return None

        normalized = re.sub(r'\s+', ' ', name).strip()
        return normalized or None

    def country_key(self, name: str) -> str:
        """Case-insensitive key used to detect duplicate names."""
        return (self.normalize_country_name(name) or "").casefold()

    def display_name(self, code: str) -> str:
        return get_display_name(self.normalize_country_code(code) or code)

    def normalize_date(self, date_obj: Any) -> Optional[date]:
        """Normalize a filing date to a calendar date."""
        try:
            if not date_obj:
                return None

            if isinstance(date_obj, datetime):
                return date_obj.date()

            if isinstance(date_obj, date):
                return date_obj

            if isinstance(date_obj, str):
                value = date_obj.strip()
                for fmt in self.date_formats:
                    try:
                        return datetime.strptime(value, fmt).date()
                    except ValueError:
                        continue

                # Fall back to a leading YYYY-MM-DD, e.g. with a timezone suffix
                date_match = re.match(r'^(\d{4})[-/](\d{1,2})[-/](\d{1,2})', value)
                if date_match:
                    year, month, day = date_match.groups()
                    return date(int(year), int(month), int(day))

            return None

        except ValueError as e:
            logger.debug("Date normalization failed", error=str(e), date_obj=date_obj)
            return None

    def classify_league_status(self, filing_date: Any) -> LeagueStatus:
        """Classify a filing date into a league status tier."""
        parsed = self.normalize_date(filing_date)
        if parsed is None:
            return LeagueStatus.STANDARD

        if parsed.year >= PREMIER_FROM_YEAR:
            return LeagueStatus.PREMIER
        if parsed.year < STANDARD_FROM_YEAR:
            return LeagueStatus.BASIC
        return LeagueStatus.STANDARD
