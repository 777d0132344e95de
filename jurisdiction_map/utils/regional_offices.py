"""Static jurisdiction tables: regional patent offices and display names."""

from types import MappingProxyType
from typing import Mapping, Tuple

# European Patent Office member states, in display order
EPO_MEMBERS = (
    "DE", "FR", "GB", "IT", "ES", "NL", "BE", "LU", "DK",
    "SE", "FI", "AT", "GR", "PT", "IE", "CY", "MT",
)

REGIONAL_OFFICES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "EP": EPO_MEMBERS,
})

JURISDICTION_NAMES: Mapping[str, str] = MappingProxyType({
    "US": "United States",
    "CA": "Canada",
    "MX": "Mexico",
    "BR": "Brazil",
    "AR": "Argentina",
    "GB": "United Kingdom",
    "FR": "France",
    "DE": "Germany",
    "IT": "Italy",
    "ES": "Spain",
    "NL": "Netherlands",
    "BE": "Belgium",
    "LU": "Luxembourg",
    "DK": "Denmark",
    "SE": "Sweden",
    "FI": "Finland",
    "AT": "Austria",
    "GR": "Greece",
    "PT": "Portugal",
    "IE": "Ireland",
    "CY": "Cyprus",
    "MT": "Malta",
    "JP": "Japan",
    "CN": "China",
    "IN": "India",
    "AU": "Australia",
    "RU": "Russia",
    "ZA": "South Africa",
    "EP": "European Patent Office",
    "WO": "World Intellectual Property Organization",
})


def is_regional_office(code: str) -> bool:
    return code in REGIONAL_OFFICES


def get_members(code: str) -> Tuple[str, ...]:
    """Member jurisdictions of a regional office, empty for anything else."""
    return REGIONAL_OFFICES.get(code, ())


def offices_for(member: str) -> list:
    """Regional offices that list the given jurisdiction as a member."""
    return [office for office, members in REGIONAL_OFFICES.items() if member in members]


def get_display_name(code: str) -> str:
    return JURISDICTION_NAMES.get(code, code)
