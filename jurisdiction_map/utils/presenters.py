"""Presentation adapters over the normalized jurisdiction collection."""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from ..models.jurisdiction import (
    ApplicationStats, CollectionStats, JurisdictionStatus, LeagueStatus, TooltipInfo
)
from ..models.patent import LegalStatus, PatentApplication
from .normalizer import JurisdictionNormalizer
from .regional_offices import offices_for


class JurisdictionPresenter(ABC):
    """Base class for views rendered from the same normalized collection."""

    @abstractmethod
    def present(self, collection: Sequence[JurisdictionStatus]) -> Any:
        pass


class StatsPresenter(JurisdictionPresenter):
    """Totals per activity and league status tier."""

    def present(self, collection: Sequence[JurisdictionStatus]) -> CollectionStats:
        active = sum(1 for record in collection if record.active)
        tiers = [record.league_status for record in collection]
        return CollectionStats(
            total=len(collection),
            active=active,
            inactive=len(collection) - active,
            premier=tiers.count(LeagueStatus.PREMIER.value),
            standard=tiers.count(LeagueStatus.STANDARD.value),
            basic=tiers.count(LeagueStatus.BASIC.value),
        )


class TooltipPresenter(JurisdictionPresenter):
    """Hover information for one jurisdiction code."""

    def __init__(self, code: str, normalizer: Optional[JurisdictionNormalizer] = None):
        self.normalizer = normalizer or JurisdictionNormalizer()
        self.code = self.normalizer.normalize_country_code(code) or code

    def _lookup(self, collection: Sequence[JurisdictionStatus], code: str):
        # Records carry either a code or, for uploaded statuses, a display name
        keys = {code.casefold(), self.normalizer.display_name(code).casefold()}
        for record in collection:
            if self.normalizer.country_key(record.country) in keys:
                return record
        return None

    def present(self, collection: Sequence[JurisdictionStatus]) -> TooltipInfo:
        name = self.normalizer.display_name(self.code)
        record = self._lookup(collection, self.code)
        if record is not None:
            return TooltipInfo(code=self.code, name=name, active=record.active,
                               via_regional_office=record.via_office is not None,
                               league_status=record.league_status)

        for office in offices_for(self.code):
            office_record = self._lookup(collection, office)
            if office_record is not None and office_record.active:
                return TooltipInfo(code=self.code, name=name, active=True,
                                   via_regional_office=True,
                                   league_status=office_record.league_status)

        return TooltipInfo(code=self.code, name=name, active=False)


class ApplicationStatsPresenter:
    """Application counts for the stored compound."""

    def present(self, applications: List[PatentApplication]) -> ApplicationStats:
        active = sum(1 for app in applications if app.legal_status == LegalStatus.ACTIVE)
        return ApplicationStats(
            total=len(applications),
            active=active,
            inactive=len(applications) - active,
        )
