"""In-memory state holders for the jurisdiction collection and compound data."""

import copy
import threading
from typing import Any, Dict, Iterable, List, Optional

import structlog

from ..models.jurisdiction import JurisdictionStatus
from .validator import check_jurisdiction_status

logger = structlog.get_logger(__name__)


class JurisdictionStore:
    """Process-lifetime store for the normalized jurisdiction collection.

    The backing collection is an immutable tuple that is swapped as a whole
    under a lock, so readers always see either the old or the new state.
    """

    def __init__(self, initial: Optional[Iterable[Any]] = None):
        self._lock = threading.Lock()
        self._records = ()
        self.revision = 0
        if initial:
            self.replace_all(initial)

    def get_all(self) -> List[JurisdictionStatus]:
        """Return a fresh list of the stored records."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def replace_all(self, data: Iterable[Any]) -> List[JurisdictionStatus]:
        """Swap in a new collection, dropping invalid elements.

        If no element is valid the previous state is kept and the revision
        is left unchanged.
        """
        valid = []
        dropped = 0
        for item in data:
            record = item.model_dump(by_alias=True) if isinstance(item, JurisdictionStatus) else item
            if check_jurisdiction_status(record):
                dropped += 1
                continue
            valid.append(item if isinstance(item, JurisdictionStatus)
                         else JurisdictionStatus.model_validate(record))

        if not valid:
            logger.warning("Collection replace ignored, no valid records", dropped=dropped)
            return self.get_all()

        with self._lock:
            self._records = tuple(valid)
            self.revision += 1
            revision = self.revision

        logger.info("Collection replaced",
                    count=len(valid),
                    dropped=dropped,
                    revision=revision)
        return self.get_all()


class CompoundStore:
    """Process-lifetime store for the latest chemistry API envelope."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._lock = threading.Lock()
        self._data = copy.deepcopy(initial) if initial else None

    def get(self) -> Optional[Dict[str, Any]]:
        """Return a deep copy of the stored envelope, or None."""
        with self._lock:
            return copy.deepcopy(self._data)

    def update(self, data: Any) -> Optional[Dict[str, Any]]:
        """Store a new envelope; keeps the previous one if the shape is wrong."""
        results = data.get("pubchemResults") if isinstance(data, dict) else None
        if not isinstance(results, dict) or not results.get("currentCompound"):
            logger.error("Invalid compound data structure")
            return self.get()

        with self._lock:
            self._data = copy.deepcopy(data)

        logger.info("Compound data updated",
                    cid=results["currentCompound"].get("cid") if isinstance(results["currentCompound"], dict) else None,
                    patents=len(results.get("patents") or []))
        return self.get()
