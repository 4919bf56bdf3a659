"""
CRP Infrastructure Repositories
===============================

Concrete implementation of the engineer roster repository.

The roster is held in memory and guarded by a lock. Every read hands
out deep copies, so a pipeline working on a snapshot never sees a
concurrent availability or workload change.
"""

import copy
import threading
from dataclasses import replace
from typing import Iterable, List, Optional

from crp_engine.config import AvailabilityStatus, SkillType
from crp_engine.core import ResourceNotFoundException, ValidationException
from crp_engine.crp.application.services import IEngineerRepository
from crp_engine.crp.domain import Engineer
from crp_engine.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class InMemoryEngineerRepository(IEngineerRepository):
    """
    Thread-safe in-memory roster.

    Engineers keep their insertion order; ids are unique.
    """

    def __init__(self, engineers: Optional[Iterable[Engineer]] = None):
        self._lock = threading.Lock()
        self._engineers: List[Engineer] = []
        if engineers is not None:
            self.replace_all(engineers)

    def _snapshot(self, engineers: Iterable[Engineer]) -> List[Engineer]:
        return [copy.deepcopy(e) for e in engineers]

    def find_by_id(self, engineer_id: str) -> Optional[Engineer]:
        """Get engineer by ID."""
        with self._lock:
            for engineer in self._engineers:
                if engineer.id == engineer_id:
                    return copy.deepcopy(engineer)
        return None

    def list_all(self) -> List[Engineer]:
        with self._lock:
            return self._snapshot(self._engineers)

    def list_available(self) -> List[Engineer]:
        with self._lock:
            return self._snapshot(e for e in self._engineers if e.is_available)

    def list_by_skill(self, skill: SkillType) -> List[Engineer]:
        with self._lock:
            return self._snapshot(e for e in self._engineers if e.has_skill(skill))

    def list_leads(self) -> List[Engineer]:
        with self._lock:
            return self._snapshot(e for e in self._engineers if e.is_lead_engineer)

    def replace_all(self, engineers: Iterable[Engineer]) -> int:
        """
        Swap in a whole new roster.

        Raises:
            ValidationException: two engineers share an id

        Returns:
            Number of engineers now in the roster
        """
        new_roster = self._snapshot(engineers)
        ids = [e.id for e in new_roster]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValidationException(
                "Duplicate engineer ids in roster",
                details={"duplicate_ids": duplicates}
            )

        with self._lock:
            self._engineers = new_roster
        logger.info("Engineer roster replaced", extra={"engineer_count": len(new_roster)})
        return len(new_roster)

    def _update(self, engineer_id: str, **changes) -> Engineer:
        with self._lock:
            for index, engineer in enumerate(self._engineers):
                if engineer.id == engineer_id:
                    updated = replace(engineer, **changes)
                    self._engineers[index] = updated
                    return copy.deepcopy(updated)
        raise ResourceNotFoundException("Engineer", engineer_id)

    def update_availability(self, engineer_id: str, availability: AvailabilityStatus) -> Engineer:
        """
        Change an engineer's availability.

        Raises:
            ResourceNotFoundException: unknown engineer id
        """
        engineer = self._update(engineer_id, availability=availability)
        logger.info(
            "Engineer availability updated",
            extra={"engineer_id": engineer_id, "availability": availability.value}
        )
        return engineer

    def update_workload(self, engineer_id: str, workload: int) -> Engineer:
        """
        Change an engineer's current workload (0-100).

        Raises:
            ResourceNotFoundException: unknown engineer id
            ValidationException: workload out of range
        """
        if not 0 <= workload <= 100:
            raise ValidationException(
                "Workload must be between 0 and 100",
                details={"engineer_id": engineer_id, "workload": workload}
            )
        return self._update(engineer_id, current_workload=workload)
