from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from ..common.datetime_utils import Period
from ..core.exceptions import NotFoundError
from ..employees.repository import EmployeeRepository
from .builder import MonthlyRecapBuilder
from .model import MonthlyRecap, RecapOutcome
from .repository import RecapRepository

logger = logging.getLogger(__name__)


class RecapService:
    """Use case: generate and read monthly recaps."""

    def __init__(
        self,
        builder: MonthlyRecapBuilder,
        recaps: RecapRepository,
        employees: EmployeeRepository,
        *,
        max_workers: int = 1,
    ):
        self._builder = builder
        self._recaps = recaps
        self._employees = employees
        self._max_workers = max(1, int(max_workers))

    def get(self, recap_id: int) -> MonthlyRecap:
        recap = self._recaps.get_by_id(int(recap_id))
        if not recap:
            raise NotFoundError("Recap not found", resource="recap")
        return recap

    def list_by_period(self, period: str) -> Sequence[MonthlyRecap]:
        return self._recaps.list_by_period(str(Period.parse(period)))

    def _build_one(self, employee_id: int, period: Period) -> RecapOutcome:
        try:
            return RecapOutcome(employee_id=employee_id, recap=self._builder.build(employee_id, period))
        except Exception as exc:
            logger.exception("recap generation failed", extra={"employee_id": employee_id, "period": str(period)})
            return RecapOutcome(employee_id=employee_id, error=str(exc) or exc.__class__.__name__)

    def generate(self, period: str) -> list[RecapOutcome]:
        """Rebuild the recap of every active employee for ``period`` (YYYY-MM).

        Each employee is built in its own transaction; one failure is reported
        in its outcome and does not stop the others.
        """
        p = Period.parse(period)
        employee_ids = [e.employee_id for e in self._employees.list_active()]

        if self._max_workers > 1 and len(employee_ids) > 1:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                outcomes = list(pool.map(lambda eid: self._build_one(eid, p), employee_ids))
        else:
            outcomes = [self._build_one(eid, p) for eid in employee_ids]

        failed = sum(1 for o in outcomes if not o.ok)
        logger.info("recap %s generated: %d ok, %d failed", p, len(outcomes) - failed, failed)
        return outcomes
