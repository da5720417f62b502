from __future__ import annotations

import logging
from decimal import Decimal

from ..common.datetime_utils import Period
from ..core.enums import RealizationSource, RealizationStatus, SessionCategory
from .model import SessionSummary
from .repository import RealizationRepository

logger = logging.getLogger(__name__)


class SessionRealizationAggregator:
    """Counts and sums approved session realizations per category."""

    def __init__(self, realizations: RealizationRepository):
        self._realizations = realizations

    def _approved(self, employee_id: int, period: Period):
        for r in self._realizations.find_for_employee(employee_id, period.start, period.end):
            if r.status != RealizationStatus.APPROVED:
                continue
            if r.session is None:
                logger.warning(
                    "realization %s references missing work session %s, skipped",
                    r.realization_id,
                    r.session_id,
                )
                continue
            yield r

    def summarize(self, employee_id: int, period: Period) -> SessionSummary:
        counts = {SessionCategory.CODING: 0, SessionCategory.NON_CODING: 0}
        income = {SessionCategory.CODING: Decimal("0"), SessionCategory.NON_CODING: Decimal("0")}

        for r in self._approved(employee_id, period):
            counts[r.session.category] += 1
            income[r.session.category] += r.session.rate

        return SessionSummary(
            coding_sessions=counts[SessionCategory.CODING],
            non_coding_sessions=counts[SessionCategory.NON_CODING],
            coding_income=income[SessionCategory.CODING],
            non_coding_income=income[SessionCategory.NON_CODING],
        )

    def overtime_income(self, employee_id: int, period: Period) -> Decimal:
        """Sum of rates of approved overtime realizations, read fresh from the store."""
        return sum(
            (r.session.rate for r in self._approved(employee_id, period) if r.source == RealizationSource.OVERTIME),
            Decimal("0"),
        )
