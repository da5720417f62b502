from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import RealizationSource, RealizationStatus
from .model import SessionRealization, WorkSession


class WorkSessionRepository(Protocol):
    def get_session(self, session_id: int) -> Optional[WorkSession]:
        raise NotImplementedError

    def list_sessions(self, *, active_only: bool = True) -> Sequence[WorkSession]:
        raise NotImplementedError


class RealizationRepository(Protocol):
    def get_by_id(self, realization_id: int) -> Optional[SessionRealization]:
        raise NotImplementedError

    def find_for_employee(self, employee_id: int, start_date: date, end_date: date) -> Sequence[SessionRealization]:
        """Realizations in range, each resolving its linked work session (or None)."""

        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        work_date: date,
        session_id: int,
        status: RealizationStatus,
        source: RealizationSource,
        approved_by: Optional[int] = None,
        note: Optional[str] = None,
    ) -> int:
        """Insert a claim; raises ConflictError when (work_date, session_id) is taken."""

        raise NotImplementedError

    def transition(
        self,
        *,
        realization_id: int,
        expected: RealizationStatus,
        status: RealizationStatus,
        approved_by: Optional[int],
        note: Optional[str],
    ) -> bool:
        raise NotImplementedError
