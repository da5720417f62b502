from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..auth.policy import Actor
from ..common.datetime_utils import Period
from ..common.validators import optional_text, require_non_empty
from ..core.enums import RealizationSource, RealizationStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import REALIZATION_TRANSITIONS, SessionRealization, WorkSession
from .repository import RealizationRepository, WorkSessionRepository

logger = logging.getLogger(__name__)


class RealizationService:
    def __init__(
        self,
        realizations: RealizationRepository,
        sessions: WorkSessionRepository,
        employees: EmployeeRepository,
    ):
        self._realizations = realizations
        self._sessions = sessions
        self._employees = employees

    def list_sessions(self) -> Sequence[WorkSession]:
        return self._sessions.list_sessions(active_only=True)

    def get(self, realization_id: int) -> SessionRealization:
        r = self._realizations.get_by_id(int(realization_id))
        if not r:
            raise NotFoundError("Session realization not found", resource="session_realization")
        return r

    def list_for_employee(self, employee_id: int, period: Period) -> Sequence[SessionRealization]:
        return self._realizations.find_for_employee(int(employee_id), period.start, period.end)

    def claim(
        self,
        actor: Actor,
        *,
        employee_id: int,
        work_date: date,
        session_id: int,
        source: RealizationSource = RealizationSource.SCHEDULED,
        note: Optional[str] = None,
        auto_approve: bool = False,
    ) -> SessionRealization:
        """Claim one session slot on one date.

        Claims filed by a session manager are approved immediately and stamped
        with the manager as approver.
        """
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found", resource="employee")

        session = self._sessions.get_session(int(session_id))
        if not session:
            raise NotFoundError("Work session not found", resource="work_session")
        if not session.is_active:
            raise ValidationError("Work session is not active")

        status = RealizationStatus.APPROVED if auto_approve else RealizationStatus.SUBMITTED
        realization_id = self._realizations.create(
            employee_id=int(employee_id),
            work_date=work_date,
            session_id=session.session_id,
            status=status,
            source=source,
            approved_by=actor.user_id if auto_approve else None,
            note=optional_text(note),
        )
        logger.info(
            "session %s claimed for %s (%s)",
            session.session_id,
            work_date.isoformat(),
            status.value,
            extra={"employee_id": int(employee_id)},
        )
        return self.get(realization_id)

    def _move(
        self,
        actor: Actor,
        realization_id: int,
        target: RealizationStatus,
        note: Optional[str],
    ) -> SessionRealization:
        r = self.get(realization_id)
        if target not in REALIZATION_TRANSITIONS[r.status]:
            raise ValidationError(f"Session realization is already {r.status.value}")

        if not self._realizations.transition(
            realization_id=r.realization_id,
            expected=r.status,
            status=target,
            approved_by=actor.user_id,
            note=note,
        ):
            raise ConflictError("Session realization was changed by another user, reload and retry")

        logger.info("realization %s: %s -> %s", r.realization_id, r.status.value, target.value)
        return self.get(r.realization_id)

    def approve(self, actor: Actor, realization_id: int, *, note: Optional[str] = None) -> SessionRealization:
        return self._move(actor, realization_id, RealizationStatus.APPROVED, optional_text(note))

    def reject(self, actor: Actor, realization_id: int, *, note: str) -> SessionRealization:
        return self._move(actor, realization_id, RealizationStatus.REJECTED, require_non_empty(note, "Note"))
