"""In-memory implementations of the repository Protocols used across tests."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, time
from decimal import Decimal
from typing import Optional

from src.payroll_system.payroll_system.attendance.model import AttendanceLog, AttendanceRecord
from src.payroll_system.payroll_system.auth.policy import Actor, Role
from src.payroll_system.payroll_system.core.enums import (
    AttendanceStatus,
    DayOfWeek,
    LeaveStatus,
    LeaveType,
    PaymentStatus,
    PayrollStatus,
    RealizationSource,
    RealizationStatus,
    SessionCategory,
)
from src.payroll_system.payroll_system.core.exceptions import ConflictError
from src.payroll_system.payroll_system.employees.model import Employee
from src.payroll_system.payroll_system.leave.model import QUOTA_HOLDING_STATUSES, LeaveRequest
from src.payroll_system.payroll_system.payroll.model import Payroll, PayrollDraft, PayrollPayment
from src.payroll_system.payroll_system.recap.model import MonthlyRecap
from src.payroll_system.payroll_system.sessions.model import SessionRealization, WorkSession


class InMemoryEmployees:
    def __init__(self, *employees: Employee):
        self.employees = {e.employee_id: e for e in employees}

    def add(self, employee: Employee) -> Employee:
        self.employees[employee.employee_id] = employee
        return employee

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.employees.get(int(employee_id))

    def list_active(self):
        return [e for _, e in sorted(self.employees.items()) if e.is_active]


class InMemoryAttendance:
    def __init__(self):
        self._next_id = 1
        self._next_log_id = 1
        self.records: dict[int, AttendanceRecord] = {}
        self.logs: dict[int, AttendanceLog] = {}

    def add(self, employee_id: int, work_date: date, status: AttendanceStatus = AttendanceStatus.PRESENT):
        return self.create(employee_id=employee_id, work_date=work_date, status=status)

    def find_for_employee(self, employee_id, start_date, end_date):
        return [
            r
            for r in sorted(self.records.values(), key=lambda r: r.work_date)
            if r.employee_id == employee_id and start_date <= r.work_date <= end_date
        ]

    def get_by_id(self, attendance_id):
        return self.records.get(int(attendance_id))

    def get_for_employee_and_date(self, employee_id, work_date):
        return next(
            (r for r in self.records.values() if r.employee_id == employee_id and r.work_date == work_date),
            None,
        )

    def create(self, *, employee_id, work_date, status, check_in=None, check_out=None, source=None, note=None):
        if self.get_for_employee_and_date(employee_id, work_date):
            raise ConflictError("Attendance already recorded for this employee on this date")
        aid = self._next_id
        self._next_id += 1
        self.records[aid] = AttendanceRecord(
            attendance_id=aid,
            employee_id=employee_id,
            work_date=work_date,
            status=status,
            check_in=check_in,
            check_out=check_out,
            source=source,
            note=note,
        )
        return aid

    def update_checkout(self, *, attendance_id, check_out: time, source=None):
        r = self.records.get(int(attendance_id))
        if not r or r.check_out is not None:
            return False
        self.records[r.attendance_id] = replace(r, check_out=check_out, source=source or r.source)
        return True

    def get_log(self, log_id):
        return self.logs.get(int(log_id))

    def create_log(self, **fields):
        lid = self._next_log_id
        self._next_log_id += 1
        self.logs[lid] = AttendanceLog(log_id=lid, **fields)
        return lid

    def update_log(self, log: AttendanceLog) -> None:
        self.logs[log.log_id] = log


class InMemoryLeaves:
    def __init__(self):
        self._next_id = 1
        self.requests: dict[int, LeaveRequest] = {}

    def add(self, employee_id, leave_date, leave_type=LeaveType.PERSONAL, status=LeaveStatus.APPROVED, approved_by=1):
        rid = self.create(employee_id=employee_id, leave_date=leave_date, leave_type=leave_type)
        self.requests[rid] = replace(self.requests[rid], status=status, approved_by=approved_by)
        return self.requests[rid]

    def get_by_id(self, request_id):
        return self.requests.get(int(request_id))

    def get_for_employee_and_date(self, employee_id, leave_date):
        return next(
            (r for r in self.requests.values() if r.employee_id == employee_id and r.leave_date == leave_date),
            None,
        )

    def find_for_employee(self, employee_id, start_date, end_date):
        return [
            r
            for r in sorted(self.requests.values(), key=lambda r: r.leave_date)
            if r.employee_id == employee_id and start_date <= r.leave_date <= end_date
        ]

    def count_held(self, employee_id, leave_type, start_date, end_date):
        return sum(
            1
            for r in self.find_for_employee(employee_id, start_date, end_date)
            if r.leave_type == leave_type and r.status in QUOTA_HOLDING_STATUSES
        )

    def create(self, *, employee_id, leave_date, leave_type, note=None):
        if self.get_for_employee_and_date(employee_id, leave_date):
            raise ConflictError("A leave request for this employee on this date already exists")
        rid = self._next_id
        self._next_id += 1
        self.requests[rid] = LeaveRequest(
            request_id=rid,
            employee_id=employee_id,
            leave_date=leave_date,
            leave_type=leave_type,
            status=LeaveStatus.SUBMITTED,
            note=note,
        )
        return rid

    def update_details(self, *, request_id, leave_date, leave_type, note):
        r = self.requests[int(request_id)]
        self.requests[r.request_id] = replace(r, leave_date=leave_date, leave_type=leave_type, note=note)

    def transition(self, *, request_id, expected, status, approved_by):
        r = self.requests.get(int(request_id))
        if not r or r.status != expected:
            return False
        self.requests[r.request_id] = replace(r, status=status, approved_by=approved_by)
        return True


def make_session(
    session_id: int,
    category: SessionCategory = SessionCategory.CODING,
    rate: str = "100000",
    *,
    is_active: bool = True,
) -> WorkSession:
    return WorkSession(
        session_id=session_id,
        category=category,
        day_of_week=DayOfWeek.MONDAY,
        session_number=session_id,
        start_time=time(8, 0),
        end_time=time(10, 0),
        rate=Decimal(rate),
        is_active=is_active,
    )


class InMemorySessions:
    """Work sessions and realizations; the (date, session) key is guarded by a lock like a unique index."""

    def __init__(self, *sessions: WorkSession):
        self._next_id = 1
        self._lock = threading.Lock()
        self.sessions = {s.session_id: s for s in sessions}
        self.realizations: dict[int, SessionRealization] = {}

    def add(
        self,
        employee_id,
        work_date,
        session_id,
        *,
        status=RealizationStatus.APPROVED,
        source=RealizationSource.SCHEDULED,
    ):
        rid = self.create(
            employee_id=employee_id,
            work_date=work_date,
            session_id=session_id,
            status=status,
            source=source,
        )
        return self.get_by_id(rid)

    def get_session(self, session_id):
        return self.sessions.get(int(session_id))

    def list_sessions(self, *, active_only=True):
        return [s for s in self.sessions.values() if s.is_active or not active_only]

    def _resolve(self, r: SessionRealization) -> SessionRealization:
        return replace(r, session=self.sessions.get(r.session_id))

    def get_by_id(self, realization_id):
        r = self.realizations.get(int(realization_id))
        return self._resolve(r) if r else None

    def find_for_employee(self, employee_id, start_date, end_date):
        return [
            self._resolve(r)
            for r in self.realizations.values()
            if r.employee_id == employee_id and start_date <= r.work_date <= end_date
        ]

    def create(self, *, employee_id, work_date, session_id, status, source, approved_by=None, note=None):
        with self._lock:
            taken = any(r.work_date == work_date and r.session_id == session_id for r in self.realizations.values())
            if taken:
                raise ConflictError("This session has already been claimed for that date")
            rid = self._next_id
            self._next_id += 1
            self.realizations[rid] = SessionRealization(
                realization_id=rid,
                employee_id=employee_id,
                work_date=work_date,
                session_id=session_id,
                status=status,
                source=source,
                approved_by=approved_by,
                note=note,
            )
            return rid

    def transition(self, *, realization_id, expected, status, approved_by, note):
        r = self.realizations.get(int(realization_id))
        if not r or r.status != expected:
            return False
        self.realizations[r.realization_id] = replace(
            r, status=status, approved_by=approved_by, note=note if note is not None else r.note
        )
        return True


class InMemoryRecaps:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, MonthlyRecap] = {}

    def add(self, recap: MonthlyRecap) -> MonthlyRecap:
        return self.get_by_id(self.upsert(recap))

    def get_by_id(self, recap_id):
        return self.rows.get(int(recap_id))

    def get_for_employee_and_period(self, employee_id, period):
        return next(
            (r for r in self.rows.values() if r.employee_id == employee_id and r.period == period),
            None,
        )

    def list_by_period(self, period):
        return sorted((r for r in self.rows.values() if r.period == period), key=lambda r: r.employee_id)

    def upsert(self, recap: MonthlyRecap) -> int:
        existing = self.get_for_employee_and_period(recap.employee_id, recap.period)
        rid = existing.recap_id if existing else self._next_id
        if not existing:
            self._next_id += 1
        self.rows[rid] = replace(recap, recap_id=rid)
        return rid


class InMemoryPayrolls:
    def __init__(self):
        self._next_id = 1
        self._next_payment_id = 1
        self.rows: dict[int, Payroll] = {}
        self.payments: dict[int, PayrollPayment] = {}

    def get_by_id(self, payroll_id):
        return self.rows.get(int(payroll_id))

    def get_for_employee_and_period(self, employee_id, period):
        return next(
            (p for p in self.rows.values() if p.employee_id == employee_id and p.period == period),
            None,
        )

    def list_by_period(self, period):
        return [p for p in self.rows.values() if p.period == period]

    def list_by_employee(self, employee_id):
        return [p for p in self.rows.values() if p.employee_id == employee_id]

    def upsert(self, draft: PayrollDraft, *, created_by):
        existing = self.get_for_employee_and_period(draft.employee_id, draft.period)
        if existing:
            self.rows[existing.payroll_id] = replace(
                existing,
                leave_days=draft.leave_days,
                leave_deduction=draft.leave_deduction,
                total_amount=draft.total_amount,
            )
            return existing.payroll_id
        pid = self._next_id
        self._next_id += 1
        self.rows[pid] = Payroll(
            payroll_id=pid,
            employee_id=draft.employee_id,
            period=draft.period,
            leave_days=draft.leave_days,
            leave_deduction=draft.leave_deduction,
            total_amount=draft.total_amount,
            status=PayrollStatus.DRAFT,
            created_by=created_by,
        )
        return pid

    def replace_components(self, payroll_id, draft: PayrollDraft):
        self.rows[payroll_id] = replace(self.rows[payroll_id], components=tuple(draft.components))

    def update_status(self, *, payroll_id, expected, status):
        p = self.rows.get(int(payroll_id))
        if not p or p.status != expected:
            return False
        self.rows[p.payroll_id] = replace(p, status=status)
        return True

    def get_payment(self, payment_id):
        return self.payments.get(int(payment_id))

    def list_payments(self, payroll_id):
        return [p for p in self.payments.values() if p.payroll_id == payroll_id]

    def create_payment(self, *, payroll_id, transfer_date, transfer_proof, note):
        pid = self._next_payment_id
        self._next_payment_id += 1
        self.payments[pid] = PayrollPayment(
            payment_id=pid,
            payroll_id=payroll_id,
            transfer_date=transfer_date,
            status=PaymentStatus.PENDING,
            transfer_proof=transfer_proof,
            note=note,
        )
        return pid

    def update_payment_status(self, *, payment_id, expected, status, approved_by):
        p = self.payments.get(int(payment_id))
        if not p or p.status != expected:
            return False
        self.payments[p.payment_id] = replace(p, status=status, approved_by=approved_by or p.approved_by)
        return True


class FakeTransactions:
    def __init__(self):
        self.opened = 0
        self.committed = 0
        self.rolled_back = 0

    @contextmanager
    def transaction(self):
        self.opened += 1
        try:
            yield None
        except Exception:
            self.rolled_back += 1
            raise
        self.committed += 1


def employee_actor(employee_id: int, user_id: int = 200) -> Actor:
    return Actor.resolve(user_id=user_id, role=Role.EMPLOYEE, employee_id=employee_id)
