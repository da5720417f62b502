from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import ComponentType, PaymentStatus, PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import Payroll, PayrollComponent, PayrollDraft, PayrollPayment
from .repository import PaymentRepository, PayrollRepository

_COLUMNS = "payroll_id, employee_id, period, leave_days, leave_deduction, total_amount, status, created_by"
_PAYMENT_COLUMNS = "payment_id, payroll_id, transfer_date, transfer_proof, status, approved_by, note"


def _to_component(r: dict) -> PayrollComponent:
    return PayrollComponent(
        component_id=int(r["component_id"]),
        component_type=ComponentType(r["component_type"]),
        label=r["label"],
        amount=as_decimal(r["amount"]),
    )


def _to_payroll(r: dict, components: Sequence[PayrollComponent] = ()) -> Payroll:
    return Payroll(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        period=str(r["period"]),
        leave_days=int(r["leave_days"]),
        leave_deduction=as_decimal(r["leave_deduction"]),
        total_amount=as_decimal(r["total_amount"]),
        status=PayrollStatus(r["status"]),
        created_by=int(r["created_by"]) if r.get("created_by") is not None else None,
        components=tuple(components),
    )


def _to_payment(r: dict) -> PayrollPayment:
    return PayrollPayment(
        payment_id=int(r["payment_id"]),
        payroll_id=int(r["payroll_id"]),
        transfer_date=r["transfer_date"],
        transfer_proof=r.get("transfer_proof"),
        status=PaymentStatus(r["status"]),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        note=r.get("note"),
    )


class MySQLPayrollRepository(PayrollRepository, PaymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _components(self, cur, payroll_id: int) -> list[PayrollComponent]:
        cur.execute(
            """
            SELECT component_id, component_type, label, amount
            FROM payroll_components
            WHERE payroll_id=%s
            ORDER BY component_id
            """,
            (int(payroll_id),),
        )
        return [_to_component(r) for r in fetchall(cur)]

    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payrolls WHERE payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            if not r:
                return None
            return _to_payroll(r, self._components(cur, int(r["payroll_id"])))

    def get_for_employee_and_period(self, employee_id: int, period: str) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payrolls WHERE employee_id=%s AND period=%s",
                (int(employee_id), period),
            )
            r = fetchone(cur)
            if not r:
                return None
            return _to_payroll(r, self._components(cur, int(r["payroll_id"])))

    def list_by_period(self, period: str) -> Sequence[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payrolls WHERE period=%s ORDER BY employee_id", (period,))
            return [_to_payroll(r) for r in fetchall(cur)]

    def list_by_employee(self, employee_id: int) -> Sequence[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payrolls WHERE employee_id=%s ORDER BY period DESC",
                (int(employee_id),),
            )
            return [_to_payroll(r) for r in fetchall(cur)]

    def upsert(self, draft: PayrollDraft, *, created_by: Optional[int]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payrolls(employee_id, period, leave_days, leave_deduction, total_amount, status, created_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    payroll_id=LAST_INSERT_ID(payroll_id),
                    leave_days=VALUES(leave_days),
                    leave_deduction=VALUES(leave_deduction),
                    total_amount=VALUES(total_amount)
                """,
                (
                    int(draft.employee_id),
                    draft.period,
                    draft.leave_days,
                    draft.leave_deduction,
                    draft.total_amount,
                    PayrollStatus.DRAFT.value,
                    created_by,
                ),
            )
            return int(cur.lastrowid)

    def replace_components(self, payroll_id: int, draft: PayrollDraft) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_components WHERE payroll_id=%s", (int(payroll_id),))
            if draft.components:
                cur.executemany(
                    "INSERT INTO payroll_components(payroll_id, component_type, label, amount) VALUES(%s,%s,%s,%s)",
                    [(int(payroll_id), c.component_type.value, c.label, c.amount) for c in draft.components],
                )

    def update_status(self, *, payroll_id: int, expected: PayrollStatus, status: PayrollStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payrolls SET status=%s WHERE payroll_id=%s AND status=%s",
                (status.value, int(payroll_id), expected.value),
            )
            return cur.rowcount == 1

    def get_payment(self, payment_id: int) -> Optional[PayrollPayment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PAYMENT_COLUMNS} FROM payroll_payments WHERE payment_id=%s", (int(payment_id),))
            r = fetchone(cur)
            return _to_payment(r) if r else None

    def list_payments(self, payroll_id: int) -> Sequence[PayrollPayment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_PAYMENT_COLUMNS} FROM payroll_payments WHERE payroll_id=%s ORDER BY transfer_date, payment_id",
                (int(payroll_id),),
            )
            return [_to_payment(r) for r in fetchall(cur)]

    def create_payment(
        self,
        *,
        payroll_id: int,
        transfer_date: date,
        transfer_proof: Optional[str],
        note: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_payments(payroll_id, transfer_date, transfer_proof, status, note)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(payroll_id), transfer_date, transfer_proof, PaymentStatus.PENDING.value, note),
            )
            return int(cur.lastrowid)

    def update_payment_status(
        self,
        *,
        payment_id: int,
        expected: PaymentStatus,
        status: PaymentStatus,
        approved_by: Optional[int],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_payments
                SET status=%s, approved_by=COALESCE(%s, approved_by)
                WHERE payment_id=%s AND status=%s
                """,
                (status.value, approved_by, int(payment_id), expected.value),
            )
            return cur.rowcount == 1
