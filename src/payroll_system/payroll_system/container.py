from __future__ import annotations

from dataclasses import dataclass

from .attendance.aggregator import AttendanceAggregator
from .attendance.geofence import Coordinate, GeofenceValidator
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import (
    DEFAULT_OFFICE_LATITUDE,
    DEFAULT_OFFICE_LONGITUDE,
    DEFAULT_RADIUS_MAX_METERS,
    DEFAULT_RADIUS_MIN_METERS,
)
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.quota import LeaveQuotaValidator
from .leave.service import LeaveService
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.service import PayrollService
from .recap.builder import MonthlyRecapBuilder
from .recap.mysql_recap_repository import MySQLRecapRepository
from .recap.service import RecapService
from .sessions.aggregator import SessionRealizationAggregator
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.service import RealizationService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    employees_repo: MySQLEmployeeRepository
    attendance_repo: MySQLAttendanceRepository
    leave_repo: MySQLLeaveRepository
    sessions_repo: MySQLSessionRepository
    recap_repo: MySQLRecapRepository
    payroll_repo: MySQLPayrollRepository

    geofence: GeofenceValidator
    leave_quota: LeaveQuotaValidator

    auth_service: AuthService
    attendance_service: AttendanceService
    leave_service: LeaveService
    realization_service: RealizationService
    recap_service: RecapService
    payroll_service: PayrollService


def build_container(*, db_config: dict, settings=None) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    users_repo = MySQLUserRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    leave_repo = MySQLLeaveRepository(conn)
    sessions_repo = MySQLSessionRepository(conn)
    recap_repo = MySQLRecapRepository(conn)
    payroll_repo = MySQLPayrollRepository(conn)

    geofence = GeofenceValidator(
        reference=Coordinate(
            float(getattr(settings, "OFFICE_LATITUDE", DEFAULT_OFFICE_LATITUDE)),
            float(getattr(settings, "OFFICE_LONGITUDE", DEFAULT_OFFICE_LONGITUDE)),
        ),
        radius_min=int(getattr(settings, "GEOFENCE_RADIUS_MIN", DEFAULT_RADIUS_MIN_METERS)),
        radius_max=int(getattr(settings, "GEOFENCE_RADIUS_MAX", DEFAULT_RADIUS_MAX_METERS)),
    )
    leave_quota = LeaveQuotaValidator(employees_repo, leave_repo)
    session_aggregator = SessionRealizationAggregator(sessions_repo)

    recap_builder = MonthlyRecapBuilder(
        AttendanceAggregator(attendance_repo, leave_repo),
        session_aggregator,
        recap_repo,
        conn,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leave_repo=leave_repo,
        sessions_repo=sessions_repo,
        recap_repo=recap_repo,
        payroll_repo=payroll_repo,
        geofence=geofence,
        leave_quota=leave_quota,
        auth_service=AuthService(users_repo),
        attendance_service=AttendanceService(
            attendance_repo,
            attendance_repo,
            employees_repo,
            geofence=geofence,
            enforce_geofence=bool(getattr(settings, "GEOFENCE_ENFORCE", True)),
        ),
        leave_service=LeaveService(leave_repo, employees_repo, leave_quota),
        realization_service=RealizationService(sessions_repo, sessions_repo, employees_repo),
        recap_service=RecapService(
            recap_builder,
            recap_repo,
            employees_repo,
            max_workers=int(getattr(settings, "RECAP_MAX_WORKERS", 1)),
        ),
        payroll_service=PayrollService(
            payroll_repo,
            payroll_repo,
            recap_repo,
            employees_repo,
            session_aggregator,
            conn,
        ),
    )
