from __future__ import annotations

import click
from flask import Flask

from .auth.policy import Actor
from .container import Container
from .core.exceptions import DomainError


def _echo_outcomes(outcomes, describe) -> None:
    for o in outcomes:
        if o.ok:
            click.echo(f"  employee {o.employee_id}: {describe(o)}")
        else:
            click.echo(f"  employee {o.employee_id}: FAILED {o.error}", err=True)
    failed = sum(1 for o in outcomes if not o.ok)
    click.echo(f"{len(outcomes) - failed} ok, {failed} failed")


def register(app: Flask, container: Container) -> None:
    @app.cli.command("generate-recap")
    @click.argument("period")
    def generate_recap(period: str):
        """Rebuild monthly recaps of all active employees for PERIOD (YYYY-MM)."""
        try:
            outcomes = container.recap_service.generate(period)
        except DomainError as e:
            raise click.ClickException(str(e))
        _echo_outcomes(
            outcomes,
            lambda o: f"present={o.recap.present_days} unexcused={o.recap.unexcused_absence_days} "
            f"sessions={o.recap.total_session_income}",
        )

    @app.cli.command("generate-payroll")
    @click.argument("period")
    @click.option("--user-id", type=int, default=None, help="User stamped as payroll creator.")
    def generate_payroll(period: str, user_id):
        """Generate payroll from every recap of PERIOD (YYYY-MM).

        Payroll already approved or paid is left unchanged and reported as failed.
        """
        try:
            outcomes = container.payroll_service.generate_for_period(Actor.system(user_id), period)
        except DomainError as e:
            raise click.ClickException(str(e))
        _echo_outcomes(outcomes, lambda o: f"total={o.payroll.total_amount} ({o.payroll.status.value})")
        locked = sum(1 for o in outcomes if o.locked)
        if locked:
            click.echo(
                f"{locked} payroll(s) already approved or paid were not regenerated; "
                "only draft payroll can be regenerated",
                err=True,
            )

    @app.cli.command("generate-payroll-from-recap")
    @click.argument("recap_id", type=int)
    @click.option("--user-id", type=int, default=None, help="User stamped as payroll creator.")
    def generate_payroll_from_recap(recap_id: int, user_id):
        """Generate the payroll of a single recap."""
        try:
            payroll = container.payroll_service.generate_from_recap(Actor.system(user_id), recap_id)
        except DomainError as e:
            raise click.ClickException(str(e))
        click.echo(f"payroll {payroll.payroll_id}: employee {payroll.employee_id} {payroll.period} total={payroll.total_amount}")
        for c in payroll.components:
            click.echo(f"  {c.component_type.value:<16} {c.label:<32} {c.amount}")
