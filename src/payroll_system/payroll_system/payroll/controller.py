from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..auth.policy import Capability
from ..common.datetime_utils import parse_iso_date
from ..common.web import employee_scope, json_body, parse_enum, requires, to_json
from ..container import Container
from ..core.enums import PaymentStatus, PayrollStatus
from ..core.exceptions import AuthorizationError


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    def _visible(payroll):
        if not g.actor.can(Capability.MANAGE_PAYROLL) and not g.actor.owns(payroll.employee_id):
            raise AuthorizationError("You can only view your own payroll")
        return payroll

    @app.route("/api/recaps/<int:recap_id>/payroll", methods=["POST"], endpoint="payroll_generate_from_recap")
    @requires(Capability.MANAGE_PAYROLL)
    def payroll_generate_from_recap(recap_id: int):
        return jsonify(to_json(service.generate_from_recap(g.actor, recap_id))), 201

    @app.route("/api/payrolls/generate", methods=["POST"], endpoint="payroll_generate")
    @requires(Capability.MANAGE_PAYROLL)
    def payroll_generate():
        return jsonify(to_json(service.generate_for_period(g.actor, json_body().get("period", ""))))

    @app.route("/api/payrolls", methods=["GET"], endpoint="payroll_list")
    @requires(Capability.VIEW_PAYROLL, Capability.MANAGE_PAYROLL)
    def payroll_list():
        period = request.args.get("period")
        if period and g.actor.can(Capability.MANAGE_PAYROLL):
            return jsonify(to_json(list(service.list_by_period(period))))
        employee_id = employee_scope(g.actor, request.args.get("employee_id"), Capability.MANAGE_PAYROLL)
        return jsonify(to_json(list(service.list_by_employee(employee_id))))

    @app.route("/api/payrolls/<int:payroll_id>", methods=["GET"], endpoint="payroll_get")
    @requires(Capability.VIEW_PAYROLL, Capability.MANAGE_PAYROLL)
    def payroll_get(payroll_id: int):
        return jsonify(to_json(_visible(service.get(payroll_id))))

    @app.route("/api/payrolls/<int:payroll_id>/status", methods=["POST"], endpoint="payroll_status")
    @requires(Capability.MANAGE_PAYROLL)
    def payroll_status(payroll_id: int):
        status = parse_enum(PayrollStatus, json_body().get("status"), "status")
        return jsonify(to_json(service.update_status(g.actor, payroll_id, status)))

    @app.route("/api/payrolls/<int:payroll_id>/payments", methods=["GET"], endpoint="payment_list")
    @requires(Capability.VIEW_PAYROLL, Capability.MANAGE_PAYMENTS)
    def payment_list(payroll_id: int):
        if not g.actor.can(Capability.MANAGE_PAYMENTS):
            _visible(service.get(payroll_id))
        return jsonify(to_json(list(service.list_payments(payroll_id))))

    @app.route("/api/payrolls/<int:payroll_id>/payments", methods=["POST"], endpoint="payment_record")
    @requires(Capability.MANAGE_PAYMENTS)
    def payment_record(payroll_id: int):
        body = json_body()
        payment = service.record_payment(
            g.actor,
            payroll_id,
            transfer_date=parse_iso_date(body.get("transfer_date")),
            transfer_proof=body.get("transfer_proof"),
            note=body.get("note"),
        )
        return jsonify(to_json(payment)), 201

    @app.route("/api/payments/<int:payment_id>/status", methods=["POST"], endpoint="payment_status")
    @requires(Capability.MANAGE_PAYMENTS)
    def payment_status(payment_id: int):
        status = parse_enum(PaymentStatus, json_body().get("status"), "status")
        return jsonify(to_json(service.update_payment_status(g.actor, payment_id, status)))
