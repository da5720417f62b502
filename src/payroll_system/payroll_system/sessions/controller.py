from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..auth.policy import Capability
from ..common.datetime_utils import Period, parse_iso_date
from ..common.validators import require_positive_id
from ..common.web import employee_scope, json_body, parse_enum, requires, to_json
from ..container import Container
from ..core.enums import RealizationSource


def register(app: Flask, container: Container) -> None:
    service = container.realization_service

    @app.route("/api/sessions", methods=["GET"], endpoint="session_list")
    @requires(Capability.CLAIM_SESSIONS, Capability.MANAGE_SESSIONS)
    def session_list():
        return jsonify(to_json(list(service.list_sessions())))

    @app.route("/api/realizations", methods=["GET"], endpoint="realization_list")
    @requires(Capability.CLAIM_SESSIONS, Capability.MANAGE_SESSIONS)
    def realization_list():
        employee_id = employee_scope(g.actor, request.args.get("employee_id"), Capability.MANAGE_SESSIONS)
        period = Period.parse(request.args.get("period", ""))
        return jsonify(to_json(list(service.list_for_employee(employee_id, period))))

    @app.route("/api/realizations", methods=["POST"], endpoint="realization_claim")
    @requires(Capability.CLAIM_SESSIONS, Capability.MANAGE_SESSIONS)
    def realization_claim():
        body = json_body()
        realization = service.claim(
            g.actor,
            employee_id=employee_scope(g.actor, body.get("employee_id"), Capability.MANAGE_SESSIONS),
            work_date=parse_iso_date(body.get("work_date")),
            session_id=require_positive_id(body.get("session_id"), "session_id"),
            source=parse_enum(RealizationSource, body.get("source", "scheduled"), "source"),
            note=body.get("note"),
            auto_approve=g.actor.can(Capability.MANAGE_SESSIONS),
        )
        return jsonify(to_json(realization)), 201

    @app.route("/api/realizations/<int:realization_id>/approve", methods=["POST"], endpoint="realization_approve")
    @requires(Capability.MANAGE_SESSIONS)
    def realization_approve(realization_id: int):
        body = json_body()
        return jsonify(to_json(service.approve(g.actor, realization_id, note=body.get("note"))))

    @app.route("/api/realizations/<int:realization_id>/reject", methods=["POST"], endpoint="realization_reject")
    @requires(Capability.MANAGE_SESSIONS)
    def realization_reject(realization_id: int):
        body = json_body()
        return jsonify(to_json(service.reject(g.actor, realization_id, note=body.get("note"))))
