from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.policy import Capability
from ..common.web import json_body, requires, to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.recap_service

    @app.route("/api/recaps/generate", methods=["POST"], endpoint="recap_generate")
    @requires(Capability.MANAGE_RECAPS)
    def recap_generate():
        outcomes = service.generate(json_body().get("period", ""))
        return jsonify(to_json(outcomes))

    @app.route("/api/recaps", methods=["GET"], endpoint="recap_list")
    @requires(Capability.MANAGE_RECAPS, Capability.MANAGE_PAYROLL)
    def recap_list():
        return jsonify(to_json(list(service.list_by_period(request.args.get("period", "")))))

    @app.route("/api/recaps/<int:recap_id>", methods=["GET"], endpoint="recap_get")
    @requires(Capability.MANAGE_RECAPS, Capability.MANAGE_PAYROLL)
    def recap_get(recap_id: int):
        return jsonify(to_json(service.get(recap_id)))
