from __future__ import annotations

from datetime import timedelta

from flask import Flask, g, jsonify, session

from ..common.web import json_body, requires
from ..container import Container


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(days=7)

    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        s_user = container.auth_service.authenticate(body.get("username", ""), body.get("password", ""))

        session.clear()
        session.permanent = bool(body.get("remember_me"))
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        session["employee_id"] = s_user.employee_id

        return jsonify(
            {
                "user_id": s_user.user_id,
                "full_name": s_user.full_name,
                "role": s_user.role.value,
                "employee_id": s_user.employee_id,
            }
        )

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"ok": True})

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @requires()
    def me():
        actor = g.actor
        return jsonify(
            {
                "user_id": actor.user_id,
                "name": session.get("name"),
                "role": actor.role.value,
                "employee_id": actor.employee_id,
                "capabilities": sorted(c.value for c in actor.capabilities),
            }
        )
