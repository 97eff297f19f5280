from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.http import admin_required, error_response, json_body, log_route_complete, log_route_start, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        try:
            body = json_body()
            log_route_start("auth-login", {"username": body.get("username")})
            user = container.run(
                "auth-login",
                lambda: container.auth_service.authenticate(body.get("username") or "", body.get("password") or ""),
            )
            session.clear()
            session["user_id"] = user.user_id
            session["name"] = user.name
            session["role"] = user.role.value
            log_route_complete("auth-login")
            return jsonify(user.to_public())
        except Exception as e:
            return error_response("login", e)

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def auth_logout():
        session.clear()
        return jsonify({"ok": True})

    @app.route("/api/auth/forgot", methods=["POST"], endpoint="auth_forgot")
    def auth_forgot():
        try:
            body = json_body()
            container.run(
                "auth-forgot",
                lambda: container.auth_service.reset_password(body.get("username") or "", body.get("newPassword") or ""),
            )
            return jsonify({"message": "Password changed"})
        except Exception as e:
            return error_response("change password", e)

    @app.route("/api/users", methods=["GET"], endpoint="users_list")
    @login_required
    def users_list():
        try:
            users = container.run("users-list", container.user_service.list_users)
            return jsonify({"users": [u.to_public() for u in users]})
        except Exception as e:
            return error_response("fetch users", e)

    @app.route("/api/users", methods=["POST"], endpoint="users_create")
    @admin_required
    def users_create():
        try:
            body = json_body()
            user = container.run(
                "users-create",
                lambda: container.user_service.create_account(
                    name=body.get("name"), username=body.get("username"), role=body.get("role")
                ),
            )
            return jsonify(user.to_public()), 201
        except Exception as e:
            return error_response("create user", e)

    @app.route("/api/users/<int:user_id>", methods=["GET"], endpoint="users_get")
    @login_required
    def users_get(user_id: int):
        try:
            user = container.run("users-get", lambda: container.user_service.get_user(user_id))
            data = user.to_public()
            return jsonify(
                {
                    "baseSalary": data["baseSalary"],
                    "workStartMinutes": data["workStartMinutes"],
                    "workEndMinutes": data["workEndMinutes"],
                    "overtimeHourlyRate": data["overtimeHourlyRate"],
                }
            )
        except Exception as e:
            return error_response("fetch user", e)

    @app.route("/api/users/<int:user_id>", methods=["PATCH"], endpoint="users_patch")
    @admin_required
    def users_patch(user_id: int):
        try:
            body = json_body()
            container.run("users-patch", lambda: container.user_service.update_payroll_settings(user_id, body))
            return jsonify({"ok": True, "id": user_id})
        except Exception as e:
            return error_response("update user", e)
