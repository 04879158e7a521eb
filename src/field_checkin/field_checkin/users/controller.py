from __future__ import annotations

from flask import Flask, session

from ..common.web import current_user_id, fail, handle_domain_errors, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    @handle_domain_errors("log in")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("email") or "", data.get("password") or "")

        session.clear()
        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value

        return ok({"id": s_user.user_id, "name": s_user.name, "email": s_user.email, "role": s_user.role.value})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(None, message="Logged out")

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    @handle_domain_errors("fetch user profile")
    def me():
        user = container.users_repo.get_by_id(current_user_id())
        if not user:
            return fail("User not found", 404)
        return ok(user.public_dict())
