from __future__ import annotations

from flask import Flask, g, jsonify, session

from ..common.web import SESSION_TOKEN_KEY, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service
    auth_required = login_required(auth)

    def _start_session(token: str) -> None:
        session.clear()
        session.permanent = True
        session[SESSION_TOKEN_KEY] = token

    @app.route("/api/auth/register", methods=["POST"], endpoint="register")
    def register_user():
        data = json_body()
        result = auth.register(data.get("email"), data.get("password"))
        _start_session(result.session_token)
        return jsonify({"success": True, "user": result.user.to_public()}), 201

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        result = auth.authenticate(data.get("email"), data.get("password"))
        _start_session(result.session_token)
        return jsonify({"success": True, "user": result.user.to_public()})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        auth.logout(session.get(SESSION_TOKEN_KEY))
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    def me():
        user = auth.current_user(session.get(SESSION_TOKEN_KEY))
        return jsonify({"user": user.to_public() if user else None})

    @app.route("/api/account/delete", methods=["DELETE"], endpoint="delete_account")
    @auth_required
    def delete_account():
        auth.delete_account(g.user)
        session.clear()
        return jsonify({"success": True, "message": "Your account has been permanently deleted."})
