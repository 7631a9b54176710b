from flask import current_app, jsonify, request
from flask.views import MethodView
from flask_smorest import Blueprint

from ..services.auth_service import authenticate, sign_out

blp = Blueprint(
    "Auth", "auth", url_prefix="", description="Session sign-in and sign-out"
)

@blp.route("/login")
class Login(MethodView):
    @blp.doc(summary="Sign In", description="Signs in with the email and password form fields and starts a session.")
    def post(self):
        """Sign in with email and password"""
        message = authenticate(request.form)
        if message is not None:
            current_app.logger.info(f"Sign-in failed: {message}")
            return jsonify({"message": message}), 401
        return jsonify({"message": None})

@blp.route("/logout")
class Logout(MethodView):
    @blp.doc(summary="Sign Out")
    def post(self):
        """End the current session"""
        sign_out()
        return jsonify({"message": None})
