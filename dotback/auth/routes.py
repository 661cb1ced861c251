from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required, login_user, logout_user
from flask_wtf.csrf import generate_csrf
from werkzeug.security import check_password_hash
from ..models import Admin

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")

@auth_bp.get("/csrf")
def csrf_token():
    return {"csrfToken": generate_csrf()}

@auth_bp.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    email = str(data.get("email") or "").strip().lower()
    password = str(data.get("password") or "")
    if not email or not password:
        return jsonify({"message": "Email and password are required."}), 400

    admin = Admin.query.filter_by(email=email).first()
    if not admin or not check_password_hash(admin.password_hash, password):
        return jsonify({"message": "Invalid credentials."}), 401

    login_user(admin, remember=True)
    return {"admin": admin.to_dict()}

@auth_bp.post("/logout")
@login_required
def logout():
    logout_user()
    return {"message": "Logged out."}

@auth_bp.get("/me")
@login_required
def me():
    return {"admin": current_user.to_dict()}
