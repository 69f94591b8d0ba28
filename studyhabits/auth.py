import logging
import re
from datetime import datetime, timedelta, timezone
from functools import wraps

import bcrypt
import jwt
from flask import request, jsonify
from sqlalchemy.exc import SQLAlchemyError

from . import app
from .models import db, User

logger = logging.getLogger(__name__)

USERNAME_RE = re.compile(r"^[A-Za-z0-9_]{3,20}$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


def generate_token(user_id, email):
    now = datetime.now(timezone.utc)
    payload = {
        "user_id": user_id,
        "email": email,
        "exp": now + timedelta(hours=app.config["JWT_EXPIRES_HOURS"]),
        "iat": now
    }
    return jwt.encode(payload, app.config["JWT_SECRET_KEY"], algorithm="HS256")


def _request_token():
    token = request.headers.get("Authorization")
    if token:
        if token.startswith("Bearer "):
            token = token[7:]
        return token
    return request.cookies.get(app.config["AUTH_COOKIE_NAME"])


def token_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        token = _request_token()
        if not token:
            logger.error("Token missing in request")
            return jsonify({"message": "Token required"}), 401
        try:
            payload = jwt.decode(token, app.config["JWT_SECRET_KEY"], algorithms=["HS256"])
        except jwt.ExpiredSignatureError:
            logger.error("Token expired")
            return jsonify({"message": "Token expired"}), 401
        except jwt.InvalidTokenError:
            logger.error("Invalid token")
            return jsonify({"message": "Invalid token"}), 401
        user = db.session.get(User, payload.get("user_id"))
        if not user:
            logger.error("User not found for token")
            return jsonify({"message": "Invalid token"}), 403
        return f(user, *args, **kwargs)
    return decorated


def _validate_registration(username, email, password):
    if not username or not email or not password:
        return "Username, email, and password required"
    if not all(isinstance(value, str) for value in (username, email, password)):
        return "Username, email, and password must be strings"
    if not USERNAME_RE.match(username):
        return "Username must be 3-20 letters, numbers, or underscores"
    if not EMAIL_RE.match(email):
        return "Invalid email format"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    return None


@app.route("/api/register", methods=["POST"])
def register():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"message": "Request body must be a JSON object"}), 400
    username = data.get("username")
    email = data.get("email")
    password = data.get("password")
    error = _validate_registration(username, email, password)
    if error:
        logger.error(f"Registration rejected: {error}")
        return jsonify({"message": error}), 400
    if User.query.filter_by(username=username).first():
        return jsonify({"message": "Username already exists"}), 400
    if User.query.filter_by(email=email).first():
        return jsonify({"message": "Email already exists"}), 400
    hashed_password = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    try:
        new_user = User(
            username=username,
            email=email,
            password=hashed_password.decode("utf-8")
        )
        db.session.add(new_user)
        db.session.commit()
    except SQLAlchemyError as e:
        logger.error(f"Database error registering user: {str(e)}")
        db.session.rollback()
        return jsonify({"message": "Failed to register user"}), 500
    logger.info(f"User registered: {username}")
    token = generate_token(new_user.id, new_user.email)
    return jsonify({
        "message": "User registered",
        "token": token,
        "user": {"id": new_user.id, "username": new_user.username, "email": new_user.email}
    }), 201


@app.route("/api/login", methods=["POST"])
def login():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"message": "Request body must be a JSON object"}), 400
    identifier = data.get("identifier")  # Can be username or email
    password = data.get("password")
    if not identifier or not password:
        return jsonify({"message": "Identifier and password required"}), 400
    if not isinstance(identifier, str) or not isinstance(password, str):
        return jsonify({"message": "Identifier and password must be strings"}), 400
    user = User.query.filter((User.username == identifier) | (User.email == identifier)).first()
    if not user or not bcrypt.checkpw(password.encode("utf-8"), user.password.encode("utf-8")):
        logger.error(f"Failed login for {identifier}")
        return jsonify({"message": "Invalid credentials"}), 401
    token = generate_token(user.id, user.email)
    response = jsonify({"token": token, "username": user.username, "email": user.email})
    response.set_cookie(
        app.config["AUTH_COOKIE_NAME"],
        token,
        max_age=app.config["JWT_EXPIRES_HOURS"] * 3600,
        httponly=True,
        secure=app.config["COOKIE_SECURE"],
        samesite="Lax"
    )
    logger.info(f"User logged in: {user.username}")
    return response, 200


@app.route("/api/logout", methods=["POST"])
def logout():
    response = jsonify({"message": "Logout successful"})
    response.delete_cookie(
        app.config["AUTH_COOKIE_NAME"],
        httponly=True,
        secure=app.config["COOKIE_SECURE"],
        samesite="Lax"
    )
    return response, 200
