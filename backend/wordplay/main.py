from datetime import datetime, timezone

from flask import Blueprint, request, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from pydantic import ValidationError

from .models import db, User
from .schemas import LoginIn, RegisterIn

main = Blueprint('main', __name__)


def validation_errors(exc: ValidationError):
    return [
        {'field': '.'.join(str(part) for part in err['loc']), 'message': err['msg']}
        for err in exc.errors()
    ]


@main.route('/health', methods=['GET'])
def health():
    return jsonify({'status': 'ok', 'timestamp': datetime.now(timezone.utc).isoformat()})


@main.route('/register', methods=['POST', 'OPTIONS'])
def register():
    if request.method == 'OPTIONS':
        return jsonify({'status': 'ok'}), 200
    try:
        data = RegisterIn.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        return jsonify({"message": "Invalid registration", "errors": validation_errors(exc)}), 400

    if User.query.filter_by(username=data.username).first():
        return jsonify({"message": "Username already exists"}), 400
    if data.email and User.query.filter_by(email=data.email).first():
        return jsonify({"message": "Email already registered"}), 400

    new_user = User(
        username=data.username,
        email=data.email,
        first_name=data.first_name,
        last_name=data.last_name,
    )
    new_user.set_password(data.password)
    db.session.add(new_user)
    db.session.commit()
    login_user(new_user)
    return jsonify(new_user.to_dict()), 201


@main.route('/login', methods=['POST', 'OPTIONS'])
def login():
    if request.method == 'OPTIONS':
        return jsonify({'status': 'ok'}), 200
    try:
        data = LoginIn.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        return jsonify({"message": "Username and password are required", "errors": validation_errors(exc)}), 400
    user = User.query.filter_by(username=data.username).first()
    if user and user.check_password(data.password):
        login_user(user, remember=True)
        return jsonify(user.to_dict())
    return jsonify({"message": "Invalid username or password"}), 401


@main.route('/logout', methods=['POST', 'OPTIONS'])
def logout():
    if request.method == 'OPTIONS':
        return jsonify({'status': 'ok'}), 200
    logout_user()
    return jsonify({"success": True})


@main.route('/user', methods=['GET'])
@main.route('/auth/user', methods=['GET'])
@login_required
def get_current_user():
    return jsonify(current_user.to_dict(include_stats=True))
