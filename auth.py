from flask import Blueprint, jsonify, request, current_app
from sqlalchemy.exc import SQLAlchemyError
import logging

from schemas import ValidationError, validate_login
from storage import STORAGE_EXTENSION

logger = logging.getLogger(__name__)

# Authentication Blueprint
auth_bp = Blueprint('auth', __name__)


def get_storage():
    """The record store the app factory attached to the current app."""
    return current_app.extensions[STORAGE_EXTENSION]


@auth_bp.route('/college/login', methods=['POST'])
def college_login():
    """Log a college admin in with the college's email and password."""
    data = request.get_json(silent=True)
    try:
        email, password = validate_login(data, identifier="email")
    except ValidationError as e:
        return jsonify(e.as_dict()), 400

    try:
        college = get_storage().get_college_by_email(email)
    except SQLAlchemyError as e:
        logger.error(f"Database error during college login: {str(e)}")
        return jsonify({"message": "Login failed"}), 500

    # Passwords are stored and compared as plain text
    if not college or college.password is None or college.password != password:
        logger.warning(f"Failed college login for {email}")
        return jsonify({"message": "Invalid email or password"}), 401

    if not college.is_approved:
        logger.info(f"Login refused for unapproved college {college.id}")
        return jsonify({"message": "College account is pending approval"}), 403

    logger.info(f"College {college.id} logged in")
    return jsonify({
        "success": True,
        "message": "Login successful",
        "college": college.as_dict(),
        "token": current_app.config["COLLEGE_AUTH_TOKEN"]
    }), 200


@auth_bp.route('/admin/login', methods=['POST'])
def admin_login():
    """Log the super admin in with username and password."""
    data = request.get_json(silent=True)
    try:
        username, password = validate_login(data, identifier="username")
    except ValidationError as e:
        return jsonify(e.as_dict()), 400

    try:
        admin = get_storage().get_admin_by_username(username)
    except SQLAlchemyError as e:
        logger.error(f"Database error during admin login: {str(e)}")
        return jsonify({"message": "Admin login failed"}), 500

    if not admin or admin.password != password:
        logger.warning(f"Failed admin login for '{username}'")
        return jsonify({"message": "Invalid credentials"}), 401

    logger.info(f"Admin '{admin.username}' logged in")
    return jsonify({
        "success": True,
        "message": "Login successful",
        "admin": admin.as_dict(),
        "token": current_app.config["ADMIN_AUTH_TOKEN"]
    }), 200
