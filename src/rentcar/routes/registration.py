from flask import Blueprint, request, jsonify, current_app

from rentcar.models.registration import ROLE_CUSTOMER
from rentcar.routes.auth import current_session
from rentcar.services import register_user, load_existing_images
from rentcar.services.registration_form import RegistrationForm

registration_bp = Blueprint("registration", __name__)


@registration_bp.route("/register", methods=["POST"])
def register():
    """
    Register a Customer, Staff, Driver Mitra or Driver Perusahaan.

    Accepts the sign-up form as JSON (camelCase or snake_case keys). Images are
    base64 data URLs; images already on file for a signed-in caller are reused.
    Returns:
        201 with the created rows, 400 with the first unmet rule or backend error.
    """
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return jsonify({"status": "error", "message": "Missing JSON payload"}), 400

    existing_images = {}
    session = current_session()
    if session is not None:
        existing_images = load_existing_images(current_app.db, session.user_id, session.role)

    form = RegistrationForm.from_payload(data, existing_images=existing_images)
    result = register_user(form, current_app.db, current_app.auth)

    status_code = 201 if result.get("status") == "success" else 400
    return jsonify(result), status_code


@registration_bp.route("/register/existing-images/<user_id>", methods=["GET"])
def existing_images(user_id):
    """Images already on file for a user. Query parameter: role (default Customer)."""
    role = request.args.get("role", ROLE_CUSTOMER)
    images = load_existing_images(current_app.db, user_id, role)
    return jsonify({"status": "success", "data": images}), 200
