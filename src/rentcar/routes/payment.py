from flask import Blueprint, request, jsonify, current_app

from rentcar.models.payment import PaymentRequest
from rentcar.services import process_payment, create_payment, get_payments_by_booking, get_payments_by_user

payment_bp = Blueprint("payment", __name__)


def _payment_request():
    data = request.get_json(silent=True)
    if not data:
        raise ValueError("Missing JSON payload")
    return PaymentRequest.from_payload(data), data


@payment_bp.route("/payments", methods=["POST"])
def submit_payment():
    """Process a booking or damage payment.
    Args:
        None (data comes from request)
    Returns:
      - JSON response with status, strategy used and the payment data.
    """
    try:
        payment_request, _ = _payment_request()
    except ValueError as e:
        return jsonify({"status": "error", "message": str(e)}), 400

    result = process_payment(payment_request, current_app.db)
    return jsonify(result), 200 if result["status"] == "success" else 502


@payment_bp.route("/payments/manual", methods=["POST"])
def manual_payment():
    """Record a payment row directly (back-office), without recomputing the booking."""
    try:
        payment_request, data = _payment_request()
    except ValueError as e:
        return jsonify({"status": "error", "message": str(e)}), 400

    result = create_payment(current_app.db, payment_request, status=data.get("status") or "completed")
    return jsonify(result), 201 if result["status"] == "success" else 502


@payment_bp.route("/payments/booking/<booking_id>", methods=["GET"])
def payments_for_booking(booking_id):
    result = get_payments_by_booking(current_app.db, booking_id)
    return jsonify(result), 200 if result["status"] == "success" else 502


@payment_bp.route("/payments/user/<user_id>", methods=["GET"])
def payments_for_user(user_id):
    result = get_payments_by_user(current_app.db, user_id)
    return jsonify(result), 200 if result["status"] == "success" else 502
