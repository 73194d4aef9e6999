import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from rentcar.config.config import Config
from rentcar.models.payment import (
    PAYMENT_STATUS_PAID,
    PAYMENT_STATUS_PARTIAL,
    PaymentRecord,
    PaymentRequest,
)
from rentcar.services.database import BackendError

logger = logging.getLogger(__name__)


class PaymentFunctionError(Exception):
    """The remote payment function answered with an error or no result."""


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _insert_payment(backend, request: PaymentRequest, is_damage_payment: bool = False,
                    status: str = "completed") -> Dict[str, Any]:
    row = {
        "user_id": request.user_id,
        "booking_id": request.booking_id,
        "amount": request.amount,
        "payment_method": request.payment_method,
        "status": status,
        "transaction_id": request.transaction_id,
        "bank_name": request.bank_name,
        "is_partial_payment": request.is_partial_payment,
        "is_damage_payment": is_damage_payment,
        "created_at": _now_iso(),
    }
    record = backend.insert("payments", row)
    return PaymentRecord.from_row(record).to_dict()


def classify_payment_status(total_paid, total_amount) -> str:
    """A booking is paid once the payments reach its total (inclusive)."""
    return PAYMENT_STATUS_PAID if total_paid >= total_amount else PAYMENT_STATUS_PARTIAL


class PaymentStrategy:
    """
    One way of settling a payment.

    attempt() either returns the result payload or raises. Strategies write
    through independent backend calls: a failure part-way leaves the earlier
    writes in place, nothing is rolled back.
    """

    name = "strategy"

    def __init__(self, backend):
        self.backend = backend

    def attempt(self, request: PaymentRequest) -> Dict[str, Any]:
        raise NotImplementedError


class DamagePaymentStrategy(PaymentStrategy):
    """Insert a damage payment, then mark the referenced damages as paid."""

    name = "damage"

    def attempt(self, request: PaymentRequest) -> Dict[str, Any]:
        payment = _insert_payment(self.backend, request, is_damage_payment=True)
        self.backend.update(
            "damages",
            {"payment_status": PAYMENT_STATUS_PAID, "payment_id": payment["id"]},
            in_filter=("id", request.damage_ids),
        )
        return {"payment": payment}


class RemoteFunctionStrategy(PaymentStrategy):
    """Delegate the whole payment to the transactional backend function."""

    name = "remote_function"

    def __init__(self, backend, function_name: Optional[str] = None):
        super().__init__(backend)
        self.function_name = function_name or Config.PAYMENT_FUNCTION_NAME

    def attempt(self, request: PaymentRequest) -> Dict[str, Any]:
        response = self.backend.invoke(self.function_name, request.to_function_payload())
        if not response:
            raise PaymentFunctionError("Unknown error from edge function")
        if isinstance(response, dict) and response.get("success") is False:
            raise PaymentFunctionError(response.get("message") or "Unknown error from edge function")
        return response


class DirectWriteStrategy(PaymentStrategy):
    """
    Fallback: insert the payment, re-sum the booking's payments and write the
    derived payment status back onto the booking.
    """

    name = "direct_write"

    def attempt(self, request: PaymentRequest) -> Dict[str, Any]:
        # 1. Create payment record
        payment = _insert_payment(self.backend, request)

        # 2. Get booking details
        booking = self.backend.select_one(
            "bookings", "total_amount, payment_status", match={"id": request.booking_id}
        )

        # 3. Calculate total paid amount
        payments = self.backend.select("payments", "amount", match={"booking_id": request.booking_id})
        total_paid = sum(float(p.get("amount") or 0) for p in payments)

        # 4. Determine payment status
        payment_status = classify_payment_status(total_paid, float(booking.get("total_amount") or 0))

        # 5. Update booking payment status
        self.backend.update("bookings", {"payment_status": payment_status}, match={"id": request.booking_id})

        return {"payment": payment, "payment_status": payment_status, "total_paid": total_paid}


class PaymentProcessor:
    """
    Runs a payment through the damage branch, or the remote function with the
    direct-write fallback.
    """

    def __init__(self, backend, primary: Optional[PaymentStrategy] = None,
                 fallback: Optional[PaymentStrategy] = None,
                 damage: Optional[PaymentStrategy] = None):
        self.primary = primary or RemoteFunctionStrategy(backend)
        self.fallback = fallback or DirectWriteStrategy(backend)
        self.damage = damage or DamagePaymentStrategy(backend)

    def process(self, request: PaymentRequest) -> dict:
        try:
            if request.is_damage_payment and request.damage_ids:
                data = self.damage.attempt(request)
                return {"status": "success", "strategy": self.damage.name, "data": data}

            try:
                data = self.primary.attempt(request)
                return {"status": "success", "strategy": self.primary.name, "data": data}
            except Exception as e:
                logger.warning("Edge function error, falling back to direct database operation: %s", e)

            data = self.fallback.attempt(request)
            return {"status": "success", "strategy": self.fallback.name, "data": data}

        except BackendError as e:
            logger.error("Payment processing error for booking %s: %s", request.booking_id, e)
            return {"status": "error", "message": str(e)}


def process_payment(request: PaymentRequest, backend) -> dict:
    """
    Process a payment with the default strategies.

    Args:
        request (PaymentRequest): Validated payment intent.
        backend: Persistence backend.

    Returns:
        dict: {"status": "success", "strategy": ..., "data": ...} or
        {"status": "error", "message": ...}. Not idempotent: every call inserts
        a new payment row.
    """
    return PaymentProcessor(backend).process(request)


def create_payment(backend, request: PaymentRequest, status: str = "completed") -> dict:
    """Insert a single payment row without touching the booking."""
    try:
        payment = _insert_payment(backend, request, status=status)
    except BackendError as e:
        logger.error("Error creating payment: %s", e)
        return {"status": "error", "message": str(e)}
    return {"status": "success", "data": payment}


def get_payments_by_booking(backend, booking_id) -> dict:
    try:
        rows = backend.select("payments", "*", match={"booking_id": str(booking_id)})
    except BackendError as e:
        logger.error("Error fetching payments: %s", e)
        return {"status": "error", "message": str(e)}
    return {"status": "success", "data": rows}


def get_payments_by_user(backend, user_id: str) -> dict:
    """Payments of a user, each with its booking attached."""
    try:
        rows = backend.select("payments", "*, bookings(*)", match={"user_id": user_id})
    except BackendError as e:
        logger.error("Error fetching user payments: %s", e)
        return {"status": "error", "message": str(e)}
    return {"status": "success", "data": rows}
