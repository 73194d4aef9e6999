import math
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional, Union

PAYMENT_METHODS = ("cash", "bank", "card")

PAYMENT_STATUS_UNPAID = "unpaid"
PAYMENT_STATUS_PARTIAL = "partial"
PAYMENT_STATUS_PAID = "paid"

Number = Union[int, float]


def _pick(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return default


def _as_amount(value: Any) -> Number:
    if isinstance(value, bool) or value is None:
        raise ValueError("amount is required")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise ValueError(f"amount must be a number, got {value!r}")
    if not isinstance(value, (int, float)):
        raise ValueError(f"amount must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError("amount must be a finite number")
    if value <= 0:
        raise ValueError("amount must be positive")
    return value


@dataclass
class PaymentRequest:
    user_id: str
    booking_id: Union[int, str]
    amount: Number
    payment_method: str
    transaction_id: Optional[str] = None
    bank_name: Optional[str] = None
    is_partial_payment: bool = False
    is_damage_payment: bool = False
    damage_ids: List[Union[int, str]] = field(default_factory=list)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "PaymentRequest":
        """
        Build a request from an API payload (camelCase or snake_case keys).

        Raises:
            ValueError: If a required field is missing or invalid.
        """
        if not isinstance(data, dict):
            raise ValueError("Missing JSON payload")

        user_id = _pick(data, "userId", "user_id")
        booking_id = _pick(data, "bookingId", "booking_id")
        if not user_id:
            raise ValueError("userId is required")
        if booking_id in (None, ""):
            raise ValueError("bookingId is required")

        method = str(_pick(data, "paymentMethod", "payment_method", default="")).strip().lower()
        if method not in PAYMENT_METHODS:
            raise ValueError(f"paymentMethod must be one of {', '.join(PAYMENT_METHODS)}")

        damage_ids = _pick(data, "damageIds", "damage_ids", default=[])
        if not isinstance(damage_ids, list):
            raise ValueError("damageIds must be a list")

        return cls(
            user_id=str(user_id),
            booking_id=booking_id,
            amount=_as_amount(_pick(data, "amount")),
            payment_method=method,
            transaction_id=_pick(data, "transactionId", "transaction_id") or None,
            bank_name=_pick(data, "bankName", "bank_name") or None,
            is_partial_payment=bool(_pick(data, "isPartialPayment", "is_partial_payment", default=False)),
            is_damage_payment=bool(_pick(data, "isDamagePayment", "is_damage_payment", default=False)),
            damage_ids=list(damage_ids),
        )

    def to_function_payload(self) -> Dict[str, Any]:
        """Body sent to the processPayment function."""
        return {
            "userId": self.user_id,
            "bookingId": self.booking_id,
            "amount": self.amount,
            "paymentMethod": self.payment_method,
            "transactionId": self.transaction_id,
            "bankName": self.bank_name,
            "isPartialPayment": self.is_partial_payment,
            "isDamagePayment": self.is_damage_payment,
            "damageIds": list(self.damage_ids),
        }

    def to_dict(self) -> Dict: return asdict(self)


@dataclass
class PaymentRecord:
    id: Union[int, str]
    user_id: str
    booking_id: Union[int, str]
    amount: Number
    payment_method: str
    status: str
    transaction_id: Optional[str] = None
    bank_name: Optional[str] = None
    is_partial_payment: bool = False
    is_damage_payment: bool = False
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "PaymentRecord":
        names = cls.__dataclass_fields__.keys()
        return cls(**{k: v for k, v in row.items() if k in names})

    def to_dict(self) -> Dict: return asdict(self)
