from typing import Any, Dict, Optional

from rentcar.models.registration import (
    ACCOUNT_FIELDS,
    DRIVER_DOCUMENT_FIELDS,
    DRIVER_FIELDS,
    DRIVER_ROLES,
    FORM_FIELDS,
    POLICE_CLEARANCE_FIELDS,
    ROLE_CUSTOMER,
    ROLE_DRIVER_MITRA,
    ROLE_DRIVER_PERUSAHAAN,
    ROLE_STAFF,
    STAFF_FIELDS,
    VEHICLE_FIELDS,
    AccountDetails,
    CustomerRegistration,
    DriverDetails,
    DriverMitraRegistration,
    DriverPerusahaanRegistration,
    RegistrationRequest,
    StaffRegistration,
    VehicleDetails,
)

# SPA field names -> form field names
CAMEL_CASE_ALIASES = {
    "selfieImage": "selfie_image",
    "firstName": "first_name",
    "lastName": "last_name",
    "birthPlace": "birth_place",
    "birthDate": "birth_date",
    "licenseNumber": "license_number",
    "licenseExpiry": "license_expiry",
    "referencePhone": "reference_phone",
    "ktpImage": "ktp_image",
    "simImage": "sim_image",
    "skckImage": "skck_image",
    "kkImage": "kk_image",
    "stnkImage": "stnk_image",
    "employeeId": "employee_id",
    "idCardImage": "id_card_image",
    "licensePlate": "license_plate",
    "fuelType": "fuel_type",
}


def _as_text(value: Any) -> str:
    # year and seats may arrive as numbers
    return "" if value is None else str(value)


class RegistrationForm:
    """
    In-memory registration form state.

    Holds every field of every role as a flat mapping, the way the sign-up
    screen does, and turns it into the role's RegistrationRequest variant on
    submit. Images already stored for the user are kept apart in
    existing_images so clearing a field never loses an on-file document.
    """

    def __init__(self, role: str = ROLE_CUSTOMER, existing_images: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = {name: "" for name in FORM_FIELDS}
        self.values["role"] = role
        self.existing_images: Dict[str, str] = dict(existing_images or {})

    @classmethod
    def from_payload(cls, data: Dict[str, Any], existing_images: Optional[Dict[str, str]] = None) -> "RegistrationForm":
        """
        Build a form from a submitted payload (camelCase or snake_case keys).

        The role is applied last so values posted for other roles are dropped.
        """
        role = _as_text(data.get("role", ROLE_CUSTOMER))
        form = cls(role=role, existing_images=existing_images)
        form.update(data)
        form.set_role(role)
        return form

    @property
    def role(self) -> str:
        return self.values["role"]

    def set_value(self, name: str, value: Any) -> None:
        name = CAMEL_CASE_ALIASES.get(name, name)
        if name not in self.values:
            raise KeyError(f"Unknown registration field: {name}")
        self.values[name] = _as_text(value)

    def update(self, data: Dict[str, Any]) -> None:
        for key, value in data.items():
            name = CAMEL_CASE_ALIASES.get(key, key)
            if name in self.values and name != "role":
                self.values[name] = _as_text(value)

    def _clear(self, fields) -> None:
        for name in fields:
            self.values[name] = ""

    def set_role(self, role: str) -> None:
        """Select a role and reset every field that does not belong to it."""
        self.values["role"] = role
        if role not in DRIVER_ROLES:
            self._clear(DRIVER_FIELDS + DRIVER_DOCUMENT_FIELDS)
        if role != ROLE_DRIVER_PERUSAHAAN:
            self._clear(POLICE_CLEARANCE_FIELDS)
        if role != ROLE_DRIVER_MITRA:
            self._clear(VEHICLE_FIELDS)
        if role != ROLE_STAFF:
            self._clear(STAFF_FIELDS)

    def image(self, name: str) -> str:
        """Submitted image, or the one already on file."""
        return self.values.get(name) or self.existing_images.get(name, "")

    def _pick(self, fields) -> Dict[str, str]:
        return {name: self.image(name) if name.endswith("_image") else self.values[name] for name in fields}

    def build_request(self) -> RegistrationRequest:
        account = AccountDetails(**self._pick(ACCOUNT_FIELDS))
        role = self.role

        if role in DRIVER_ROLES:
            driver = DriverDetails(**self._pick(DRIVER_FIELDS + DRIVER_DOCUMENT_FIELDS))
            if role == ROLE_DRIVER_MITRA:
                return DriverMitraRegistration(
                    account=account,
                    driver=driver,
                    vehicle=VehicleDetails(**self._pick(VEHICLE_FIELDS)),
                )
            return DriverPerusahaanRegistration(
                account=account,
                driver=driver,
                skck_image=self.image("skck_image"),
            )

        if role == ROLE_STAFF:
            return StaffRegistration(account=account, **self._pick(STAFF_FIELDS))

        # Customer, and unknown roles which the validator rejects
        return CustomerRegistration(account=account)
