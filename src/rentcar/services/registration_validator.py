import re
from typing import Callable, Dict, Optional, Type

from rentcar.models.registration import (
    ROLES,
    AccountDetails,
    CustomerRegistration,
    DriverDetails,
    DriverMitraRegistration,
    DriverPerusahaanRegistration,
    RegistrationRequest,
    StaffRegistration,
    ValidationResult,
)

EMAIL_PAT = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

SELFIE_REQUIRED = "Silakan ambil foto selfie terlebih dahulu"
DRIVER_DETAILS_REQUIRED = "All personal information and license details are required for drivers"
VEHICLE_REQUIRED = "Please complete all vehicle information"
STAFF_DETAILS_REQUIRED = "Please complete all staff information"

# Upload order for driver documents; the first missing one is reported
DRIVER_DOCUMENTS = (
    ("ktp_image", "Please upload your KTP (ID card)"),
    ("sim_image", "Please upload your SIM (Driver's License)"),
    ("kk_image", "Please upload your KK (Family Card)"),
    ("stnk_image", "Please upload your STNK (Vehicle Registration)"),
)
SKCK_REQUIRED = "Please upload your SKCK (Police Clearance Certificate)"
ID_CARD_REQUIRED = "Please upload your ID Card"


def _present(value: Optional[str]) -> bool:
    return bool(value and str(value).strip())


def _check_account(account: AccountDetails) -> Optional[str]:
    if len(account.name) < 2:
        return "Name must be at least 2 characters"
    if not EMAIL_PAT.match(account.email or ""):
        return "Please enter a valid email address"
    if len(account.password) < 6:
        return "Password must be at least 6 characters"
    if len(account.phone) < 10:
        return "Phone number must be at least 10 digits"
    if not account.role:
        return "Please select a role"
    if account.role not in ROLES:
        return f"Unknown role: {account.role}"
    return None


def _check_selfie(account: AccountDetails) -> Optional[str]:
    return None if _present(account.selfie_image) else SELFIE_REQUIRED


def _check_driver_details(driver: DriverDetails) -> Optional[str]:
    required = (
        driver.first_name, driver.last_name, driver.address, driver.birth_place,
        driver.birth_date, driver.religion, driver.license_number,
        driver.license_expiry, driver.reference_phone,
    )
    return None if all(_present(v) for v in required) else DRIVER_DETAILS_REQUIRED


def _check_driver_documents(driver: DriverDetails) -> Optional[str]:
    for attr, message in DRIVER_DOCUMENTS:
        if not _present(getattr(driver, attr)):
            return message
    return None


def _validate_customer(request: CustomerRegistration) -> Optional[str]:
    return _check_selfie(request.account)


def _validate_staff(request: StaffRegistration) -> Optional[str]:
    if not (_present(request.department) and _present(request.position) and _present(request.employee_id)):
        return STAFF_DETAILS_REQUIRED
    return _check_selfie(request.account) or (None if _present(request.id_card_image) else ID_CARD_REQUIRED)


def _validate_driver_mitra(request: DriverMitraRegistration) -> Optional[str]:
    vehicle = request.vehicle
    error = _check_driver_details(request.driver)
    if error:
        return error
    if not all(_present(v) for v in (vehicle.make, vehicle.model, vehicle.year, vehicle.license_plate, vehicle.color)):
        return VEHICLE_REQUIRED
    return _check_selfie(request.account) or _check_driver_documents(request.driver)


def _validate_driver_perusahaan(request: DriverPerusahaanRegistration) -> Optional[str]:
    error = _check_driver_details(request.driver) or _check_selfie(request.account) \
        or _check_driver_documents(request.driver)
    if error:
        return error
    return None if _present(request.skck_image) else SKCK_REQUIRED


_VALIDATORS: Dict[Type, Callable[..., Optional[str]]] = {
    CustomerRegistration: _validate_customer,
    StaffRegistration: _validate_staff,
    DriverMitraRegistration: _validate_driver_mitra,
    DriverPerusahaanRegistration: _validate_driver_perusahaan,
}


def validate_registration(request: RegistrationRequest) -> ValidationResult:
    """
    Decide whether a registration request can be submitted.

    Rules run in a fixed order and stop at the first failure: account fields,
    role-specific details, selfie, then documents (KTP, SIM, KK, STNK, SKCK for
    drivers; ID card for staff).

    Args:
        request: One of the RegistrationRequest variants.

    Returns:
        ValidationResult with is_valid and, on rejection, the first unmet rule.
    """
    error = _check_account(request.account)
    if error is None:
        validator = _VALIDATORS.get(type(request))
        if validator is None:
            raise TypeError(f"Unsupported registration type: {type(request).__name__}")
        error = validator(request)

    if error:
        return ValidationResult(is_valid=False, message=error)
    return ValidationResult(is_valid=True)
