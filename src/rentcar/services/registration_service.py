import logging
from dataclasses import asdict
from typing import Any, Dict

from rentcar.models.registration import (
    DRIVER_ROLES,
    IMAGE_COLUMNS,
    ROLE_DRIVER_MITRA,
    ROLE_STAFF,
    DriverMitraRegistration,
    DriverPerusahaanRegistration,
    RegistrationRequest,
    StaffRegistration,
)
from rentcar.services.database import BackendError
from rentcar.services.registration_form import RegistrationForm
from rentcar.services.registration_validator import validate_registration
from rentcar.services.storage_service import upload_image

logger = logging.getLogger(__name__)

# Storage folder for each image field
IMAGE_FOLDERS = {
    "selfie_image": "selfies",
    "ktp_image": "ktp",
    "sim_image": "sim",
    "skck_image": "skck",
    "kk_image": "kk",
    "stnk_image": "stnk",
    "id_card_image": "id_cards",
}


def _collect_images(request: RegistrationRequest) -> Dict[str, str]:
    images = {"selfie_image": request.account.selfie_image}
    if isinstance(request, (DriverMitraRegistration, DriverPerusahaanRegistration)):
        driver = request.driver
        images.update({
            "ktp_image": driver.ktp_image,
            "sim_image": driver.sim_image,
            "kk_image": driver.kk_image,
            "stnk_image": driver.stnk_image,
        })
    if isinstance(request, DriverPerusahaanRegistration):
        images["skck_image"] = request.skck_image
    if isinstance(request, StaffRegistration):
        images["id_card_image"] = request.id_card_image
    return {name: value for name, value in images.items() if value}


def _as_number(value: str):
    return int(value) if value and value.strip().isdigit() else (value or None)


def _driver_row(user_id: str, request, urls: Dict[str, str]) -> Dict[str, Any]:
    account, driver = request.account, request.driver
    row = {
        "id": user_id,
        "name": account.name,
        "email": account.email,
        "phone_number": account.phone,
        "driver_type": "mitra" if account.role == ROLE_DRIVER_MITRA else "perusahaan",
        "first_name": driver.first_name,
        "last_name": driver.last_name,
        "address": driver.address,
        "birth_place": driver.birth_place,
        "birth_date": driver.birth_date,
        "religion": driver.religion,
        "license_number": driver.license_number,
        "license_expiry": driver.license_expiry,
        "reference_phone": driver.reference_phone,
        "selfie_url": urls.get("selfie_image"),
        "ktp_url": urls.get("ktp_image"),
        "sim_url": urls.get("sim_image"),
        "kk_url": urls.get("kk_image"),
        "stnk_url": urls.get("stnk_image"),
    }
    if isinstance(request, DriverPerusahaanRegistration):
        row["skck_url"] = urls.get("skck_image")
    if isinstance(request, DriverMitraRegistration):
        vehicle = asdict(request.vehicle)
        vehicle["year"] = _as_number(vehicle["year"])
        vehicle["seats"] = _as_number(vehicle["seats"])
        row.update(vehicle)
    return row


def _staff_row(user_id: str, request: StaffRegistration, urls: Dict[str, str]) -> Dict[str, Any]:
    account = request.account
    return {
        "id": user_id,
        "name": account.name,
        "email": account.email,
        "phone": account.phone,
        "department": request.department,
        "position": request.position,
        "employee_id": request.employee_id,
        "id_card_url": urls.get("id_card_image"),
    }


def register_user(form: RegistrationForm, backend, auth) -> dict:
    """
    Validate and submit a registration.

    Args:
        form (RegistrationForm): Form state with the selected role applied.
        backend: Persistence backend (tables and storage).
        auth (AuthService): Owner of account sign-up.

    Returns:
        dict: {"status": "success", "data": {...}} or {"status": "error", "message": ...}.
        A failure after the first remote write leaves earlier writes in place.
    """
    request = form.build_request()
    result = validate_registration(request)
    if not result.is_valid:
        return {"status": "error", "message": result.message}

    account = request.account
    try:
        # Step 1: Store document images
        urls = {
            name: upload_image(backend, value, IMAGE_FOLDERS[name], owner=account.email)
            for name, value in _collect_images(request).items()
        }

        # Step 2: Create the auth account
        user = auth.sign_up(
            account.email,
            account.password,
            {"name": account.name, "phone": account.phone, "role": account.role},
        )
        user_id = user["id"]

        # Step 3: Create the profile rows
        user_row = backend.insert("users", {
            "id": user_id,
            "full_name": account.name,
            "email": account.email,
            "phone": account.phone,
            "role": account.role,
            "selfie_url": urls.get("selfie_image"),
        })

        profile = None
        if account.role in DRIVER_ROLES:
            profile = backend.insert("drivers", _driver_row(user_id, request, urls))
        elif account.role == ROLE_STAFF:
            profile = backend.insert("staff", _staff_row(user_id, request, urls))

    except (BackendError, ValueError) as e:
        logger.error("Registration error for %s: %s", account.email, e)
        return {"status": "error", "message": f"Registration failed: {e}"}

    logger.info("Registered %s as %s", user_id, account.role)
    return {
        "status": "success",
        "data": {"user": user_row, "profile": profile, "role": account.role},
    }


def load_existing_images(backend, user_id: str, role: str) -> Dict[str, str]:
    """
    Fetch the images a user already has on file, keyed by form field name.

    Errors are logged and yield whatever was found before the failure.
    """
    images: Dict[str, str] = {}
    try:
        users = backend.select("users", "selfie_url", match={"id": user_id})
        if users and users[0].get("selfie_url"):
            images["selfie_image"] = users[0]["selfie_url"]

        if role in DRIVER_ROLES:
            table, fields = "drivers", ("ktp_image", "sim_image", "skck_image", "kk_image", "stnk_image")
        elif role == ROLE_STAFF:
            table, fields = "staff", ("id_card_image",)
        else:
            return images

        rows = backend.select(table, "*", match={"id": user_id})
        if rows:
            for name in fields:
                url = rows[0].get(IMAGE_COLUMNS[name])
                if url:
                    images[name] = url
    except BackendError as e:
        logger.error("Error fetching user data for %s: %s", user_id, e)
    return images
