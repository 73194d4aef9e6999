from rentcar.services.auth_service import AuthService
from rentcar.services.registration_form import RegistrationForm
from rentcar.services.registration_service import load_existing_images, register_user


def base_payload(image, role="Customer", **extra):
    payload = {
        "role": role,
        "name": "Budi Santoso",
        "email": "budi@example.com",
        "password": "secret1",
        "phone": "081234567890",
        "selfieImage": image,
    }
    payload.update(extra)
    return payload


def driver_payload(image, role):
    return base_payload(
        image, role,
        firstName="Budi", lastName="Santoso", address="Jl. Merdeka 1",
        birthPlace="Bandung", birthDate="1990-01-01", religion="Islam",
        licenseNumber="SIM123", licenseExpiry="2030-01-01", referencePhone="081298765432",
        ktpImage=image, simImage=image, kkImage=image, stnkImage=image,
    )


def test_register_customer_creates_account_and_user_row(backend, image):
    auth = AuthService(backend)
    result = register_user(RegistrationForm.from_payload(base_payload(image)), backend, auth)

    assert result["status"] == "success"
    user = result["data"]["user"]
    assert user["role"] == "Customer"
    assert user["full_name"] == "Budi Santoso"
    assert user["selfie_url"].startswith("memory://documents/selfies/budi@example.com/")
    assert result["data"]["profile"] is None
    assert len(backend.files) == 1

    session = auth.sign_in("budi@example.com", "secret1")
    assert session.user_id == user["id"]
    assert session.role == "Customer"


def test_invalid_registration_writes_nothing(backend, image):
    payload = base_payload(image, password="123")
    result = register_user(RegistrationForm.from_payload(payload), backend, AuthService(backend))

    assert result == {"status": "error", "message": "Password must be at least 6 characters"}
    assert backend.tables.get("users", []) == []
    assert backend.files == {}


def test_register_driver_mitra_creates_driver_row_with_vehicle(backend, image):
    payload = driver_payload(image, "Driver Mitra")
    payload.update({"make": "Toyota", "model": "Avanza", "year": "2020", "color": "Silver",
                    "licensePlate": "D 1234 AB", "seats": "7", "transmission": "manual"})

    result = register_user(RegistrationForm.from_payload(payload), backend, AuthService(backend))

    assert result["status"] == "success"
    driver = backend.tables["drivers"][0]
    assert driver["driver_type"] == "mitra"
    assert driver["year"] == 2020
    assert driver["seats"] == 7
    assert driver["license_plate"] == "D 1234 AB"
    assert driver["kk_url"].startswith("memory://documents/kk/")
    assert "skck_url" not in driver


def test_register_driver_perusahaan_stores_skck(backend, image):
    payload = driver_payload(image, "Driver Perusahaan")
    payload["skckImage"] = image

    result = register_user(RegistrationForm.from_payload(payload), backend, AuthService(backend))

    assert result["status"] == "success"
    driver = backend.tables["drivers"][0]
    assert driver["driver_type"] == "perusahaan"
    assert driver["skck_url"].startswith("memory://documents/skck/")
    assert "make" not in driver


def test_register_staff_creates_staff_row(backend, image):
    payload = base_payload(image, "Staff", department="Ops", position="Admin",
                           employeeId="E-01", idCardImage="https://cdn.example.com/id.jpg")

    result = register_user(RegistrationForm.from_payload(payload), backend, AuthService(backend))

    assert result["status"] == "success"
    staff = backend.tables["staff"][0]
    assert staff["employee_id"] == "E-01"
    # already stored images are referenced, not re-uploaded
    assert staff["id_card_url"] == "https://cdn.example.com/id.jpg"


def test_duplicate_email_reports_backend_error(backend, image):
    auth = AuthService(backend)
    register_user(RegistrationForm.from_payload(base_payload(image)), backend, auth)
    result = register_user(RegistrationForm.from_payload(base_payload(image)), backend, auth)

    assert result["status"] == "error"
    assert result["message"] == "Registration failed: User already registered"
    assert len(backend.tables["users"]) == 1


def test_malformed_image_reports_error(backend):
    result = register_user(
        RegistrationForm.from_payload(base_payload("not-an-image")), backend, AuthService(backend)
    )
    assert result["status"] == "error"
    assert result["message"].startswith("Registration failed:")


def test_load_existing_images_for_driver(backend):
    backend.seed("users", [{"id": "u1", "selfie_url": "https://cdn.example.com/selfie.jpg"}])
    backend.seed("drivers", [{"id": "u1", "ktp_url": "https://cdn.example.com/ktp.jpg", "sim_url": None}])

    images = load_existing_images(backend, "u1", "Driver Mitra")

    assert images == {
        "selfie_image": "https://cdn.example.com/selfie.jpg",
        "ktp_image": "https://cdn.example.com/ktp.jpg",
    }


def test_load_existing_images_for_unknown_user(backend):
    assert load_existing_images(backend, "nobody", "Staff") == {}
