import pytest

from rentcar.models.registration import (
    CustomerRegistration,
    DriverMitraRegistration,
    DriverPerusahaanRegistration,
    StaffRegistration,
)
from rentcar.services.registration_form import RegistrationForm
from rentcar.services.registration_validator import validate_registration


def test_switching_from_driver_mitra_to_customer_clears_vehicle():
    form = RegistrationForm(role="Driver Mitra")
    form.set_value("make", "Toyota")
    form.set_value("licensePlate", "D 1234 AB")
    form.set_value("first_name", "Budi")
    form.set_value("kk_image", "https://cdn.example.com/kk.jpg")

    form.set_role("Customer")

    assert form.values["make"] == ""
    assert form.values["license_plate"] == ""
    assert form.values["first_name"] == ""
    assert form.values["kk_image"] == ""
    assert isinstance(form.build_request(), CustomerRegistration)


def test_switching_from_staff_clears_staff_fields():
    form = RegistrationForm(role="Staff")
    form.set_value("department", "Ops")
    form.set_value("idCardImage", "https://cdn.example.com/id.jpg")

    form.set_role("Driver Perusahaan")

    assert form.values["department"] == ""
    assert form.values["id_card_image"] == ""


def test_switching_between_driver_roles_keeps_driver_documents():
    form = RegistrationForm(role="Driver Mitra")
    form.set_value("kk_image", "https://cdn.example.com/kk.jpg")
    form.set_value("stnk_image", "https://cdn.example.com/stnk.jpg")
    form.set_value("model", "Avanza")

    form.set_role("Driver Perusahaan")

    assert form.values["kk_image"] == "https://cdn.example.com/kk.jpg"
    assert form.values["stnk_image"] == "https://cdn.example.com/stnk.jpg"
    assert form.values["model"] == ""


def test_skck_cleared_when_leaving_driver_perusahaan():
    form = RegistrationForm(role="Driver Perusahaan")
    form.set_value("skckImage", "https://cdn.example.com/skck.jpg")
    form.set_role("Driver Mitra")
    assert form.values["skck_image"] == ""


def test_unknown_field_raises():
    with pytest.raises(KeyError):
        RegistrationForm().set_value("favourite_colour", "blue")


def test_from_payload_accepts_camel_case_and_drops_other_roles():
    form = RegistrationForm.from_payload({
        "role": "Staff",
        "name": "Siti",
        "employeeId": "E-07",
        "licensePlate": "B 1 XYZ",
        "year": 2021,
    })
    request = form.build_request()

    assert isinstance(request, StaffRegistration)
    assert request.employee_id == "E-07"
    assert form.values["license_plate"] == ""
    assert form.values["year"] == ""


def test_from_payload_builds_driver_variants():
    mitra = RegistrationForm.from_payload({"role": "Driver Mitra", "make": "Honda", "seats": 7}).build_request()
    assert isinstance(mitra, DriverMitraRegistration)
    assert mitra.vehicle.make == "Honda"
    assert mitra.vehicle.seats == "7"

    perusahaan = RegistrationForm.from_payload({"role": "Driver Perusahaan", "skck_image": "x"}).build_request()
    assert isinstance(perusahaan, DriverPerusahaanRegistration)
    assert perusahaan.skck_image == "x"


def test_existing_images_satisfy_document_rules():
    existing = {
        "selfie_image": "https://cdn.example.com/selfie.jpg",
        "ktp_image": "https://cdn.example.com/ktp.jpg",
        "sim_image": "https://cdn.example.com/sim.jpg",
        "kk_image": "https://cdn.example.com/kk.jpg",
        "stnk_image": "https://cdn.example.com/stnk.jpg",
        "skck_image": "https://cdn.example.com/skck.jpg",
    }
    form = RegistrationForm.from_payload({
        "role": "Driver Perusahaan",
        "name": "Budi Santoso",
        "email": "budi@example.com",
        "password": "secret1",
        "phone": "081234567890",
        "firstName": "Budi",
        "lastName": "Santoso",
        "address": "Jl. Merdeka 1",
        "birthPlace": "Bandung",
        "birthDate": "1990-01-01",
        "religion": "Islam",
        "licenseNumber": "SIM123",
        "licenseExpiry": "2030-01-01",
        "referencePhone": "081298765432",
    }, existing_images=existing)

    request = form.build_request()
    assert request.driver.ktp_image == "https://cdn.example.com/ktp.jpg"
    assert validate_registration(request).is_valid


def test_unknown_role_builds_customer_request_that_fails_validation():
    form = RegistrationForm.from_payload({"role": "Admin"})
    request = form.build_request()
    assert isinstance(request, CustomerRegistration)
    assert not validate_registration(request).is_valid
