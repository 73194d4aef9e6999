from dataclasses import dataclass, asdict, field
from typing import Dict, Union

'''
Registration Models
One dataclass per role. Each variant carries only the fields its role needs,
so a field can never be "optional but actually required".
 '''

ROLE_CUSTOMER = "Customer"
ROLE_STAFF = "Staff"
ROLE_DRIVER_MITRA = "Driver Mitra"
ROLE_DRIVER_PERUSAHAAN = "Driver Perusahaan"

ROLES = (ROLE_CUSTOMER, ROLE_STAFF, ROLE_DRIVER_MITRA, ROLE_DRIVER_PERUSAHAAN)
DRIVER_ROLES = (ROLE_DRIVER_MITRA, ROLE_DRIVER_PERUSAHAAN)

# Form field groups, used to clear stale values when the role changes
DRIVER_FIELDS = (
    "first_name", "last_name", "address", "birth_place", "birth_date", "religion",
    "license_number", "license_expiry", "reference_phone", "ktp_image", "sim_image",
)
VEHICLE_FIELDS = (
    "color", "license_plate", "make", "model", "year", "type", "category",
    "seats", "transmission", "fuel_type",
)
DRIVER_DOCUMENT_FIELDS = ("kk_image", "stnk_image")
POLICE_CLEARANCE_FIELDS = ("skck_image",)
STAFF_FIELDS = ("department", "position", "employee_id", "id_card_image")
ACCOUNT_FIELDS = ("name", "email", "password", "phone", "role", "selfie_image")

FORM_FIELDS = (
    ACCOUNT_FIELDS + DRIVER_FIELDS + POLICE_CLEARANCE_FIELDS + VEHICLE_FIELDS
    + DRIVER_DOCUMENT_FIELDS + STAFF_FIELDS
)

# Image fields mapped to the column that stores their URL once uploaded
IMAGE_COLUMNS = {
    "selfie_image": "selfie_url",
    "ktp_image": "ktp_url",
    "sim_image": "sim_url",
    "skck_image": "skck_url",
    "kk_image": "kk_url",
    "stnk_image": "stnk_url",
    "id_card_image": "id_card_url",
}


@dataclass
class AccountDetails:
    name: str = ""
    email: str = ""
    password: str = ""
    phone: str = ""
    role: str = ""
    selfie_image: str = ""


@dataclass
class DriverDetails:
    first_name: str = ""
    last_name: str = ""
    address: str = ""
    birth_place: str = ""
    birth_date: str = ""
    religion: str = ""
    license_number: str = ""
    license_expiry: str = ""
    reference_phone: str = ""
    ktp_image: str = ""      # KTP, identity card
    sim_image: str = ""      # SIM, driving licence
    kk_image: str = ""       # KK, family card
    stnk_image: str = ""     # STNK, vehicle registration


@dataclass
class VehicleDetails:
    make: str = ""
    model: str = ""
    year: str = ""
    color: str = ""
    license_plate: str = ""
    type: str = ""
    category: str = ""
    seats: str = ""
    transmission: str = ""
    fuel_type: str = ""


@dataclass
class CustomerRegistration:
    account: AccountDetails

    def to_dict(self) -> Dict: return asdict(self)


@dataclass
class StaffRegistration:
    account: AccountDetails
    department: str = ""
    position: str = ""
    employee_id: str = ""
    id_card_image: str = ""

    def to_dict(self) -> Dict: return asdict(self)


@dataclass
class DriverMitraRegistration:
    account: AccountDetails
    driver: DriverDetails = field(default_factory=DriverDetails)
    vehicle: VehicleDetails = field(default_factory=VehicleDetails)

    def to_dict(self) -> Dict: return asdict(self)


@dataclass
class DriverPerusahaanRegistration:
    account: AccountDetails
    driver: DriverDetails = field(default_factory=DriverDetails)
    skck_image: str = ""     # SKCK, police clearance

    def to_dict(self) -> Dict: return asdict(self)


RegistrationRequest = Union[
    CustomerRegistration,
    StaffRegistration,
    DriverMitraRegistration,
    DriverPerusahaanRegistration,
]


@dataclass
class ValidationResult:
    is_valid: bool
    message: str = ""

    def to_dict(self) -> Dict: return asdict(self)
