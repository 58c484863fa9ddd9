import os

# Settings are read at import time
os.environ.setdefault("APPLICATION_STORE", "memory")
os.environ.setdefault("AUDIT_LOG_ENABLED", "false")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-permit-portal")

import copy

import pytest
from fastapi.testclient import TestClient

from permit_portal.main import app
from permit_portal.core.auth_dependencies import get_current_user, get_optional_user
from permit_portal.repositories.application_repository import (
    InMemoryApplicationRepository,
    get_application_repository,
)

APPLICANT = {"id": "u1", "email": "amina.bello@kaduna.gov.ng", "full_name": "Amina Bello", "is_admin": False}
OTHER_APPLICANT = {"id": "u2", "email": "musa.ibrahim@kaduna.gov.ng", "full_name": "Musa Ibrahim", "is_admin": False}
REVIEWER = {"id": "admin-1", "email": "reviewer@kasupda.gov.ng", "full_name": "Review Officer", "is_admin": True}

PERSON = {
    "firstName": "Amina",
    "surname": "Bello",
    "gender": "Female",
    "dateOfBirth": "1990-05-14",
    "phone1": "+234 803 123 4567",
}

ORGANISATION = {
    "orgName": "Zaria Builders Ltd",
    "orgPhone": "08031234567",
    "ceoFirstName": "Musa",
    "ceoSurname": "Ibrahim",
}

SITE = {
    "siteStreetName": "Ahmadu Bello Way",
    "siteCityTown": "Kaduna",
    "siteLGA": "Kaduna North",
    "siteTypeOfLand": "Public",
}

VALID_VALUES = {
    "residential-building-permit": {**PERSON, "plotDescriptionAddress": "Plot 12, Barnawa"},
    "commercial-industrial-other-permit": {
        **ORGANISATION, "plotDescriptionAddress": "Plot 7, Kakuri Industrial Estate", "declaration": True,
    },
    "mast-permit": {**ORGANISATION, **SITE, "mastType": "GSM", "declaration": True},
    "street-naming-permit": {
        **PERSON, "maritalStatus": "Married", "educationLevel": "Tertiary",
        "typeOfRoad": "Local", "locationOfSite": "Unguwan Rimi", "declaration": True,
    },
    "outdoor-advertisement-permit": {
        "applicantCompanyNameIndividual": "Creative Signs",
        "applicantPhone": "0803 123 4567",
        "applicantFullNameContact": "Ngozi Eze, 08031234567",
        "outdoorActivity": {"kiosk": True},
        **SITE,
        "declaration": True,
    },
    "outdoor-advertisement-structure-permit": {
        "companyName": "Global Structs",
        "phoneNo": "(0803) 123-4567",
        "ceoNameContact": "Tunde Ade, 08031234567",
        "boardInstallations": {"gantry": True},
        **SITE,
        "repFirstName": "Bala",
        "repSurname": "Usman",
        "repPhone1": "08039876543",
        "repEmail": "bala.usman@globalstructs.com.ng",
        "repIdentificationType": {"nationalIdCard": True},
        "repIdNumber": "NIN-12345678",
        "declaration": True,
    },
    "shop-owners-permit": {
        **PERSON, "typeOfDevelopment": "Retail", "categoryOfBusiness": "Provisions",
        "plotAddressDescription": "Shop 4, Central Market", "declaration": True,
    },
    "stage-approval": {**PERSON, "originalPermitId": "KBP-2023-0042", "declaration": True},
    "din-application": {**PERSON, "declaration": True},
}


def valid_values(slug: str) -> dict:
    return copy.deepcopy(VALID_VALUES[slug])


def act_as(user: dict) -> None:
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_optional_user] = lambda: user


def sign_out() -> None:
    app.dependency_overrides.pop(get_current_user, None)
    app.dependency_overrides.pop(get_optional_user, None)


@pytest.fixture
def repository():
    return InMemoryApplicationRepository()


@pytest.fixture
def client(repository):
    app.dependency_overrides = {}
    app.dependency_overrides[get_application_repository] = lambda: repository
    act_as(APPLICANT)
    yield TestClient(app)
    app.dependency_overrides = {}
