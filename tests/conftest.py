"""Pytest fixtures for the form store, scoring and wizard flow tests."""

from datetime import date

import pytest

from src.database.redis import InMemoryStorage
from src.integrations.clients.mocks.document_scanner import DocumentScanner
from src.wizard.flows.quote_wizard import QuoteWizardFlow
from src.wizard.state_manager import FormStore

TODAY = date(2026, 6, 15)


@pytest.fixture
def today():
    """Fixed reference date so age-based rules are stable."""
    return TODAY


@pytest.fixture
def storage():
    """In-memory storage stub for tests."""
    return InMemoryStorage()


@pytest.fixture
def store(storage):
    return FormStore(storage)


@pytest.fixture
def wizard(store, today):
    return QuoteWizardFlow(store, scanner=DocumentScanner(delay=0), today=today)


@pytest.fixture
def valid_driver():
    return {
        "firstName": "Emily",
        "lastName": "Tremblay",
        "dateOfBirth": "1988-03-02",
        "gender": "female",
        "maritalStatus": "married",
        "licenseNumber": "T6543-21098",
        "yearsLicensed": "10+",
        "address": "221 Rue Sainte-Catherine",
        "city": "Montreal",
        "province": "QC",
        "postalCode": "H2X 1L4",
        "hasPreviousClaims": "no",
        "hasViolations": "no",
        "hasSuspensions": "no",
        "hasTickets": "no",
    }


@pytest.fixture
def valid_vehicle():
    return {
        "vin": "2HGFC2F59JH000001",
        "year": "2018",
        "make": "Honda",
        "model": "Civic",
        "usage": "commute",
        "annualKilometers": "10000-15000",
    }
