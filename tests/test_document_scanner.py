"""Tests for the simulated document scanner and VIN lookup."""

import asyncio
from datetime import date

import pytest

from src.integrations.clients.mocks.document_scanner import (
    SAMPLE_LICENSE_TEXT,
    SAMPLE_REGISTRATION_TEXT,
    DocumentScanner,
    parse_drivers_license,
    parse_vehicle_registration,
    validate_document_data,
)


def test_parse_drivers_license():
    data = parse_drivers_license(SAMPLE_LICENSE_TEXT, today=date(2026, 6, 15))

    assert data == {
        "firstName": "John",
        "lastName": "Smith",
        "licenseNumber": "123456789",
        "address": "123 Main Street",
        "city": "Toronto",
        "province": "ON",
        "postalCode": "M5V 3A8",
        "dateOfBirth": "1990-05-15",
        "gender": "male",
        "maritalStatus": "married",
        "yearsLicensed": "16+",
    }


def test_parse_drivers_license_partial_text():
    data = parse_drivers_license("Jane Doe\nSingle\n")
    assert data["firstName"] == "Jane"
    assert data["maritalStatus"] == "single"
    assert data["licenseNumber"] == ""


def test_parse_vehicle_registration():
    assert parse_vehicle_registration(SAMPLE_REGISTRATION_TEXT) == {
        "year": "2020",
        "make": "Toyota",
        "model": "Camry",
        "vin": "1234567890ABCDEFG",
    }


def test_validate_license_data():
    complete = parse_drivers_license(SAMPLE_LICENSE_TEXT, today=date(2026, 6, 15))
    assert validate_document_data(complete, "license") == {"is_valid": True, "errors": [], "warnings": []}

    result = validate_document_data({"firstName": "John", "licenseNumber": "123456789", "dateOfBirth": "1990-05-15"}, "license")
    assert result["is_valid"] is False
    assert result["errors"] == ["Unable to extract full name from license"]
    assert result["warnings"] == ["Some address information may be incomplete"]


def test_validate_registration_data():
    result = validate_document_data({"year": "2020"}, "registration")
    assert result["errors"] == ["Unable to extract VIN number", "Unable to extract complete vehicle information"]


@pytest.mark.asyncio
async def test_unknown_document_returns_raw_text():
    out = await DocumentScanner(delay=0).process_document("receipt.png", "other")
    assert out == {"rawText": "Sample extracted text from document"}


@pytest.mark.asyncio
async def test_vin_lookup_always_returns_mock_vehicle():
    scanner = DocumentScanner(delay=0)
    first = await scanner.lookup_vin("1HGCM82633A004352")
    second = await scanner.lookup_vin("2HGFC2F59JH000001")
    assert first == second
    assert first["vin"] == "4T1B11HK0JU705506"
    assert first["annualKilometers"] == "10000-15000"


@pytest.mark.asyncio
async def test_pending_scan_delivers_once():
    calls = []
    pending = DocumentScanner(delay=0).start_vin_lookup("1HGCM82633A004352", on_result=calls.append)

    result = await pending.wait()
    await pending.wait()

    assert pending.done
    assert calls == [result]


@pytest.mark.asyncio
async def test_cancel_before_completion_discards_result():
    calls = []
    pending = DocumentScanner(delay=0.05).start_document_scan("license.jpg", "license", on_result=calls.append)
    pending.cancel()
    pending.cancel()

    assert await pending.wait() is None
    await asyncio.sleep(0.1)
    assert calls == []
    assert pending.cancelled is True
