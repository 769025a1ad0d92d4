"""End-to-end tests for the quote wizard screens."""

import asyncio
import json

import pytest

from src.integrations.clients.mocks.document_scanner import DocumentScanner
from src.wizard.flows.quote_wizard import QuoteWizardFlow
from src.wizard.state_manager import STORAGE_KEY, FormStore
from src.wizard.validation import FormValidationError

COVERAGE = {"liability": "1000000", "collision": True, "comprehensive": True, "accidentForgiveness": False}
CARD = {"payment_method": "card", "cardNumber": "4111111111111111", "expiryDate": "12/29", "cvv": "123", "cardholderName": "Emily Tremblay"}


async def _fill_to_summary(wizard, driver, vehicle):
    await wizard.process_step("driver-info", driver)
    await wizard.process_step("vehicle-info", vehicle)
    await wizard.process_step("personal-details", {"email": "emily@example.com", "phone": "(514) 555-0123", "preferredContact": "email"})
    return await wizard.process_step("coverage", COVERAGE)


@pytest.mark.asyncio
async def test_welcome_screen(wizard):
    out = await wizard.start()
    assert out["next_screen"] == "welcome"
    assert out["current_step"] == 0
    assert out["response"]["has_saved_progress"] is False


@pytest.mark.asyncio
async def test_start_shows_driver_form(wizard):
    out = await wizard.process_step("welcome", {"action": "start"})
    assert out["next_screen"] == "driver-info"
    assert out["current_step"] == 0
    names = [f["name"] for f in out["response"]["fields"]]
    assert names[:3] == ["firstName", "lastName", "dateOfBirth"]


@pytest.mark.asyncio
async def test_valid_driver_advances_and_persists(wizard, store, storage, valid_driver):
    out = await wizard.process_step("driver-info", valid_driver)

    assert "error" not in out
    assert out["next_screen"] == "vehicle-info"
    assert out["current_step"] == 1
    assert store.get("firstName") == "Emily"
    assert json.loads(storage.get_item(STORAGE_KEY))["postalCode"] == "H2X 1L4"


@pytest.mark.asyncio
async def test_invalid_driver_blocks_navigation(wizard, store, valid_driver):
    out = await wizard.process_step("driver-info", {**valid_driver, "postalCode": "12345", "firstName": "E"})

    assert out["error"] == "Validation failed in driver-info"
    assert set(out["details"]) == {"postalCode", "firstName"}
    assert out["screen"] == "driver-info"
    assert out["current_step"] == 0
    assert store.get("firstName") == ""


@pytest.mark.asyncio
async def test_details_cleared_when_flag_is_no(wizard, store, valid_driver):
    await wizard.process_step(
        "driver-info",
        {**valid_driver, "hasTickets": "yes", "ticketDetails": "Speeding 2024"},
    )
    assert store.get("ticketDetails") == "Speeding 2024"

    await wizard.process_step("driver-info", {"hasTickets": "no", "ticketDetails": "Speeding 2024"})
    assert store.get("hasTickets") == "no"
    assert store.get("ticketDetails") == ""


@pytest.mark.asyncio
async def test_json_string_input(wizard, store, valid_driver, valid_vehicle):
    await wizard.process_step("driver-info", valid_driver)
    out = await wizard.process_step("vehicle-info", json.dumps(valid_vehicle))
    assert out["next_screen"] == "personal-details"
    assert store.get("make") == "Honda"


@pytest.mark.asyncio
async def test_consent_flags_stored_as_booleans(wizard, store):
    await wizard.process_step(
        "personal-details",
        {"email": "emily@example.com", "phone": "5145550123", "preferredContact": "phone", "acceptEmailCommunications": 1},
    )
    assert store.get("acceptEmailCommunications") is True
    assert store.get("acceptPhoneCommunications") is False


@pytest.mark.asyncio
async def test_quote_summary(wizard, valid_driver, valid_vehicle):
    out = await _fill_to_summary(wizard, valid_driver, valid_vehicle)

    assert out["next_screen"] == "quote-summary"
    assert out["current_step"] == 4
    quote = out["response"]["quote_details"]
    assert quote["driverRisk"]["score"] == 0
    assert quote["vehicleRisk"]["score"] == 0
    assert quote["overallRisk"] == {"riskLevel": "low", "riskDescription": "Low Risk"}
    # 1200 * 1.2 * 1.15
    assert quote["premium"]["annual"] == 1656
    assert quote["premium"]["monthly"] == 138
    assert quote["suggestedCoverage"]["liability"] == "2000000"
    assert quote["selectedCoverage"] == COVERAGE


@pytest.mark.asyncio
async def test_apply_suggested_coverage(wizard, store, valid_driver, valid_vehicle):
    await _fill_to_summary(wizard, valid_driver, valid_vehicle)

    out = await wizard.process_step("quote-summary", {"action": "apply_suggestion"})

    assert out["response"]["applied_coverage"]["liability"] == "2000000"
    assert store.get("liability") == "2000000"
    assert out["response"]["quote_details"]["selectedCoverage"]["liability"] == "2000000"


@pytest.mark.asyncio
async def test_modify_returns_to_coverage(wizard, valid_driver, valid_vehicle):
    await _fill_to_summary(wizard, valid_driver, valid_vehicle)
    out = await wizard.process_step("quote-summary", {"action": "modify"})
    assert out["next_screen"] == "coverage"
    assert out["current_step"] == 3


@pytest.mark.asyncio
async def test_accept_then_pay_clears_record(wizard, store, storage, valid_driver, valid_vehicle):
    await _fill_to_summary(wizard, valid_driver, valid_vehicle)

    out = await wizard.process_step("quote-summary", {"action": "accept"})
    assert out["next_screen"] == "payment"
    assert out["current_step"] == 5
    # Payment screen uses the simplified formula: 1200 + 300 + 200
    assert out["response"]["amount"] == 1700

    paid = await wizard.process_step("payment", CARD)
    assert paid["complete"] is True
    assert paid["response"]["reference"].startswith("PAY-")
    assert paid["next_screen"] == "welcome"
    assert store.get("firstName") == ""
    assert storage.get_item(STORAGE_KEY) is None


@pytest.mark.asyncio
async def test_bad_card_keeps_record(wizard, store, valid_driver):
    await wizard.process_step("driver-info", valid_driver)
    out = await wizard.process_step("payment", {**CARD, "cvv": "12"})
    assert out["error"] == "Validation failed in payment"
    assert "cvv" in out["details"]
    assert store.get("firstName") == "Emily"


@pytest.mark.asyncio
async def test_unsupported_payment_method(wizard):
    out = await wizard.process_step("payment", {"payment_method": "cheque"})
    assert out["error"] == "Unsupported payment method"


@pytest.mark.asyncio
async def test_start_over_clears_saved_progress(wizard, store, valid_driver):
    await wizard.process_step("driver-info", valid_driver)
    welcome = await wizard.start()
    assert welcome["response"]["has_saved_progress"] is True

    out = await wizard.process_step("welcome", {"action": "start_over"})
    assert out["next_screen"] == "driver-info"
    assert store.get("firstName") == ""


@pytest.mark.asyncio
async def test_progress_survives_restart(storage, today, valid_driver):
    first = QuoteWizardFlow(FormStore(storage), scanner=DocumentScanner(delay=0), today=today)
    await first.process_step("driver-info", valid_driver)

    second = QuoteWizardFlow(FormStore(storage), scanner=DocumentScanner(delay=0), today=today)
    out = await second.process_step("driver-info", {})
    assert out["response"]["values"]["lastName"] == "Tremblay"


@pytest.mark.asyncio
async def test_invalid_screen(wizard):
    out = await wizard.process_step("checkout", {})
    assert out["error"] == "Invalid screen"


@pytest.mark.asyncio
async def test_unexpected_error_returns_fallback(wizard, monkeypatch):
    async def boom():
        raise RuntimeError("scoring exploded")

    monkeypatch.setattr(wizard.quotation, "start", boom)
    out = await wizard.process_step("quote-summary", {})

    assert out["fallback"] is True
    assert out["next_screen"] == "quote-summary"
    assert out["current_step"] == 4


# ---------------------------------------------------------------------------
# Simulated scans
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_vin_lookup_fills_vehicle(wizard, store):
    pending = wizard.start_vin_lookup("1HGCM82633A004352")
    result = await pending.wait()

    assert result["make"] == "Toyota"
    assert store.get("year") == "2023"
    assert store.get("model") == "Camry"
    assert store.get("vin") == "4T1B11HK0JU705506"


@pytest.mark.asyncio
async def test_vin_lookup_rejects_short_vin(wizard):
    with pytest.raises(FormValidationError) as exc:
        wizard.start_vin_lookup("SHORT")
    assert "vin" in exc.value.field_errors


@pytest.mark.asyncio
async def test_cancelled_vin_lookup_never_applies(store, today):
    wizard = QuoteWizardFlow(store, scanner=DocumentScanner(delay=0.05), today=today)
    pending = wizard.start_vin_lookup("1HGCM82633A004352")
    pending.cancel()

    assert await pending.wait() is None
    await asyncio.sleep(0.1)
    assert store.get("make") == ""
    assert store.get("vin") == "1HGCM82633A004352"


@pytest.mark.asyncio
async def test_license_scan_fills_driver_fields_without_wiping_input(wizard, store):
    store.update("email", "kept@example.com")

    pending = wizard.start_document_scan("drivers_license.jpg", "license")
    await pending.wait()

    assert store.get("firstName") == "John"
    assert store.get("licenseNumber") == "123456789"
    assert store.get("city") == "Toronto"
    assert store.get("province") == "ON"
    assert store.get("email") == "kept@example.com"


@pytest.mark.asyncio
async def test_registration_scan(wizard, store):
    await wizard.start_document_scan("registration.pdf", "registration").wait()
    assert store.get("vin") == "1234567890ABCDEFG"
    assert store.get("make") == "Toyota"
    assert store.get("usage") == ""


def test_suggest_skips_fields_already_filled(wizard, store):
    store.update_many({"firstName": "Emily", "lastName": "Tremblay", "postalCode": "H2X 1L4", "province": "QC"})

    out = wizard.suggest("email", "emily@gmial.com")

    assert out["suggestions"][0]["value"] == "emily@gmail.com"
    assert out["predictions"]["email"]["value"] == "emily.tremblay@example.com"
    assert "province" not in out["predictions"]
