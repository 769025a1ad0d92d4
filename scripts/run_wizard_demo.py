#!/usr/bin/env python3
"""
Walk one applicant through every wizard screen and print each stage to the terminal.
Shows forms, validation errors, risk assessments, recommendations and both premiums.

Usage (from repo root):
  python scripts/run_wizard_demo.py
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.database.redis import InMemoryStorage
from src.integrations.clients.mocks.document_scanner import DocumentScanner
from src.wizard.flows.quote_wizard import QuoteWizardFlow
from src.wizard.state_manager import FormStore


def setup_logging():
    """Log to terminal at INFO so every stage is visible."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def print_stage(title: str, data: dict | list | str):
    """Print a stage header and data to the terminal."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    if isinstance(data, (dict, list)):
        print(json.dumps(data, indent=2, default=str))
    else:
        print(data)
    print()


async def main():
    setup_logging()
    store = FormStore(InMemoryStorage())
    wizard = QuoteWizardFlow(store, scanner=DocumentScanner(delay=0.2))

    result = await wizard.start()
    print_stage("WELCOME", result.get("response", {}))

    # --- Driver info: a bad postal code is rejected first ---
    driver = {
        "firstName": "Jane",
        "lastName": "Demo",
        "dateOfBirth": "2003-04-12",
        "gender": "female",
        "maritalStatus": "single",
        "licenseNumber": "D1234-56789",
        "yearsLicensed": "1-3",
        "address": "88 Queen Street West",
        "city": "Toronto",
        "province": "ON",
        "postalCode": "12345",
        "hasPreviousClaims": "yes",
        "numberOfClaims": "2",
        "claimDetails": "Rear-ended at a light, 2022",
        "hasViolations": "no",
        "hasSuspensions": "no",
        "hasTickets": "yes",
        "ticketDetails": "Speeding, 2023",
        "demeritPoints": "3",
    }
    result = await wizard.process_step("driver-info", driver)
    print_stage("DRIVER INFO: validation errors", result)
    print_stage("SUGGESTIONS for email", wizard.suggest("email", "jane.demo@gmial.com"))

    driver["postalCode"] = "M5H 2N2"
    result = await wizard.process_step("driver-info", driver)
    print_stage("DRIVER INFO accepted -> VEHICLE INFO form", result.get("response", {}).get("message"))

    # --- Vehicle info via simulated VIN lookup ---
    pending = wizard.start_vin_lookup("1FA6P8TH5J5100001")
    vehicle = await pending.wait()
    print_stage("VIN LOOKUP RESULT", vehicle)

    result = await wizard.process_step("vehicle-info", {"make": "Ford", "model": "Mustang GT"})
    print_stage("VEHICLE INFO accepted -> PERSONAL DETAILS form", result.get("response", {}).get("message"))

    result = await wizard.process_step(
        "personal-details",
        {"email": "jane.demo@example.com", "phone": "(416) 555-0199", "preferredContact": "email"},
    )
    print_stage("PERSONAL DETAILS accepted -> COVERAGE form", result.get("response", {}).get("values"))

    result = await wizard.process_step(
        "coverage", {"liability": "2000000", "collision": True, "comprehensive": True, "accidentForgiveness": False}
    )
    print_stage("QUOTE SUMMARY", result.get("response", {}).get("quote_details"))

    result = await wizard.process_step("quote-summary", {"action": "accept"})
    print_stage("PAYMENT", result.get("response", {}))

    result = await wizard.process_step(
        "payment",
        {"payment_method": "card", "cardNumber": "4111 1111 1111 1111", "expiryDate": "09/29", "cvv": "123", "cardholderName": "Jane Demo"},
    )
    print_stage("PAYMENT CONFIRMED", result.get("response", {}))
    print_stage("STORE AFTER PURCHASE", store.record)


if __name__ == "__main__":
    asyncio.run(main())
