"""
Quote wizard flow - Collect driver, vehicle, contact and coverage details,
present the quote summary, then hand off to payment.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Dict, Mapping, Optional

from src.error_handler import ErrorHandler
from src.integrations.clients.mocks.document_scanner import DocumentScanner, PendingScan
from src.wizard.flows.payment import PaymentFlow
from src.wizard.flows.quotation import QuotationFlow
from src.wizard.suggestions import generate_field_suggestions, predict_form_values
from src.wizard.validation import (
    ANNUAL_KM_OPTIONS,
    CLAIM_COUNT_OPTIONS,
    CONDITIONAL_DETAILS,
    CONTACT_METHODS,
    GENDERS,
    LIABILITY_OPTIONS,
    MARITAL_STATUSES,
    PROVINCES,
    USAGE_OPTIONS,
    YEARS_LICENSED_OPTIONS,
    raise_if_errors,
    validate_coverage,
    validate_driver_info,
    validate_personal_details,
    validate_vehicle_info,
    validate_vin,
)

logger = logging.getLogger(__name__)

DRIVER_FIELDS = (
    "firstName", "lastName", "dateOfBirth", "gender", "maritalStatus", "licenseNumber", "yearsLicensed",
    "address", "city", "province", "postalCode",
    "hasPreviousClaims", "numberOfClaims", "claimDetails", "hasViolations", "violationDetails",
    "demeritPoints", "hasSuspensions", "suspensionDetails", "hasTickets", "ticketDetails",
)
VEHICLE_FIELDS = ("year", "make", "model", "vin", "usage", "annualKilometers")
PERSONAL_FIELDS = (
    "email", "phone", "preferredContact",
    "acceptEmailCommunications", "acceptMailCommunications", "acceptPhoneCommunications",
)
COVERAGE_FIELDS = ("liability", "collision", "comprehensive", "accidentForgiveness")

VEHICLE_YEARS = [str(y) for y in range(2025, 1999, -1)]


def _parse_payload(user_input: Any) -> Dict[str, Any]:
    if isinstance(user_input, Mapping):
        return dict(user_input)
    if isinstance(user_input, str) and user_input.strip().startswith("{"):
        try:
            return json.loads(user_input)
        except json.JSONDecodeError:
            return {"_raw": user_input}
    return {"_raw": user_input} if user_input else {}


def _pick(payload: Mapping[str, Any], fields) -> Dict[str, Any]:
    return {k: payload[k] for k in fields if k in payload}


class QuoteWizardFlow:
    """
    Guided flow for the auto insurance quote.

    Screen order:
        welcome
        driver-info
        vehicle-info
        personal-details
        coverage
        quote-summary
        payment

    A screen only advances when the user submits it; invalid submissions leave
    the stored record untouched.
    """

    SCREENS = [
        "welcome",
        "driver-info",
        "vehicle-info",
        "personal-details",
        "coverage",
        "quote-summary",
        "payment",
    ]

    def __init__(self, store, scanner: Optional[DocumentScanner] = None, today: Optional[date] = None):
        self.store = store
        self.scanner = scanner or DocumentScanner()
        self.today = today
        self.quotation = QuotationFlow(store, today=today)
        self.payment = PaymentFlow(store, today=today)
        self.error_handler = ErrorHandler()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def start(self) -> Dict:
        return await self.process_step("welcome", {})

    async def process_step(self, screen: str, user_input: Any = None) -> Dict:
        payload = _parse_payload(user_input)
        screen = (screen or "").strip().strip("/") or "welcome"

        handlers = {
            "welcome": self._screen_welcome,
            "driver-info": self._screen_driver_info,
            "vehicle-info": self._screen_vehicle_info,
            "personal-details": self._screen_personal_details,
            "coverage": self._screen_coverage,
            "quote-summary": self._screen_quote_summary,
            "payment": self._screen_payment,
        }
        handler = handlers.get(screen)
        if handler is None:
            return {"error": "Invalid screen", "screen": screen}

        logger.info("[QuoteWizard] screen=%s submitted=%s", screen, bool(payload) and "_raw" not in payload)
        try:
            out = await handler(payload)
        except Exception as e:
            out = self.error_handler.handle_exception(e, context={"screen": screen})
            out["next_screen"] = screen
        out.setdefault("screen", screen)
        out["current_step"] = self.store.current_step(out.get("next_screen", screen))
        return out

    def _submitted(self, payload: Mapping[str, Any]) -> bool:
        return bool(payload) and "_raw" not in payload

    def _next(self, screen: str) -> str:
        return self.SCREENS[self.SCREENS.index(screen) + 1]

    def _invalid(self, screen: str, errors: Dict[str, str]) -> Dict:
        logger.info("[QuoteWizard] Validation failed screen=%s fields=%s", screen, sorted(errors))
        return {"error": f"Validation failed in {screen}", "details": errors, "screen": screen}

    # ------------------------------------------------------------------
    # Welcome
    # ------------------------------------------------------------------

    async def _screen_welcome(self, payload: Dict) -> Dict:
        action = str(payload.get("action") or payload.get("_raw") or "").strip().lower()
        if action == "start_over":
            self.store.clear()
            return await self._screen_driver_info({})
        if action in ("start", "get_quote"):
            return await self._screen_driver_info({})

        return {
            "response": {
                "type": "welcome",
                "message": "Get an auto insurance quote in minutes",
                "actions": [
                    {"type": "start", "label": "Get Started"},
                    {"type": "start_over", "label": "Start Over"},
                ],
                "has_saved_progress": any(self.store.get(k) for k in ("firstName", "lastName", "vin")),
            },
            "next_screen": "welcome",
        }

    # ------------------------------------------------------------------
    # Driver info
    # ------------------------------------------------------------------

    async def _screen_driver_info(self, payload: Dict) -> Dict:
        if self._submitted(payload):
            merged = {**self.store.record, **_pick(payload, DRIVER_FIELDS)}
            errors = validate_driver_info(merged, today=self.today)
            if errors:
                return self._invalid("driver-info", errors)

            updates = _pick(merged, DRIVER_FIELDS)
            for flag, details in CONDITIONAL_DETAILS.items():
                if str(updates.get(flag) or "").strip() == "no":
                    updates.update({d: "" for d in details})
            self.store.update_many(updates)
            return await self._screen_vehicle_info({})

        return {
            "response": {
                "type": "form",
                "message": "Driver Information",
                "values": _pick(self.store.record, DRIVER_FIELDS),
                "fields": [
                    {"name": "firstName", "label": "First Name", "type": "text", "required": True},
                    {"name": "lastName", "label": "Last Name", "type": "text", "required": True},
                    {"name": "dateOfBirth", "label": "Date of Birth", "type": "date", "required": True},
                    {"name": "gender", "label": "Gender", "type": "select", "options": list(GENDERS), "required": True},
                    {"name": "maritalStatus", "label": "Marital Status", "type": "select", "options": list(MARITAL_STATUSES), "required": True},
                    {"name": "licenseNumber", "label": "Driver's License Number", "type": "text", "required": True},
                    {"name": "yearsLicensed", "label": "Years Licensed", "type": "select", "options": list(YEARS_LICENSED_OPTIONS), "required": True},
                    {"name": "address", "label": "Street Address", "type": "text", "required": True},
                    {"name": "city", "label": "City", "type": "text", "required": True},
                    {"name": "province", "label": "Province", "type": "select", "options": list(PROVINCES), "required": True},
                    {"name": "postalCode", "label": "Postal Code", "type": "text", "required": True},
                    {"name": "hasPreviousClaims", "label": "Any claims in the last 6 years?", "type": "radio", "options": ["yes", "no"]},
                    {"name": "numberOfClaims", "label": "Number of Claims", "type": "select", "options": list(CLAIM_COUNT_OPTIONS), "show_if": {"hasPreviousClaims": "yes"}},
                    {"name": "claimDetails", "label": "Claim Details", "type": "textarea", "show_if": {"hasPreviousClaims": "yes"}},
                    {"name": "hasViolations", "label": "Any traffic violations?", "type": "radio", "options": ["yes", "no"]},
                    {"name": "violationDetails", "label": "Violation Details", "type": "textarea", "show_if": {"hasViolations": "yes"}},
                    {"name": "demeritPoints", "label": "Current Demerit Points", "type": "number"},
                    {"name": "hasSuspensions", "label": "Any license suspensions?", "type": "radio", "options": ["yes", "no"]},
                    {"name": "suspensionDetails", "label": "Suspension Details", "type": "textarea", "show_if": {"hasSuspensions": "yes"}},
                    {"name": "hasTickets", "label": "Any traffic tickets?", "type": "radio", "options": ["yes", "no"]},
                    {"name": "ticketDetails", "label": "Ticket Details", "type": "textarea", "show_if": {"hasTickets": "yes"}},
                ],
                "actions": [{"type": "scan_license", "label": "Scan Driver's License"}],
            },
            "next_screen": "driver-info",
        }

    # ------------------------------------------------------------------
    # Vehicle info
    # ------------------------------------------------------------------

    async def _screen_vehicle_info(self, payload: Dict) -> Dict:
        if self._submitted(payload):
            merged = {**self.store.record, **_pick(payload, VEHICLE_FIELDS)}
            errors = validate_vehicle_info(merged)
            if errors:
                return self._invalid("vehicle-info", errors)
            self.store.update_many(_pick(merged, VEHICLE_FIELDS))
            return await self._screen_personal_details({})

        return {
            "response": {
                "type": "form",
                "message": "Vehicle Information",
                "values": _pick(self.store.record, VEHICLE_FIELDS),
                "fields": [
                    {"name": "vin", "label": "VIN (Vehicle Identification Number)", "type": "text", "required": True, "maxLength": 17},
                    {"name": "year", "label": "Year", "type": "select", "options": VEHICLE_YEARS, "required": True},
                    {"name": "make", "label": "Make", "type": "text", "required": True},
                    {"name": "model", "label": "Model", "type": "text", "required": True},
                    {"name": "usage", "label": "Primary Use", "type": "select", "options": list(USAGE_OPTIONS), "required": True},
                    {"name": "annualKilometers", "label": "Annual Kilometers", "type": "select", "options": list(ANNUAL_KM_OPTIONS), "required": True},
                ],
                "actions": [
                    {"type": "vin_lookup", "label": "Look Up VIN"},
                    {"type": "scan_registration", "label": "Scan Registration"},
                ],
            },
            "next_screen": "vehicle-info",
        }

    # ------------------------------------------------------------------
    # Personal details
    # ------------------------------------------------------------------

    async def _screen_personal_details(self, payload: Dict) -> Dict:
        if self._submitted(payload):
            merged = {**self.store.record, **_pick(payload, PERSONAL_FIELDS)}
            errors = validate_personal_details(merged)
            if errors:
                return self._invalid("personal-details", errors)
            updates = _pick(merged, PERSONAL_FIELDS)
            for consent in PERSONAL_FIELDS[3:]:
                updates[consent] = bool(updates.get(consent))
            self.store.update_many(updates)
            return await self._screen_coverage({})

        return {
            "response": {
                "type": "form",
                "message": "Contact Details",
                "values": _pick(self.store.record, PERSONAL_FIELDS),
                "fields": [
                    {"name": "email", "label": "Email Address", "type": "email", "required": True},
                    {"name": "phone", "label": "Phone Number", "type": "tel", "required": True},
                    {"name": "preferredContact", "label": "Preferred Contact Method", "type": "radio", "options": list(CONTACT_METHODS), "required": True},
                    {"name": "acceptEmailCommunications", "label": "Email me offers and updates", "type": "checkbox"},
                    {"name": "acceptMailCommunications", "label": "Mail me offers and updates", "type": "checkbox"},
                    {"name": "acceptPhoneCommunications", "label": "Call me about offers and updates", "type": "checkbox"},
                ],
            },
            "next_screen": "personal-details",
        }

    # ------------------------------------------------------------------
    # Coverage
    # ------------------------------------------------------------------

    async def _screen_coverage(self, payload: Dict) -> Dict:
        if self._submitted(payload):
            merged = {**self.store.record, **_pick(payload, COVERAGE_FIELDS)}
            errors = validate_coverage(merged)
            if errors:
                return self._invalid("coverage", errors)
            self.store.update_many(_pick(merged, COVERAGE_FIELDS))
            return await self._screen_quote_summary({})

        return {
            "response": {
                "type": "form",
                "message": "Choose Your Coverage",
                "values": _pick(self.store.record, COVERAGE_FIELDS),
                "fields": [
                    {"name": "liability", "label": "Third-Party Liability", "type": "select", "options": list(LIABILITY_OPTIONS), "required": True},
                    {"name": "collision", "label": "Collision", "type": "checkbox"},
                    {"name": "comprehensive", "label": "Comprehensive", "type": "checkbox"},
                    {"name": "accidentForgiveness", "label": "Accident Forgiveness", "type": "checkbox"},
                ],
            },
            "next_screen": "coverage",
        }

    # ------------------------------------------------------------------
    # Quote summary / payment
    # ------------------------------------------------------------------

    async def _screen_quote_summary(self, payload: Dict) -> Dict:
        if self._submitted(payload):
            out = await self.quotation.process_step(payload)
            if out.get("next_screen") == "payment":
                return await self._screen_payment({})
            if out.get("next_screen") == "coverage":
                return await self._screen_coverage({})
            return out
        return await self.quotation.start()

    async def _screen_payment(self, payload: Dict) -> Dict:
        if self._submitted(payload):
            return await self.payment.process_step(payload)
        return await self.payment.start()

    # ------------------------------------------------------------------
    # Simulated scans
    # ------------------------------------------------------------------

    def _apply_scan(self, result: Dict[str, Any]) -> None:
        # Only fields the scan actually found; blanks must not wipe user input.
        updates = {k: v for k, v in result.items() if k in self.store.record and v not in ("", None)}
        if updates:
            self.store.update_many(updates)
            logger.info("[QuoteWizard] Applied scanned fields: %s", sorted(updates))

    def start_document_scan(self, file_name: str, document_type: str) -> PendingScan:
        """Begin a simulated licence/registration scan; fields are filled in when it resolves."""
        return self.scanner.start_document_scan(file_name, document_type, on_result=self._apply_scan)

    def start_vin_lookup(self, vin: Optional[str] = None) -> PendingScan:
        """Begin a simulated VIN lookup. Raises FormValidationError for a malformed VIN."""
        vin = vin if vin is not None else self.store.get("vin", "")
        errors: Dict[str, str] = {}
        validate_vin(vin, errors)
        raise_if_errors(errors, message="Please enter a valid 17-character VIN")
        self.store.update("vin", vin.strip())
        return self.scanner.start_vin_lookup(vin.strip(), on_result=self._apply_scan)

    # ------------------------------------------------------------------
    # Suggestions
    # ------------------------------------------------------------------

    def suggest(self, field: str, value: str = "") -> Dict[str, Any]:
        """Inline suggestions for the field being edited, plus predictions for fields still blank."""
        record = self.store.record
        predictions = {
            name: p for name, p in predict_form_values(record, self.today).items() if not record.get(name)
        }
        return {"suggestions": generate_field_suggestions(field, value, record), "predictions": predictions}
