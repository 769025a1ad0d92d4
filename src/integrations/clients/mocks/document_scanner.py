"""
Mock Document Scanner / VIN lookup.

Purpose:
- Simulates OCR of a driver's licence or vehicle registration and a VIN
  decoder, so the wizard can pre-fill fields without external services.
- Does NOT make network calls. Every call "succeeds" after a fixed delay.

Cancellation:
- `start_document_scan` / `start_vin_lookup` return a `PendingScan`.
  Cancelling it guarantees the result is never applied, even if the
  simulated work had already finished.
"""

from __future__ import annotations

import asyncio
import logging
import re
from datetime import date
from typing import Any, Awaitable, Callable, Dict, Optional

from src.integrations.contracts.documents import (
    DocumentValidation,
    DriversLicenseData,
    VehicleRegistrationData,
    VinLookupResult,
)

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 2.0

SAMPLE_LICENSE_TEXT = """
    John Smith
    123456789
    123 Main Street
    Toronto, ON M5V 3A8
    1990-05-15
    Male
    Married
    Licensed since 2010
"""

SAMPLE_REGISTRATION_TEXT = """
    2020 Toyota Camry
    VIN: 1234567890ABCDEFG
    Registered Owner: John Smith
    Expiry Date: 2025-06-30
"""

MOCK_VIN_VEHICLE = {
    "year": "2023",
    "make": "Toyota",
    "model": "Camry",
    "vin": "4T1B11HK0JU705506",
    "usage": "commute",
    "annualKilometers": "10000-15000",
}

_LICENSE_NUMBER_RE = re.compile(r"\d{9}")
_NAME_RE = re.compile(r"^([A-Z][a-z]+) ([A-Z][a-z]+)$")
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_GENDER_RE = re.compile(r"\b(male|female)\b", re.IGNORECASE)
_MARITAL_RE = re.compile(r"\b(married|single|divorced|widowed)\b", re.IGNORECASE)
_STREET_RE = re.compile(r"^\d+\s+\D+$")
_CITY_LINE_RE = re.compile(r"^(?P<city>[^,]+),\s*(?P<province>[A-Z]{2})\s+(?P<postal>[A-Z]\d[A-Z] ?\d[A-Z]\d)$")
_LICENSED_SINCE_RE = re.compile(r"Licensed since (\d{4})")
_VEHICLE_LINE_RE = re.compile(r"(\d{4}) ([A-Z][a-z]+) ([A-Z][a-z]+)")
_VIN_LINE_RE = re.compile(r"VIN: ([A-Z0-9]+)")


def _lines(text: str):
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


def parse_drivers_license(text: str, today: Optional[date] = None) -> Dict[str, str]:
    """Pull driver fields out of licence text with simple pattern matching."""
    data = DriversLicenseData()

    for line in _lines(text):
        if not data.licenseNumber and _LICENSE_NUMBER_RE.search(line):
            data.licenseNumber = _LICENSE_NUMBER_RE.search(line).group(0)
        elif not data.firstName and _NAME_RE.match(line):
            data.firstName, data.lastName = _NAME_RE.match(line).groups()
        elif not data.dateOfBirth and _DATE_RE.fullmatch(line):
            data.dateOfBirth = line
        elif not data.gender and _GENDER_RE.search(line):
            data.gender = _GENDER_RE.search(line).group(1).lower()
        elif not data.maritalStatus and _MARITAL_RE.search(line):
            data.maritalStatus = _MARITAL_RE.search(line).group(1).lower()
        elif _CITY_LINE_RE.match(line):
            m = _CITY_LINE_RE.match(line)
            data.city = m.group("city").strip()
            data.province = m.group("province")
            data.postalCode = m.group("postal")
        elif not data.address and _STREET_RE.match(line):
            data.address = line
        elif _LICENSED_SINCE_RE.search(line):
            since = int(_LICENSED_SINCE_RE.search(line).group(1))
            data.yearsLicensed = f"{(today or date.today()).year - since}+"

    return data.model_dump()


def parse_vehicle_registration(text: str) -> Dict[str, str]:
    data = VehicleRegistrationData()

    for line in _lines(text):
        vehicle = _VEHICLE_LINE_RE.search(line)
        if vehicle:
            data.year, data.make, data.model = vehicle.groups()
            continue
        vin = _VIN_LINE_RE.search(line)
        if vin:
            data.vin = vin.group(1)

    return data.model_dump()


def validate_document_data(data: Dict[str, Any], document_type: str) -> Dict[str, Any]:
    errors = []
    warnings = []

    if document_type == "license":
        if not data.get("firstName") or not data.get("lastName"):
            errors.append("Unable to extract full name from license")
        if not data.get("licenseNumber"):
            errors.append("Unable to extract license number")
        if not data.get("dateOfBirth"):
            errors.append("Unable to extract date of birth")
        if not all(data.get(k) for k in ("address", "city", "province", "postalCode")):
            warnings.append("Some address information may be incomplete")
    elif document_type == "registration":
        if not data.get("vin"):
            errors.append("Unable to extract VIN number")
        if not all(data.get(k) for k in ("year", "make", "model")):
            errors.append("Unable to extract complete vehicle information")

    return DocumentValidation(is_valid=not errors, errors=errors, warnings=warnings).model_dump()


class PendingScan:
    """
    An in-flight simulated scan or lookup.

    The `on_result` callback runs at most once, and never after `cancel()`.
    """

    def __init__(self, coro: Awaitable[Dict[str, Any]], on_result: Optional[Callable[[Dict[str, Any]], None]] = None):
        self._task = asyncio.ensure_future(coro)
        self._on_result = on_result
        self._settled = False
        self.cancelled = False
        self.result: Optional[Dict[str, Any]] = None
        self._task.add_done_callback(lambda _task: self._settle())

    @property
    def done(self) -> bool:
        return self._task.done()

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        self._task.cancel()
        logger.info("[Scanner] Pending scan cancelled; result will be discarded")

    def _settle(self) -> None:
        if self._settled or not self._task.done():
            return
        self._settled = True

        if self.cancelled or self._task.cancelled():
            logger.info("[Scanner] Discarding result of cancelled scan")
            return

        exc = self._task.exception()
        if exc is not None:
            logger.error("[Scanner] Simulated scan failed: %s", exc)
            return

        self.result = self._task.result()
        if self._on_result is not None:
            self._on_result(self.result)

    async def wait(self) -> Optional[Dict[str, Any]]:
        """Wait for completion; returns the result, or None if cancelled."""
        try:
            await self._task
        except asyncio.CancelledError:
            if not self.cancelled:
                raise
        self._settle()
        return None if self.cancelled else self.result


class DocumentScanner:
    def __init__(self, delay: float = DEFAULT_DELAY_SECONDS):
        self.delay = delay

    async def extract_text(self, file_name: str) -> str:
        """Simulated OCR: canned text chosen by file name."""
        await asyncio.sleep(self.delay)
        name = (file_name or "").lower()
        if "license" in name:
            return SAMPLE_LICENSE_TEXT
        if "registration" in name:
            return SAMPLE_REGISTRATION_TEXT
        return "Sample extracted text from document"

    async def process_document(self, file_name: str, document_type: str) -> Dict[str, Any]:
        logger.info("[Scanner] Processing document file=%s type=%s", file_name, document_type)
        text = await self.extract_text(file_name)
        if document_type == "license":
            return parse_drivers_license(text)
        if document_type == "registration":
            return parse_vehicle_registration(text)
        return {"rawText": text}

    async def lookup_vin(self, vin: str) -> Dict[str, Any]:
        """Simulated VIN decode. Always returns the same vehicle."""
        logger.info("[Scanner] VIN lookup vin=%s", vin)
        await asyncio.sleep(self.delay)
        return VinLookupResult(**MOCK_VIN_VEHICLE).model_dump()

    def start_document_scan(
        self, file_name: str, document_type: str, on_result: Optional[Callable[[Dict[str, Any]], None]] = None
    ) -> PendingScan:
        return PendingScan(self.process_document(file_name, document_type), on_result)

    def start_vin_lookup(self, vin: str, on_result: Optional[Callable[[Dict[str, Any]], None]] = None) -> PendingScan:
        return PendingScan(self.lookup_vin(vin), on_result)
