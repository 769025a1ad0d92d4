"""
Form state management for the quote wizard.

The applicant record is a single flat dict. Every mutation is written through
to durable storage before returning; storage failures are logged and the
in-memory record stays the source of truth.
"""

import copy
import json
import logging
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

STORAGE_KEY = "insuranceFormData"

DEFAULT_APPLICANT_RECORD: Dict[str, Any] = {
    # Driver Information
    "firstName": "",
    "lastName": "",
    "dateOfBirth": "",
    "gender": "",
    "maritalStatus": "",
    "licenseNumber": "",
    "yearsLicensed": "",
    # Address Information
    "address": "",
    "city": "",
    "province": "",
    "postalCode": "",
    # Driver History
    "hasPreviousClaims": "",
    "numberOfClaims": "",
    "claimDetails": "",
    "hasViolations": "",
    "violationDetails": "",
    "demeritPoints": "",
    "hasSuspensions": "",
    "suspensionDetails": "",
    "hasTickets": "",
    "ticketDetails": "",
    # Vehicle Information
    "year": "",
    "make": "",
    "model": "",
    "vin": "",
    "usage": "",
    "annualKilometers": "",
    # Coverage Information
    "liability": "1000000",
    "collision": True,
    "comprehensive": True,
    "accidentForgiveness": False,
    # Contact Information
    "email": "",
    "phone": "",
    "preferredContact": "email",
    # Communication Preferences
    "acceptEmailCommunications": False,
    "acceptMailCommunications": False,
    "acceptPhoneCommunications": False,
}

# Screen identifier -> progress step. Welcome and driver-info share step 0.
SCREEN_STEPS: Dict[str, int] = {
    "": 0,
    "welcome": 0,
    "driver-info": 0,
    "vehicle-info": 1,
    "personal-details": 2,
    "coverage": 3,
    "quote-summary": 4,
    "payment": 5,
}


def default_record() -> Dict[str, Any]:
    """Fresh copy of the default applicant record."""
    return copy.deepcopy(DEFAULT_APPLICANT_RECORD)


class FormStore:
    """Owns the current session's applicant record and its persisted copy."""

    def __init__(self, storage, storage_key: str = STORAGE_KEY):
        self.storage = storage
        self.storage_key = storage_key
        self._record = self.load()

    @property
    def record(self) -> Dict[str, Any]:
        return copy.deepcopy(self._record)

    def get(self, field: str, default: Any = None) -> Any:
        return self._record.get(field, default)

    def load(self) -> Dict[str, Any]:
        """Read the persisted record, falling back to defaults on missing or corrupt data."""
        try:
            raw = self.storage.get_item(self.storage_key)
        except Exception:
            logger.exception("[FormStore] Error loading saved data (key=%s)", self.storage_key)
            return default_record()

        if not raw:
            return default_record()

        try:
            saved = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            logger.error("[FormStore] Saved data is corrupt (key=%s): %s", self.storage_key, e)
            return default_record()

        if not isinstance(saved, dict):
            logger.error("[FormStore] Saved data is not an object (key=%s type=%s)", self.storage_key, type(saved).__name__)
            return default_record()

        record = default_record()
        record.update(saved)
        return record

    def persist(self, record: Optional[Mapping[str, Any]] = None) -> bool:
        """Serialize the full record to storage. Returns False (and logs) on failure."""
        if record is None:
            record = self._record
        try:
            self.storage.set_item(self.storage_key, json.dumps(dict(record)))
        except Exception:
            logger.exception("[FormStore] Error saving data (key=%s)", self.storage_key)
            return False
        return True

    def update(self, field: str, value: Any) -> None:
        self._record[field] = value
        self.persist()

    def update_many(self, fields: Mapping[str, Any]) -> None:
        self._record.update(fields)
        self.persist()

    def clear(self) -> None:
        """Erase persisted data and reset to defaults ("start over")."""
        try:
            self.storage.remove_item(self.storage_key)
        except Exception:
            logger.exception("[FormStore] Error clearing saved data (key=%s)", self.storage_key)
        self._record = default_record()
        logger.info("[FormStore] Form data cleared")

    @staticmethod
    def current_step(path: Optional[str]) -> int:
        """Map a screen identifier (with or without leading '/') to its progress step."""
        screen = (path or "").strip().strip("/")
        return SCREEN_STEPS.get(screen, 0)
