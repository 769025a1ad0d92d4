"""
Document scan / VIN lookup contracts.

Shapes returned by the simulated scanner (clients/mocks/document_scanner.py).
Field names match the applicant record so results can be merged straight into
the form store.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class DriversLicenseData(BaseModel):
    firstName: str = ""
    lastName: str = ""
    licenseNumber: str = ""
    address: str = ""
    city: str = ""
    province: str = ""
    postalCode: str = ""
    dateOfBirth: str = ""
    gender: str = ""
    maritalStatus: str = ""
    yearsLicensed: str = ""


class VehicleRegistrationData(BaseModel):
    year: str = ""
    make: str = ""
    model: str = ""
    vin: str = ""


class VinLookupResult(VehicleRegistrationData):
    usage: str = ""
    annualKilometers: str = ""


class DocumentValidation(BaseModel):
    is_valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


__all__ = [
    "DriversLicenseData",
    "VehicleRegistrationData",
    "VinLookupResult",
    "DocumentValidation",
]
