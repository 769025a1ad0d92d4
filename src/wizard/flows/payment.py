"""
Payment flow - Show the payable premium and take a (simulated) payment
"""

import logging
import uuid
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional

from src.risk.premium import calculate_payment_premium
from src.wizard.validation import validate_card

logger = logging.getLogger(__name__)

PAYMENT_METHODS = ("card", "apple_pay", "google_pay", "samsung_pay")


class PaymentFlow:
    def __init__(self, store, today: Optional[date] = None):
        self.store = store
        self.today = today

    def amount_due(self) -> int:
        return calculate_payment_premium(self.store.record, self.today)

    async def start(self) -> Dict:
        """Payment method selection"""
        amount = self.amount_due()
        logger.info("[Payment] start amount=%s", amount)
        return {
            "response": {
                "type": "payment_method",
                "message": "Choose your payment method",
                "amount": amount,
                "currency": "CAD",
                "options": [
                    {"id": "card", "label": "Credit/Debit Card"},
                    {"id": "apple_pay", "label": "Apple Pay"},
                    {"id": "google_pay", "label": "Google Pay"},
                    {"id": "samsung_pay", "label": "Samsung Pay"},
                ],
                "fields": [
                    {"name": "cardNumber", "label": "Card Number", "type": "text", "required": True},
                    {"name": "expiryDate", "label": "Expiry Date (MM/YY)", "type": "text", "required": True},
                    {"name": "cvv", "label": "CVV", "type": "text", "required": True},
                    {"name": "cardholderName", "label": "Cardholder Name", "type": "text", "required": True},
                ],
            },
            "next_screen": "payment",
        }

    async def process_step(self, payload: Mapping[str, Any]) -> Dict:
        method = str(payload.get("payment_method") or "card").strip().lower()
        if method not in PAYMENT_METHODS:
            return {"error": "Unsupported payment method", "details": {"payment_method": method}, "screen": "payment"}

        if method == "card":
            errors: Dict[str, str] = {}
            validate_card(payload, errors)
            if errors:
                logger.info("[Payment] Card validation failed fields=%s", sorted(errors))
                return {"error": "Validation failed in payment", "details": errors, "screen": "payment"}

        amount = self.amount_due()
        reference = f"PAY-{uuid.uuid4().hex[:12].upper()}"
        logger.info("[Payment] Simulated payment method=%s amount=%s reference=%s", method, amount, reference)

        # Purchase complete: start the next visit with a fresh record.
        self.store.clear()

        return {
            "response": {
                "type": "payment_confirmed",
                "message": "Payment processed successfully! Thank you for your purchase.",
                "amount": amount,
                "payment_method": method,
                "reference": reference,
                "paid_at": datetime.utcnow().isoformat(),
            },
            "complete": True,
            "next_screen": "welcome",
        }
