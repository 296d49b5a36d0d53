"""
Midtrans Snap Payment Gateway Integration

Thin HTTP client for the two calls the payments app needs:

- create_transaction: open a Snap checkout session for an order id
- transaction_status: read the gateway's live status of an order id

Plus verification of notification signatures. Each payment method maps to
the Snap channels offered to the payer (``ENABLED_PAYMENTS``); CASH offers
all of them. Every request carries a bounded timeout
(``PAYMENT_GATEWAY_TIMEOUT``). Without a server key, or with DEBUG on, the
client emulates the gateway locally.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal

import requests
from django.conf import settings  # type: ignore

from apps.payments.domain.amounts import gross_amount
from apps.payments.domain.entities import PaymentMethod

logger = logging.getLogger(__name__)

SNAP_URLS = {
    False: "https://app.sandbox.midtrans.com/snap/v1/transactions",
    True: "https://app.midtrans.com/snap/v1/transactions",
}
API_URLS = {
    False: "https://api.sandbox.midtrans.com/v2",
    True: "https://api.midtrans.com/v2",
}

# CASH has no Snap channel of its own; the payer picks one at the counter
ENABLED_PAYMENTS = {
    PaymentMethod.QRIS: ["qris"],
    PaymentMethod.TRANSFER: ["bank_transfer"],
    PaymentMethod.CASH: ["qris", "bank_transfer"],
}

EMULATED_REDIRECT_URL = "https://app.sandbox.midtrans.com/snap/v4/redirection"


class PaymentGatewayError(Exception):
    """Raised when the gateway cannot be reached or refuses a request."""


class PaymentGatewayTimeout(PaymentGatewayError):
    """Raised when the gateway does not answer within the configured timeout."""


@dataclass(frozen=True)
class CheckoutSession:
    reference: str
    token: str
    redirect_url: str


@dataclass(frozen=True)
class Customer:
    first_name: str
    last_name: str
    email: str
    phone: str

    @classmethod
    def from_user(cls, user) -> "Customer":
        name = (user.get_full_name() or "").strip() or "Customer"
        first_name, _, last_name = name.partition(" ")
        return cls(
            first_name=first_name,
            last_name=last_name.strip(),
            email=user.email or "",
            phone=getattr(user, "phone", "") or "",
        )


class MidtransGateway:
    """Midtrans Snap client; configuration is read from settings on every call."""

    def __init__(self, session: requests.Session | None = None):
        self.session = session or requests.Session()

    @property
    def server_key(self) -> str:
        return getattr(settings, "MIDTRANS_SERVER_KEY", "") or ""

    @property
    def is_production(self) -> bool:
        return bool(getattr(settings, "MIDTRANS_IS_PRODUCTION", False))

    @property
    def timeout(self) -> float:
        return float(getattr(settings, "PAYMENT_GATEWAY_TIMEOUT", 10))

    @property
    def emulated(self) -> bool:
        return settings.DEBUG or not self.server_key

    def create_transaction(
        self,
        reference: str,
        amount: Decimal,
        method: PaymentMethod,
        customer: Customer,
    ) -> CheckoutSession:
        """
        Open a Snap checkout session

        Raises:
            PaymentGatewayTimeout: no answer within the timeout
            PaymentGatewayError: transport failure or refusal
        """
        logger.info(f"Creating Midtrans transaction {reference} for {amount} IDR ({method.value})")

        if self.emulated:
            logger.warning("Midtrans emulation in use (DEBUG mode or no server key)")
            token = uuid.uuid4().hex
            return CheckoutSession(
                reference=reference,
                token=token,
                redirect_url=f"{EMULATED_REDIRECT_URL}/{token}",
            )

        frontend_url = settings.FRONTEND_URL.rstrip("/")
        payload = {
            "transaction_details": {
                "order_id": reference,
                "gross_amount": gross_amount(amount),
            },
            "customer_details": {
                "first_name": customer.first_name,
                "last_name": customer.last_name,
                "email": customer.email,
                "phone": customer.phone,
            },
            "enabled_payments": ENABLED_PAYMENTS[method],
            "callbacks": {
                "finish": f"{frontend_url}/payment/success",
                "error": f"{frontend_url}/payment/error",
                "pending": f"{frontend_url}/payment/pending",
            },
        }
        result = self._request("post", SNAP_URLS[self.is_production], json=payload)

        token = result.get("token")
        redirect_url = result.get("redirect_url")
        if not token or not redirect_url:
            messages = result.get("error_messages") or ["missing token"]
            raise PaymentGatewayError(f"Midtrans refused transaction {reference}: {'; '.join(messages)}")

        logger.info(f"Midtrans transaction {reference} created")
        return CheckoutSession(reference=reference, token=token, redirect_url=redirect_url)

    def transaction_status(self, reference: str) -> dict | None:
        """
        Live gateway status of an order id

        Returns the gateway's status document, or None when the gateway does
        not know the order id yet.
        """
        if self.emulated:
            logger.info(f"Midtrans emulation: reporting {reference} as pending")
            return {
                "order_id": reference,
                "status_code": "201",
                "transaction_status": "pending",
                "fraud_status": None,
            }

        result = self._request("get", f"{API_URLS[self.is_production]}/{reference}/status")
        if str(result.get("status_code")) == "404":
            logger.info(f"Midtrans has no transaction {reference} yet")
            return None
        return result

    def verify_signature(self, payload: dict) -> bool:
        """
        Check a notification's ``signature_key``

        sha512(order_id + status_code + gross_amount + server_key), compared
        in constant time. Without a server key nothing can be verified and
        notifications are accepted.
        """
        if not self.server_key:
            return True
        raw = "".join(
            str(payload.get(field, ""))
            for field in ("order_id", "status_code", "gross_amount")
        ) + self.server_key
        expected = hashlib.sha512(raw.encode("utf-8")).hexdigest()
        return hmac.compare_digest(expected, str(payload.get("signature_key", "")))

    def _request(self, method: str, url: str, **kwargs) -> dict:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        try:
            response = self.session.request(
                method,
                url,
                headers=headers,
                auth=(self.server_key, ""),
                timeout=self.timeout,
                **kwargs,
            )
            if response.status_code >= 500:
                response.raise_for_status()
            return response.json()
        except requests.exceptions.Timeout as e:
            logger.error(f"Midtrans request timed out after {self.timeout}s: {url}")
            raise PaymentGatewayTimeout(f"Gateway did not answer within {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error talking to Midtrans: {e}")
            raise PaymentGatewayError(f"Gateway connection error: {e}") from e
        except ValueError as e:
            logger.error(f"Midtrans returned a non-JSON response from {url}")
            raise PaymentGatewayError("Gateway returned an unreadable response") from e


payment_gateway = MidtransGateway()
