"""
Payment Queries

Read side of payments. Only the booking owner and administrators may look
at a payment; the status check asks the gateway without changing anything.
"""

from uuid import UUID
import logging

from apps.payments.gateway import PaymentGatewayError, payment_gateway
from apps.payments.models import Payment
from apps.payments.repositories import payment_repository
from shared.application.access import Caller, Role, require_owner_or_role
from shared.application.result import returns_result
from shared.domain.errors import ExternalServiceError

logger = logging.getLogger(__name__)


class PaymentQueries:

    def __init__(self, payment_repo=None, gateway=None):
        self.payment_repo = payment_repo or payment_repository
        self.gateway = gateway or payment_gateway

    def _visible(self, payment_id: UUID, caller: Caller) -> Payment:
        payment = self.payment_repo.get(payment_id)
        require_owner_or_role(caller, payment.booking.user_id, {Role.ADMIN}).unwrap()
        return payment

    @returns_result
    def detail(self, payment_id: UUID, caller: Caller) -> Payment:
        return self._visible(payment_id, caller)

    @returns_result
    def check_status(self, payment_id: UUID, caller: Caller) -> dict:
        """Stored status next to the gateway's live one"""
        payment = self._visible(payment_id, caller)
        try:
            live = self.gateway.transaction_status(payment.reference)
        except PaymentGatewayError as e:
            raise ExternalServiceError(str(e), reference=payment.reference)

        logger.info(f"Status check of {payment.reference}: stored {payment.status}, gateway {live and live.get('transaction_status')}")
        return {
            "payment_id": str(payment.pk),
            "reference": payment.reference,
            "payment_status": payment.status,
            "gateway_status": live.get("transaction_status") if live else None,
            "details": live or {},
        }


payment_queries = PaymentQueries()
