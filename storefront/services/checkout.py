# storefront/services/checkout.py
"""
Checkout workflow: turns a session's cart into an order backed by a
payment screenshot.

Payment happens outside the system (QR code bank transfer), so the order is
recorded as "payment_uploaded" and waits for a person to verify it.

Steps:
- Preconditions, each a hard stop: non-empty cart, proof present, proof is a
  JPEG/PNG image, proof is at most MAX_UPLOAD_BYTES.
- Core transaction: store the proof locally, create the order, clear the cart.
  A failed local store is logged and the order goes ahead without a proof URL.
- Notifications (Drive backup, Sheets mirror), each in its own failure
  boundary. Their outcome never changes the returned order.
"""
import logging
from decimal import Decimal
from typing import List, Optional

from fastapi import Depends, Request
from starlette.concurrency import run_in_threadpool

from storefront.config import Settings, get_app_settings
from storefront.models.order import OrderStatus
from storefront.schemas.order import CheckoutData, OrderCreate, OrderOut, dump_cart_snapshot
from storefront.schemas.user import UserRecord
from storefront.services.notifiers import Notifier, get_notifiers, run_notifications
from storefront.services.pricing import compute_totals
from storefront.storage import Storage, get_storage
from storefront.utils.uploads import LocalProofStore, PaymentProof

logger = logging.getLogger(__name__)

ALLOWED_PROOF_TYPES = ("image/jpeg", "image/jpg", "image/png")


class CheckoutError(Exception):
    status_code = 400
    default_detail = "Checkout failed"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class EmptyCartError(CheckoutError):
    default_detail = "Cart is empty"


class PaymentProofRequiredError(CheckoutError):
    default_detail = "Payment screenshot is required to complete the order"


class InvalidProofTypeError(CheckoutError):
    default_detail = "Invalid file type. Only JPEG, JPG and PNG images are allowed"


class ProofTooLargeError(CheckoutError):
    default_detail = "File size too large. Maximum 5MB allowed"


class CheckoutService:
    def __init__(self, storage: Storage, proof_store: LocalProofStore, notifiers: List[Notifier],
                 tax_rate: Decimal, max_proof_bytes: int):
        self.storage = storage
        self.proof_store = proof_store
        self.notifiers = notifiers
        self.tax_rate = tax_rate
        self.max_proof_bytes = max_proof_bytes

    def validate_proof(self, proof: Optional[PaymentProof]) -> PaymentProof:
        if proof is None:
            raise PaymentProofRequiredError()
        if proof.content_type not in ALLOWED_PROOF_TYPES:
            raise InvalidProofTypeError()
        if proof.size > self.max_proof_bytes:
            raise ProofTooLargeError(
                f"File size too large. Maximum {self.max_proof_bytes // (1024 * 1024)}MB allowed"
            )
        return proof

    def _store_proof(self, proof: PaymentProof) -> Optional[str]:
        # A sale is never blocked because the screenshot could not be written
        try:
            return self.proof_store.save(proof)
        except Exception:
            logger.exception("Failed to store payment proof %s locally", proof.filename)
            return None

    async def place_order(self, session_id: str, user: UserRecord, billing: CheckoutData,
                          proof: Optional[PaymentProof]) -> OrderOut:
        # Storage and disk writes block, so the core transaction runs in the threadpool
        order = await run_in_threadpool(self.record_order, session_id, user, billing, proof)

        results = await run_notifications(self.notifiers, order, proof)
        failed = [name for name, ok in results.items() if not ok]
        if failed:
            logger.warning("Order %s created, but best-effort steps failed: %s", order.id, ", ".join(failed))
        return order

    def record_order(self, session_id: str, user: UserRecord, billing: CheckoutData,
                     proof: Optional[PaymentProof]) -> OrderOut:
        """Check preconditions, then store the proof, create the order and clear the cart."""
        lines = self.storage.list_cart(session_id)
        if not lines:
            raise EmptyCartError()
        proof = self.validate_proof(proof)

        totals = compute_totals(lines, self.tax_rate)
        proof_url = self._store_proof(proof)

        order = self.storage.create_order(OrderCreate(
            user_id=user.id,
            customer_name=f"{billing.first_name} {billing.last_name}",
            customer_email=billing.email,
            customer_address=billing.address,
            customer_city=billing.city,
            customer_state=billing.state,
            customer_zip=billing.zip,
            items_json=dump_cart_snapshot(lines),
            subtotal=totals.subtotal,
            tax=totals.tax,
            total=totals.total,
            payment_screenshot_url=proof_url,
            status=OrderStatus.PAYMENT_UPLOADED,
        ))
        self.storage.clear_cart(session_id)
        logger.info("Order %s created for user %s: %s line(s), total %s", order.id, user.id, len(lines), order.total)
        return order


def get_checkout_service(
    request: Request,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
    notifiers: List[Notifier] = Depends(get_notifiers),
) -> CheckoutService:
    return CheckoutService(
        storage=storage,
        proof_store=request.app.state.proof_store,
        notifiers=notifiers,
        tax_rate=Decimal(settings.TAX_RATE),
        max_proof_bytes=settings.MAX_UPLOAD_BYTES,
    )
