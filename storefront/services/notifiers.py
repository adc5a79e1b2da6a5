# storefront/services/notifiers.py
"""
Best-effort steps that run after an order has been committed.

Each notifier backs up or mirrors an order for the back office. They run one
after another, every one inside its own failure boundary: an exception is
logged with the order id and never reaches the customer or the next notifier.
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import Request

from storefront.config import Settings
from storefront.schemas.order import OrderOut
from storefront.utils.google_client import DriveClient, GoogleServiceAccount, SheetsClient
from storefront.utils.uploads import PaymentProof, proof_filename

logger = logging.getLogger(__name__)

DEFAULT_TAB = "Sheet1"
ORDERS_TAB = "Orders"
ORDER_COLUMNS = "A:N"
ORDER_SHEET_HEADER = [
    "Order ID", "Customer Name", "Email", "Address", "City", "State", "ZIP",
    "Subtotal", "Tax", "Total", "Status", "Payment Screenshot", "Created At", "Items",
]


class SheetsMirrorError(Exception):
    pass


class Notifier(ABC):
    name = "notifier"

    @abstractmethod
    async def notify(self, order: OrderOut, proof: Optional[PaymentProof]) -> None: ...


class DriveProofBackup(Notifier):
    """Copies the payment screenshot into a shared Drive folder."""

    name = "drive_backup"

    def __init__(self, drive: DriveClient):
        self.drive = drive

    async def notify(self, order: OrderOut, proof: Optional[PaymentProof]) -> None:
        if proof is None:
            return
        url = await self.drive.upload_public(proof_filename(proof), proof.content_type, proof.content)
        logger.info("Payment proof for order %s backed up to %s", order.id, url)


def order_row(order: OrderOut) -> list:
    created_at = order.created_at or datetime.now(timezone.utc)
    items = "; ".join(f"{it.product.name} (x{it.quantity})" for it in order.items)
    return [
        order.id,
        order.customer_name,
        order.customer_email,
        order.customer_address,
        order.customer_city,
        order.customer_state,
        order.customer_zip,
        float(order.subtotal),
        float(order.tax),
        float(order.total),
        order.status.value,
        order.payment_screenshot_url or "",
        created_at.isoformat(),
        items,
    ]


class SheetsOrderMirror(Notifier):
    """Appends one row per order to the back-office spreadsheet.

    Spreadsheets in the wild do not all have the same tabs, so the row is
    offered to a list of targets in order and the first one that accepts it
    wins: the default tab, then an "Orders" tab (created with a header row
    when missing), then whatever range the API picks on its own.
    """

    name = "sheets_mirror"

    def __init__(self, sheets: SheetsClient):
        self.sheets = sheets

    def attempts(self):
        return [
            ("default tab", self._append_to_default_tab),
            ("orders tab", self._append_to_orders_tab),
            ("untargeted append", self._append_untargeted),
        ]

    async def notify(self, order: OrderOut, proof: Optional[PaymentProof]) -> None:
        row = order_row(order)
        for label, attempt in self.attempts():
            try:
                await attempt(row)
            except Exception as e:
                logger.warning("Sheets append via %s failed for order %s: %s", label, order.id, e)
                continue
            logger.info("Order %s mirrored to spreadsheet via %s", order.id, label)
            return
        raise SheetsMirrorError(f"Every spreadsheet append attempt failed for order {order.id}")

    async def _append_to_default_tab(self, row: list) -> None:
        await self.sheets.append_row(f"{DEFAULT_TAB}!{ORDER_COLUMNS}", row)

    async def _append_to_orders_tab(self, row: list) -> None:
        target = f"{ORDERS_TAB}!{ORDER_COLUMNS}"
        if ORDERS_TAB not in await self.sheets.sheet_titles():
            await self.sheets.add_sheet(ORDERS_TAB)
            await self.sheets.append_row(target, ORDER_SHEET_HEADER)
        await self.sheets.append_row(target, row)

    async def _append_untargeted(self, row: list) -> None:
        await self.sheets.append_row(ORDER_COLUMNS, row)


async def run_notifications(notifiers: List[Notifier], order: OrderOut,
                            proof: Optional[PaymentProof]) -> Dict[str, bool]:
    results = {}
    for notifier in notifiers:
        try:
            await notifier.notify(order, proof)
            results[notifier.name] = True
        except Exception:
            logger.exception("Best-effort step %s failed for order %s", notifier.name, order.id)
            results[notifier.name] = False
    return results


def build_notifiers(settings: Settings, transport=None) -> List[Notifier]:
    """Notifiers enabled by the Google settings; none when credentials are missing."""
    if not settings.google_configured:
        return []

    account = GoogleServiceAccount(
        settings.GOOGLE_CLIENT_EMAIL,
        settings.google_private_key,
        settings.GOOGLE_TOKEN_URI,
        timeout=settings.GOOGLE_HTTP_TIMEOUT,
        transport=transport,
    )
    options = {"timeout": settings.GOOGLE_HTTP_TIMEOUT, "transport": transport}

    notifiers: List[Notifier] = []
    if settings.GOOGLE_DRIVE_FOLDER_ID:
        notifiers.append(DriveProofBackup(DriveClient(account, settings.GOOGLE_DRIVE_FOLDER_ID, **options)))
    if settings.GOOGLE_SHEET_ID:
        notifiers.append(SheetsOrderMirror(SheetsClient(account, settings.GOOGLE_SHEET_ID, **options)))
    return notifiers


def get_notifiers(request: Request) -> List[Notifier]:
    return request.app.state.notifiers
