"""
Stockbook Stock History - Movement Model
==========================================
One immutable row per stock movement.

RULES (NON-NEGOTIABLE):
- No deletes, no updates after persistence
- change is signed: + inbound, - outbound, 0 price change only
- supplier_id is denormalized from the item at write time
- price_at_change is a snapshot, never recomputed
- seq is the write order; it breaks ties between equal created_at values
"""

import uuid

from django.db import models


class StockChangeReasonChoices(models.TextChoices):
    INITIAL_STOCK = "INITIAL_STOCK", "Initial stock"
    MANUAL_UPDATE = "MANUAL_UPDATE", "Manual update"
    PRICE_CHANGE = "PRICE_CHANGE", "Price change"
    SOLD = "SOLD", "Sold"
    SCRAPPED = "SCRAPPED", "Scrapped"
    DESTROYED = "DESTROYED", "Destroyed"
    DAMAGED = "DAMAGED", "Damaged"
    EXPIRED = "EXPIRED", "Expired"
    LOST = "LOST", "Lost"
    RETURNED_TO_SUPPLIER = "RETURNED_TO_SUPPLIER", "Returned to supplier"
    RETURNED_BY_CUSTOMER = "RETURNED_BY_CUSTOMER", "Returned by customer"


def _new_history_id() -> str:
    return str(uuid.uuid4())


class StockHistory(models.Model):
    seq = models.BigAutoField(primary_key=True)

    movement_id = models.CharField(
        max_length=64,
        unique=True,
        default=_new_history_id,
        editable=False,
    )

    item_id = models.CharField(max_length=64)

    supplier_id = models.CharField(
        max_length=64,
        null=True,
        blank=True,
        help_text="Supplier of the item when the movement was recorded.",
    )

    change = models.IntegerField(
        help_text="Signed quantity delta. Zero only for price changes.",
    )

    reason = models.CharField(
        max_length=32,
        choices=StockChangeReasonChoices.choices,
    )

    created_by = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(
        help_text="When the movement happened (replay ordering key).",
    )

    price_at_change = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Unit price snapshot at the time of the movement.",
    )

    class Meta:
        db_table = "stockbook_stock_history"
        ordering = ["created_at", "seq"]
        indexes = [
            models.Index(fields=["item_id", "created_at"], name="ix_sh_item_ts"),
            models.Index(fields=["created_at"], name="ix_sh_ts"),
            models.Index(fields=["supplier_id", "created_at"], name="ix_sh_supplier_ts"),
        ]

    def save(self, *args, **kwargs):
        """GUARD: INSERT only. Corrections are new movements."""
        if not self._state.adding:
            raise PermissionError(
                "Stock history is immutable. Cannot update a persisted movement; "
                "record a correcting movement instead."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise PermissionError("Stock history rows are never deleted.")

    def __str__(self):
        return f"[{self.reason}] {self.item_id} {self.change:+d} @ {self.created_at}"
