from django.db import migrations, models

import core.stock_history.models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="StockHistory",
            fields=[
                ("seq", models.BigAutoField(primary_key=True, serialize=False)),
                (
                    "movement_id",
                    models.CharField(
                        default=core.stock_history.models._new_history_id,
                        editable=False,
                        max_length=64,
                        unique=True,
                    ),
                ),
                ("item_id", models.CharField(max_length=64)),
                (
                    "supplier_id",
                    models.CharField(
                        blank=True,
                        help_text="Supplier of the item when the movement was recorded.",
                        max_length=64,
                        null=True,
                    ),
                ),
                (
                    "change",
                    models.IntegerField(
                        help_text="Signed quantity delta. Zero only for price changes.",
                    ),
                ),
                (
                    "reason",
                    models.CharField(
                        choices=[
                            ("INITIAL_STOCK", "Initial stock"),
                            ("MANUAL_UPDATE", "Manual update"),
                            ("PRICE_CHANGE", "Price change"),
                            ("SOLD", "Sold"),
                            ("SCRAPPED", "Scrapped"),
                            ("DESTROYED", "Destroyed"),
                            ("DAMAGED", "Damaged"),
                            ("EXPIRED", "Expired"),
                            ("LOST", "Lost"),
                            ("RETURNED_TO_SUPPLIER", "Returned to supplier"),
                            ("RETURNED_BY_CUSTOMER", "Returned by customer"),
                        ],
                        max_length=32,
                    ),
                ),
                ("created_by", models.CharField(blank=True, default="", max_length=255)),
                (
                    "created_at",
                    models.DateTimeField(
                        help_text="When the movement happened (replay ordering key).",
                    ),
                ),
                (
                    "price_at_change",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Unit price snapshot at the time of the movement.",
                        max_digits=12,
                        null=True,
                    ),
                ),
            ],
            options={
                "db_table": "stockbook_stock_history",
                "ordering": ["created_at", "seq"],
                "indexes": [
                    models.Index(fields=["item_id", "created_at"], name="ix_sh_item_ts"),
                    models.Index(fields=["created_at"], name="ix_sh_ts"),
                    models.Index(
                        fields=["supplier_id", "created_at"], name="ix_sh_supplier_ts"
                    ),
                ],
            },
        ),
    ]
