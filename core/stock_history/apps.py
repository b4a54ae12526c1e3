"""
Stockbook Stock History - App Configuration
=============================================
Immutable log of stock movements (the valuation Event Source).

This app:
- Stores one row per stock movement
- Refuses updates and deletes
- Serves ordered, supplier-scoped reads for the WAC replay

This app does NOT compute valuations.
"""

from django.apps import AppConfig


class StockHistoryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.stock_history"
    label = "stock_history"
    verbose_name = "Stockbook Stock History"
