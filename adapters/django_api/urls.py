"""
Stockbook Django adapter URL routing.
"""

from django.urls import path

from adapters.django_api import views


urlpatterns = [
    path("analytics/financial/summary", views.financial_summary_view),
]
