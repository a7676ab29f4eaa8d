"""
URL configuration for the import web endpoints.
"""

from django.urls import path, re_path

from . import views

urlpatterns = [
    # Raw CSV upload
    path("import", views.import_csv, name="import"),
    # Everything else is a Telegram webhook update
    re_path(r"^.*$", views.telegram_webhook, name="telegram_webhook"),
]
