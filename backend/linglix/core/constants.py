# backend/linglix/core/constants.py
"""Application-wide constants."""

BRAND_NAME = "Linglix"

API_TITLE = f"{BRAND_NAME} API"
API_DESCRIPTION = "Tutor availability and booking API for the Linglix language-tutoring marketplace"
API_VERSION = "1.0.0"
