"""Application-wide constants for the BookMe booking core."""

from __future__ import annotations

BRAND_NAME = "BookMe"

API_TITLE = f"{BRAND_NAME} Booking API"
API_DESCRIPTION = (
    "Booking lifecycle service for the BookMe marketplace: request, confirm, "
    "decline, complete and cancel bookings against provider services."
)
API_VERSION = "0.1.0"

# Text constraints
MAX_MESSAGE_LENGTH = 2000
MAX_NOTES_LENGTH = 2000
MAX_REASON_LENGTH = 500

# Query limits
DEFAULT_QUERY_LIMIT = 100
MAX_QUERY_LIMIT = 500

# Paths skipped by request timing/metrics
UNTIMED_PATHS = frozenset({"/health", "/metrics"})
