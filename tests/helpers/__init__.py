"""Test helpers for FedEx adapter tests."""

from tests.helpers.fedex_replies import (
    BARCODE_BYTES,
    LABEL_BYTES,
    RecordingTransport,
    notification,
    rate_detail,
    rate_reply,
    ship_reply,
    track_event,
    track_reply,
)

__all__ = [
    "BARCODE_BYTES",
    "LABEL_BYTES",
    "RecordingTransport",
    "notification",
    "rate_detail",
    "rate_reply",
    "ship_reply",
    "track_event",
    "track_reply",
]
