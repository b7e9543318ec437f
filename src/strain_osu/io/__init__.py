"""Input/output helpers for hit object attributes."""

from .attributes import (
    iter_attributes,
    load_attributes,
    record_from_payload,
    record_to_payload,
    write_attributes,
)
from .validation import AttributeValidationError, validate_clock_rate, validate_records

__all__ = [
    "AttributeValidationError",
    "iter_attributes",
    "load_attributes",
    "record_from_payload",
    "record_to_payload",
    "validate_clock_rate",
    "validate_records",
    "write_attributes",
]
