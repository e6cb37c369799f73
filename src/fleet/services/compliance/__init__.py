"""Vehicle compliance service exports."""

from .service import (
    check_circulation_day,
    check_compliance,
    check_time_restriction,
    update_location,
    update_status,
)

__all__ = [
    "check_circulation_day",
    "check_time_restriction",
    "check_compliance",
    "update_location",
    "update_status",
]
