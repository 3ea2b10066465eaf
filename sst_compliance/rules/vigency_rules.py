"""
Vigency Rules — calendar-based freshness of a requirement.

An authoritative status from the source wins over date math. Both dates are
truncated to the calendar day, so the time of day never changes the result.
"today" is always passed in; nothing here reads the clock.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sst_compliance.models.enums import DocumentStatus, VigencyState
from sst_compliance.rules.rules_config import get_vigency_config
from sst_compliance.utils.dates import as_calendar_date

_STATUS_TO_VIGENCY: dict[DocumentStatus, VigencyState] = {
    DocumentStatus.EXPIRED: VigencyState.EXPIRED,
    DocumentStatus.ABOUT_TO_EXPIRE: VigencyState.EXPIRING,
    DocumentStatus.VALID: VigencyState.VALID,
}


def compute_days_remaining(
    expiration_date: Optional[date | datetime],
    today: date | datetime,
) -> Optional[int]:
    """Signed whole days from today to expiration; negative means overdue."""
    expires = as_calendar_date(expiration_date)
    if expires is None:
        return None
    return (expires - as_calendar_date(today)).days


def classify_vigency(
    expiration_date: Optional[date | datetime],
    authoritative_status: Optional[DocumentStatus],
    today: date | datetime,
) -> VigencyState:
    if expiration_date is None:
        return VigencyState.NO_EXPIRATION

    if authoritative_status in _STATUS_TO_VIGENCY:
        return _STATUS_TO_VIGENCY[authoritative_status]

    days = compute_days_remaining(expiration_date, today)
    if days < 0:
        return VigencyState.EXPIRED
    if days <= get_vigency_config().expiring_window_days:
        return VigencyState.EXPIRING
    return VigencyState.VALID
