from .logger import setup_logging
from .dates import as_calendar_date

__all__ = ["setup_logging", "as_calendar_date"]
