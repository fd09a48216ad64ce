"""Spreadsheet domain mixins package."""

from .db_companies import CompanyDbMixin
from .db_events import EventDbMixin
from .db_registrations import RegistrationDbMixin

__all__ = [
    "CompanyDbMixin",
    "EventDbMixin",
    "RegistrationDbMixin",
]
