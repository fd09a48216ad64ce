from flask import Blueprint
import logging

from database import SpreadsheetManager


events_bp = Blueprint('events', __name__)

db_manager = SpreadsheetManager()
logger = logging.getLogger(__name__)

# One module per operation
from . import (
    get_events,
    create_event,
    update_event,
    register_event,
    export_registrations,
)

__all__ = ['events_bp']
