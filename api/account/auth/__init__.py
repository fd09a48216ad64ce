from flask import Blueprint
import logging

from database import SpreadsheetManager


auth_bp = Blueprint('auth', __name__)

db_manager = SpreadsheetManager()
logger = logging.getLogger(__name__)

from . import (
    login,
    logout,
    check_session,
)

__all__ = ['auth_bp']
