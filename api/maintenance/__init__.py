from flask import Blueprint
import logging

from database import SpreadsheetManager


maintenance_bp = Blueprint('maintenance', __name__)

db_manager = SpreadsheetManager()
logger = logging.getLogger(__name__)

from . import diagnostics

__all__ = ['maintenance_bp']
