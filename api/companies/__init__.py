from flask import Blueprint
import logging

from database import SpreadsheetManager


companies_bp = Blueprint('companies', __name__)

db_manager = SpreadsheetManager()
logger = logging.getLogger(__name__)

# One module per operation
from . import (
    get_companies,
    create_company,
    update_company,
    delete_company,
)

__all__ = ['companies_bp']
