from flask import jsonify, request

from utils.decorators import admin_required, log_action, handle_db_errors
from utils.helpers import parse_bool

from . import companies_bp, db_manager


@companies_bp.route('', methods=['GET'])
@admin_required
@log_action('list companies')
@handle_db_errors('Failed to get companies')
def get_companies():
    """Companies without password hashes; deleted ones only on request"""
    include_deleted = parse_bool(request.args.get('include_deleted'))
    companies = db_manager.get_all_companies(include_deleted=include_deleted)

    return jsonify({'companies': [company.to_dict() for company in companies]})
