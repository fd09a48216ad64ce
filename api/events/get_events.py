from flask import request, jsonify

from models import CompanyStatus
from database import SheetNotFoundError
from utils.decorators import log_action, handle_db_errors

from . import events_bp, db_manager, logger


@events_bp.route('', methods=['GET'])
@log_action('list events')
@handle_db_errors('Failed to get events')
def get_events():
    """Public list of a company's events"""
    company_name = (request.args.get('company') or '').strip()
    if not company_name:
        return jsonify({'error': 'Company name is required'}), 400

    try:
        events = db_manager.get_company_events(company_name)
    except SheetNotFoundError:
        logger.info(f"Company sheet {company_name} does not exist")
        return jsonify({'error': 'Company not found'}), 404

    company = db_manager.get_company_by_name(company_name)
    company_status = company.status if company else CompanyStatus.ENABLED
    if company_status == CompanyStatus.DISABLED:
        return jsonify({'error': 'Company is disabled'}), 403

    return jsonify({'events': [event.to_dict(company_status) for event in events]})
