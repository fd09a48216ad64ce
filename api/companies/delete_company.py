from flask import request, jsonify

from database import RecordNotFoundError
from utils.decorators import admin_required, log_action, handle_db_errors

from . import companies_bp, db_manager, logger


@companies_bp.route('', methods=['DELETE'])
@admin_required
@log_action('delete company')
@handle_db_errors('Failed to mark company as deleted')
def delete_company():
    """Soft delete: flag the row and rename the company sheet"""
    company_id = (request.args.get('id') or '').strip()
    if not company_id:
        return jsonify({'error': 'Company ID is required'}), 400

    try:
        company = db_manager.soft_delete_company(company_id)
    except RecordNotFoundError:
        return jsonify({'error': 'Company not found'}), 404

    logger.info(f"Company {company.name} marked as deleted")

    return jsonify({
        'success': True,
        'message': f'Company {company.name} marked as deleted successfully',
    })
