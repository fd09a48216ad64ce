from datetime import datetime

from flask import request, jsonify, send_file
from io import BytesIO

from models import UserRole
from database import SheetNotFoundError, RecordNotFoundError
from utils.decorators import role_required, get_current_identity, log_action, handle_db_errors
from utils.excel_handler import ExcelHandler
from utils.helpers import safe_filename

from . import events_bp, db_manager, logger
from .company_context import resolve_session_company


@events_bp.route('/export', methods=['GET'])
@role_required([UserRole.ADMIN, UserRole.COMPANY])
@log_action('export registrations')
@handle_db_errors('Failed to export registrations')
def export_registrations():
    """Download the registrations of an event as an Excel file"""
    event_name = (request.args.get('event') or '').strip()
    if not event_name:
        return jsonify({'error': 'Event name is required'}), 400

    if get_current_identity().is_admin:
        company_name = (request.args.get('company') or '').strip()
        if not company_name:
            return jsonify({'error': 'Company name is required'}), 400
    else:
        company, error = resolve_session_company()
        if error:
            return error
        company_name = company.name

    try:
        registrations = db_manager.get_registrations(company_name, event_name)
    except SheetNotFoundError:
        return jsonify({'error': 'Company not found'}), 404
    except RecordNotFoundError:
        return jsonify({'error': 'Event not found'}), 404

    content = ExcelHandler().export_registrations(registrations, event_name)
    logger.info(f"Exported {len(registrations)} registrations of {company_name}/{event_name}")

    filename = (
        f"{safe_filename(company_name)}_{safe_filename(event_name)}_"
        f"{datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
    )

    return send_file(
        BytesIO(content),
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        as_attachment=True,
        download_name=filename,
    )
