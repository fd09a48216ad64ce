from flask import request, jsonify

from models import Event, EventStatus
from database import DuplicateRecordError, SheetNotFoundError
from utils.decorators import company_required, validate_json, log_action, handle_db_errors

from . import events_bp, db_manager, logger
from .company_context import resolve_session_company, parse_event_status, upload_event_image


@events_bp.route('', methods=['POST'])
@company_required
@validate_json(['name'], message='Event name is required')
@log_action('create event')
@handle_db_errors('Failed to create event')
def create_event():
    """Create an event in the signed-in company's sheet"""
    data = request.get_json()
    company, error = resolve_session_company()
    if error:
        return error

    status = EventStatus.ENABLED
    if data.get('status'):
        try:
            status = parse_event_status(data['status'])
        except ValueError:
            return jsonify({'error': f"Invalid status: {data['status']}"}), 400

    event = Event(name=str(data['name']).strip(), status=status)
    if data.get('image'):
        event.image = upload_event_image(company, data['image'])

    try:
        event = db_manager.create_event(company.name, event)
    except DuplicateRecordError:
        return jsonify({'error': 'Event already exists'}), 400
    except SheetNotFoundError:
        logger.error(f"Company {company.company_id} has no sheet named {company.name}")
        return jsonify({'error': 'Company not found'}), 404

    return jsonify({
        'success': True,
        'event': event.to_dict(company.status),
    })
