from flask import request, jsonify

from database import RecordNotFoundError, SheetNotFoundError
from utils.decorators import company_required, validate_json, log_action, handle_db_errors

from . import events_bp, db_manager
from .company_context import resolve_session_company, parse_event_status, upload_event_image


@events_bp.route('', methods=['PUT'])
@company_required
@validate_json(['name'], message='Event name is required')
@log_action('update event')
@handle_db_errors('Failed to update event')
def update_event():
    """Toggle the status or replace the image of an event"""
    data = request.get_json()
    company, error = resolve_session_company()
    if error:
        return error

    changes = {}
    if data.get('status'):
        try:
            changes['status'] = parse_event_status(data['status'])
        except ValueError:
            return jsonify({'error': f"Invalid status: {data['status']}"}), 400

    if data.get('image'):
        image_url = upload_event_image(company, data['image'])
        if image_url:
            changes['image'] = image_url

    try:
        event = db_manager.update_event(company.name, str(data['name']).strip(), changes)
    except (RecordNotFoundError, SheetNotFoundError):
        return jsonify({'error': 'Event not found'}), 404

    return jsonify({
        'success': True,
        'event': event.to_dict(company.status),
    })
