from urllib.parse import unquote

from flask import request, jsonify, current_app

from models import Registration
from database import SheetNotFoundError, RecordNotFoundError, DuplicateRecordError
from utils.decorators import validate_json, log_action, handle_db_errors
from utils.helpers import validate_email, validate_phone, parse_age

from . import events_bp, db_manager, logger


REQUIRED_FIELDS = [
    'companyName',
    'eventName',
    'name',
    'whatsapp',
    'email',
    'gender',
    'education',
    'universityCollege',
    'age',
    'nationalId',
]


def _text(value):
    return value.strip() if isinstance(value, str) else value


@events_bp.route('/register', methods=['POST'])
@validate_json(REQUIRED_FIELDS, message='All fields are required')
@log_action('register for event')
@handle_db_errors('Failed to register for event')
def register_event():
    """Public registration for an event"""
    data = request.get_json()
    company_name = unquote(str(data['companyName'])).strip()
    event_name = str(data['eventName']).strip()
    email = _text(data['email'])
    whatsapp = str(data['whatsapp']).strip()

    logger.info(f"Registration request for {company_name}/{event_name}: {email}")

    if not validate_email(email):
        return jsonify({'error': 'Invalid email format'}), 400

    if not validate_phone(whatsapp):
        return jsonify({'error': 'Invalid WhatsApp number format'}), 400

    min_age = current_app.config['REGISTRATION_MIN_AGE']
    max_age = current_app.config['REGISTRATION_MAX_AGE']
    age = parse_age(data['age'])
    if age is None or age < min_age or age > max_age:
        return jsonify({'error': f'Please enter a valid age between {min_age} and {max_age}'}), 400

    # One workbook load for all checks and the append
    with db_manager.get_workbook():
        try:
            sheet_rows = db_manager.get_sheet_data(company_name)
        except SheetNotFoundError:
            sheet_rows = None
        if not sheet_rows:
            logger.warning(f"Company sheet {company_name} is empty or does not exist")
            return jsonify({'error': 'Company not found'}), 404

        company = db_manager.get_company_by_name(company_name)
        if company and not company.is_enabled:
            return jsonify({'error': 'Company is disabled, registration is not available'}), 403

        event = db_manager.get_event(company_name, event_name)
        if event is None:
            logger.warning(f"Event {event_name} not found in company {company_name}")
            return jsonify({'error': 'Event not found'}), 404

        if not event.is_enabled:
            return jsonify({'error': 'Event registration is currently disabled'}), 403

        try:
            existing = db_manager.find_registration(company_name, event_name, email=email, whatsapp=whatsapp)
        except (RecordNotFoundError, SheetNotFoundError):
            logger.error(f"Registration table of {company_name}/{event_name} is missing")
            return jsonify({'error': 'Event not found'}), 404
        if existing:
            return jsonify({'error': 'You are already registered for this event'}), 400

        registration = Registration(
            name=_text(data['name']),
            whatsapp=whatsapp,
            national_id=str(_text(data['nationalId'])),
            email=email,
            education=_text(data['education']),
            university_college=_text(data['universityCollege']),
            age=age,
            gender=_text(data['gender']),
        )

        try:
            db_manager.add_registration(company_name, event_name, registration)
        except DuplicateRecordError:
            return jsonify({'error': 'You are already registered for this event'}), 400
        except (RecordNotFoundError, SheetNotFoundError):
            return jsonify({'error': 'Event not found'}), 404

    logger.info(f"Registration successful: {email} for {company_name}/{event_name}")

    return jsonify({
        'success': True,
        'message': 'Registration successful',
        'registration': {
            'name': registration.name,
            'email': registration.email,
            'registrationDate': registration.registration_date,
        },
    })
