import time

from flask import jsonify

from models import EventStatus
from utils.decorators import get_current_identity
from utils.image_upload import image_uploader

from . import db_manager, logger


def resolve_session_company():
    """Company of the signed-in user, or an error response tuple

    The company is looked up by id so a rename after sign-in is picked up.
    """
    identity = get_current_identity()
    company = db_manager.get_company_by_id(identity.user_id)
    if not company or company.deleted:
        return None, (jsonify({'error': 'Company not found'}), 404)
    if not company.is_enabled:
        return None, (jsonify({'error': 'Company is disabled'}), 403)
    return company, None


def parse_event_status(value):
    """EventStatus from request data; ValueError on unknown values"""
    return EventStatus(str(value).strip().lower())


def upload_event_image(company, image):
    file_name = f"event_{company.company_id}_{int(time.time() * 1000)}"
    result = image_uploader.upload(file_name, image, 'events')
    if not result.get('success'):
        logger.warning(f"Event image upload failed for {company.name}: {result.get('error')}")
        return None
    return result['url']
