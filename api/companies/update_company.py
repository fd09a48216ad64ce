from flask import request, jsonify

from models import CompanyStatus
from database import DuplicateRecordError, SheetExistsError, InvalidSheetNameError
from utils.decorators import admin_required, validate_json, log_action, handle_db_errors
from utils.helpers import generate_password_hash

from . import companies_bp, db_manager, logger
from .images import upload_company_image


@companies_bp.route('', methods=['PUT'])
@admin_required
@validate_json(['id'], message='Company ID is required')
@log_action('update company')
@handle_db_errors('Failed to update company')
def update_company():
    """Update a company addressed by id

    Only the fields present in the body change. A new name renames the
    company sheet; restoring a deleted company leaves its sheet name as is.
    """
    data = request.get_json()
    company_id = str(data['id']).strip()

    company = db_manager.get_company_by_id(company_id)
    if not company:
        return jsonify({'error': 'Company not found'}), 404

    changes = {}

    name = str(data.get('name') or '').strip()
    if name and name != company.name:
        changes['name'] = name

    username = str(data.get('username') or '').strip()
    if username and username != company.username:
        changes['username'] = username

    if data.get('password'):
        changes['password_hash'] = generate_password_hash(str(data['password']))

    status = data.get('status')
    if status:
        try:
            changes['status'] = CompanyStatus(str(status).strip().lower())
        except ValueError:
            return jsonify({'error': f'Invalid status: {status}'}), 400

    if isinstance(data.get('deleted'), bool):
        changes['deleted'] = data['deleted']

    if data.get('image'):
        image_url = upload_company_image(company_id, data['image'])
        if image_url:
            changes['image'] = image_url

    try:
        company = db_manager.update_company(company_id, changes)
    except DuplicateRecordError:
        return jsonify({'error': 'Username already exists'}), 400
    except SheetExistsError:
        return jsonify({'error': f'A sheet named {name} already exists'}), 400
    except InvalidSheetNameError:
        return jsonify({'error': 'Company name cannot be used as a sheet name'}), 400

    logger.info(f"Company {company_id} updated: {', '.join(changes) or 'no changes'}")

    return jsonify({
        'success': True,
        'company': company.to_dict(),
    })
