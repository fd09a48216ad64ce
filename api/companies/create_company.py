from flask import request, jsonify

from models import Company, CompanyStatus
from database import DuplicateRecordError, SheetExistsError, InvalidSheetNameError
from utils.decorators import admin_required, validate_json, log_action, handle_db_errors
from utils.helpers import generate_company_id, generate_password_hash

from . import companies_bp, db_manager, logger
from .images import upload_company_image


@companies_bp.route('', methods=['POST'])
@admin_required
@validate_json(['name', 'username', 'password'], message='Name, username, and password are required')
@log_action('create company')
@handle_db_errors('Failed to create company')
def create_company():
    """Create a company and its event sheet"""
    data = request.get_json()
    name = str(data['name']).strip()
    username = str(data['username']).strip()
    password = str(data['password'])

    if db_manager.get_company_by_username(username):
        return jsonify({'error': 'Username already exists'}), 400

    company = Company(
        company_id=generate_company_id(),
        name=name,
        username=username,
        password_hash=generate_password_hash(password),
        status=CompanyStatus.ENABLED,
        deleted=False,
    )

    if data.get('image'):
        company.image = upload_company_image(company.company_id, data['image'])

    try:
        company = db_manager.create_company(company)
    except DuplicateRecordError:
        return jsonify({'error': 'Username already exists'}), 400
    except SheetExistsError:
        return jsonify({'error': f'A sheet named {name} already exists'}), 400
    except InvalidSheetNameError:
        return jsonify({'error': 'Company name cannot be used as a sheet name'}), 400

    logger.info(f"Company {company.name} created with id {company.company_id}")

    return jsonify({
        'success': True,
        'company': company.to_dict(),
    })
