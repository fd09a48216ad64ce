import hmac

from flask import request, jsonify, session, current_app

from models import Identity, UserRole
from utils.decorators import validate_json, log_action, handle_db_errors
from utils.helpers import verify_password

from . import auth_bp, db_manager, logger


def _is_admin_login(username, password):
    admin_username = current_app.config.get('ADMIN_USERNAME')
    admin_password = current_app.config.get('ADMIN_PASSWORD')
    if not admin_username or not admin_password:
        return False
    return (
        hmac.compare_digest(username.encode('utf-8'), admin_username.encode('utf-8'))
        and hmac.compare_digest(password.encode('utf-8'), admin_password.encode('utf-8'))
    )


@auth_bp.route('/login', methods=['POST'])
@validate_json(['username', 'password'], message='Username and password are required')
@log_action('login')
@handle_db_errors('Login failed')
def login():
    """Sign in as the admin or as a company"""
    data = request.get_json()
    username = str(data['username']).strip()
    password = str(data['password'])

    if _is_admin_login(username, password):
        identity = Identity(user_id='admin', username=username, role=UserRole.ADMIN)
    else:
        company = db_manager.get_company_by_username(username)
        if not company or not verify_password(password, company.password_hash):
            logger.warning(f"Failed login for {username}")
            return jsonify({'error': 'Invalid username or password'}), 401

        if not company.is_enabled:
            logger.warning(f"Disabled company {company.name} tried to sign in")
            return jsonify({'error': 'Company is disabled'}), 403

        identity = Identity(
            user_id=company.company_id,
            username=company.username,
            role=UserRole.COMPANY,
            company_name=company.name,
        )

    session.clear()
    identity.to_session(session)
    session.permanent = True

    logger.info(f"{identity.role.value} {identity.username} signed in")

    return jsonify({
        'success': True,
        'message': 'Login successful',
        'user': identity.to_dict(),
    })
