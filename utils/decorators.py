#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Event registration service - decorators (auth, validation, logging)
"""

import time
import logging
from functools import wraps

from flask import session, jsonify, request, g

from models import Identity, UserRole

logger = logging.getLogger(__name__)


def get_current_identity():
    """Identity of the caller, cached on flask.g for the request"""
    if 'identity' not in g:
        g.identity = Identity.from_session(session)
    return g.identity


def role_required(required_roles):
    """Role check decorator

    Args:
        required_roles: a role or a list of roles (UserRole or str)
    """
    if isinstance(required_roles, (str, UserRole)):
        required_roles = [required_roles]
    roles = {r if isinstance(r, UserRole) else UserRole(r) for r in required_roles}

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            identity = get_current_identity()
            if identity is None or identity.role not in roles:
                return jsonify({'error': 'Unauthorized'}), 401
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def admin_required(f):
    """Admin-only endpoint"""
    return role_required(UserRole.ADMIN)(f)


def company_required(f):
    """Endpoint for a signed-in company"""
    return role_required(UserRole.COMPANY)(f)


def validate_json(required_fields=None, message=None):
    """JSON body validation decorator

    Args:
        required_fields: fields that must be present and non-empty
        message: error text when the body is not an object or a field is
            missing; defaults to a generic text or a list of the missing fields
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                return jsonify({'error': message or 'Request body must be a JSON object'}), 400

            if required_fields:
                missing_fields = []
                for field in required_fields:
                    value = data.get(field)
                    if value is None or (isinstance(value, str) and not value.strip()):
                        missing_fields.append(field)

                if missing_fields:
                    logger.info(f"Validation failed - missing fields: {', '.join(missing_fields)}")
                    return jsonify({
                        'error': message or f"Missing required fields: {', '.join(missing_fields)}"
                    }), 400

            return f(*args, **kwargs)
        return decorated_function
    return decorator


def log_action(action_name):
    """Operation logging decorator

    Args:
        action_name: operation name used in the log lines
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            username = session.get('username', 'anonymous')
            role = session.get('user_role', '-')

            start_time = time.perf_counter()
            logger.info(f"{username} ({role}) started: {action_name}")

            try:
                result = f(*args, **kwargs)

                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.info(f"{username} ({role}) finished: {action_name}, took {duration_ms:.1f} ms")

                return result

            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.error(
                    f"{username} ({role}) failed: {action_name}, took {duration_ms:.1f} ms, error: {str(e)}"
                )
                raise

        return decorated_function
    return decorator


def handle_db_errors(message='Internal server error'):
    """Turn unexpected storage / collaborator errors into a logged 500

    Args:
        message: generic error text returned to the client
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except Exception as e:
                logger.error(f"{f.__name__} failed: {str(e)}", exc_info=True)
                return jsonify({'error': message}), 500
        return decorated_function
    return decorator
