from flask import jsonify

from utils.decorators import get_current_identity

from . import auth_bp


@auth_bp.route('/check-session', methods=['GET'])
def check_session():
    """Session state of the caller"""
    identity = get_current_identity()
    if identity is None:
        return jsonify({'logged_in': False})

    return jsonify({
        'logged_in': True,
        'user': identity.to_dict()
    })
