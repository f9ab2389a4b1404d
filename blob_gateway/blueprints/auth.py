"""
Token endpoint blueprint.

Issues JWTs used as Bearer tokens on the blob endpoints.
"""
import logging
from flask import Blueprint, jsonify, make_response, current_app

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/v1/auth')

TOKEN_SUBJECT = 'user'


@auth_bp.route('/jwt', methods=['GET'])
def generate_jwt():
    """
    Issue a JWT.

    Returns:
        201 Created: JSON {"username": "user", "token": "<jwt>"}
        500 Internal Server Error: Token could not be signed
    """
    try:
        token = current_app.config['JWT_MANAGER'].generate_token(TOKEN_SUBJECT)
    except Exception as e:
        logger.error("Error generating JWT", extra={
            'error_type': type(e).__name__,
            'error_message': str(e)
        }, exc_info=True)
        return make_response('Error generating JWT', 500)

    return jsonify({'username': TOKEN_SUBJECT, 'token': token}), 201
