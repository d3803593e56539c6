import logging
from flask import Blueprint, current_app, request, jsonify
from werkzeug.exceptions import BadRequest
from donorapp.errors import StorageError

logger = logging.getLogger(__name__)

# Define the Blueprint for account sign up and sign in
auth_bp = Blueprint('auth_bp', __name__)


def _identity():
    return current_app.extensions['identity_provider']


# POST a new account
@auth_bp.route('/signup', methods=['POST'])
def signup():
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        email, password, name = data.get('email'), data.get('password'), data.get('name')
        if not email or not password or not name:
            raise BadRequest('Email, password, and name are required')
        if not all(isinstance(value, str) for value in (email, password, name)):
            raise BadRequest('Email, password, and name must be strings')

        user = _identity().create_user(email, password, name)
        return jsonify({'success': True, 'user': user.to_dict()}), 200
    except BadRequest as e:
        logger.info("Signup error: %s", e.description)
        return jsonify({'error': e.description}), 400
    except StorageError as e:
        logger.error("Signup error: %s", e.description)
        return jsonify({'error': 'Failed to sign up'}), 500
    except Exception:
        logger.exception("Signup error")
        return jsonify({'error': 'Failed to sign up'}), 500


# POST credentials in exchange for an access token
@auth_bp.route('/signin', methods=['POST'])
def signin():
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        email, password = data.get('email'), data.get('password')
        if not email or not password:
            raise BadRequest('Email and password are required')
        if not isinstance(email, str) or not isinstance(password, str):
            raise BadRequest('Email and password must be strings')

        access_token, user = _identity().authenticate(email, password)
        return jsonify({
            'success': True,
            'access_token': access_token,
            'user': user.to_dict()
        }), 200
    except BadRequest as e:
        logger.info("Signin error: %s", e.description)
        return jsonify({'error': e.description}), 400
    except StorageError as e:
        logger.error("Signin error: %s", e.description)
        return jsonify({'error': 'Failed to sign in'}), 500
    except Exception:
        logger.exception("Signin error")
        return jsonify({'error': 'Failed to sign in'}), 500
