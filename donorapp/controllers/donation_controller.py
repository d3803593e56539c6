import logging
from flask import Blueprint, current_app, request, jsonify
from werkzeug.exceptions import BadRequest, Unauthorized
from donorapp.errors import StorageError
from donorapp.services.donation_service import (
    DonationIntakeHandler, DonationStatsHandler, RecentDonorsHandler
)

logger = logging.getLogger(__name__)

# Define the Blueprint for donation intake and donor listings
donation_bp = Blueprint('donation_bp', __name__)


def _store():
    return current_app.extensions['kv_store']


def _clock():
    return current_app.extensions['clock']


def bearer_token():
    """Return the token from an ``Authorization: Bearer <token>`` header, or None."""
    parts = request.headers.get('Authorization', '').split(' ')
    return parts[1] if len(parts) > 1 and parts[1] else None


# POST a donation form (requires auth)
@donation_bp.route('/donate', methods=['POST'])
def submit_donation():
    try:
        token = bearer_token()
        principal = None
        if token:
            principal = current_app.extensions['identity_provider'].verify(token)

        handler = DonationIntakeHandler(_store(), clock=_clock())
        result = handler.submit(principal, request.get_json(silent=True))
        return jsonify(result), 200
    except Unauthorized as e:
        return jsonify({'error': e.description}), 401
    except BadRequest as e:
        return jsonify({'error': e.description}), 400
    except StorageError as e:
        logger.error("Donation submission error: %s", e.description)
        return jsonify({'error': 'Failed to submit donation'}), 500
    except Exception:
        logger.exception("Donation submission error")
        return jsonify({'error': 'Failed to submit donation'}), 500


# GET donation counts
@donation_bp.route('/stats', methods=['GET'])
def get_stats():
    try:
        return jsonify(DonationStatsHandler(_store()).stats()), 200
    except StorageError as e:
        logger.error("Stats error: %s", e.description)
        return jsonify({'error': 'Failed to get stats'}), 500
    except Exception:
        logger.exception("Stats error")
        return jsonify({'error': 'Failed to get stats'}), 500


# GET the ten most recent eligible donors from the last week
@donation_bp.route('/recent-donors', methods=['GET'])
def get_recent_donors():
    try:
        donors = RecentDonorsHandler(_store(), clock=_clock()).recent_donors()
        return jsonify({'donors': donors}), 200
    except StorageError as e:
        logger.error("Recent donors error: %s", e.description)
        return jsonify({'error': 'Failed to get recent donors'}), 500
    except Exception:
        logger.exception("Recent donors error")
        return jsonify({'error': 'Failed to get recent donors'}), 500
