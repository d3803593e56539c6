"""
Identity capability used by the donation endpoints.

Any provider implementing ``verify``, ``create_user`` and ``authenticate``
can be installed on the app. ``LocalIdentityProvider`` keeps accounts in the
``user_account`` table, hashes passwords with bcrypt and issues JWT access
tokens.
"""
import logging
from collections import namedtuple

from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import BadRequest, Unauthorized

from donorapp.errors import StorageError
from donorapp.extensions import bcrypt, db
from donorapp.models.user_model import UserAccount

logger = logging.getLogger(__name__)

Principal = namedtuple('Principal', ['user_id', 'email'])

INVALID_TOKEN = 'Unauthorized - Invalid token'
DUPLICATE_EMAIL = 'A user with this email address has already been registered'
INVALID_CREDENTIALS = 'Invalid login credentials'


class IdentityProvider:
    """Interface: verify bearer tokens and manage user accounts."""

    def verify(self, token):
        """Return the Principal for ``token`` or raise Unauthorized."""
        raise NotImplementedError

    def create_user(self, email, password, name):
        raise NotImplementedError

    def authenticate(self, email, password):
        """Return ``(access_token, user)`` or raise BadRequest."""
        raise NotImplementedError


class LocalIdentityProvider(IdentityProvider):

    def verify(self, token):
        if not token:
            raise Unauthorized(INVALID_TOKEN)
        try:
            claims = decode_token(token)
        except (PyJWTError, JWTExtendedException) as e:
            logger.warning("Rejected access token: %s", e)
            raise Unauthorized(INVALID_TOKEN) from e

        if claims.get('type') != 'access':
            raise Unauthorized(INVALID_TOKEN)

        try:
            user = db.session.get(UserAccount, claims.get('sub'))
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError('Failed to load user') from e
        if user is None:
            logger.warning("Access token for unknown user %s", claims.get('sub'))
            raise Unauthorized(INVALID_TOKEN)

        return Principal(user_id=user.id, email=user.email)

    def create_user(self, email, password, name):
        email = email.strip().lower()
        if UserAccount.query.filter_by(email=email).first():
            raise BadRequest(DUPLICATE_EMAIL)

        user = UserAccount(
            email=email,
            name=name,
            password_hash=bcrypt.generate_password_hash(password).decode('utf-8')
        )
        try:
            db.session.add(user)
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise BadRequest(DUPLICATE_EMAIL) from e
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError('Failed to create user') from e

        logger.info("Created user %s", user.id)
        return user

    def authenticate(self, email, password):
        user = UserAccount.query.filter_by(email=email.strip().lower()).first()
        if user is None or not bcrypt.check_password_hash(user.password_hash, password):
            raise BadRequest(INVALID_CREDENTIALS)

        access_token = create_access_token(identity=user.id, additional_claims={'email': user.email})
        return access_token, user
