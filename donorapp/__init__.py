import logging
from flask import Flask
from donorapp.config import Config
from donorapp.extensions import db, bcrypt, jwt, cors
from donorapp.logging_config import configure_logging
from donorapp.services.donation_service import utc_now
from donorapp.services.identity import LocalIdentityProvider
from donorapp.stores.kv_store import create_store

# Import controllers (blueprints) for each module
from donorapp.controllers.donation_controller import donation_bp
from donorapp.controllers.auth_controller import auth_bp
from donorapp.controllers.health_controller import health_bp

logger = logging.getLogger(__name__)


def create_app(config_class=Config, store=None, identity_provider=None, clock=None, **overrides):
    """Flask application factory.

    ``store``, ``identity_provider`` and ``clock`` replace the collaborators
    built from configuration; remaining keyword arguments override config keys.
    """
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.config.update(overrides)

    configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    bcrypt.init_app(app)
    jwt.init_app(app)
    cors.init_app(
        app,
        origins='*',
        send_wildcard=True,
        allow_headers=['Content-Type', 'Authorization'],
        methods=['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'],
        expose_headers=['Content-Length'],
        max_age=600
    )

    with app.app_context():
        db.create_all()

    app.extensions['kv_store'] = store if store is not None else create_store(app.config['STORE_BACKEND'])
    app.extensions['identity_provider'] = identity_provider or LocalIdentityProvider()
    app.extensions['clock'] = clock or utc_now

    # Register Blueprints under the service prefix
    prefix = app.config['API_PREFIX']
    app.register_blueprint(donation_bp, url_prefix=prefix)
    app.register_blueprint(auth_bp, url_prefix=prefix)
    app.register_blueprint(health_bp, url_prefix=prefix)

    @app.after_request
    def log_request(response):
        logger.info("completed %s", response.status_code)
        return response

    return app
