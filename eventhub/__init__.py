"""Initialize the Flask app and its extensions."""

import json
import os

import firebase_admin
from firebase_admin import auth, credentials, firestore
from flask import Flask
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from .constants import (
    CORS_ALLOWED_HEADERS,
    STORE_BACKOFF_FACTOR,
    STORE_CONNECT_DELAY,
    STORE_CONNECT_RETRIES,
    STORE_PING_TIMEOUT,
)


def _load_credentials(app):
    """Find Firebase credentials: env JSON, then a local file, then ADC."""
    cred = None
    project_id = os.environ.get("FIREBASE_PROJECT_ID")

    # First, try to load from environment variable (for production)
    cred_json = app.config.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            project_id = cred_info.get("project_id") or project_id
            cred = credentials.Certificate(cred_info)
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    # If env var fails or is not present, try loading from file (for local dev)
    if not cred:
        cred_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
        )
        if os.path.exists(cred_path):
            try:
                with open(cred_path, "r") as f:
                    cred_info = json.load(f)
                project_id = cred_info.get("project_id") or project_id
                cred = credentials.Certificate(cred_path)
            except (json.JSONDecodeError, ValueError) as e:
                app.logger.error(f"Error loading credentials from file: {e}")

    # If both methods fail, fallback to default credentials
    if not cred:
        try:
            cred = credentials.ApplicationDefault()
        except Exception as e:
            app.logger.error(
                f"Could not find any valid credentials (env, file, or default): {e}"
            )
    return cred, project_id


def init_firebase(app):
    """Initialize the Firebase Admin SDK; return True when it is usable."""
    if firebase_admin._apps:
        app.logger.info("Firebase Admin already initialized")
        return True

    cred, project_id = _load_credentials(app)
    if not cred:
        app.logger.warning(
            "Firebase Admin not initialized. "
            "Authentication will use fallback method (headers-based)"
        )
        return False

    options = {"projectId": project_id} if project_id else None
    try:
        firebase_admin.initialize_app(cred, options)
    except ValueError as e:
        app.logger.warning(f"Firebase Admin initialization warning: {e}")
        return bool(firebase_admin._apps)
    app.logger.info("Firebase Admin initialized")
    return True


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        FIREBASE_CREDENTIALS_JSON=os.environ.get("FIREBASE_CREDENTIALS_JSON"),
        STORE_CONNECT_RETRIES=int(
            os.environ.get("STORE_CONNECT_RETRIES") or STORE_CONNECT_RETRIES
        ),
        STORE_CONNECT_DELAY=float(
            os.environ.get("STORE_CONNECT_DELAY") or STORE_CONNECT_DELAY
        ),
        STORE_BACKOFF_FACTOR=float(
            os.environ.get("STORE_BACKOFF_FACTOR") or STORE_BACKOFF_FACTOR
        ),
        STORE_PING_TIMEOUT=float(
            os.environ.get("STORE_PING_TIMEOUT") or STORE_PING_TIMEOUT
        ),
        STORE_CLIENT_FACTORY=firestore.client,
        TOKEN_VERIFIER=None,
    )

    if test_config:
        app.config.update(test_config)

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING") and init_firebase(app):
        app.config["TOKEN_VERIFIER"] = app.config["TOKEN_VERIFIER"] or (
            lambda token: auth.verify_id_token(token)
        )

    from .auth.identity import IdentityResolver

    app.extensions["identity_resolver"] = IdentityResolver(
        app.config["TOKEN_VERIFIER"]
    )

    from .core import store

    store.init_app(app)

    # Register blueprints
    from . import main as main_bp

    app.register_blueprint(main_bp.bp)

    from . import group as group_bp

    app.register_blueprint(group_bp.bp)

    from . import article as article_bp

    app.register_blueprint(article_bp.bp)

    from . import user as user_bp

    app.register_blueprint(user_bp.bp)

    from . import stats as stats_bp

    app.register_blueprint(stats_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    # Reflects the caller's origin so browser clients may send credentials
    CORS(
        app,
        supports_credentials=True,
        allow_headers=list(CORS_ALLOWED_HEADERS),
        expose_headers=["Authorization"],
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    )
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app
