import logging

from flask import Flask, jsonify
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from tripsplit.config import Config
from tripsplit.errors import ComputationError, TripSplitError
from tripsplit.extensions import init_store

bcrypt = Bcrypt()
jwt = JWTManager()

logger = logging.getLogger(__name__)

def create_app(config_class=Config, store=None):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )

    # Disable strict slashes to prevent 308 redirects that break CORS preflight
    app.url_map.strict_slashes = False

    # Allow the web client to talk to Flask
    CORS(
        app,
        supports_credentials=True,
        resources={r"/*": {"origins": app.config["CORS_ORIGINS"]}}
    )

    # Init extensions
    init_store(app, store)
    bcrypt.init_app(app)
    jwt.init_app(app)

    register_error_handlers(app)

    # Register blueprints
    from tripsplit.auth.routes import auth_bp
    from tripsplit.users.routes import users_bp
    from tripsplit.trips.routes import trips_bp
    from tripsplit.expenses.routes import expenses_bp
    from tripsplit.bookings.routes import bookings_bp

    app.register_blueprint(auth_bp, url_prefix='/api/v1/auth')
    app.register_blueprint(users_bp, url_prefix='/api/v1/users')
    app.register_blueprint(trips_bp, url_prefix='/api/v1/trips')
    app.register_blueprint(expenses_bp, url_prefix='/api/v1/expenses')
    app.register_blueprint(bookings_bp, url_prefix='/api/v1/bookings')

    return app

def register_error_handlers(app):

    @app.errorhandler(TripSplitError)
    def handle_tripsplit_error(error):
        if isinstance(error, ComputationError):
            logger.exception("Computation failed: %s", error.message)
        return jsonify(error.to_dict()), error.status
