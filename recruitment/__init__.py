import os
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_talisman import Talisman
from flask_socketio import SocketIO
from config import config
import sentry_sdk
from sentry_sdk.integrations.flask import FlaskIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.integrations.rq import RqIntegration

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()

# Storage comes from RATELIMIT_STORAGE_URI so tests can run against memory://
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per day", "300 per hour"]
)
socketio = SocketIO()


def init_sentry(app):
    """Initialize Sentry error tracking and performance monitoring"""
    sentry_dsn = app.config.get('SENTRY_DSN')

    if sentry_dsn:
        sentry_sdk.init(
            dsn=sentry_dsn,
            integrations=[
                FlaskIntegration(),
                SqlalchemyIntegration(),
                RqIntegration(),
            ],
            # Performance monitoring - sample 10% of transactions
            traces_sample_rate=0.1,

            # Release tracking for better debugging
            release=os.environ.get('HEROKU_SLUG_COMMIT', 'unknown'),

            # Environment tracking
            environment=app.config.get('FLASK_ENV', 'development'),

            # Candidate emails must not leave the system
            send_default_pii=False,

            sample_rate=1.0,
        )
        print(f"✓ Sentry initialized for {app.config.get('FLASK_ENV', 'development')} environment")
    else:
        print("⚠ Sentry DSN not configured - error tracking disabled")


def create_app(config_name='default'):
    """Application factory pattern"""
    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # Initialize Sentry error tracking (do this early to catch initialization errors)
    init_sentry(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    allowed_origins = os.environ.get('SOCKETIO_CORS_ORIGINS', 'http://localhost:5000').split(',')

    socketio.init_app(
        app,
        message_queue=app.config['SOCKETIO_MESSAGE_QUEUE'],
        async_mode=app.config['SOCKETIO_ASYNC_MODE'],
        cors_allowed_origins=allowed_origins
    )

    from recruitment.services.socketio_manager import init_socketio_events
    init_socketio_events(socketio)

    # Security headers (Talisman) - only in production
    if config_name == 'production':
        Talisman(
            app,
            force_https=True,
            strict_transport_security=True,
            strict_transport_security_max_age=31536000,  # 1 year
            content_security_policy={'default-src': "'self'"},
            frame_options='DENY'
        )

    # Import all models for Flask-Migrate
    with app.app_context():
        from recruitment.models import (  # noqa: F401
            application, room, interview, notification_job,
            result_confirmation, email_template, audit_log
        )

    # Register blueprints
    from recruitment.blueprints.interviews import interviews_bp
    from recruitment.blueprints.results import results_bp

    app.register_blueprint(interviews_bp)
    app.register_blueprint(results_bp)

    register_error_handlers(app)
    register_cli(app)

    # Health check endpoint for monitoring and load balancers
    @app.route('/health')
    def health_check():
        """Health check endpoint - returns 200 if app is healthy"""
        from redis import Redis
        from sqlalchemy import text

        health_status = {
            'status': 'healthy',
            'version': os.environ.get('HEROKU_RELEASE_VERSION', 'unknown'),
            'environment': app.config.get('FLASK_ENV', 'development')
        }

        try:
            db.session.execute(text('SELECT 1'))
            health_status['database'] = 'connected'
        except Exception as e:
            health_status['status'] = 'unhealthy'
            health_status['database'] = f'error: {str(e)}'
            return jsonify(health_status), 500

        try:
            Redis.from_url(app.config['REDIS_URL']).ping()
            health_status['redis'] = 'connected'
        except Exception as e:
            health_status['status'] = 'unhealthy'
            health_status['redis'] = f'error: {str(e)}'
            return jsonify(health_status), 500

        return jsonify(health_status), 200

    return app


def register_error_handlers(app):
    """Render domain errors and HTTP errors as JSON"""
    from recruitment.errors import RecruitmentError

    @app.errorhandler(RecruitmentError)
    def recruitment_error(error):
        db.session.rollback()
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'error': 'not_found', 'message': 'Resource not found'}), 404

    @app.errorhandler(429)
    def ratelimit_error(error):
        return jsonify({'error': 'rate_limited', 'message': str(error.description)}), 429

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()  # Rollback any failed database transactions
        return jsonify({'error': 'internal_error', 'message': 'Internal server error'}), 500


def register_cli(app):
    """Register maintenance commands on the flask CLI"""

    @app.cli.command('init-email-templates')
    def init_email_templates():
        """Seed default result-notification email templates"""
        from recruitment.services.email_template_service import email_template_service
        created = email_template_service.initialize_default_templates()
        print(f"Initialized {created} email template(s)")
