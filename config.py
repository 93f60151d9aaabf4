import os
import secrets


def _redis_url():
    # Heroku Redis uses self-signed certificates in chain
    url = os.environ.get('REDIS_URL') or 'redis://localhost:6379/0'
    if url.startswith('rediss://'):
        url += '?ssl_cert_reqs=none'
    return url


class Config:
    """Base configuration"""
    # Generate a temporary key for development if not set
    _secret = os.environ.get('SECRET_KEY')
    if not _secret:
        _secret = secrets.token_hex(32)
        print("WARNING: Using auto-generated SECRET_KEY. Set SECRET_KEY environment variable for production.")
    SECRET_KEY = _secret

    # Database - Handle Heroku's postgres:// -> postgresql:// conversion
    database_url = os.environ.get('DATABASE_URL') or 'postgresql://localhost/recruitment'
    if database_url.startswith('postgres://'):
        database_url = database_url.replace('postgres://', 'postgresql://', 1)
    SQLALCHEMY_DATABASE_URI = database_url
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 10,
        'max_overflow': 20,
        'pool_pre_ping': True,     # Test connection health before using
        'pool_recycle': 300,       # Recycle connections after 5 minutes
        'pool_timeout': 30,
    }

    # Error Tracking
    SENTRY_DSN = os.environ.get('SENTRY_DSN')

    # Email Configuration (SendGrid)
    SENDGRID_API_KEY = os.environ.get('SENDGRID_API_KEY')
    SENDGRID_FROM_EMAIL = os.environ.get('SENDGRID_FROM_EMAIL', 'noreply@recruitment.local')
    SENDGRID_FROM_NAME = os.environ.get('SENDGRID_FROM_NAME', 'Recruitment Team')
    ORGANIZATION_NAME = os.environ.get('ORGANIZATION_NAME', 'Code Academy Lab')

    # Redis (RQ, rate limiter, SocketIO message queue)
    REDIS_URL = _redis_url()
    RATELIMIT_STORAGE_URI = REDIS_URL

    # SocketIO
    SOCKETIO_MESSAGE_QUEUE = REDIS_URL
    SOCKETIO_ASYNC_MODE = os.environ.get('SOCKETIO_ASYNC_MODE', 'threading')

    # Notification queue
    NOTIFICATION_QUEUE_NAME = 'notifications'
    NOTIFICATION_MAX_ATTEMPTS = int(os.environ.get('NOTIFICATION_MAX_ATTEMPTS', 3))
    NOTIFICATION_RETRY_DELAY_SECONDS = int(os.environ.get('NOTIFICATION_RETRY_DELAY_SECONDS', 60))
    NOTIFICATION_SEND_TIMEOUT = int(os.environ.get('NOTIFICATION_SEND_TIMEOUT', 30))
    NOTIFICATION_LEASE_SECONDS = 300
    NOTIFICATION_BATCH_SIZE = 10
    NOTIFICATION_DISPATCH_ENABLED = True

    # Application
    INTERVIEWS_PER_PAGE = 20
    QUEUE_JOBS_LISTED = 50


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    SQLALCHEMY_ECHO = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    SOCKETIO_ASYNC_MODE = os.environ.get('SOCKETIO_ASYNC_MODE', 'eventlet')

    # Add SSL mode for Postgres on Heroku if not already present
    if 'postgresql://' in Config.database_url and 'sslmode' not in Config.database_url:
        SQLALCHEMY_DATABASE_URI = Config.database_url + '?sslmode=require'


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    # Use DATABASE_URL from environment if set (for CI), otherwise an in-memory database
    test_db_url = os.environ.get('DATABASE_URL') or 'sqlite://'
    if test_db_url.startswith('postgres://'):
        test_db_url = test_db_url.replace('postgres://', 'postgresql://', 1)
    SQLALCHEMY_DATABASE_URI = test_db_url
    if test_db_url.startswith('sqlite'):
        SQLALCHEMY_ENGINE_OPTIONS = {}
    RATELIMIT_ENABLED = False  # Disable rate limiting in tests
    RATELIMIT_STORAGE_URI = 'memory://'
    SOCKETIO_ASYNC_MODE = 'threading'  # Use threading mode for tests
    SOCKETIO_MESSAGE_QUEUE = None  # Disable Redis message queue for tests
    NOTIFICATION_DISPATCH_ENABLED = False  # Tests drive the backlog sweep directly
    NOTIFICATION_RETRY_DELAY_SECONDS = 0


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
