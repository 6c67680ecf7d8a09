import os
from dotenv import load_dotenv

# Load .env variables
load_dotenv()
basedir = os.path.abspath(os.path.dirname(__file__))


class Config:
    """Base configuration"""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'neonflow-dev-secret'

    # Database
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_RECORD_QUERIES = True

    # Stock rules
    LOW_STOCK_THRESHOLD = int(os.environ.get('LOW_STOCK_THRESHOLD', 20))
    # Optimistic lock retries for a single movement
    MOVEMENT_MAX_RETRIES = int(os.environ.get('MOVEMENT_MAX_RETRIES', 3))

    # AI insights (any OpenAI compatible chat completions endpoint)
    AI_API_KEY = os.environ.get('AI_API_KEY', 'sk-placeholder')
    AI_BASE_URL = os.environ.get('AI_BASE_URL', 'https://api.deepseek.com')
    AI_MODEL = os.environ.get('AI_MODEL', 'deepseek-chat')
    # Without an external key, fall back to the local rule based analysis
    AI_FALLBACK = os.environ.get('AI_FALLBACK', 'true').lower() in ('1', 'true', 'yes')
    AI_ANALYSIS_TIMEOUT = float(os.environ.get('AI_ANALYSIS_TIMEOUT', 15))
    AI_RESTOCK_TIMEOUT = float(os.environ.get('AI_RESTOCK_TIMEOUT', 10))

    # Seeded super admin
    ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL', 'admin')
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD', '22')

    # Uploads (bulk import files)
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024

    # Cache (SimpleCache by default, switch to Redis in production)
    CACHE_TYPE = os.environ.get('CACHE_TYPE', 'SimpleCache')
    CACHE_DEFAULT_TIMEOUT = 300

    @staticmethod
    def init_app(app):
        # Make sure the sqlite instance folder exists
        instance_dir = os.path.join(basedir, 'instance')
        if not os.path.exists(instance_dir):
            os.makedirs(instance_dir)


class DevelopmentConfig(Config):
    """Development"""
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'neonflow.db')


class ProductionConfig(Config):
    """Production"""
    DEBUG = False

    DATABASE_URL = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'neonflow_prod.db')
    # Hosted PostgreSQL providers still hand out postgres:// URLs
    if DATABASE_URL and DATABASE_URL.startswith('postgres://'):
        DATABASE_URL = DATABASE_URL.replace('postgres://', 'postgresql://', 1)

    SQLALCHEMY_DATABASE_URI = DATABASE_URL

    SESSION_COOKIE_SECURE = False  # TLS is terminated by the proxy
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    @classmethod
    def init_app(cls, app):
        Config.init_app(app)


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    WTF_CSRF_ENABLED = False
    CACHE_TYPE = 'NullCache'
    AI_API_KEY = ''
    AI_FALLBACK = True

    @staticmethod
    def init_app(app):
        pass


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
