import os


def _env_bool(name, default):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes')


class BaseConfig:
    """Base configuration shared across all environments."""

    # Flask core
    SECRET_KEY = os.environ.get('SECRET_KEY', 'fallback-secret-key-change-me')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JSON_SORT_KEYS = False

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'SQLALCHEMY_DATABASE_URI', 'sqlite:///dev.db'
    )

    # Bearer tokens
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or SECRET_KEY
    JWT_ALGORITHM = os.environ.get('JWT_ALGORITHM', 'HS256')
    JWT_EXPIRES_DAYS = int(os.environ.get('JWT_EXPIRES_DAYS', '7'))

    # Browser client
    CORS_ORIGIN = os.environ.get('CORS_ORIGIN', '*')
    CLIENT_URL = os.environ.get('CLIENT_URL', 'http://localhost:5173')

    # Google OAuth
    GOOGLE_CLIENT_ID = os.environ.get('GOOGLE_CLIENT_ID', '')
    GOOGLE_CLIENT_SECRET = os.environ.get('GOOGLE_CLIENT_SECRET', '')
    GOOGLE_DISCOVERY_URL = os.environ.get(
        'GOOGLE_DISCOVERY_URL',
        'https://accounts.google.com/.well-known/openid-configuration',
    )
    OAUTH_LINK_BY_EMAIL = _env_bool('OAUTH_LINK_BY_EMAIL', 'false')

    # AI provider settings
    AI_PROVIDER = os.environ.get('AI_PROVIDER', 'openai')
    AI_MODEL = os.environ.get('AI_MODEL', '')

    # AI API keys
    ANTHROPIC_API_KEY = os.environ.get('ANTHROPIC_API_KEY', '')
    OPENAI_API_KEY = os.environ.get('OPENAI_API_KEY', '')
    ZHIPU_API_KEY = os.environ.get('ZHIPU_API_KEY', '')

    # Rate-limit retry for LLM calls
    LLM_MAX_RETRIES = int(os.environ.get('LLM_MAX_RETRIES', '3'))
    LLM_RETRY_BASE_DELAY = float(os.environ.get('LLM_RETRY_BASE_DELAY', '1.0'))

    # Judge0 execution service
    JUDGE0_URL = os.environ.get(
        'JUDGE0_URL', 'https://judge0-ce.p.rapidapi.com'
    )
    JUDGE0_HOST = os.environ.get('JUDGE0_HOST', 'judge0-ce.p.rapidapi.com')
    RAPIDAPI_KEY = os.environ.get('RAPIDAPI_KEY', '')
    JUDGE0_POLL_INTERVAL = float(os.environ.get('JUDGE0_POLL_INTERVAL', '1.0'))
    JUDGE0_MAX_POLLS = int(os.environ.get('JUDGE0_MAX_POLLS', '30'))
    JUDGE0_HTTP_TIMEOUT = float(os.environ.get('JUDGE0_HTTP_TIMEOUT', '15'))

    # Chat titles are derived off the request thread
    CHAT_TITLE_ASYNC = _env_bool('CHAT_TITLE_ASYNC', 'true')

    # File logging (0 disables)
    LOG_FILE_MAX_BYTES = int(os.environ.get('LOG_FILE_MAX_BYTES', '0'))
    LOG_FILE_BACKUP_COUNT = int(os.environ.get('LOG_FILE_BACKUP_COUNT', '3'))


class DevelopmentConfig(BaseConfig):
    """Development environment configuration."""

    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'SQLALCHEMY_DATABASE_URI', 'sqlite:///dev.db'
    )


class ProductionConfig(BaseConfig):
    """Production environment configuration."""

    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'SQLALCHEMY_DATABASE_URI', 'sqlite:///prod.db'
    )
    LOG_FILE_MAX_BYTES = int(os.environ.get('LOG_FILE_MAX_BYTES', str(5 * 1024 * 1024)))


class TestingConfig(BaseConfig):
    """Testing environment configuration."""

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SECRET_KEY = 'test-secret-key'
    JWT_SECRET_KEY = 'test-jwt-secret'
    AI_PROVIDER = 'openai'
    OPENAI_API_KEY = 'test-openai-key'
    RAPIDAPI_KEY = 'test-rapidapi-key'
    JUDGE0_POLL_INTERVAL = 0
    JUDGE0_MAX_POLLS = 5
    LLM_RETRY_BASE_DELAY = 0
    CHAT_TITLE_ASYNC = False
    GOOGLE_CLIENT_ID = ''
    LOG_FILE_MAX_BYTES = 0


config_map = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
}
