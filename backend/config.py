import os

basedir = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(basedir, 'lobbyhub.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Access token lifetime (seconds), default one week
    TOKEN_MAX_AGE_SEC = int(os.environ.get('TOKEN_MAX_AGE_SEC', str(7 * 24 * 3600)))
    MIN_PASSWORD_LENGTH = int(os.environ.get('MIN_PASSWORD_LENGTH', '8'))
    # Default page size for leaderboard and session history
    DEFAULT_LIST_LIMIT = int(os.environ.get('DEFAULT_LIST_LIMIT', '10'))
    BCRYPT_LOG_ROUNDS = int(os.environ.get('BCRYPT_LOG_ROUNDS', '12'))
    # bcrypt only reads the first 72 bytes; pre-hash longer passwords
    BCRYPT_HANDLE_LONG_PASSWORDS = True
    CORS_ORIGINS = [o.strip() for o in os.environ.get(
        'CORS_ORIGINS',
        'http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000',
    ).split(',') if o.strip()]
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
