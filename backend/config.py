import os


def _env_list(name, default):
    raw = os.environ.get(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(',') if item.strip()]


def _env_flag(name, default=False):
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    # Socket.IO namespace carrying the game protocol
    WS_NAMESPACE = os.environ.get('WS_NAMESPACE', '/ws')
    ALLOWED_ORIGINS = _env_list('ALLOWED_ORIGINS', [
        "http://localhost:8181",
        "http://127.0.0.1:8181",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ])
    # Directory holding the front-end bundle (index.html and assets)
    FRONT_DIR = os.environ.get('FRONT_DIR', 'front')
    # Accounts registered at startup, "name:password,name2:password2"
    SEED_PLAYERS = os.environ.get('SEED_PLAYERS', '')
    # Reject ships whose declared length differs from their type's length
    STRICT_SHIP_LENGTH = _env_flag('STRICT_SHIP_LENGTH', False)
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    DEBUG = _env_flag('FLASK_DEBUG', False)
    # Let run.py serve through the Werkzeug dev server outside debug mode
    ALLOW_UNSAFE_WERKZEUG = _env_flag('ALLOW_UNSAFE_WERKZEUG', False)
