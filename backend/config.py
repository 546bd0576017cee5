import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Reconnect window after a disconnect or an emptied room (seconds)
    GRACE_PERIOD_SEC = int(os.environ.get('GRACE_PERIOD_SEC', '15'))
    # Pause before the scripted opponent answers a human move (seconds)
    SCRIPTED_MOVE_DELAY_SEC = float(os.environ.get('SCRIPTED_MOVE_DELAY_SEC', '0.5'))
    # Single-player policy when the client does not pick one: easy | normal
    DEFAULT_DIFFICULTY = os.environ.get('DEFAULT_DIFFICULTY', 'normal')
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:5173,http://127.0.0.1:5173,http://localhost:5174,http://127.0.0.1:5174',
        ).split(',')
        if origin.strip()
    ]
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Only read by run.py
    SERVER_HOST = os.environ.get('SERVER_HOST', '127.0.0.1')
    SERVER_PORT = int(os.environ.get('SERVER_PORT', '5000'))
