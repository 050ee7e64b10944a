import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Shared admin credential; hashed once at startup
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD') or 'admin123'
    ADMIN_PASSWORD_HASH_METHOD = os.environ.get('ADMIN_PASSWORD_HASH_METHOD') or None
    # Auto-advance timers (seconds)
    ROLL_DURATION_SEC = int(os.environ.get('ROLL_DURATION_SEC', '3'))
    QUESTION_DURATION_SEC = int(os.environ.get('QUESTION_DURATION_SEC', '60'))
    RESULTS_DURATION_SEC = int(os.environ.get('RESULTS_DURATION_SEC', '5'))
    # Deferred roster removal after a disconnect
    DISCONNECT_GRACE_SEC = int(os.environ.get('DISCONNECT_GRACE_SEC', '30'))
    # Flat points per accepted answer
    SCORE_INCREMENT = int(os.environ.get('SCORE_INCREMENT', '10'))
    # Cosmetic dice range shown while rolling (1..N)
    DICE_FACES = int(os.environ.get('DICE_FACES', '6'))
    # Venues: None selects the built-in templates
    VENUES = None
    VENUE_CAPACITY = int(os.environ.get('VENUE_CAPACITY', '25'))
    DEFAULT_VENUE_ID = os.environ.get('DEFAULT_VENUE_ID') or None
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', '*').split(',') if o.strip()]
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
