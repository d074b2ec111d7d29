import os
from pathlib import Path

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent

class Config:
    """Base configuration class"""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'your-secret-key-here'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Default utilization window around the current week
    UTILIZATION_WEEKS_BACK = int(os.environ.get('UTILIZATION_WEEKS_BACK', 4))
    UTILIZATION_WEEKS_AHEAD = int(os.environ.get('UTILIZATION_WEEKS_AHEAD', 8))

    # Sentinel project receiving approved PTO hours
    PTO_PROJECT_TIMECODE = os.environ.get('PTO_PROJECT_TIMECODE', 'INT-PTO-001')
    PTO_HOURS_PER_DAY = float(os.environ.get('PTO_HOURS_PER_DAY', 8))

    @staticmethod
    def init_app(app):
        pass

class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        f'sqlite:///{BASE_DIR / "utilization.db"}'

class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        f'sqlite:///{BASE_DIR / "utilization.db"}'

class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    LOG_LEVEL = 'WARNING'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'

# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
