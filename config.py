"""Application configuration"""
import os
import secrets


class Config:
    """Base configuration"""
    SECRET_KEY = os.environ.get('SECRET_KEY', secrets.token_hex(16))
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///school_receipts.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Google OAuth configuration
    GOOGLE_CLIENT_ID = os.environ.get('GOOGLE_CLIENT_ID')
    GOOGLE_CLIENT_SECRET = os.environ.get('GOOGLE_CLIENT_SECRET')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    CURRENCY_CODE = os.environ.get('CURRENCY_CODE', 'KES')
    TRIAL_DAYS = int(os.environ.get('TRIAL_DAYS', 14))

    # Receipts
    RECEIPT_DEFAULT_SIZE = 'A5'
    RECEIPT_SIGNATURE_LABEL = 'Authorized Signature / School Stamp'
    # 'zero' or 'unknown': what a student's balance becomes when its lookup fails
    RECEIPT_BALANCE_FALLBACK = os.environ.get('RECEIPT_BALANCE_FALLBACK', 'zero')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False


class TestingConfig(Config):
    """Test configuration"""
    TESTING = True
    SECRET_KEY = 'testing'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    GOOGLE_CLIENT_ID = 'test-client'
    GOOGLE_CLIENT_SECRET = 'test-secret'


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
