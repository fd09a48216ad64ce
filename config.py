#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Event registration service - configuration
"""

import os
from datetime import timedelta
from dotenv import load_dotenv

# Load variables from .env
load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


class Config:
    """Application configuration"""

    # Flask
    SECRET_KEY = os.environ.get('SECRET_KEY')

    # Spreadsheet storage
    SPREADSHEET_PATH = os.environ.get('SPREADSHEET_PATH') or os.path.join(BASE_DIR, 'data', 'events.xlsx')
    COMPANIES_SHEET = os.environ.get('COMPANIES_SHEET') or 'companies'
    SLOW_OPERATION_THRESHOLD_MS = int(os.environ.get('SLOW_OPERATION_THRESHOLD_MS') or 200)

    # Admin account
    ADMIN_USERNAME = os.environ.get('ADMIN_USERNAME') or 'admin'
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD') or ''

    # Server
    HOST = os.environ.get('HOST') or '0.0.0.0'
    PORT = int(os.environ.get('PORT') or 5000)
    DEBUG = os.environ.get('DEBUG', 'False').lower() == 'true'

    # Session
    PERMANENT_SESSION_LIFETIME = timedelta(hours=24)
    SESSION_COOKIE_SECURE = False  # True in production
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    # Registration form
    REGISTRATION_MIN_AGE = int(os.environ.get('REGISTRATION_MIN_AGE') or 15)
    REGISTRATION_MAX_AGE = int(os.environ.get('REGISTRATION_MAX_AGE') or 100)

    # Image hosting (GitHub contents API); local folder when unset
    GITHUB_TOKEN = os.environ.get('GITHUB_TOKEN')
    GITHUB_REPO = os.environ.get('GITHUB_REPO')
    GITHUB_BRANCH = os.environ.get('GITHUB_BRANCH') or 'main'
    GITHUB_API_URL = os.environ.get('GITHUB_API_URL') or 'https://api.github.com'
    IMAGE_UPLOAD_TIMEOUT = int(os.environ.get('IMAGE_UPLOAD_TIMEOUT') or 15)

    # Uploads
    UPLOAD_FOLDER = os.path.join(BASE_DIR, 'uploads')
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB
    ALLOWED_IMAGE_FORMATS = {'JPEG', 'PNG', 'GIF', 'WEBP'}

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'
    LOG_FILE = os.environ.get('LOG_FILE') or 'event_registration.log'

    SYSTEM_NAME = 'Event Registration'
    SYSTEM_VERSION = '1.0.0'

    @classmethod
    def init_app(cls, app):
        """Prepare folders and logging for the app"""
        os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)
        os.makedirs(os.path.dirname(os.path.abspath(app.config['SPREADSHEET_PATH'])), exist_ok=True)

        import logging
        handlers = [logging.StreamHandler()]
        log_file = app.config.get('LOG_FILE')
        if log_file:
            handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
        logging.basicConfig(
            level=getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=handlers
        )


class DevelopmentConfig(Config):
    """Development settings"""
    DEBUG = True
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'event-registration-dev-secret-key'
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD') or 'admin123'


class ProductionConfig(Config):
    """Production settings"""
    DEBUG = False
    SESSION_COOKIE_SECURE = True
    SECRET_KEY = os.environ.get('SECRET_KEY')


class TestingConfig(Config):
    """Test settings"""
    TESTING = True
    SECRET_KEY = 'event-registration-test-secret-key'
    ADMIN_USERNAME = 'admin'
    ADMIN_PASSWORD = 'admin-password'
    GITHUB_TOKEN = None
    GITHUB_REPO = None
    LOG_FILE = None
    SLOW_OPERATION_THRESHOLD_MS = 10000


# Environment name -> config class
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
