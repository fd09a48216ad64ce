from flask import Flask, request, jsonify, send_from_directory, g
import os
import sys
import time
from dotenv import load_dotenv
from werkzeug.middleware.proxy_fix import ProxyFix

load_dotenv()

from config import config as config_map
from database import SpreadsheetManager
from api import auth_bp, companies_bp, events_bp, maintenance_bp


def create_app(env_name=None, overrides=None):
    app = Flask(__name__)
    env_name = (env_name or os.environ.get('APP_ENV', 'default')).lower()
    config_class = config_map.get(env_name, config_map['default'])
    app.config.from_object(config_class)
    if overrides:
        app.config.update(overrides)

    if env_name == 'production' and not app.config.get('SECRET_KEY'):
        raise RuntimeError('SECRET_KEY environment variable is required in production')

    config_class.init_app(app)

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    @app.before_request
    def start_request_timer():
        g.request_start_time = time.perf_counter()

    @app.after_request
    def log_request_time(response):
        start_time = getattr(g, 'request_start_time', None)
        if start_time is not None:
            duration_ms = (time.perf_counter() - start_time) * 1000
            app.logger.info(
                "Request %s %s took %.2fms, status %d",
                request.method,
                request.path,
                duration_ms,
                response.status_code,
            )
        return response

    # Read-only storage check at startup; a broken workbook must not stop the app
    try:
        with app.app_context():
            companies = SpreadsheetManager().get_all_companies()
        app.logger.info(
            "Spreadsheet storage ready at %s (%d companies)",
            app.config['SPREADSHEET_PATH'],
            len(companies),
        )
    except Exception as e:
        app.logger.error(f"Spreadsheet storage check failed: {e}")

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(companies_bp, url_prefix='/api/companies')
    app.register_blueprint(events_bp, url_prefix='/api/events')
    app.register_blueprint(maintenance_bp, url_prefix='/api')

    @app.route('/')
    def index():
        return jsonify({
            'name': app.config['SYSTEM_NAME'],
            'version': app.config['SYSTEM_VERSION'],
            'status': 'ok',
        })

    @app.route('/uploads/<path:filename>')
    def uploaded_file(filename):
        """Images stored locally when no GitHub repository is configured"""
        return send_from_directory(app.config['UPLOAD_FOLDER'], filename)

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(413)
    def request_too_large_error(error):
        return jsonify({'error': 'Request body is too large'}), 413

    @app.errorhandler(500)
    def internal_error(error):
        return jsonify({'error': 'Internal server error'}), 500

    return app


app = create_app()


if __name__ == '__main__':
    try:
        app.run(
            host=app.config.get('HOST', '0.0.0.0'),
            port=app.config.get('PORT', 5000),
            debug=app.config.get('DEBUG', True)
        )
    except KeyboardInterrupt:
        sys.exit(0)
