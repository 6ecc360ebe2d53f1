"""BuzzBolt: Flask application entry point."""
import logging
import logging.handlers
import os
import traceback

from flask import Flask, jsonify, request as flask_request
from werkzeug.exceptions import HTTPException

from config.settings import SECRET_KEY, PORT
from db.database import init_db
from routes.home import home_bp
from routes.game import game_bp
from routes.baseline import baseline_bp
from routes.dashboard import dashboard_bp
from services import question_bank

# --- File logging with daily rotation, 3-day retention ---
LOG_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'buzzbolt_debug.log')

file_handler = logging.handlers.TimedRotatingFileHandler(
    LOG_FILE, when='midnight', backupCount=3, encoding='utf-8',
)
file_handler.setLevel(logging.DEBUG)
file_handler.setFormatter(logging.Formatter(
    '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
))

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    handlers=[logging.StreamHandler(), file_handler],
)

CONTENT_SECURITY_POLICY = (
    "default-src 'self'; "
    "style-src 'self' 'unsafe-inline'; "
    "img-src 'self' data:"
)


def create_app():
    app = Flask(__name__)
    app.secret_key = SECRET_KEY

    app.register_blueprint(home_bp)
    app.register_blueprint(game_bp, url_prefix='/game')
    app.register_blueprint(baseline_bp, url_prefix='/baseline')
    app.register_blueprint(dashboard_bp, url_prefix='/dashboard')

    # --- Request/response logging ---
    req_logger = logging.getLogger('buzzbolt.requests')

    @app.before_request
    def log_request():
        body = flask_request.get_json(silent=True) if flask_request.is_json else None
        req_logger.info('>>> %s %s  json=%s', flask_request.method,
                        flask_request.full_path.rstrip('?'), body)

    @app.after_request
    def log_response(response):
        req_logger.info('<<< %s %s  status=%d',
                        flask_request.method,
                        flask_request.full_path.rstrip('?'),
                        response.status_code)
        return response

    @app.after_request
    def set_security_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['Content-Security-Policy'] = CONTENT_SECURITY_POLICY
        return response

    @app.errorhandler(Exception)
    def log_error(error):
        if isinstance(error, HTTPException):
            return jsonify({'error': error.name}), error.code
        req_logger.error('!!! %s %s  EXCEPTION:\n%s',
                         flask_request.method,
                         flask_request.full_path.rstrip('?'),
                         traceback.format_exc())
        return "Internal Server Error", 500

    with app.app_context():
        init_db()
        question_bank.seed()

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True, host='0.0.0.0', port=PORT, threaded=True)
