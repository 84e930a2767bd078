import json

import click
from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from werkzeug.exceptions import HTTPException, MethodNotAllowed

from config import Config

db = SQLAlchemy()


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(flask_app)
    CORS(flask_app, origins=flask_app.config.get('CORS_ORIGINS', '*'))

    # Components get their configuration here so tests can swap them out
    # through flask_app.extensions.
    from quizapi.services.leaderboard import LeaderboardService, LeaderboardStore
    from quizapi.services.relay import PromptRelay

    flask_app.extensions['leaderboard'] = LeaderboardService(
        LeaderboardStore(db.session),
        logger=flask_app.logger,
        default_limit=int(flask_app.config.get('LEADERBOARD_DEFAULT_LIMIT', 10)),
        max_limit=int(flask_app.config.get('LEADERBOARD_MAX_LIMIT', 50)),
    )
    flask_app.extensions['prompt_relay'] = PromptRelay(
        api_key=flask_app.config.get('GEMINI_API_KEY'),
        api_base=flask_app.config['GEMINI_API_BASE'],
        model=flask_app.config['GEMINI_MODEL'],
        logger=flask_app.logger,
    )

    from quizapi.main import main
    flask_app.register_blueprint(main)

    from quizapi.api.leaderboard import leaderboard
    flask_app.register_blueprint(leaderboard)

    from quizapi.api.generate import generate
    flask_app.register_blueprint(generate)

    _register_error_handlers(flask_app)

    @click.command('init-db')
    @click.option('--drop', is_flag=True, help='Drop existing tables first.')
    def init_db_command(drop):
        """Creates the leaderboard tables."""
        import quizapi.models  # noqa: F401
        with flask_app.app_context():
            if drop:
                db.drop_all()
            db.create_all()
        click.echo('Leaderboard tables are ready.')

    flask_app.cli.add_command(init_db_command)

    return flask_app


def _register_error_handlers(flask_app):
    from quizapi.errors import ApiError

    @flask_app.errorhandler(ApiError)
    def handle_api_error(err):
        return jsonify(err.to_dict()), err.status_code

    @flask_app.errorhandler(HTTPException)
    def handle_http_exception(err):
        # Keep werkzeug's headers (Allow on 405) but answer in JSON
        response = err.get_response()
        response.data = json.dumps({'error': err.description})
        response.content_type = 'application/json'
        return response

    @flask_app.errorhandler(MethodNotAllowed)
    def handle_method_not_allowed(err):
        # HEAD and OPTIONS are answered implicitly; Allow lists the declared methods
        allowed = sorted(m for m in (err.valid_methods or []) if m not in ('HEAD', 'OPTIONS'))
        response = jsonify({'error': f'Method {request.method} not allowed'})
        response.headers['Allow'] = ', '.join(allowed)
        return response, 405

    @flask_app.errorhandler(Exception)
    def handle_unexpected(err):
        flask_app.logger.exception(f"[unhandled] {err.__class__.__name__}: {err}")
        return jsonify({'error': 'Unexpected server error'}), 500
