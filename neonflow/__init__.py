import logging
import colorlog
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import config
from neonflow.extensions import db, migrate, login_manager, cache, csrf
from neonflow.exceptions import NeonFlowException

from neonflow import commands


def create_app(config_name='default'):
    """NeonFlow application factory"""
    app = Flask(__name__)

    # 1. Configuration
    app.config.from_object(config[config_name])
    config[config_name].init_app(app)

    # 2. Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    cache.init_app(app)
    csrf.init_app(app)

    # 3. Logging
    configure_logging(app)

    # 4. Blueprints
    register_blueprints(app)

    # 5. Error handlers
    register_error_handlers(app)

    # 6. CLI commands
    register_commands(app)

    return app


def register_blueprints(app):
    """Every module is a JSON API blueprint under /api"""
    from neonflow.blueprints.auth import auth_bp
    app.register_blueprint(auth_bp, url_prefix='/api/auth')

    from neonflow.blueprints.inventory import inventory_bp
    app.register_blueprint(inventory_bp, url_prefix='/api/inventory')

    from neonflow.blueprints.transactions import transactions_bp
    app.register_blueprint(transactions_bp, url_prefix='/api/transactions')

    from neonflow.blueprints.reject import reject_bp
    app.register_blueprint(reject_bp, url_prefix='/api/reject')

    from neonflow.blueprints.users import users_bp
    app.register_blueprint(users_bp, url_prefix='/api/users')

    from neonflow.blueprints.insights import insights_bp
    app.register_blueprint(insights_bp, url_prefix='/api/insights')

    from neonflow.blueprints.media import media_bp
    app.register_blueprint(media_bp, url_prefix='/api/playlist')

    from neonflow.blueprints.system import system_bp
    app.register_blueprint(system_bp, url_prefix='/api')

    # The API authenticates by session and only accepts JSON
    for bp in (auth_bp, inventory_bp, transactions_bp, reject_bp, users_bp, insights_bp, media_bp, system_bp):
        csrf.exempt(bp)


def register_error_handlers(app):
    @app.errorhandler(NeonFlowException)
    def handle_service_error(e):
        if e.code >= 500:
            app.logger.error(f"{type(e).__name__}: {e.message}")
        else:
            app.logger.info(f"Rejected request ({type(e).__name__}): {e.message}")
        return jsonify(e.to_dict()), e.code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({'success': False, 'code': e.code, 'message': e.description}), e.code

    @app.errorhandler(500)
    def internal_server_error(e):
        return jsonify({'success': False, 'code': 500, 'message': 'Internal server error'}), 500


def register_commands(app):
    """Flask CLI commands"""
    app.cli.add_command(commands.init_db)
    app.cli.add_command(commands.forge)
    app.cli.add_command(commands.status)


def configure_logging(app):
    """Colored console logging in debug mode"""
    if app.debug:
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)

        formatter = colorlog.ColoredFormatter(
            "%(log_color)s[%(asctime)s] %(levelname)-8s%(reset)s %(blue)s%(message)s",
            datefmt="%H:%M:%S",
            reset=True,
            log_colors={
                'DEBUG':    'cyan',
                'INFO':     'green',
                'WARNING':  'yellow',
                'ERROR':    'red',
                'CRITICAL': 'red,bg_white',
            },
            secondary_log_colors={},
            style='%'
        )
        handler.setFormatter(formatter)
        app.logger.addHandler(handler)
        app.logger.setLevel(logging.INFO)
