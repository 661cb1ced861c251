from flask import Flask, jsonify
from config import Config
from flask_login import LoginManager
from flask_wtf import CSRFProtect
from .errors import LevelConfigError
from .models import db, Admin
import logging
import os

login_manager = LoginManager()
csrf = CSRFProtect()

def create_app(overrides=None):
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    app.logger.setLevel(getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO))

    # ensure instance and upload folders exist
    os.makedirs(app.instance_path, exist_ok=True)
    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)

    # initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    csrf.init_app(app)

    from .auth.routes import auth_bp
    from .api.routes import levels_bp
    from .main.routes import main_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(levels_bp)
    app.register_blueprint(main_bp)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(Admin, user_id)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"message": "Unauthorized"}), 401

    @app.errorhandler(LevelConfigError)
    def handle_level_error(error):
        return jsonify({"message": error.message}), error.status_code

    with app.app_context():
        from .seeding import seed_data
        seed_data(include_levels=app.config["SEED_DEFAULT_LEVELS"])

    return app
