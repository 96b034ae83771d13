import logging

from flask import Flask, jsonify, request
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from config import Config
from extensions import cors, db, socketio
from livequiz.errors import QuizRoomError, describe_validation_error
from livequiz.routes import register_routes
from livequiz.services.room_registry import RoomRegistry
from livequiz.sockets import register_sockets

logger = logging.getLogger(__name__)


def configure_logging(level):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger().setLevel(getattr(logging, str(level).upper(), logging.INFO))


def _error(message, status):
    return jsonify({"success": False, "message": message}), status


def register_error_handlers(app):

    @app.errorhandler(QuizRoomError)
    def handle_quiz_room_error(e):
        db.session.rollback()
        return _error(e.message, e.status_code)

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return _error(describe_validation_error(e), 400)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return _error(e.description, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        db.session.rollback()
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return _error("Internal server error", 500)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    db.init_app(app)
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": app.config["CLIENT_URL"]}},
        supports_credentials=True,
    )
    socketio.init_app(
        app,
        cors_allowed_origins=app.config["CLIENT_URL"],
        async_mode="threading",
    )

    # Per-app presence cache handed to socket handlers through current_app.
    app.extensions["room_registry"] = RoomRegistry()

    register_routes(app)
    register_sockets(socketio)
    register_error_handlers(app)

    @app.before_request
    def log_request():
        logger.info("%s %s", request.method, request.path)

    with app.app_context():
        from livequiz import models  # noqa: F401
        db.create_all()

    return app


if __name__ == "__main__":
    app = create_app()
    host, port = app.config["HOST"], app.config["PORT"]
    print(f"LIVE QUIZ READY ON {host}:{port}")
    socketio.run(app, host=host, port=port, debug=False, allow_unsafe_werkzeug=True)
