from .auth_routes import auth_bp
from .public_routes import public_bp
from .quiz_routes import quiz_bp
from .room_routes import room_bp

def register_routes(app):
    app.register_blueprint(public_bp, url_prefix="/api")
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(quiz_bp, url_prefix="/api/quizzes")
    app.register_blueprint(room_bp, url_prefix="/api/rooms")
