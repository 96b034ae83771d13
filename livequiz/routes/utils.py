from functools import wraps

from flask import g, jsonify, request

from livequiz.services.auth_service import parse_bearer, user_from_token


def load_current_user():
    token = parse_bearer(request.headers.get("Authorization"))
    g.current_user = user_from_token(token)
    return g.current_user


def token_required(f):
    @wraps(f)
    def wrapped(*args, **kwargs):
        load_current_user()
        return f(*args, **kwargs)
    return wrapped


def json_body():
    return request.get_json(silent=True) or {}


def success(data=None, message=None, status=200):
    body = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return jsonify(body), status
