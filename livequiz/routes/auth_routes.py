from flask import Blueprint, g

from livequiz.routes.utils import json_body, success, token_required
from livequiz.schemas.auth import LoginRequest, RegisterRequest, UpdateProfileRequest
from livequiz.services import auth_service
from livequiz.services.serializers import serialize_user

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
def register():
    data = RegisterRequest.model_validate(json_body())
    user = auth_service.register_user(data)
    token = auth_service.create_access_token(user)
    return success(
        {"user": serialize_user(user, private=True), "token": token},
        message="User registered successfully",
        status=201,
    )


@auth_bp.route("/login", methods=["POST"])
def login():
    data = LoginRequest.model_validate(json_body())
    user = auth_service.authenticate_user(data.email, data.password)
    token = auth_service.create_access_token(user)
    return success(
        {"user": serialize_user(user, private=True), "token": token},
        message="Login successful",
    )


@auth_bp.route("/profile", methods=["GET"])
@token_required
def get_profile():
    return success(serialize_user(g.current_user, private=True), message="Profile retrieved successfully")


@auth_bp.route("/profile", methods=["PUT"])
@token_required
def update_profile():
    data = UpdateProfileRequest.model_validate(json_body())
    user = auth_service.update_profile(g.current_user, data)
    return success(serialize_user(user, private=True), message="Profile updated successfully")


@auth_bp.route("/users/<int:user_id>", methods=["GET"])
@token_required
def get_user(user_id):
    user = auth_service.get_user(user_id)
    return success(serialize_user(user))
