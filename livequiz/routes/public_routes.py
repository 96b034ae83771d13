import datetime

from flask import Blueprint

from livequiz.routes.utils import success

public_bp = Blueprint("public", __name__)


@public_bp.route("/health")
def health():
    return success(
        {"timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat()},
        message="API is running",
    )
