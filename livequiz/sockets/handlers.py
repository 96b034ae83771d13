import logging
from functools import wraps

from flask import request
from flask_socketio import emit
from pydantic import ValidationError

from extensions import db
from livequiz.errors import AuthenticationError, AuthorizationError, QuizRoomError, describe_validation_error
from livequiz.services.room_registry import get_registry

logger = logging.getLogger(__name__)


def socket_action(error_message):
    """Report any failure of a socket handler back to the sender.

    The error is emitted as ``error_message.event`` and also returned, so
    clients that emitted with an ack callback get ``{"success": False, ...}``.
    """
    def decorator(f):
        @wraps(f)
        def wrapped(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except ValidationError as e:
                message = describe_validation_error(e)
            except QuizRoomError as e:
                message = e.message
            except Exception as e:
                logger.exception("Socket event %s failed", f.__name__)
                message = str(e) or "Internal server error"
            db.session.rollback()
            logger.info("Socket event %s rejected for %s: %s", f.__name__, request.sid, message)
            emit(error_message.event, error_message(message=message).payload())
            return {"success": False, "message": message}
        return wrapped
    return decorator


def acting_user_id(claimed_user_id=None, required=True):
    """Who is acting on this socket.

    An authenticated socket speaks for its own user only. Unauthenticated
    sockets are taken at their word.
    """
    bound = get_registry().identity(request.sid)
    if bound is not None:
        if claimed_user_id is not None and claimed_user_id != bound:
            raise AuthorizationError("userId does not match the authenticated user")
        return bound
    if claimed_user_id is None and required:
        raise AuthenticationError("Authentication required")
    return claimed_user_id
