"""
Authentication dependencies for FastAPI routes.

Requests carry a bearer token in the Authorization header. The ``sub``
claim holds the user id.
"""

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from inventory_core.errors import AuthenticationError
from inventory_core.models import User
from inventory_core.repositories import UserRepository

from ..database import get_db
from .jwt import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token", auto_error=False)


def get_token_from_request(token_header: str | None = Depends(oauth2_scheme)) -> str:
    if not token_header:
        raise AuthenticationError("Not authenticated")
    return token_header


def get_current_user(
    token: str = Depends(get_token_from_request),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the authenticated user from a bearer token.

    Steps:
    1) Decode JWT and extract the subject (user id).
    2) Load the active, non-deleted user or raise 401.
    """
    try:
        payload = decode_access_token(token)
    except ValueError:
        raise AuthenticationError("Invalid authentication credentials") from None

    user_id = payload.get("sub")
    if not user_id or not str(user_id).isdigit():
        raise AuthenticationError("Invalid authentication credentials")

    user = UserRepository(db).get_active_by_id(int(user_id))
    if user is None:
        raise AuthenticationError("User not found")
    return user
