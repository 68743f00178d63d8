from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from backend.app.auth.jwt import create_access_token
from backend.app.main import create_app
from inventory_core.models import Permission, Role, User


def _bearer(user_id: int) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user_id)})}"}


@pytest.fixture
def test_app_client(test_db) -> Iterator[tuple[TestClient, sessionmaker]]:
    _, TestingSessionLocal, _ = test_db

    app = create_app()

    with TestClient(app) as client:
        yield client, TestingSessionLocal


@pytest.fixture
def authorized_client(
    test_app_client,
) -> Iterator[tuple[TestClient, dict[str, str], sessionmaker]]:
    """Client plus bearer headers of a system administrator."""
    client, TestingSessionLocal = test_app_client
    session = TestingSessionLocal()
    user = User(username="admin", email="admin@example.com", is_system_admin=True)
    session.add(user)
    session.commit()
    session.refresh(user)
    session.close()

    yield client, _bearer(user.id), TestingSessionLocal


@pytest.fixture
def user_headers(test_app_client) -> Callable[..., dict[str, str]]:
    """
    Build bearer headers for a regular user holding the given module codes.

    Usage:
        headers = user_headers("inventory_countries")
    """
    _, TestingSessionLocal = test_app_client
    created = {"count": 0}

    def make(*permission_codes: str, active: bool = True) -> dict[str, str]:
        created["count"] += 1
        n = created["count"]
        session = TestingSessionLocal()
        permissions = []
        for code in permission_codes:
            permission = session.query(Permission).filter(Permission.code == code).one_or_none()
            if permission is None:
                permission = Permission(code=code, name=code)
                session.add(permission)
            permissions.append(permission)
        role = Role(name=f"role-{n}", permissions=permissions)
        user = User(
            username=f"user-{n}",
            email=f"user-{n}@example.com",
            active=active,
            roles=[role],
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        session.close()
        return _bearer(user.id)

    return make
