import hashlib
import hmac

import pytest
from fastapi.testclient import TestClient

BOT_TOKEN = "123456:TEST-bot-token"
ADMIN_HANDLE = "AuroraStore_Safe"


def sign(fields, bot_token=BOT_TOKEN):
    """Sign claims the way the Telegram login widget does."""
    check_string = "\n".join(f"{k}={fields[k]}" for k in sorted(fields))
    secret = hashlib.sha256(bot_token.encode()).digest()
    return hmac.new(secret, check_string.encode(), hashlib.sha256).hexdigest()


def signed_assertion(**fields):
    claims = {k: str(v) for k, v in fields.items()}
    claims.setdefault("auth_date", "1718000000")
    return {**claims, "hash": sign(claims)}


@pytest.fixture
def settings():
    from aurora.core.config import AuthSettings, Settings

    return Settings(auth=AuthSettings(bot_token=BOT_TOKEN, super_admin_handle=ADMIN_HANDLE))


@pytest.fixture
def store():
    from aurora.stores.document_store import MemoryStore

    return MemoryStore()


@pytest.fixture
def aurora(settings, store):
    from aurora.app import AuroraApp

    return AuroraApp(settings=settings, store=store).initialize()


@pytest.fixture
def client(aurora):
    from aurora_web.main import create_app

    return TestClient(create_app(aurora))


@pytest.fixture
def login(client):
    """Log a user in through the callback route and return the response."""

    def _login(user_id, first_name="Test", username=""):
        params = signed_assertion(id=user_id, first_name=first_name, username=username)
        return client.get("/auth/provider/callback", params=params)

    return _login
