"""
Configuration partagée pour tous les tests.
Override la dépendance get_db pour éviter toute connexion réelle à PostgreSQL,
et désactive le bot Telegram au démarrage de l'application.
"""

import hashlib
import hmac
import json
from urllib.parse import urlencode

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock, patch

from app.config import settings
from app.database import get_db
from app.main import app

TEST_BOT_TOKEN = "123456:TEST-TOKEN"


@pytest.fixture
def client():
    """Client HTTP de test avec la BDD mockée et sans bot."""
    mock_db = MagicMock()
    app.dependency_overrides[get_db] = lambda: mock_db
    with patch("app.main.init_db"), patch.object(settings, "BOT_TOKEN", ""):
        with TestClient(app) as c:
            yield c
    app.dependency_overrides.clear()


@pytest.fixture
def sign_init_data():
    """
    Construit une chaîne initData signée comme le ferait le client Telegram.
    Usage : sign_init_data({"user": {...}, "auth_date": "..."}, token)
    """
    def _sign(fields: dict, token: str = TEST_BOT_TOKEN) -> str:
        pairs = {
            key: json.dumps(value) if isinstance(value, dict) else str(value)
            for key, value in fields.items()
        }
        check_string = "\n".join(f"{k}={pairs[k]}" for k in sorted(pairs))
        secret = hmac.new(b"WebAppData", token.encode(), hashlib.sha256).digest()
        pairs["hash"] = hmac.new(secret, check_string.encode(), hashlib.sha256).hexdigest()
        return urlencode(pairs)

    return _sign
