"""
Vérification des données d'initialisation du Mini-App Telegram (WebApp init-data).

Le client Telegram signe la chaîne initData avec une clé dérivée du token du bot :
    secret = HMAC_SHA256(key="WebAppData", msg=bot_token)
    hash   = hex(HMAC_SHA256(key=secret, msg=data_check_string))
où data_check_string = les paires `clé=valeur` (hors `hash`) triées par clé, jointes par "\n".
"""

import hashlib
import hmac
import json
from typing import Optional
from urllib.parse import parse_qsl

WEB_APP_DATA_KEY = b"WebAppData"


def _data_check_string(pairs: list) -> str:
    """Construit la chaîne signée à partir des paires (sans `hash`)."""
    return "\n".join(f"{key}={value}" for key, value in sorted(pairs, key=lambda p: p[0]))


def compute_init_data_hash(pairs: list, bot_token: str) -> str:
    """Calcule la signature hexadécimale attendue pour ces paires."""
    secret_key = hmac.new(WEB_APP_DATA_KEY, bot_token.encode(), hashlib.sha256).digest()
    return hmac.new(
        secret_key, _data_check_string(pairs).encode(), hashlib.sha256
    ).hexdigest()


def verify_init_data(init_data: Optional[str], bot_token: str) -> bool:
    """
    Retourne True si initData a bien été signée par Telegram pour ce bot.
    Ne lève jamais d'exception : payload vide, sans hash ou altéré → False.
    """
    if not init_data or not bot_token:
        return False

    pairs = parse_qsl(init_data, keep_blank_values=True)
    received_hash = next((value for key, value in pairs if key == "hash"), None)
    if not received_hash:
        return False

    pairs = [(key, value) for key, value in pairs if key != "hash"]
    expected = compute_init_data_hash(pairs, bot_token)
    return hmac.compare_digest(expected.encode(), received_hash.encode())


def extract_telegram_user(init_data: str) -> Optional[dict]:
    """Retourne l'objet `user` (JSON) embarqué dans initData, ou None s'il est absent ou illisible."""
    pairs = parse_qsl(init_data or "", keep_blank_values=True)
    raw_user = next((value for key, value in pairs if key == "user"), None)
    if not raw_user:
        return None
    try:
        user = json.loads(raw_user)
    except ValueError:
        return None
    return user if isinstance(user, dict) else None
