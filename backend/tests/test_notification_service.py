"""
Tests unitaires de la notification Telegram de confirmation.
"""

import asyncio
from unittest.mock import AsyncMock

from telegram.error import BadRequest, NetworkError

from app.services.notification_service import (
    build_confirmation_message,
    send_registration_confirmation,
)


def test_message_contient_nom_et_ticket():
    text = build_confirmation_message("Awa Koné", "482913")
    assert "Awa Koné" in text
    assert "Ticket : 482913" in text


def test_envoi_reussi():
    bot = AsyncMock()

    sent = asyncio.run(send_registration_confirmation(bot, 424242, "Awa Koné", "482913"))

    assert sent is True
    bot.send_message.assert_awaited_once_with(
        chat_id=424242, text=build_confirmation_message("Awa Koné", "482913")
    )


def test_chat_invalide_ignore():
    bot = AsyncMock()
    bot.send_message.side_effect = BadRequest("Chat not found")

    sent = asyncio.run(send_registration_confirmation(bot, 1, "Awa Koné", "482913"))

    assert sent is False


def test_erreur_reseau_ignoree():
    bot = AsyncMock()
    bot.send_message.side_effect = NetworkError("connexion refusée")

    assert asyncio.run(send_registration_confirmation(bot, 1, "Awa", "111111")) is False


def test_delai_depasse():
    """Un envoi trop lent est abandonné sans lever d'exception."""
    async def slow_send(**kwargs):
        await asyncio.sleep(1)

    bot = AsyncMock()
    bot.send_message.side_effect = slow_send

    sent = asyncio.run(
        send_registration_confirmation(bot, 1, "Awa", "111111", timeout=0.01)
    )

    assert sent is False
