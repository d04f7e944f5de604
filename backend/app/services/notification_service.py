"""
Notification Telegram de confirmation d'inscription.
Exécutée en tâche de fond après la réponse HTTP : un échec d'envoi n'affecte jamais le client.
"""

import asyncio
import logging
from typing import Optional

from telegram import Bot

from app.config import settings

logger = logging.getLogger(__name__)


def build_confirmation_message(nom_complet: str, ticket_id: str) -> str:
    return f"✅ Dossier enregistré !\n👤 {nom_complet}\n🆔 Ticket : {ticket_id}"


async def send_registration_confirmation(
    bot: Bot,
    chat_id: int,
    nom_complet: str,
    ticket_id: str,
    timeout: Optional[float] = None,
) -> bool:
    """
    Envoie le message de confirmation à l'utilisateur Telegram.
    Borné par NOTIFY_TIMEOUT_SECONDS ; toute erreur est journalisée puis ignorée.
    Retourne True si le message est parti.
    """
    if timeout is None:
        timeout = settings.NOTIFY_TIMEOUT_SECONDS

    try:
        await asyncio.wait_for(
            bot.send_message(chat_id=chat_id, text=build_confirmation_message(nom_complet, ticket_id)),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.error("Notification bot expirée après %.1fs (chat %s)", timeout, chat_id)
        return False
    except Exception as exc:
        logger.error("Erreur notif bot (chat %s) : %s", chat_id, exc)
        return False

    logger.info("Confirmation envoyée au chat %s pour le ticket %s", chat_id, ticket_id)
    return True
