"""
Bot Telegram (python-telegram-bot) : porte d'entrée vers le formulaire.

La commande /start répond avec un bouton qui ouvre le Mini-App.
Le bot est démarré et arrêté par le cycle de vie de l'API (voir app.main).
"""

import logging
from typing import Optional

from fastapi import Request
from telegram import Bot, KeyboardButton, ReplyKeyboardMarkup, Update, WebAppInfo
from telegram.ext import Application, CommandHandler, ContextTypes

logger = logging.getLogger(__name__)

WELCOME_TEXT = "👋 MGC Inscriptions\nBase de données connectée.\nCliquez pour ouvrir :"
OPEN_FORM_LABEL = "📝 Ouvrir le Formulaire"


def build_form_keyboard(web_app_url: str) -> ReplyKeyboardMarkup:
    """Clavier à un seul bouton ouvrant le formulaire dans Telegram."""
    return ReplyKeyboardMarkup(
        [[KeyboardButton(OPEN_FORM_LABEL, web_app=WebAppInfo(url=web_app_url))]],
        resize_keyboard=True,
    )


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handler /start : message d'accueil + bouton du formulaire."""
    if update.message is None:
        return
    await update.message.reply_text(
        WELCOME_TEXT,
        reply_markup=build_form_keyboard(context.bot_data["web_app_url"]),
    )


def build_bot_application(token: str, web_app_url: str) -> Application:
    """Construit l'application du bot avec son unique handler."""
    application = Application.builder().token(token).build()
    application.bot_data["web_app_url"] = web_app_url
    application.add_handler(CommandHandler("start", start_command))
    return application


async def start_bot(application: Application) -> None:
    """
    Démarre le bot en long polling.
    Le webhook éventuellement enregistré est supprimé d'abord, sinon getUpdates est refusé.
    """
    await application.initialize()
    await application.bot.delete_webhook()
    await application.updater.start_polling()
    await application.start()
    logger.info("Bot Telegram en ligne (long polling).")


async def stop_bot(application: Application) -> None:
    """Arrête la boucle de réception puis libère le client HTTP du bot."""
    if application.updater is not None and application.updater.running:
        await application.updater.stop()
    if application.running:
        await application.stop()
    await application.shutdown()
    logger.info("Bot Telegram arrêté.")


def get_bot(request: Request) -> Optional[Bot]:
    """Dépendance FastAPI — client du bot démarré au lancement (None sans token)."""
    return getattr(request.app.state, "bot", None)
