"""
Point d'entrée principal de l'API MGC Inscriptions.
Démarrage : uvicorn app.main:app --reload   (ou la commande `mgc-inscriptions`)
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import OperationalError
from telegram.error import TelegramError

from app.bot import build_bot_application, start_bot, stop_bot
from app.config import settings
from app.database import init_db
from app.routers import students

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Cycle de vie de l'application : crée les tables, puis démarre le bot si un token est configuré.
    À l'arrêt (SIGINT/SIGTERM relayés par uvicorn), la boucle du bot est arrêtée proprement.
    """
    try:
        init_db()
    except OperationalError as exc:
        # Le bot et les fichiers statiques restent servis ; les routes /api répondront 500
        logger.error("Erreur de connexion BDD : %s", exc)
    else:
        logger.info("Base de données connectée.")

    app.state.bot_application = None
    app.state.bot = None
    if settings.BOT_TOKEN:
        application = build_bot_application(settings.BOT_TOKEN, settings.web_app_url)
        try:
            await start_bot(application)
        except TelegramError as exc:
            # L'API reste disponible, seules les notifications sont perdues
            logger.error("Démarrage du bot impossible : %s", exc)
            await stop_bot(application)
        else:
            app.state.bot_application = application
            app.state.bot = application.bot
    else:
        logger.warning("BOT_TOKEN absent : bot désactivé, inscriptions non attribuées.")

    yield

    if app.state.bot_application is not None:
        await stop_bot(app.state.bot_application)


app = FastAPI(
    title="MGC Inscriptions API",
    description="API d'inscription des élèves depuis le Mini-App Telegram",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS — le formulaire peut être servi depuis n'importe quelle origine (Mini-App Telegram).
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "X-Telegram-Data"],
)


app.include_router(students.router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées pour garantir que la réponse 500
    passe bien par CORSMiddleware (qui injecte les headers CORS).
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Une erreur interne est survenue."},
    )


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "MGC Inscriptions API", "version": "0.1.0"}


def mount_public_dir(application: FastAPI, directory: str) -> bool:
    """
    Sert le formulaire (index.html, admin.html...) à la racine.
    Monté après les routes /api pour ne pas les masquer ; ignoré si le dossier n'existe pas.
    """
    if not os.path.isdir(directory):
        logger.info("Dossier public %s introuvable, fichiers statiques non servis.", directory)
        return False
    application.mount("/", StaticFiles(directory=directory, html=True), name="public")
    return True


mount_public_dir(app, settings.PUBLIC_DIR)


def run() -> None:
    """Lance le serveur uvicorn sur le port configuré."""
    import uvicorn

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
