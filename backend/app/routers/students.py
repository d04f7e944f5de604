"""
Router des inscriptions.
POST /api/students          : enregistrement depuis le Mini-App (+ confirmation Telegram)
POST /api/check-duplicates  : recherche indicative de doublons
GET  /api/students?pwd=...  : liste complète pour admin.html
"""

import logging
import secrets
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Header
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from telegram import Bot

from app.bot import get_bot
from app.config import settings
from app.database import get_db
from app.schemas.student import (
    DuplicateCheckRequest,
    DuplicateCheckResponse,
    StudentCreate,
    StudentCreateResult,
    StudentResponse,
)
from app.services import student_service
from app.services.notification_service import send_registration_confirmation
from app.services.telegram_auth import extract_telegram_user, verify_init_data

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Inscriptions"])

ACCESS_DENIED_MESSAGE = "Accès refusé. Mot de passe incorrect."


def _resolve_telegram_user_id(init_data: Optional[str]) -> Optional[int]:
    """ID Telegram de l'auteur si initData est authentique, sinon None (jamais de rejet)."""
    if init_data and verify_init_data(init_data, settings.BOT_TOKEN):
        user = extract_telegram_user(init_data) or {}
        user_id = user.get("id")
        if isinstance(user_id, int):
            logger.info("Ajout par utilisateur certifié : %s", user.get("first_name"))
            return user_id
    logger.warning("Ajout hors Telegram ou non sécurisé")
    return None


@router.post("/students", response_model=StudentCreateResult, summary="Enregistrer un élève")
def create_student(
    data: StudentCreate,
    background_tasks: BackgroundTasks,
    x_telegram_data: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
    bot: Optional[Bot] = Depends(get_bot),
):
    """
    Enregistre une inscription et retourne son numéro de ticket.

    L'en-tête `X-Telegram-Data` (initData du Mini-App) est facultatif : s'il est valide,
    l'inscription est attribuée à l'utilisateur Telegram qui reçoit une confirmation.
    """
    telegram_user_id = _resolve_telegram_user_id(x_telegram_data)

    try:
        student = student_service.create_student(db, data, telegram_user_id)
    except (SQLAlchemyError, student_service.ReadableIdExhaustedError) as exc:
        logger.error("Erreur API : %s", exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Erreur enregistrement"},
        )

    logger.info("Élève sauvegardé en BDD : %s (ticket %s)", student.nom_complet, student.readable_id)

    if bot is not None and telegram_user_id is not None:
        background_tasks.add_task(
            send_registration_confirmation,
            bot,
            telegram_user_id,
            student.nom_complet,
            student.readable_id,
        )

    return StudentCreateResult(success=True, id=student.readable_id)


@router.post("/check-duplicates", response_model=DuplicateCheckResponse,
             summary="Chercher des inscriptions similaires")
def check_duplicates(
    data: Optional[DuplicateCheckRequest] = Body(default=None),
    db: Session = Depends(get_db),
):
    """
    Retourne au plus 5 inscriptions avec le même téléphone ou un nom proche.
    Sans critère (ou sans corps), répond `found: false` sans interroger la base.
    """
    if data is None:
        return DuplicateCheckResponse(found=False, candidates=[])

    try:
        candidates = student_service.find_duplicates(db, data.nom_complet, data.telephone)
    except SQLAlchemyError as exc:
        logger.error("Erreur doublon : %s", exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})

    if not candidates:
        return DuplicateCheckResponse(found=False, candidates=[])
    return DuplicateCheckResponse(
        found=True,
        candidates=[StudentResponse.model_validate(s) for s in candidates],
    )


@router.get("/students", response_model=List[StudentResponse], summary="Lister les inscriptions (admin)")
def list_students(pwd: Optional[str] = None, db: Session = Depends(get_db)):
    """Liste complète, plus récentes d'abord. Protégée par le mot de passe `pwd`."""
    if pwd is None or not secrets.compare_digest(pwd.encode(), settings.ADMIN_PASSWORD.encode()):
        return JSONResponse(status_code=403, content={"error": ACCESS_DENIED_MESSAGE})

    try:
        return student_service.list_students(db)
    except SQLAlchemyError as exc:
        logger.error("Erreur liste élèves : %s", exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})
