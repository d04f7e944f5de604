"""
Service métier des inscriptions : création avec numéro de ticket,
recherche de doublons et listage pour l'administration.
"""

import logging
import random
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.student import Student
from app.schemas.student import StudentCreate

logger = logging.getLogger(__name__)

READABLE_ID_MIN = 100000
READABLE_ID_MAX = 999999
READABLE_ID_MAX_ATTEMPTS = 5
DUPLICATE_CANDIDATES_LIMIT = 5


class ReadableIdExhaustedError(Exception):
    """Aucun numéro de ticket libre trouvé après plusieurs tentatives."""


def generate_readable_id() -> str:
    """Numéro de ticket aléatoire à 6 chiffres (100000–999999)."""
    return str(random.randint(READABLE_ID_MIN, READABLE_ID_MAX))


def create_student(
    db: Session, data: StudentCreate, telegram_user_id: Optional[int] = None
) -> Student:
    """
    Enregistre un élève avec un numéro de ticket aléatoire.

    La contrainte d'unicité sur readable_id est la seule garantie : en cas de collision,
    la transaction est annulée et un nouveau numéro est tiré (READABLE_ID_MAX_ATTEMPTS fois au plus).
    Les autres erreurs BDD sont propagées.
    """
    fields = data.model_dump()
    for attempt in range(1, READABLE_ID_MAX_ATTEMPTS + 1):
        student = Student(
            **fields,
            readable_id=generate_readable_id(),
            created_by_telegram_id=telegram_user_id,
        )
        db.add(student)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning(
                "Collision du numéro de ticket %s (tentative %d/%d)",
                student.readable_id, attempt, READABLE_ID_MAX_ATTEMPTS,
            )
            continue
        db.refresh(student)
        return student

    raise ReadableIdExhaustedError(
        f"Aucun numéro de ticket libre après {READABLE_ID_MAX_ATTEMPTS} tentatives."
    )


def _escape_like(value: str) -> str:
    """Échappe les jokers LIKE pour une recherche littérale."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def find_duplicates(
    db: Session, nom_complet: Optional[str] = None, telephone: Optional[str] = None
) -> Optional[List[Student]]:
    """
    Cherche des inscriptions proches : même téléphone (exact) OU nom contenant
    la saisie (insensible à la casse). Retourne None sans interroger la BDD
    si aucun critère n'est fourni.
    """
    conditions = []
    if telephone:
        conditions.append(Student.telephone == telephone)
    if nom_complet:
        conditions.append(
            Student.nom_complet.ilike(f"%{_escape_like(nom_complet)}%", escape="\\")
        )

    if not conditions:
        return None

    return db.execute(
        select(Student).where(or_(*conditions)).limit(DUPLICATE_CANDIDATES_LIMIT)
    ).scalars().all()


def list_students(db: Session) -> List[Student]:
    """Retourne toutes les inscriptions, les plus récentes d'abord."""
    return db.execute(
        select(Student).order_by(Student.date_ajout.desc())
    ).scalars().all()
