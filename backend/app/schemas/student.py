"""
Schémas Pydantic pour les inscriptions d'élèves.
Les champs JSON sont en camelCase (formulaire du Mini-App), les attributs Python en snake_case.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class StudentCreate(_CamelModel):
    """Schéma du formulaire d'inscription (POST /api/students). Les champs inconnus sont ignorés."""
    nom_complet: str
    telephone: Optional[str] = None
    date_naissance: Optional[str] = None
    adresse: Optional[str] = None
    eglise: Optional[str] = None
    profession: Optional[str] = None
    option: Optional[str] = None

    id_app: Optional[str] = None
    nom_tree: Optional[str] = None
    tel_tree: Optional[str] = None
    liaison: Optional[str] = None
    departement: Optional[str] = None

    @field_validator("nom_complet")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom complet est obligatoire.")
        return v


class StudentCreateResult(BaseModel):
    """Réponse après enregistrement : numéro de ticket lisible."""
    success: bool
    id: str


class StudentResponse(_CamelModel):
    """Fiche complète d'un élève, telle que stockée."""
    id: uuid.UUID
    readable_id: str
    nom_complet: str
    telephone: Optional[str] = None
    date_naissance: Optional[str] = None
    adresse: Optional[str] = None
    eglise: Optional[str] = None
    profession: Optional[str] = None
    option: Optional[str] = None
    id_app: Optional[str] = None
    nom_tree: Optional[str] = None
    tel_tree: Optional[str] = None
    liaison: Optional[str] = None
    departement: Optional[str] = None
    created_by_telegram_id: Optional[int] = None
    date_ajout: Optional[datetime] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DuplicateCheckRequest(_CamelModel):
    """Critères de recherche de doublons (POST /api/check-duplicates)."""
    nom_complet: Optional[str] = None
    telephone: Optional[str] = None


class DuplicateCheckResponse(BaseModel):
    """Candidats potentiels (5 au maximum), à titre indicatif."""
    found: bool
    candidates: List[StudentResponse] = []
