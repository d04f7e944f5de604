"""
Modèle SQLAlchemy pour la table students.
Une inscription = une ligne, créée une seule fois et jamais modifiée.
Les champs du formulaire sont libres (Text, sans limite de longueur).
"""

import uuid
from sqlalchemy import BigInteger, Column, DateTime, String, Text, func
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Numéro de ticket montré à l'utilisateur (6 chiffres)
    readable_id = Column(String(6), unique=True, nullable=False)
    nom_complet = Column(Text, nullable=False)
    telephone = Column(Text, nullable=True, index=True)
    date_naissance = Column(Text, nullable=True)
    adresse = Column(Text, nullable=True)
    eglise = Column(Text, nullable=True)
    profession = Column(Text, nullable=True)
    option = Column(Text, nullable=True)

    # Parrainage / liaison
    id_app = Column(Text, nullable=True)
    nom_tree = Column(Text, nullable=True)
    tel_tree = Column(Text, nullable=True)
    liaison = Column(Text, nullable=True)
    departement = Column(Text, nullable=True)

    created_by_telegram_id = Column(BigInteger, nullable=True)
    date_ajout = Column(DateTime, server_default=func.now())
