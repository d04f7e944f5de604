# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant l'appel à create_all.

from app.models.student import Student  # noqa: F401
