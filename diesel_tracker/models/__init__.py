"""
Modèles SQLAlchemy / SQLAlchemy models.
Importer tous les modèles ici pour que create_all les détecte.
Import all models here so create_all can detect them.
"""

from diesel_tracker.models.fill import Fill

__all__ = [
    "Fill",
]
