from webstore.db.models.storage import ObjectModel, HeadModel

__all__ = [
    "ObjectModel",
    "HeadModel"
]
