from .service import CatalogEntry, ScheduleCatalog

__all__ = ["CatalogEntry", "ScheduleCatalog"]
