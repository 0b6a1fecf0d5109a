"""YAML entity catalog serving the finder collaborator protocols."""

from finderkit.catalog.spec import CatalogSpec, FieldSpec, ProjectSpec, TypeSpec
from finderkit.catalog.store import EntityCatalog, default_plural

__all__ = [
    "CatalogSpec",
    "FieldSpec",
    "ProjectSpec",
    "TypeSpec",
    "EntityCatalog",
    "default_plural",
]
