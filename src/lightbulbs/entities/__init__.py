"""Entity models: in-memory entities with a tri-state sync lifecycle."""

from lightbulbs.entities.bulb import Bulb
from lightbulbs.entities.category import Category
from lightbulbs.entities.lifecycle import EntityLifecycle, EntityModel, Identifiable
from lightbulbs.entities.reference_source import Reference, ReferenceSource
from lightbulbs.entities.tag import Tag
from lightbulbs.models.enums import ModelStatus

__all__ = [
    "Bulb",
    "Category",
    "EntityLifecycle",
    "EntityModel",
    "Identifiable",
    "ModelStatus",
    "Reference",
    "ReferenceSource",
    "Tag",
]
