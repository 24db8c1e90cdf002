"""Database records for Lightbulbs."""

from lightbulbs.models.base import Base, TimestampMixin, UTCDateTime, utcnow
from lightbulbs.models.bulb import BulbRecord, BulbReferenceRecord, BulbTagRecord
from lightbulbs.models.category import CategoryRecord
from lightbulbs.models.enums import ModelStatus, ReferenceSourceType, ReferenceType
from lightbulbs.models.reference_source import ReferenceRecord, ReferenceSourceRecord
from lightbulbs.models.tag import TagRecord

__all__ = [
    "Base",
    "BulbRecord",
    "BulbReferenceRecord",
    "BulbTagRecord",
    "CategoryRecord",
    "ModelStatus",
    "ReferenceRecord",
    "ReferenceSourceRecord",
    "ReferenceSourceType",
    "ReferenceType",
    "TagRecord",
    "TimestampMixin",
    "UTCDateTime",
    "utcnow",
]
