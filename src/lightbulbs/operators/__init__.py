"""Database operators: one persisted record per operator instance."""

from lightbulbs.operators.base import DatabaseOperator, OperatorFactory
from lightbulbs.operators.bulb import BulbOperator
from lightbulbs.operators.category import CategoryOperator
from lightbulbs.operators.reference_source import ReferenceOperator, ReferenceSourceOperator
from lightbulbs.operators.tag import TagOperator

__all__ = [
    "BulbOperator",
    "CategoryOperator",
    "DatabaseOperator",
    "OperatorFactory",
    "ReferenceOperator",
    "ReferenceSourceOperator",
    "TagOperator",
]
