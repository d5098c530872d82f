"""Base models and mixins for database models"""

from sqlalchemy import Column, DateTime, Enum
from sqlalchemy.orm import DeclarativeBase, declared_attr
from sqlalchemy.sql import func
from typing import Type
import enum

# Create declarative base
class Base(DeclarativeBase):
    pass

class TimestampedModel:
    """Mixin for adding created_at and updated_at timestamps"""

    @declared_attr
    def created_at(cls):
        return Column(
            DateTime(timezone=True),
            nullable=False,
            server_default=func.now(),
            index=True
        )

    @declared_attr
    def updated_at(cls):
        return Column(
            DateTime(timezone=True),
            nullable=False,
            server_default=func.now(),
            onupdate=func.now()
        )

def enum_type(enum_class: Type[enum.Enum]) -> Enum:
    """Portable enum column storing the member values as VARCHAR"""
    return Enum(
        enum_class,
        native_enum=False,
        length=50,
        values_callable=lambda members: [member.value for member in members],
    )

__all__ = [
    'Base',
    'TimestampedModel',
    'enum_type',
]
