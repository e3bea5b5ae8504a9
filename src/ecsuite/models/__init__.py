"""Shared model base and enumerations for ecsuite."""

from ecsuite.models.base import ECSuiteBaseModel
from ecsuite.models.enums import KeyType

__all__ = [
    "ECSuiteBaseModel",
    "KeyType",
]
