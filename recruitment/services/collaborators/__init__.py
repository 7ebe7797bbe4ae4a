"""Collaborator interfaces and default adapters."""

from recruitment.services.collaborators.base import (
    ContractCreator,
    FileStorage,
    Notifier,
    best_effort,
)
from recruitment.services.collaborators.local_storage import LocalFileStorage
from recruitment.services.collaborators.logging_collaborators import (
    LoggingContractCreator,
    LoggingNotifier,
)

__all__ = [
    "ContractCreator",
    "FileStorage",
    "Notifier",
    "best_effort",
    "LocalFileStorage",
    "LoggingContractCreator",
    "LoggingNotifier",
]
