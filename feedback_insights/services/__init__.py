"""External text-classification service adapters."""

from .classification_service import (
    ClassificationService,
    MockClassificationService,
    OpenAIClassificationService,
)

__all__ = [
    "ClassificationService",
    "MockClassificationService",
    "OpenAIClassificationService",
]
