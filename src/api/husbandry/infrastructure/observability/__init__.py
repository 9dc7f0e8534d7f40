"""Domain-Oriented Observability for husbandry infrastructure."""

from husbandry.infrastructure.observability.repository_probe import (
    DefaultHusbandryRepositoryProbe,
    HusbandryRepositoryProbe,
)

__all__ = [
    "DefaultHusbandryRepositoryProbe",
    "HusbandryRepositoryProbe",
]
