"""Domain-Oriented Observability for husbandry application services."""

from husbandry.application.observability.service_probe import (
    DefaultHusbandryServiceProbe,
    HusbandryServiceProbe,
)

__all__ = [
    "DefaultHusbandryServiceProbe",
    "HusbandryServiceProbe",
]
