from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from hovercard.components.capability import CapabilityStatus


@dataclass(slots=True)
class FeatureDefinition:
    """Registered optional feature and its current switches."""

    name: str
    enabled: bool = True
    running: bool = True


class CapabilityRegistry:
    """In-memory collection of optional features.

    Passed by reference to the systems that need it; status is read on
    every query so toggling a feature takes effect on the next popup.
    """

    def __init__(self, features: Iterable[FeatureDefinition] = ()) -> None:
        self._features: dict[str, FeatureDefinition] = {}
        for feature in features:
            self.register(feature)

    def register(self, feature: FeatureDefinition) -> None:
        if feature.name in self._features:
            raise ValueError(f"Feature '{feature.name}' already registered")
        self._features[feature.name] = feature

    def has(self, name: str) -> bool:
        return name in self._features

    def set_enabled(self, name: str, enabled: bool) -> None:
        feature = self._get(name)
        feature.enabled = bool(enabled)
        if not feature.enabled:
            feature.running = False

    def set_running(self, name: str, running: bool) -> None:
        feature = self._get(name)
        feature.running = bool(running) and feature.enabled

    def status(self, name: str) -> CapabilityStatus:
        feature = self._features.get(name)
        if feature is None:
            return CapabilityStatus()
        return CapabilityStatus(is_enabled=feature.enabled, is_running=feature.enabled and feature.running)

    def is_enabled(self, name: str) -> bool:
        return self.status(name).is_enabled

    def is_running(self, name: str) -> bool:
        return self.status(name).is_running

    def _get(self, name: str) -> FeatureDefinition:
        try:
            return self._features[name]
        except KeyError as exc:
            raise KeyError(f"Feature '{name}' is not registered") from exc
