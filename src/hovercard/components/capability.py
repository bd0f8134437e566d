from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CapabilityStatus:
    is_enabled: bool = False
    is_running: bool = False
