"""Write-side messages."""

from abc import ABC
from dataclasses import dataclass


@dataclass(frozen=True)
class Command(ABC):
    """Immutable request that may change position state (e.g. RunTickCommand)."""
