"""
Base Producer Module - Abstract base class for technique producers.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional, Tuple

from ..grid import Grid, Region
from ..techniques import SolvingTechnique
from .accumulator import HintsAccumulator


class ProducerKind(Enum):
    """How a producer's hints act on the grid."""
    DIRECT = "direct"
    INDIRECT = "indirect"
    WARNING = "warning"


class HintProducer(ABC):
    """
    Abstract base class for all technique producers.

    Subclasses implement get_hints() and define name, description and kind
    class attributes. Producers must be deterministic functions of the grid
    state: they read nothing but the grid and keep no state between calls.

    Attributes:
        name: Registry key of the producer class
        description: Human-readable technique name
        kind: Direct, indirect or warning producer
        technique: Setting that enables this producer, if any
    """
    name: str = "base"
    description: str = "Base producer"
    kind: ProducerKind = ProducerKind.INDIRECT
    technique: Optional[SolvingTechnique] = None

    @abstractmethod
    def get_hints(self, grid: Grid, accu: HintsAccumulator) -> None:
        """
        Find hints on the grid and add them to the accumulator.

        Must stop early when accu.should_stop() turns True.

        Args:
            grid: Grid with up-to-date potential values
            accu: Accumulator receiving the hints
        """
        pass

    def parameters(self) -> Tuple:
        """Constructor parameters that distinguish instances of one class."""
        return ()

    @property
    def producer_id(self) -> str:
        """
        Stable identifier of this producer instance.

        Two producers with the same id produce the same hints on the
        same grid.
        """
        params = self.parameters()
        if not params:
            return self.name
        return f"{self.name}({','.join(str(p) for p in params)})"

    def __str__(self) -> str:
        return self.description

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.producer_id}>"


def value_positions(masks: List[int], region: Region, value_bit: int) -> List[int]:
    """
    Find the cells of a region that can still hold a value.

    Args:
        masks: Potential masks of all 256 cells
        region: Region to scan
        value_bit: Bit of the value

    Returns:
        Cell indices, in region order
    """
    return [i for i in region.indices if masks[i] & value_bit]
