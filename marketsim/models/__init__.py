from .asset import Asset
from .behavior import Behavior
from .history import Direction, HistoryRecord

__all__ = [
    "Asset",
    "Behavior",
    "Direction",
    "HistoryRecord",
]
