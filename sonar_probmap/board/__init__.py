from sonar_probmap.board.models import (
    BoardDimensions,
    CellStatus,
    Mode,
    Orientation,
    Placement,
    Ship,
    Strategy,
)
from sonar_probmap.board.placement import enumerate_all_placements, enumerate_placements
from sonar_probmap.board.state import (
    BoardState,
    HitOutcome,
    MissOutcome,
    SinkCandidate,
    SinkOutcome,
    build,
)

__all__ = [
    "BoardDimensions",
    "BoardState",
    "CellStatus",
    "HitOutcome",
    "MissOutcome",
    "Mode",
    "Orientation",
    "Placement",
    "Ship",
    "SinkCandidate",
    "SinkOutcome",
    "Strategy",
    "build",
    "enumerate_all_placements",
    "enumerate_placements",
]
