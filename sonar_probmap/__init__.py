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
    add_ship,
    build,
    confirm_sink,
    decline_sink,
    record_hit,
    record_miss,
    remove_ship,
    sampler_inputs,
)
from sonar_probmap.config import DEFAULT_CONFIG, EngineConfig, load_config
from sonar_probmap.errors import (
    CellAlreadyResolved,
    ConfigError,
    InternalInconsistency,
    InvalidDimensions,
    NoValidPlacement,
    OutOfRange,
    SonarError,
    StaleSinkCandidate,
)
from sonar_probmap.heatmaps import compute_heatmap, overlay_resolved
from sonar_probmap.heatmaps.monte_carlo import PlacementSampler, sample_heatmap
from sonar_probmap.heatmaps.normalize import normalize_counts
from sonar_probmap.heatmaps.rule_based import resolve_hunt_anchor, rule_based_heatmap

__version__ = "0.1.0"

__all__ = [
    "BoardDimensions",
    "BoardState",
    "CellAlreadyResolved",
    "CellStatus",
    "ConfigError",
    "DEFAULT_CONFIG",
    "EngineConfig",
    "HitOutcome",
    "InternalInconsistency",
    "InvalidDimensions",
    "MissOutcome",
    "Mode",
    "NoValidPlacement",
    "Orientation",
    "OutOfRange",
    "Placement",
    "PlacementSampler",
    "Ship",
    "SinkCandidate",
    "SinkOutcome",
    "SonarError",
    "StaleSinkCandidate",
    "Strategy",
    "add_ship",
    "build",
    "compute_heatmap",
    "confirm_sink",
    "decline_sink",
    "enumerate_all_placements",
    "enumerate_placements",
    "load_config",
    "normalize_counts",
    "overlay_resolved",
    "record_hit",
    "record_miss",
    "remove_ship",
    "resolve_hunt_anchor",
    "rule_based_heatmap",
    "sample_heatmap",
    "sampler_inputs",
]
