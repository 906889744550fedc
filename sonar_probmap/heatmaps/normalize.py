from __future__ import annotations

import numpy as np


def normalize_counts(counts: np.ndarray, alpha: float = 0.0) -> np.ndarray:
    """Scale occupancy counts into [0, 1] with additive smoothing.

    ``prob = (counts + alpha) / (max(counts) + alpha)``; when every count is
    zero the denominator is 1, so the result is uniformly ``alpha`` (1.0 for
    the sampler, 0.0 for the rule-based scorer).
    """
    if alpha < 0:
        raise ValueError("alpha must be non-negative")
    counts = np.asarray(counts, dtype=np.float64)
    max_count = float(counts.max()) if counts.size else 0.0
    denom = max_count + alpha if max_count > 0 else 1.0
    return (counts + alpha) / denom
