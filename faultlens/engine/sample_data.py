"""
Demo dataset for the anomaly dashboard.

Reproduces the records the dashboard starts with: two seed events, the
template used when a user adds an event, and a synthetic batch for the
aggregate window chart.
"""

from typing import Optional

import numpy as np

# (low, high) per reading for synthetic batches; humidity is not generated
SYNTHETIC_RANGES = {
    "temp": (35.0, 65.0),
    "voltage": (3.3, 3.9),
    "current": (0.5, 3.5),
    "vibration": (0.0, 1.0),
}


def demo_events() -> list[dict]:
    """The two seed events: one warning, one normal."""
    return [
        {
            "id": "E-101",
            "metrics": {"temp": 58, "voltage": 3.2, "current": 2.8, "vibration": 0.5, "humidity": 65},
        },
        {
            "id": "E-102",
            "metrics": {"temp": 42, "voltage": 3.55, "current": 1.0, "vibration": 0.3, "humidity": 40},
        },
    ]


def default_event(index: int) -> dict:
    """Template for a newly added event; ``index`` is 1-based."""
    return {
        "id": f"E-{index}",
        "metrics": {"temp": 40, "voltage": 3.5, "current": 1.2, "vibration": 0.2, "humidity": 45},
    }


def synthetic_batch(size: int = 60, seed: Optional[int] = None) -> list[dict]:
    """
    Generate uniformly distributed metrics records.

    Args:
        size: Number of records
        seed: Seed for reproducible batches

    Returns:
        List of plain metrics dicts, ready to post as ``batch``
    """
    if size < 0:
        raise ValueError(f"Batch size must be non-negative, got {size}")

    rng = np.random.default_rng(seed)
    columns = {
        name: rng.uniform(low, high, size)
        for name, (low, high) in SYNTHETIC_RANGES.items()
    }
    return [
        {name: float(values[i]) for name, values in columns.items()}
        for i in range(size)
    ]
