"""Selection of the recent samples that drive the short-term trend."""

from __future__ import annotations

from datetime import timedelta
from typing import Sequence

from weighttrack.tracking.models import WeightSample

# Date-bounded window: samples within this many days of the latest sample
RECENT_WINDOW_DAYS = 30

# Count-bounded window: this many most recent samples
RECENT_WINDOW_ENTRIES = 10


def select_recent_window(samples: Sequence[WeightSample]) -> list[WeightSample]:
    """
    Pick the recent samples used for the short-term slope and confidence.

    Two candidate windows are built: every sample dated within
    RECENT_WINDOW_DAYS of the latest sample, and the last
    RECENT_WINDOW_ENTRIES samples. The one with more samples wins; a tie
    goes to the date-bounded window.

    Args:
        samples: Samples in ascending date order

    Returns:
        The selected samples, in input order. Empty when samples is empty.
    """
    if not samples:
        return []

    latest_date = samples[-1].source_date
    cutoff = latest_date - timedelta(days=RECENT_WINDOW_DAYS)

    by_date = [s for s in samples if s.source_date >= cutoff]
    by_count = list(samples[-RECENT_WINDOW_ENTRIES:])

    return by_date if len(by_date) >= len(by_count) else by_count
