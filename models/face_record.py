from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class EnrolledFace:
    """In-memory representation of a row in the FACE table.

    Attributes:
        label: Unique identity label (primary key).
        descriptors: One or more fixed-length face descriptors for the label.
        trained_at: Unix timestamp (seconds) of the latest enrollment.
    """

    label: str
    descriptors: List[List[float]] = field(default_factory=list)
    trained_at: Optional[int] = None

    @property
    def sample_count(self) -> int:
        return len(self.descriptors)
