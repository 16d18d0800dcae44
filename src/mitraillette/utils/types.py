# src/mitraillette/utils/types.py
"""Shared type aliases for the Mitraillette project.

``FaceCounts`` is the histogram of a roll: one count per face, index ``0``
being the face "one". ``Int64Array2D`` is a convenience alias for NumPy
arrays of ``np.int64`` that are expected, by convention, to be
two-dimensional (one histogram per row).
"""

from __future__ import annotations

from typing import Tuple, TypeAlias

import numpy as np
import numpy.typing as npt

FaceCounts: TypeAlias = Tuple[int, ...]  # counts for faces 1-6
Int64Array2D: TypeAlias = npt.NDArray[np.int64]  # rows of face counts
