"""Fitting a laid-out text into a line budget."""

from expandable_text.fit.models import (FitBoundary, FitRequest,  # noqa: F401
                                        FitResult)
from expandable_text.fit.solver import FitSolver  # noqa: F401
