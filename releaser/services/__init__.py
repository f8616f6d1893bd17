"""Release services: staging, script generation, compilation."""

from .errors import ReleaseError, StageWarning
from .release import ReleaseReport, ReleaseService

__all__ = ["ReleaseError", "ReleaseReport", "ReleaseService", "StageWarning"]
