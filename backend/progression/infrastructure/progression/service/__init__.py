from progression.infrastructure.progression.service.impl import ProgressionServiceImpl
from progression.infrastructure.progression.service.interface import ProgressionService

__all__ = ["ProgressionService", "ProgressionServiceImpl"]
