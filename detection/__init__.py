from .models import FrameResult, HeightCategory, Measurement, TargetSlots
from .pipeline import TargetPipeline

__all__ = ["FrameResult", "HeightCategory", "Measurement", "TargetSlots", "TargetPipeline"]
