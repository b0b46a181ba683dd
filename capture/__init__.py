from .recorder import VideoRecorder
from .source import FrameSource

__all__ = ["FrameSource", "VideoRecorder"]
