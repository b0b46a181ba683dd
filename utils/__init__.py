from .fps import FrameRateCounter
from .image_utils import (
    format_targets,
    poll_quit,
    show_images,
)

__all__ = [
    "FrameRateCounter",
    "format_targets",
    "poll_quit",
    "show_images",
]
