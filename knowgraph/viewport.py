import logging
import math

logger = logging.getLogger(__name__)


class Viewport:
    """Tracks the host widget's size and keeps the engine's bounds in sync.

    The backing surface is sized in device pixels so strokes stay crisp on
    high-density screens; everything else works in logical pixels.
    """

    def __init__(self, engine, width=0, height=0, device_pixel_ratio=1.0):
        self.engine = engine
        self.width = 0
        self.height = 0
        self.device_pixel_ratio = 1.0
        self.resize(width, height, device_pixel_ratio)

    @property
    def backing_size(self):
        dpr = self.device_pixel_ratio
        return max(1, math.ceil(self.width * dpr)), max(1, math.ceil(self.height * dpr))

    def resize(self, width, height, device_pixel_ratio=None):
        """Applies a new content size. Returns True if anything changed."""
        width = max(0, int(width))
        height = max(0, int(height))
        dpr = self.device_pixel_ratio if device_pixel_ratio is None else float(device_pixel_ratio)
        if dpr <= 0:
            dpr = 1.0

        if (width, height, dpr) == (self.width, self.height, self.device_pixel_ratio):
            return False

        bounds_changed = (width, height) != (self.width, self.height)
        self.width, self.height, self.device_pixel_ratio = width, height, dpr
        if bounds_changed and width and height:
            self.engine.set_bounds(width, height)
        logger.debug("Viewport resized to %dx%d @%.2fx", width, height, dpr)
        return True
