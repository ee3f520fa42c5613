"""Near-bottom scroll signals that drive pagination."""
from dataclasses import dataclass

from bookfeed.controller import FeedController

DEFAULT_THRESHOLD = 350


@dataclass(frozen=True)
class ViewportMetrics:
    """Scroll geometry reported by the UI layer."""
    viewport_height: float
    scroll_y: float
    content_height: float


class ScrollTrigger:
    """Turns scroll events into next-page loads on a FeedController."""

    def __init__(self, controller: FeedController, threshold: float = DEFAULT_THRESHOLD):
        """
        Args:
            controller: Feed to page
            threshold: Distance from the bottom (same units as metrics) that counts as near
        """
        self.controller = controller
        self.threshold = threshold

    def is_near_bottom(self, metrics: ViewportMetrics) -> bool:
        return metrics.viewport_height + metrics.scroll_y >= metrics.content_height - self.threshold

    async def on_scroll(self, metrics: ViewportMetrics) -> bool:
        """Load the next page if the viewport is near the bottom."""
        if not self.is_near_bottom(metrics):
            return False
        return await self.fire()

    async def fire(self) -> bool:
        """Signal proximity to the bottom without geometry."""
        if not self.controller.can_load_more:
            return False
        return await self.controller.load_next_page()
