"""Landing page state shown while the visual has nothing to chart."""

from __future__ import annotations

from dataclasses import dataclass

from dumbbell.log import log_event


@dataclass(slots=True)
class LandingPageState:
    """Track whether the landing page is shown.

    `enabled` is True while the landing page is visible. `removed` records
    that it was hidden after having been shown, so a renderer knows to tear
    it down exactly once.
    """

    enabled: bool = False
    removed: bool = False

    def handle_display(self, is_view_model_valid: bool) -> bool:
        """Update the state for a new model.

        Args:
            is_view_model_valid: Whether the current model is chartable.

        Returns:
            True when the landing page should be visible.
        """

        if not is_view_model_valid:
            if not self.enabled:
                log_event("landing_page_shown", level="debug")
            self.enabled = True
            self.removed = False
            return True

        if self.enabled:
            log_event("landing_page_removed", level="debug")
        self.removed = self.enabled and not self.removed
        self.enabled = False
        return False
