from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable

from ..domain.ports import ReviewPromptPort, SettingsPort

_log = logging.getLogger(__name__)

MIN_RENDERS = 3
MIN_ACTIVATIONS = 3
PROMPT_INTERVAL = timedelta(days=3)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AskForReview:
    """Ask for an app review once usage is established and not too often."""

    settings: SettingsPort
    prompt: ReviewPromptPort
    clock: Callable[[], datetime] = field(default=_utcnow)

    def __call__(self) -> bool:
        renders = self.settings.render_count
        activations = self.settings.activation_count
        if not (renders > MIN_RENDERS and activations > MIN_ACTIVATIONS):
            _log.debug(
                "Review prompt criteria not met. Renders: %d, activations: %d.",
                renders,
                activations,
            )
            return False

        now = self.clock()
        last = self.settings.last_review_prompt
        if last is not None:
            if last.tzinfo is None:
                last = last.replace(tzinfo=timezone.utc)
            if now - last <= PROMPT_INTERVAL:
                _log.debug("Last review prompt too recent: %s.", last.isoformat())
                return False

        self.prompt.request_review()
        self.settings.last_review_prompt = now
        _log.info("Prompting the user for a review")
        return True


__all__ = ["AskForReview", "MIN_ACTIVATIONS", "MIN_RENDERS", "PROMPT_INTERVAL"]
