from __future__ import annotations

"""Typed user settings, free-tier limits and entitlement rules."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .entities import ImageQuality, SelectionFilter

FREE_RESULT_LIMIT = 30
"""Framed results a non-subscriber may save before the purchase sheet shows."""


@dataclass
class SettingsConfig:
    """Snapshot of every persisted user setting and usage counter."""

    auto_save_to_files: bool = False
    auto_save_to_photos: bool = False
    auto_delete_screenshots: bool = False
    clear_images_on_background: bool = False
    selection_filter: SelectionFilter = SelectionFilter.ALL
    image_quality: ImageQuality = ImageQuality.ORIGINAL
    render_count: int = 0
    launch_count: int = 0
    activation_count: int = 0
    last_review_prompt: Optional[datetime] = None
    is_subscribed: bool = False


class EntitlementMixin:
    """Derived entitlement predicates for anything exposing the counters."""

    render_count: int
    is_subscribed: bool

    @property
    def can_save_result(self) -> bool:
        return bool(self.is_subscribed) or self.render_count <= FREE_RESULT_LIMIT

    @property
    def free_results_remaining(self) -> int:
        return max(0, FREE_RESULT_LIMIT - self.render_count)


__all__ = ["EntitlementMixin", "FREE_RESULT_LIMIT", "SettingsConfig"]
