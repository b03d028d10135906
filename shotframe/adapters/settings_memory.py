from __future__ import annotations

from dataclasses import fields
from datetime import datetime
from typing import Optional

from shotframe.domain.entities import ImageQuality, SelectionFilter
from shotframe.domain.ports import SettingsPort
from shotframe.domain.settings import EntitlementMixin, SettingsConfig


class SettingsMemory(EntitlementMixin, SettingsPort):
    """Non-persistent settings used by tests and previews."""

    auto_save_to_files: bool
    auto_save_to_photos: bool
    auto_delete_screenshots: bool
    clear_images_on_background: bool
    selection_filter: SelectionFilter
    image_quality: ImageQuality
    render_count: int
    launch_count: int
    activation_count: int
    last_review_prompt: Optional[datetime]
    is_subscribed: bool

    def __init__(self, config: Optional[SettingsConfig] = None, **overrides: object) -> None:
        self.reset(config)
        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(self, key, value)

    def reset(self, config: Optional[SettingsConfig] = None) -> None:
        """Restore every setting to ``config`` (defaults when omitted)."""
        source = config or SettingsConfig()
        for item in fields(SettingsConfig):
            setattr(self, item.name, getattr(source, item.name))

    def snapshot(self) -> SettingsConfig:
        return SettingsConfig(**{item.name: getattr(self, item.name) for item in fields(SettingsConfig)})


__all__ = ["SettingsMemory"]
