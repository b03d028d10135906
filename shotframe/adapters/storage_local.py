from __future__ import annotations

import json
import logging
import os
from dataclasses import fields, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from shotframe.domain.entities import ImageQuality, SelectionFilter
from shotframe.domain.ports import SettingsPort
from shotframe.domain.settings import EntitlementMixin, SettingsConfig

_log = logging.getLogger(__name__)

_ENUM_FIELDS = {
    "selection_filter": SelectionFilter,
    "image_quality": ImageQuality,
}


class _Persisted:
    """Attribute bridged to ``StorageLocal.config``; writes save immediately."""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Optional["StorageLocal"], objtype: Optional[type] = None) -> Any:
        if obj is None:
            return self
        return getattr(obj.config, self.name)

    def __set__(self, obj: "StorageLocal", value: Any) -> None:
        coerced = _coerce_field(self.name, value, getattr(obj.config, self.name))
        obj.config = replace(obj.config, **{self.name: coerced})
        obj.save()


class StorageLocal(EntitlementMixin, SettingsPort):
    """Local filesystem storage for user settings and usage counters (JSON)."""

    FILE_NAME = "user_settings.json"

    auto_save_to_files = _Persisted()
    auto_save_to_photos = _Persisted()
    auto_delete_screenshots = _Persisted()
    clear_images_on_background = _Persisted()
    selection_filter = _Persisted()
    image_quality = _Persisted()
    render_count = _Persisted()
    launch_count = _Persisted()
    activation_count = _Persisted()
    last_review_prompt = _Persisted()
    is_subscribed = _Persisted()

    def __init__(self, root_dir: str = ".") -> None:
        self.root = root_dir
        self.config = self.config_from_dict(self.load_user_settings() or {})
        _log.debug(
            "Loaded settings: subscribed=%s renders=%d launches=%d activations=%d",
            self.config.is_subscribed,
            self.config.render_count,
            self.config.launch_count,
            self.config.activation_count,
        )

    @property
    def path(self) -> str:
        return os.path.join(self.root, self.FILE_NAME)

    # ---- User settings (JSON) ----
    def save_user_settings(self, payload: Dict[str, Any]) -> None:
        os.makedirs(self.root, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)

    def load_user_settings(self) -> Optional[Dict[str, Any]]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            _log.warning("Ignoring unreadable settings file %s: %s", self.path, exc)
            return None
        if not isinstance(data, dict):
            _log.warning("Ignoring settings file %s: not a JSON object.", self.path)
            return None
        return data

    def save(self) -> None:
        self.save_user_settings(self.config_to_dict(self.config))

    # ---- Conversion ----
    @staticmethod
    def config_to_dict(config: SettingsConfig) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        for item in fields(SettingsConfig):
            value = getattr(config, item.name)
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, datetime):
                value = value.isoformat()
            payload[item.name] = value
        return payload

    @staticmethod
    def config_from_dict(payload: Dict[str, Any]) -> SettingsConfig:
        defaults = SettingsConfig()
        values: Dict[str, Any] = {}
        for item in fields(SettingsConfig):
            default = getattr(defaults, item.name)
            if item.name not in payload:
                values[item.name] = default
                continue
            values[item.name] = _coerce_field(item.name, payload[item.name], default)
        unknown = set(payload) - set(values)
        if unknown:
            _log.info("Ignoring unknown settings keys: %s", ", ".join(sorted(unknown)))
        return SettingsConfig(**values)


def _coerce_field(name: str, value: Any, default: Any) -> Any:
    if name in _ENUM_FIELDS:
        try:
            return _ENUM_FIELDS[name](value)
        except ValueError:
            _log.warning("Invalid %s %r, using %s.", name, value, default)
            return default
    if name == "last_review_prompt":
        return _coerce_datetime(value, default)
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        if isinstance(value, (int, float)):
            return bool(value)
        return default
    if isinstance(default, int):
        try:
            return max(0, int(value))
        except (TypeError, ValueError):
            _log.warning("Invalid %s %r, using %s.", name, value, default)
            return default
    return value


def _coerce_datetime(value: Any, default: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            _log.warning("Invalid review prompt date %r.", value)
            return default
    else:
        return default
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


__all__ = ["StorageLocal"]
