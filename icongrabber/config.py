"""Persistent user settings and the choices they index into."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping

CONFIG_PATH = "sdmc:/config/NewIconGrabber/config.json"


@dataclass(frozen=True)
class AssetProfile:
    name: str
    span_count: int
    row_height: int
    page_size: int
    asset_resolutions: tuple[str, ...]


ALLOWED_ASSET_PROFILES: tuple[AssetProfile, ...] = (
    AssetProfile("Square", 7, 150, 42, ("512x512", "1024x1024")),
    AssetProfile("Vertical", 7, 230, 42, ("600x900", "660x930", "342x482")),
    AssetProfile("Horizontal", 4, 130, 48, ("460x215", "920x430")),
)

ALLOWED_ASSET_STYLES: tuple[str, ...] = (
    "all",
    "alternate",
    "blurred",
    "white_logo",
    "material",
    "no_logo",
)

ALLOWED_SORT_ORDERS: tuple[tuple[str, str], ...] = (
    ("score_desc", "Highest Score"),
    ("score_asc", "Lowest Score"),
    ("score_old_desc", "Highest Score (Old)"),
    ("score_old_asc", "Lowest Score (Old)"),
    ("age_desc", "Newest First"),
    ("age_asc", "Oldest First"),
)


def _key(name: str) -> str:
    return field(default=None, metadata={"key": name})


@dataclass
class Settings:
    """User settings, stored as JSON with camel-case keys."""

    asset_profile: int = field(default=0, metadata={"key": "assetProfile"})
    asset_style: int = field(default=0, metadata={"key": "assetStyle"})
    sort_order: int = field(default=0, metadata={"key": "sortOrder"})
    nsfw: bool = field(default=False, metadata={"key": "nsfw"})
    display_search_results_icons: bool = field(
        default=True, metadata={"key": "displaySearchResultsIcons"}
    )
    auto_select_if_perfect_match: bool = field(
        default=True, metadata={"key": "autoSelectIfPerfectMatch"}
    )
    use_english_games_title: bool = field(default=True, metadata={"key": "useEnglishGamesTitle"})
    check_for_homebrew_updates: bool = field(
        default=True, metadata={"key": "ckeckForHomebrewUpdates"}
    )
    check_for_systweak_updates: bool = field(
        default=True, metadata={"key": "checkForSysTweakUpdates"}
    )
    show_debugging_view: bool = field(default=False, metadata={"key": "showDebuggingView"})
    show_fps: bool = field(default=False, metadata={"key": "showFPS"})
    log_level: int = field(default=0, metadata={"key": "logLevel"})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        """Build settings from a JSON object; missing keys keep their defaults."""
        if not isinstance(data, Mapping):
            raise TypeError("settings must be a JSON object")
        values = {}
        for f in fields(cls):
            key = f.metadata["key"]
            if key not in data:
                continue
            raw = data[key]
            if f.type == "bool":
                if not isinstance(raw, bool):
                    raise TypeError(f"{key} must be a boolean, got {raw!r}")
                values[f.name] = raw
            else:
                if not isinstance(raw, (int, float)):
                    raise TypeError(f"{key} must be a number, got {raw!r}")
                values[f.name] = int(raw)
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return {f.metadata["key"]: getattr(self, f.name) for f in fields(self)}

    @staticmethod
    def _pick(options, index: int, what: str):
        if not 0 <= index < len(options):
            raise IndexError(f"{what} index {index} out of range")
        return options[index]

    def current_asset_profile(self) -> AssetProfile:
        return self._pick(ALLOWED_ASSET_PROFILES, self.asset_profile, "asset profile")

    def current_asset_style(self) -> str:
        return self._pick(ALLOWED_ASSET_STYLES, self.asset_style, "asset style")

    def current_sort_order(self) -> str:
        return self._pick(ALLOWED_SORT_ORDERS, self.sort_order, "sort order")[0]


def load(path=CONFIG_PATH) -> Settings:
    """Read settings from ``path``, or return defaults when the file is absent."""
    config_file = Path(path)
    if not config_file.exists():
        return Settings()
    with config_file.open(encoding="utf-8") as handle:
        return Settings.from_dict(json.load(handle))


def save(settings: Settings, path=CONFIG_PATH) -> None:
    """Write settings to ``path``, creating its directory if needed."""
    config_file = Path(path)
    config_file.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(settings.to_dict(), indent=4, sort_keys=True)
    config_file.write_text(text + "\n", encoding="utf-8")