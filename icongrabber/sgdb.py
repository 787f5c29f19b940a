"""Client for the public SteamGridDB search API."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from . import http

BASE_URL = "https://www.steamgriddb.com/api/public/"
_HEADERS = ["Content-Type: application/json"]


class ApiException(Exception):
    """Raised when the API reports a failure or answers with something unreadable."""


def _require(data: Mapping[str, Any], key: str, kind: type):
    if not isinstance(data, Mapping):
        raise TypeError("expected a JSON object")
    if key not in data:
        raise KeyError(f"missing key {key!r}")
    value = data[key]
    if kind is int:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"{key} must be a number, got {value!r}")
        return int(value)
    if not isinstance(value, kind):
        raise TypeError(f"{key} must be {kind.__name__}, got {value!r}")
    return value


@dataclass
class Asset:
    id: int = 0
    style: str = ""
    nsfw: bool = False
    humor: bool = False
    language: str = ""
    thumb: str = ""
    date: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Asset":
        """Build an asset; every field must be present."""
        return cls(
            id=_require(data, "id", int),
            style=_require(data, "style", str),
            nsfw=_require(data, "nsfw", bool),
            humor=_require(data, "humor", bool),
            language=_require(data, "language", str),
            thumb=_require(data, "thumb", str),
            date=_require(data, "date", int),
        )


@dataclass
class Game:
    id: int = 0
    name: str = ""
    types: list[str] = field(default_factory=list)
    release_date: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Game":
        """Build a game; ``release_date`` must be present but may be null."""
        game_id = _require(data, "id", int)
        name = _require(data, "name", str)
        if "release_date" not in data:
            raise KeyError("missing key 'release_date'")
        raw_date = data["release_date"]
        release_date = None if raw_date is None else _require(data, "release_date", int)
        return cls(id=game_id, name=name, release_date=release_date)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "release_date": self.release_date}


@dataclass
class SearchResult:
    game: Game = field(default_factory=Game)
    total: int = 0
    assets: list[Asset] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SearchResult":
        """Build a result; missing keys keep their defaults."""
        if not isinstance(data, Mapping):
            raise TypeError("expected a JSON object")
        result = cls()
        if "game" in data:
            result.game = Game.from_dict(data["game"])
        if "total" in data:
            result.total = _require(data, "total", int)
        if "assets" in data:
            assets = data["assets"]
            if not isinstance(assets, list):
                raise TypeError("assets must be a list")
            result.assets = [Asset.from_dict(item) for item in assets]
        return result


def _post(endpoint: str, body: Mapping[str, Any]) -> str:
    payload = json.dumps(body, sort_keys=True, separators=(",", ":"))
    return http.post(BASE_URL + endpoint, payload, headers=_HEADERS)


def _data(response: str):
    parsed = json.loads(response)
    success = parsed["success"]
    if not isinstance(success, bool):
        raise TypeError(f"success must be a boolean, got {success!r}")
    if not success:
        message = parsed["errors"][0]
        if not isinstance(message, str):
            raise TypeError(f"error message must be a string, got {message!r}")
        raise ApiException(message)
    return parsed["data"]


def get_assets_for_game(
    game_id: int,
    asset_type: str,
    sort_order: str,
    asset_resolutions: Sequence[str] | None = None,
    asset_styles: Sequence[str] | None = None,
    max_assets_per_page: int = 48,
    page: int = 0,
    nsfw: bool = False,
) -> SearchResult:
    """Fetch one page of assets of ``asset_type`` for a game."""
    body = {
        "order": sort_order,
        "animated": False,
        "asset_type": asset_type,
        "game_id": [game_id],
        "page": page,
        "limit": max_assets_per_page,
        "nsfw": nsfw,
        "styles": list(asset_styles or []),
        "dimensions": list(asset_resolutions or []),
    }
    response = _post("search/assets", body)
    try:
        return SearchResult.from_dict(_data(response))
    except Exception as exc:
        raise ApiException(f"Failed to parse response: {exc}") from exc


def search_games(search_term: str) -> list[SearchResult]:
    """Search games by name, best scored icons first."""
    body = {
        "asset_type": "icon",
        "filters": {"order": "score_desc"},
        "term": search_term,
    }
    response = _post("search/main/games", body)
    try:
        games = _data(response)["games"]
        if not isinstance(games, list):
            raise TypeError("games must be a list")
        return [SearchResult.from_dict(item) for item in games]
    except Exception as exc:
        raise ApiException(f"Failed to parse response: {exc}") from exc