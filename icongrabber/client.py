"""Search SteamGridDB for grid images and apply them as title icons."""

from __future__ import annotations

import argparse
import json
import logging
import shutil
import sys
from pathlib import Path
from typing import Any, Mapping, Sequence
from urllib.parse import quote

import requests

from . import http
from .utils import overwrite_icon

logger = logging.getLogger(__name__)

CONFIG_PATH = "sdmc:/config/icongrabber/config.json"
GAME_ICONS_ROOT = "sdmc:/gameIcons/"
CONTENTS_ROOT = "sdmc:/atmosphere/contents/"

API_URL = "https://www.steamgriddb.com/api/v2/"
USER_AGENT = "icongrabber/1.0"

ALLOWED_STYLES: tuple[str, ...] = (
    "all styles",
    "alternate",
    "blurred",
    "white_logo",
    "material",
    "no_logo",
)

ALLOWED_IMAGE_RESOLUTIONS: tuple[str, ...] = (
    "460x215",
    "920x430",
    "600x900",
    "342x482",
    "660x930",
    "512x512",
    "1024x1024",
)

_FAILURE: dict[str, Any] = {"success": False}


def _default_config() -> dict[str, Any]:
    return {"api_token": "", "style_id": 0, "resolution_id": 5}


def load_config(path=CONFIG_PATH) -> dict[str, Any]:
    """Read the JSON config at ``path``, or return the defaults if it is absent."""
    config_file = Path(path)
    if not config_file.exists():
        logger.info("using default config")
        return _default_config()
    logger.info("Loading config from file")
    with config_file.open(encoding="utf-8") as handle:
        return json.load(handle)


def save_config(config: Mapping[str, Any], path=CONFIG_PATH) -> None:
    """Write ``config`` as indented JSON, creating the directory if needed."""
    config_file = Path(path)
    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        logger.info("Could not create directory")
        raise
    config_file.write_text(json.dumps(dict(config), indent=4) + "\n", encoding="utf-8")
    logger.info("saved config")


def _pick(options: Sequence[str], index: Any, what: str) -> str:
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(options):
        raise IndexError(f"{what} {index!r} out of range")
    return options[index]


def build_grid_query(config: Mapping[str, Any]) -> str:
    """Query string selecting the configured styles and resolution."""
    style_id = config["style_id"]
    if style_id == 0:
        styles = ",".join(ALLOWED_STYLES[1:])
    else:
        styles = _pick(ALLOWED_STYLES, style_id, "style_id")
    dimensions = _pick(ALLOWED_IMAGE_RESOLUTIONS, config["resolution_id"], "resolution_id")
    return f"?styles={styles}&dimensions={dimensions}&mimes=image/png,image/jpeg"


def _api_headers(api_token: str) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_token}",
        "User-Agent": USER_AGENT,
    }


def _api_get(url: str, api_token: str) -> dict[str, Any]:
    try:
        response = requests.get(url, headers=_api_headers(api_token))
    except requests.RequestException as exc:
        logger.info("request failed: %s", exc)
        return dict(_FAILURE)
    return json.loads(response.text)


def request_games(game_name: str, api_token: str) -> dict[str, Any]:
    """Look up games whose names match ``game_name``."""
    url = API_URL + "search/autocomplete/" + quote(game_name, safe="")
    return _api_get(url, api_token)


def request_icons(game_id, config: Mapping[str, Any]) -> dict[str, Any]:
    """Fetch the grid images of a game, filtered by the configured style and size."""
    url = API_URL + "grids/game/" + str(game_id) + build_grid_query(config)
    return _api_get(url, config["api_token"])


def base_name(path: str) -> str:
    """The part of ``path`` after its last ``/`` or ``\\``."""
    cut = max(path.rfind("/"), path.rfind("\\"))
    return path[cut + 1:]


def download_file(game: Mapping[str, Any], thumbnail: bool, root=GAME_ICONS_ROOT) -> str:
    """Download an image into the cache and return its path, or "" on failure.

    Files already present in the cache are not fetched again.
    """
    url = game["thumb"]
    out_dir = Path(root) / ("thumbnails" if thumbnail else "full")
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        logger.info("Could not create directory")

    filename = f"{json.dumps(game['width'])}x{json.dumps(game['height'])}_{base_name(url)}"
    out_path = out_dir / filename
    result = str(out_path)

    if not out_path.exists():
        try:
            http.download(url, out_path)
        except (http.HttpError, OSError) as exc:
            logger.info("download failed: %s", exc)
            out_path.unlink(missing_ok=True)
            result = ""

    if not thumbnail:
        if result:
            logger.info("Image Downloaded. Apply to a title in main menu.")
        else:
            logger.info("Image Download Failed.")
    return result


def _title_icon_path(tid: str, contents_root) -> Path:
    return Path(contents_root) / tid / "icon.jpg"


def overwrite_title_icon(tid: str, image_path, contents_root=CONTENTS_ROOT) -> Path:
    """Resize ``image_path`` into the icon of title ``tid`` and return the icon path."""
    out_path = _title_icon_path(tid, contents_root)
    overwrite_icon(out_path, str(image_path))
    return out_path


def delete_title_icon(tid: str, contents_root=CONTENTS_ROOT) -> bool:
    """Remove the custom icon of ``tid``; return whether one was there."""
    icon = _title_icon_path(tid, contents_root)
    try:
        icon.unlink()
    except FileNotFoundError:
        return False
    logger.info("Icon deleted")
    return True


def list_downloaded_icons(root=GAME_ICONS_ROOT) -> list[Path]:
    """Full-size downloaded images, sorted by name."""
    return sorted((Path(root) / "full").iterdir(), key=lambda entry: entry.name)


def clear_image_cache(root=GAME_ICONS_ROOT) -> None:
    """Empty the downloaded image cache; applied icons are kept."""
    for sub in ("full", "thumbnails"):
        directory = Path(root) / sub
        if directory.exists():
            shutil.rmtree(directory)
            directory.mkdir()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="icongrabber", description="Fetch and apply title icons.")
    parser.add_argument("--config", default=CONFIG_PATH, help="config file")
    parser.add_argument("--root", default=GAME_ICONS_ROOT, help="image cache directory")
    parser.add_argument("--contents", default=CONTENTS_ROOT, help="title contents directory")
    commands = parser.add_subparsers(dest="command", required=True)

    config_cmd = commands.add_parser("config", help="show or change settings")
    config_cmd.add_argument("--token", help="API token")
    config_cmd.add_argument("--style", choices=ALLOWED_STYLES)
    config_cmd.add_argument("--resolution", choices=ALLOWED_IMAGE_RESOLUTIONS)

    search_cmd = commands.add_parser("search", help="search games by name")
    search_cmd.add_argument("name", nargs="*")

    icons_cmd = commands.add_parser("icons", help="list images of a game")
    icons_cmd.add_argument("game_id")

    download_cmd = commands.add_parser("download", help="download an image of a game")
    download_cmd.add_argument("game_id")
    download_cmd.add_argument("asset_id", type=int)
    download_cmd.add_argument("--thumbnail", action="store_true")

    apply_cmd = commands.add_parser("apply", help="set an image as a title icon")
    apply_cmd.add_argument("tid")
    apply_cmd.add_argument("image")

    delete_cmd = commands.add_parser("delete", help="delete a title icon")
    delete_cmd.add_argument("tid")

    commands.add_parser("list", help="list downloaded images")
    commands.add_parser("clear-cache", help="delete downloaded images")
    return parser


def _visible_icons(icon_list: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    if icon_list.get("success") is not True:
        return []
    icons = []
    for item in icon_list.get("data") or []:
        if item.get("lock"):
            logger.info("skipped DMCA hidden image")
            continue
        icons.append(item)
    return icons


def _run(args: argparse.Namespace) -> int:
    if args.command == "config":
        config = load_config(args.config)
        if args.token is None and args.style is None and args.resolution is None:
            print(json.dumps(config, indent=4))
            return 0
        if args.token is not None:
            config["api_token"] = args.token
        if args.style is not None:
            config["style_id"] = ALLOWED_STYLES.index(args.style)
        if args.resolution is not None:
            config["resolution_id"] = ALLOWED_IMAGE_RESOLUTIONS.index(args.resolution)
        save_config(config, args.config)
        print("Saved")
        return 0

    if args.command == "search":
        text = " ".join(args.name) or " "
        found = request_games(text, load_config(args.config)["api_token"])
        games = found.get("data") or [] if found.get("success") is True else []
        if not games:
            print("No game found")
            return 1
        for game in games:
            print(f"{game['id']}\t{game['name']}")
        return 0

    if args.command == "icons":
        icons = _visible_icons(request_icons(args.game_id, load_config(args.config)))
        if not icons:
            print("No icon found. Maybe select a different icon style or resolution.")
            return 1
        for icon in icons:
            print(f"{json.dumps(icon['id'])}\t{icon['thumb']}")
        return 0

    if args.command == "download":
        icons = _visible_icons(request_icons(args.game_id, load_config(args.config)))
        chosen = next((icon for icon in icons if icon.get("id") == args.asset_id), None)
        if chosen is None:
            print("No icon found")
            return 1
        path = download_file(chosen, args.thumbnail, args.root)
        if not path:
            print("Image Download Failed.")
            return 1
        print(path)
        return 0

    if args.command == "apply":
        icon = overwrite_title_icon(args.tid, args.image, args.contents)
        if not icon.exists():
            print("Icon could not be saved")
            return 1
        print("Icon saved")
        return 0

    if args.command == "delete":
        delete_title_icon(args.tid, args.contents)
        print("Icon deleted")
        return 0

    if args.command == "list":
        try:
            entries = list_downloaded_icons(args.root)
        except FileNotFoundError:
            entries = []
        if not entries:
            print("No files found.")
            return 0
        for entry in entries:
            print(entry.name)
        return 0

    clear_image_cache(args.root)
    print("Done")
    return 0


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        return _run(args)
    except (OSError, ValueError, IndexError, KeyError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())