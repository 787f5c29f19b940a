import io
import json

import pytest
import requests
import responses
from PIL import Image

from icongrabber import client

AUTOCOMPLETE = "https://www.steamgriddb.com/api/v2/search/autocomplete/"
GRIDS = "https://www.steamgriddb.com/api/v2/grids/game/"


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        yield mock


def _png_bytes(size=(40, 30), color=(200, 10, 10)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def test_load_config_defaults_when_missing(tmp_path):
    config = client.load_config(tmp_path / "missing.json")
    assert config == {"api_token": "", "style_id": 0, "resolution_id": 5}


def test_save_and_load_round_trip(tmp_path):
    path = tmp_path / "nested" / "config.json"
    config = {"api_token": "token", "style_id": 2, "resolution_id": 1}
    client.save_config(config, path)
    assert client.load_config(path) == config
    assert path.read_text(encoding="utf-8").endswith("\n")


def test_grid_query_all_styles():
    query = client.build_grid_query({"style_id": 0, "resolution_id": 5})
    assert query == (
        "?styles=alternate,blurred,white_logo,material,no_logo"
        "&dimensions=512x512&mimes=image/png,image/jpeg"
    )


def test_grid_query_single_style():
    query = client.build_grid_query({"style_id": 2, "resolution_id": 2})
    assert query.startswith("?styles=blurred&dimensions=600x900&")


@pytest.mark.parametrize("config", [
    {"style_id": 9, "resolution_id": 0},
    {"style_id": 0, "resolution_id": 7},
    {"style_id": -1, "resolution_id": 0},
])
def test_grid_query_out_of_range(config):
    with pytest.raises(IndexError):
        client.build_grid_query(config)


def test_request_games_escapes_and_authorizes(rsps):
    payload = {"success": True, "data": [{"id": 3, "name": "Some Game"}]}
    rsps.add(responses.GET, AUTOCOMPLETE + "Some%20Game", json=payload)
    result = client.request_games("Some Game", "token")
    assert result == payload
    sent = rsps.calls[0].request
    assert sent.headers["Authorization"] == "Bearer token"
    assert sent.url == AUTOCOMPLETE + "Some%20Game"


def test_request_games_transport_failure(rsps):
    rsps.add(responses.GET, AUTOCOMPLETE + "x", body=requests.ConnectionError("down"))
    assert client.request_games("x", "token") == {"success": False}


def test_request_icons_url(rsps):
    rsps.add(responses.GET, GRIDS + "42", json={"success": True, "data": []})
    config = {"api_token": "token", "style_id": 1, "resolution_id": 0}
    assert client.request_icons(42, config) == {"success": True, "data": []}
    url = rsps.calls[0].request.url
    assert url == GRIDS + "42" + client.build_grid_query(config)


@pytest.mark.parametrize("path, expected", [
    ("https://cdn.example.com/a/b/file.png", "file.png"),
    ("dir\\sub\\file.jpg", "file.jpg"),
    ("plain", "plain"),
])
def test_base_name(path, expected):
    assert client.base_name(path) == expected


def test_download_file_caches(rsps, tmp_path):
    url = "https://cdn.example.com/thumb/abc.png"
    body = _png_bytes()
    rsps.add(responses.GET, url, body=body)
    game = {"thumb": url, "width": 460, "height": 215, "id": 7}
    path = client.download_file(game, True, tmp_path)
    assert path == str(tmp_path / "thumbnails" / "460x215_abc.png")
    with open(path, "rb") as handle:
        assert handle.read() == body
    assert client.download_file(game, True, tmp_path) == path
    assert len(rsps.calls) == 1


def test_download_file_failure(rsps, tmp_path):
    url = "https://cdn.example.com/full/missing.png"
    rsps.add(responses.GET, url, status=404)
    game = {"thumb": url, "width": 512, "height": 512}
    assert client.download_file(game, False, tmp_path) == ""
    assert list((tmp_path / "full").iterdir()) == []


def test_overwrite_and_delete_title_icon(tmp_path):
    image = tmp_path / "src.png"
    image.write_bytes(_png_bytes())
    contents = tmp_path / "contents"
    icon = client.overwrite_title_icon("0100000000001000", image, contents)
    assert icon == contents / "0100000000001000" / "icon.jpg"
    with Image.open(icon) as written:
        assert written.size == (256, 256)
        assert written.format == "JPEG"
    assert client.delete_title_icon("0100000000001000", contents) is True
    assert not icon.exists()
    assert client.delete_title_icon("0100000000001000", contents) is False


def test_list_downloaded_icons_sorted(tmp_path):
    full = tmp_path / "full"
    full.mkdir()
    for name in ("b.png", "a.png", "c.png"):
        (full / name).write_bytes(b"x")
    names = [entry.name for entry in client.list_downloaded_icons(tmp_path)]
    assert names == sorted(names)
    assert set(names) == {"a.png", "b.png", "c.png"}


def test_clear_image_cache(tmp_path):
    for sub in ("full", "thumbnails"):
        (tmp_path / sub).mkdir()
        (tmp_path / sub / "img.png").write_bytes(b"x")
    client.clear_image_cache(tmp_path)
    assert list((tmp_path / "full").iterdir()) == []
    assert list((tmp_path / "thumbnails").iterdir()) == []


def test_main_config_saves(tmp_path):
    path = tmp_path / "config.json"
    code = client.main(["--config", str(path), "config", "--token", "token", "--style", "material"])
    assert code == 0
    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved["api_token"] == "token"
    assert saved["style_id"] == client.ALLOWED_STYLES.index("material")


def test_main_search_prints_games(rsps, tmp_path, capsys):
    payload = {"success": True, "data": [{"id": 11, "name": "Found Game"}]}
    rsps.add(responses.GET, AUTOCOMPLETE + "Found%20Game", json=payload)
    code = client.main(["--config", str(tmp_path / "c.json"), "search", "Found", "Game"])
    assert code == 0
    assert "Found Game" in capsys.readouterr().out


def test_main_search_nothing_found(rsps, tmp_path, capsys):
    rsps.add(responses.GET, AUTOCOMPLETE + "nothing", json={"success": True, "data": []})
    code = client.main(["--config", str(tmp_path / "c.json"), "search", "nothing"])
    assert code == 1
    assert "No game found" in capsys.readouterr().out


def test_main_icons_skips_locked(rsps, tmp_path, capsys):
    payload = {"success": True, "data": [
        {"id": 1, "thumb": "https://cdn.example.com/open.png", "lock": False},
        {"id": 2, "thumb": "https://cdn.example.com/hidden.png", "lock": True},
    ]}
    rsps.add(responses.GET, GRIDS + "5", json=payload)
    code = client.main(["--config", str(tmp_path / "c.json"), "icons", "5"])
    out = capsys.readouterr().out
    assert code == 0
    assert "open.png" in out
    assert "hidden.png" not in out


def test_main_apply_writes_icon(tmp_path):
    image = tmp_path / "src.png"
    image.write_bytes(_png_bytes())
    contents = tmp_path / "contents"
    code = client.main(["--contents", str(contents), "apply", "0100000000002000", str(image)])
    assert code == 0
    assert (contents / "0100000000002000" / "icon.jpg").is_file()