# icongrabber

Find artwork for your games on SteamGridDB, download it, and turn it into
256×256 JPEG title icons.

## Installation

```
pip install .
```

For development and running the tests:

```
pip install ".[test]"
pytest
```

## Command line

Installing the package provides the `icongrabber` command:

```
icongrabber --help
```

Global options choose where things live:

- `--config` – the JSON config file (default `sdmc:/config/icongrabber/config.json`)
- `--root` – the image cache directory (default `sdmc:/gameIcons/`)
- `--contents` – the title contents directory icons are written to
  (default `sdmc:/atmosphere/contents/`)

Subcommands:

- `config` – print the config, or change it with `--token`, `--style`
  (`all styles`, `alternate`, `blurred`, `white_logo`, `material`, `no_logo`)
  and `--resolution` (`460x215`, `920x430`, `600x900`, `342x482`, `660x930`,
  `512x512`, `1024x1024`).
- `search NAME...` – list matching games as `id<TAB>name`.
- `icons GAME_ID` – list the game's grid images in the configured style and
  resolution as `id<TAB>thumbnail url`; images locked by a DMCA notice are skipped.
- `download GAME_ID ASSET_ID [--thumbnail]` – download one image into
  `full/` (or `thumbnails/`) under the cache and print its path. Files already
  in the cache are not fetched again.
- `apply TID IMAGE` – resize an image to 256×256 and write it as
  `<contents>/<TID>/icon.jpg`.
- `delete TID` – remove a title's custom icon.
- `list` – list the downloaded full-size images.
- `clear-cache` – empty the `full/` and `thumbnails/` cache directories;
  applied icons are kept.

A session might look like:

```
icongrabber config --token token --style alternate --resolution 512x512
icongrabber search Celeste
icongrabber icons 12345
icongrabber download 12345 67890
icongrabber apply 0100000000010000 sdmc:/gameIcons/full/512x512_image.png
```

The `search`, `icons` and `download` commands use the SteamGridDB v2 API and
send the configured token as a bearer token.

## Library use

### Settings

`icongrabber.config` holds a separate set of settings stored as JSON with
camel-case keys. Missing keys fall back to the defaults.

```python
from icongrabber import config

settings = config.load("config.json")
print(settings.current_asset_profile().name)
print(settings.current_asset_style())
print(settings.current_sort_order())

config.save(settings, "config.json")
```

Three asset profiles exist: Square (512x512, 1024x1024), Vertical
(600x900, 660x930, 342x482) and Horizontal (460x215, 920x430). Styles are
`all`, `alternate`, `blurred`, `white_logo`, `material` and `no_logo`. Sort
orders are `score_desc`, `score_asc`, `score_old_desc`, `score_old_asc`,
`age_desc` and `age_asc`.

### Searching SteamGridDB

`icongrabber.sgdb` talks to the public search API, which needs no token.

```python
from icongrabber import sgdb

for result in sgdb.search_games("Celeste"):
    print(result.game.id, result.game.name)

assets = sgdb.get_assets_for_game(
    result.game.id, "grid", "score_desc", ["512x512"], ["alternate"], 48, 0, False
)
for asset in assets.assets:
    print(asset.id, asset.thumb)
```

API failures and unreadable answers raise `sgdb.ApiException`.

### Making an icon

```python
from icongrabber import utils

path = utils.get_icon_path(utils.format_application_id(0x0100000000010000))
utils.overwrite_icon(path, "artwork.png", None)
```

`overwrite_icon` reads an image from a file or from an in-memory buffer,
resizes it to 256×256 and writes it as a JPEG, creating the directory it
goes into. An image that cannot be decoded is logged and nothing is written;
giving neither a path nor a buffer raises `ValueError`.

`utils` also has `extract_title_id`, `capitalize_words`, `to_upper_string`,
`clear_special_characters`, `get_file_extension` and `format_strings_array`.

### HTTP helpers

`icongrabber.http` offers `get`, `post` and `download` functions built on a
reusable `HTTP` session. Keyword options are `headers` (a list of
`"Name: value"` lines), `byte_range` (a `Range`), `timeout` (milliseconds),
`cancel` (a `threading.Event`), `cookies` (a list of `Cookie`), `progress`
(a `callback(total, received)`) and `user_agent`. Failed transfers and
responses with a status of 400 or above raise `HttpError`.

```python
from icongrabber import http

body = http.get("https://example.com/data.json", timeout=3000)
```

### Worker threads

`icongrabber.thread.ThreadPool` runs submitted tasks on worker threads;
each task is called with that worker's `HTTP` session. Use it as a context
manager or call `stop()` to end the workers.

## What it does not do

There is no interactive on-screen menu, and the package cannot read the list
of installed titles: you give the title id yourself to `apply` and `delete`.