import json
from pathlib import Path

import pytest

MILES_URL = (
    "irealb://500%20Miles%20High%3DCorea%20Chick%3D%3DBossa%20Nova%3DE-%3D7%3D"
    "1r34LbKcu77E%7CQy-7XyQL%20lcKQyX7%5EbBZLl%20cKQyX7-GZL%20lcKZBh7XE44T%5BQyX7-"
    "%7CA-7XlcKQyX7-FZL%20lcQKyX7h%23FZL%20lcKQy%20QLZCQyX9%23KQyX7ZB7%239%20lcKQyX7-"
    "CQ%7BY%20Q%20yXQyXZ%20%20lcKQyXLZAb%5EL%20lcKcl%20%20%7D%3DJazz-Bossa%20Nova%3D"
    "140%3D0%3D%3D%3D"
)

# Chord body of MILES_URL after the music prefix, before and after unscrambling
MILES_SCRAMBLED = (
    "7E|Qy-7XyQL lcKQyX7^bBZLl cKQyX7-GZL lcKZBh7XE44T[QyX7-|A-7XlcKQyX7-FZL "
    "lcQKyX7h#FZL lcKQy QLZCQyX9#KQyX7ZB7#9 lcKQyX7-CQ{Y Q yXQyXZ  lcKQyXLZAb^L lcKcl  }"
)
MILES_MUSIC = (
    "[T44E-7XyQKcl LZG-7XyQKcl LZBb^7XyQKcl LZBh7XyQ|E7#9XyQ|A-7XyQKcl LZF#h7XyQKcl "
    "LZF-7XyQKcl QLZC-7XyQKcl LZB7#9XyQKcl  ZXyQXyQ  Y{QC-7XyQKcl LZAb^7XyQKcl  }"
)


@pytest.fixture
def miles_url() -> str:
    return MILES_URL


@pytest.fixture
def miles_scrambled() -> str:
    return MILES_SCRAMBLED


@pytest.fixture
def miles_music() -> str:
    return MILES_MUSIC


@pytest.fixture
def write_json(tmp_path):
    """Write *data* as JSON under tmp_path and return the file path."""

    def _write(name: str, data) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        return path

    return _write
