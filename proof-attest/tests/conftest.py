from datetime import datetime, timezone

import pytest

from proof_attest.config import Options

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

CLAIMS = {
    "name": "Ada Lovelace",
    "email": "ada@example.org",
    "home": "London",
    "desc": "Notes on the Analytical Engine",
    "domain": "example.org",
}


@pytest.fixture
def out_dir(tmp_path):
    d = tmp_path / "out"
    d.mkdir()
    return d


@pytest.fixture
def write_template(tmp_path):
    def _write(text, name="template.txt", encoding="utf-8"):
        p = tmp_path / name
        p.write_bytes(text.encode(encoding))
        return p
    return _write


@pytest.fixture
def make_options(out_dir):
    def _make(**over):
        fields = dict(CLAIMS, output=out_dir)
        fields.update(over)
        return Options.create(**fields)
    return _make


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW
