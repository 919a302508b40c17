import base64
import hashlib
import os

import pytest

from proof_attest import attest, nonce
from proof_attest.errors import ErrorKind, InternalError, TemplateNotFoundError
from proof_attest.render import Renderer


def test_default_template_end_to_end(make_options, out_dir):
    res = attest.generate(make_options())
    assert res.path.parent == out_dir.resolve()
    text = res.path.read_text(encoding="utf-8")
    assert "Ada Lovelace <ada@example.org>" in text
    assert res.nonce_bytes == 64
    assert os.listdir(out_dir) == [res.path.name]

def test_filename_binds_content(make_options):
    for algo in ("sha256", "sha512", "sha3_256", "blake2b"):
        res = attest.generate(make_options(algorithm=algo))
        data = res.path.read_bytes()
        assert res.path.name == f"{hashlib.new(algo, data).hexdigest()}_{algo}.txt"
        assert res.hex_digest == hashlib.new(algo, data).hexdigest()
        assert res.algorithm == algo

def test_two_runs_differ(make_options, fixed_clock):
    opts = make_options()
    first = attest.generate(opts, clock=fixed_clock)
    second = attest.generate(opts, clock=fixed_clock)
    assert first.hex_digest != second.hex_digest
    assert first.path != second.path

def test_zero_bit_nonce_is_deterministic_for_fixed_time(make_options, fixed_clock, out_dir):
    opts = make_options(bits=0)
    first = attest.generate(opts, clock=fixed_clock)
    second = attest.generate(opts, clock=fixed_clock)
    assert first.path == second.path
    assert os.listdir(out_dir) == [first.path.name]

@pytest.mark.parametrize("bits", [0, 8, 512, 2048, 8192])
def test_nonce_decodes_to_requested_size(make_options, write_template, bits):
    tpl = write_template("BEGIN\n{{ attest.uniqueDataWrapped }}\nEND\n")
    res = attest.generate(make_options(template=tpl, bits=bits))
    body = res.path.read_text(encoding="utf-8").split("BEGIN\n", 1)[1].rsplit("\nEND", 1)[0]
    if bits > 120 * 6:
        assert "\n" in body
    assert len(base64.b64decode("".join(body.split()))) == bits // 8

def test_placeholder_free_template_verbatim(make_options, write_template):
    text = "Just text.\r\nSecond line without newline"
    tpl = write_template(text)
    res = attest.generate(make_options(template=tpl))
    assert res.path.read_bytes() == text.encode("utf-8")

def test_template_and_output_encoding(make_options, write_template):
    tpl = write_template("Née {{ owner.name }}\n", encoding="latin-1")
    res = attest.generate(make_options(template=tpl, encoding="latin-1", name="Zoë"))
    assert res.path.read_bytes() == "Née Zoë\n".encode("latin-1")

def test_missing_template_is_user_error(make_options, tmp_path, out_dir):
    missing = tmp_path / "no-such-template.txt"
    with pytest.raises(TemplateNotFoundError) as exc:
        attest.generate(make_options(template=missing))
    assert exc.value.kind == ErrorKind.USER
    assert exc.value.path == missing
    assert os.listdir(out_dir) == []

def test_missing_output_dir_is_internal(make_options, tmp_path):
    target = tmp_path / "gone"
    with pytest.raises(InternalError) as exc:
        attest.generate(make_options(output=target))
    assert exc.value.stage == "write"
    assert exc.value.cause_kind == ErrorKind.IO
    assert exc.value.__cause__ is not None
    assert not target.exists()

def test_failed_write_leaves_no_partial_file(make_options, out_dir, monkeypatch):
    from proof_attest import output
    def boom(src, dst):
        raise OSError(28, "No space left on device")
    monkeypatch.setattr(output.os, "replace", boom)
    with pytest.raises(InternalError) as exc:
        attest.generate(make_options())
    assert "No space left on device" in str(exc.value)
    assert os.listdir(out_dir) == []

def test_template_error_is_internal(make_options, write_template, out_dir):
    tpl = write_template("{{ owner.phone }}")
    with pytest.raises(InternalError) as exc:
        attest.generate(make_options(template=tpl))
    assert exc.value.stage == "render"
    assert exc.value.cause_kind == ErrorKind.TEMPLATE
    assert os.listdir(out_dir) == []

def test_permissive_renderer(make_options, write_template):
    tpl = write_template("[{{ owner.phone }}]")
    res = attest.generate(make_options(template=tpl), renderer=Renderer(strict=False))
    assert res.path.read_text(encoding="utf-8") == "[]"

def test_unexpected_failure_is_wrapped(make_options, monkeypatch, out_dir):
    def broken(bits):
        raise RuntimeError("entropy source unavailable")
    monkeypatch.setattr(nonce, "generate", broken)
    with pytest.raises(InternalError) as exc:
        attest.generate(make_options())
    assert exc.value.stage == "generate_nonce"
    assert exc.value.cause_kind == ErrorKind.INTERNAL
    assert isinstance(exc.value.__cause__, RuntimeError)
    assert os.listdir(out_dir) == []

@pytest.mark.parametrize("text", [
    "line one\r\nline two\r\n",
    "a\rb",
    "a\rb\r",
])
def test_placeholder_free_template_keeps_line_endings(make_options, write_template, text):
    tpl = write_template(text)
    res = attest.generate(make_options(template=tpl))
    data = res.path.read_bytes()
    assert data == text.encode("utf-8")
    assert res.path.name == f"{hashlib.sha256(data).hexdigest()}_sha256.txt"

def test_crlf_template_renders_with_crlf(make_options, write_template):
    tpl = write_template("Owner: {{ owner.name }}\r\nDomain: {{ owned.domain }}\r\n")
    res = attest.generate(make_options(template=tpl))
    assert res.path.read_bytes() == b"Owner: Ada Lovelace\r\nDomain: example.org\r\n"

@pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0, reason="root ignores directory permissions")
def test_read_only_output_dir_is_internal(make_options, out_dir):
    out_dir.chmod(0o555)
    try:
        with pytest.raises(InternalError) as exc:
            attest.generate(make_options())
        assert exc.value.stage == "write"
        assert exc.value.cause_kind == ErrorKind.IO
        assert os.listdir(out_dir) == []
    finally:
        out_dir.chmod(0o755)
