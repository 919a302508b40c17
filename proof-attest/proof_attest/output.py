import codecs, hashlib, logging, os, tempfile
from pathlib import Path
from typing import Tuple

from .config import check_algorithm
from .errors import AttestIOError, ConfigError

logger = logging.getLogger(__name__)


def encode_text(text: str, encoding: str) -> bytes:
    try:
        codecs.lookup(encoding)
        return text.encode(encoding)
    except LookupError as e:
        raise ConfigError(f"unknown text encoding {encoding!r}") from e
    except UnicodeEncodeError as e:
        raise ConfigError(f"attestation cannot be encoded as {encoding}: {e}") from e


def digest(algorithm: str, text: str, encoding: str) -> str:
    return hashlib.new(check_algorithm(algorithm), encode_text(text, encoding)).hexdigest()


def output_name(hex_digest: str, algorithm: str) -> str:
    return f"{hex_digest}_{algorithm}.txt"


def write(text: str, algorithm: str, encoding: str, output_dir) -> Tuple[Path, str]:
    """Write `text` to `{digest}_{algorithm}.txt` in an existing directory; return (absolute path, hex digest).

    The file appears only once it is complete; identical content maps to the same name and simply replaces it.
    """
    algo = check_algorithm(algorithm)
    data = encode_text(text, encoding)
    out_dir = Path(output_dir)
    if not out_dir.is_dir():
        raise AttestIOError(f"Output directory does not exist: {out_dir}", path=out_dir)
    hex_digest = hashlib.new(algo, data).hexdigest()
    target = (out_dir / output_name(hex_digest, algo)).resolve()
    tmp = None
    try:
        with tempfile.NamedTemporaryFile(dir=out_dir, prefix=".attest-", suffix=".tmp", delete=False) as f:
            tmp = f.name
            f.write(data)
        os.chmod(tmp, 0o644)
        os.replace(tmp, target)
        tmp = None
    except OSError as e:
        raise AttestIOError(f"Cannot write attestation to {out_dir}: {e}", path=out_dir) from e
    finally:
        if tmp is not None:
            try: os.unlink(tmp)
            except OSError: logger.warning(f"Could not remove temporary file {tmp}")
    logger.info(f"Wrote {len(data)} bytes to {target}")
    return target, hex_digest
