import hashlib, logging
from pathlib import Path
from typing import List, Optional

from .config import check_algorithm
from .errors import AttestIOError

logger = logging.getLogger(__name__)

PACKAGE_ROOT = Path(__file__).resolve().parent


def source_files(root: Path) -> List[Path]:
    """The .py files that make up the tool, in a stable order."""
    if not root.is_dir():
        raise AttestIOError(f"Program source directory not found: {root}", path=root)
    files = [p for p in root.rglob("*.py") if "__pycache__" not in p.parts]
    return sorted(files, key=lambda p: p.relative_to(root).as_posix())


def digest_of_self(algorithm: str, root: Optional[Path] = None) -> str:
    """Hex digest over the tool's own source, binding an attestation to the code that produced it."""
    algo = check_algorithm(algorithm)
    root = Path(root) if root is not None else PACKAGE_ROOT
    files = source_files(root)
    if not files:
        raise AttestIOError(f"No program source found under {root}", path=root)
    h = hashlib.new(algo)
    for p in files:
        try:
            data = p.read_bytes()
        except OSError as e:
            raise AttestIOError(f"Cannot read program source {p}: {e}", path=p) from e
        # name and length frame each file so content cannot shift between modules
        h.update(f"{p.relative_to(root).as_posix()}\0{len(data)}\0".encode("utf-8"))
        h.update(data)
    logger.debug(f"Self-hash over {len(files)} files under {root}")
    return h.hexdigest()
