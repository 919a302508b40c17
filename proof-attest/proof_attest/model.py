import hashlib
from datetime import datetime
from typing import Any, Dict, Optional

from . import PACKAGE, nonce as nonces
from .config import Options


def build_model(options: Options, nonce: bytes, self_hash: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Assemble the tree the template sees as `owner`, `owned` and `attest`."""
    now = now or datetime.now().astimezone()
    unique = nonces.encode(nonce)
    return {
        "owner": {"name": options.name, "email": options.email},
        "owned": {"desc": options.desc, "domain": options.domain},
        "attest": {
            "home": options.home,
            "uniqueData": unique,
            "uniqueDataWrapped": nonces.wrap(unique),
            "uniqueDataBytes": len(nonce),
            "uniqueDataBits": len(nonce) * 8,
            "uniqueDataHash": hashlib.new(options.algorithm, nonce).hexdigest(),
            "date": now.isoformat(timespec="seconds"),
            "tz": now.tzname() or "",
            "package": dict(PACKAGE),
            "hash": {"algo": options.algorithm, "hex": self_hash},
        },
    }
