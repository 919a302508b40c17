import codecs, dataclasses, hashlib, logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV = "PROOF_ATTEST_CONFIG"
DEFAULT_TEMPLATE = str(Path(__file__).parent / "templates" / "proof.txt")


@dataclass(frozen=True)
class Defaults:
    """Values used for any option the caller leaves out."""
    template: str = DEFAULT_TEMPLATE
    bits: int = 512
    encoding: str = "utf-8"
    algorithm: str = "sha256"
    output: str = "."


def load_defaults(path: Optional[str] = None) -> Defaults:
    """Overlay a YAML file on the built-in defaults. No path means built-ins only."""
    if path is None:
        return Defaults()
    p = Path(path)
    if not p.is_file():
        raise ConfigError(f"Config file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {p}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file {p}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {p} must contain a mapping")
    bad = sorted((k for k in data if not isinstance(k, str)), key=str)
    if bad:
        raise ConfigError(f"Config file {p} has non-string keys: {', '.join(map(str, bad))}")
    known = {f.name for f in dataclasses.fields(Defaults)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown keys in config file {p}: {', '.join(map(str, unknown))}")
    logger.debug(f"Loaded defaults from {p}: {sorted(data)}")
    return dataclasses.replace(Defaults(), **data)


class Options(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="forbid")

    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    home: str = Field(min_length=1)
    desc: str = Field(min_length=1)
    domain: str = Field(min_length=1)
    template: Path = Path(DEFAULT_TEMPLATE)
    bits: int = Field(default=512, ge=0)
    encoding: str = "utf-8"
    algorithm: str = "sha256"
    output: Path = Path(".")

    @field_validator("bits")
    @classmethod
    def _bits_whole_bytes(cls, v: int) -> int:
        if v % 8:
            raise ValueError(f"nonce size must be divisible by 8, got {v}")
        return v

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"unknown text encoding {v!r}")
        return v

    @field_validator("algorithm")
    @classmethod
    def _known_algorithm(cls, v: str) -> str:
        return check_algorithm(v, exc=ValueError)

    @classmethod
    def create(cls, defaults: Optional[Defaults] = None, **fields: Any) -> "Options":
        """Build options, filling gaps from `defaults` and reporting problems as ConfigError."""
        values: Dict[str, Any] = dataclasses.asdict(defaults or Defaults())
        values.update({k: v for k, v in fields.items() if v is not None})
        try:
            return cls(**values)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(x) for x in err['loc']) or 'options'}: {err['msg']}" for err in e.errors()
            )
            raise ConfigError(f"Invalid options: {problems}") from e


def check_algorithm(name: str, exc=ConfigError) -> str:
    """Normalize a digest name and make sure hashlib can produce a fixed-size hex digest for it."""
    algo = (name or "").strip().lower()
    if algo not in hashlib.algorithms_available or algo.startswith("shake_"):
        raise exc(f"unsupported hash algorithm {name!r}")
    return algo
