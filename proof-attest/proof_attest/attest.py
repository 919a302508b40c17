import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from . import model, nonce, output, render, selfhash
from .config import Options
from .errors import InternalError, TemplateNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttestationResult:
    path: Path
    algorithm: str
    hex_digest: str
    nonce_bytes: int


def generate(options: Options, renderer: Optional[render.Renderer] = None,
             clock: Optional[Callable[[], datetime]] = None) -> AttestationResult:
    """Run load_template -> nonce -> self-hash -> model -> render -> write.

    A missing template surfaces as TemplateNotFoundError; anything else becomes InternalError
    with the failing stage and the original exception chained.
    """
    renderer = renderer or render.Renderer()
    stage = "load_template"
    try:
        logger.debug(f"Loading template {options.template}")
        template_text = render.load_template(options.template, options.encoding)
        stage = "generate_nonce"
        unique = nonce.generate(options.bits)
        stage = "self_hash"
        self_hex = selfhash.digest_of_self(options.algorithm)
        logger.debug(f"Self-hash {options.algorithm} {self_hex}")
        stage = "build_model"
        data = model.build_model(options, unique, self_hex, now=clock() if clock else None)
        stage = "render"
        text = renderer.render(template_text, data)
        stage = "write"
        path, hex_digest = output.write(text, options.algorithm, options.encoding, options.output)
    except TemplateNotFoundError:
        raise
    except Exception as e:
        raise InternalError(f"Attestation failed during {stage}: {e}", stage=stage, cause=e) from e
    return AttestationResult(path=path, algorithm=options.algorithm, hex_digest=hex_digest, nonce_bytes=len(unique))
