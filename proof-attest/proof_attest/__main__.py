import argparse, logging, os, sys
from typing import List, Optional

from . import __version__
from .attest import generate
from .config import CONFIG_ENV, Defaults, Options, load_defaults
from .errors import ConfigError, InternalError, TemplateNotFoundError

logger = logging.getLogger("proof_attest")


def build_parser(defaults: Defaults) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="proof-attest",
        description="Write a Proof-of-Ownership attestation named after the digest of its own content.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument("--name", required=True, help="owner's full name")
    ap.add_argument("--email", required=True, help="owner's email address")
    ap.add_argument("--home", required=True, help="owner's home location")
    ap.add_argument("--desc", required=True, help="description of the owned artifact")
    ap.add_argument("--domain", required=True, help="domain the artifact is published under")
    ap.add_argument("--template", default=defaults.template, help="Jinja2 template file")
    ap.add_argument("--bits", type=int, default=defaults.bits, help="nonce size in bits (multiple of 8)")
    ap.add_argument("--encoding", default=defaults.encoding, help="text encoding of template and output")
    ap.add_argument("--algorithm", default=defaults.algorithm, help="hash algorithm (any hashlib name)")
    ap.add_argument("--out", default=defaults.output, help="existing output directory")
    ap.add_argument("--config", default=None, help=f"YAML file overriding the defaults (or ${CONFIG_ENV})")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def _defaults(argv: List[str]) -> Defaults:
    # --config has to be known before the real parser is built so its values show up as defaults
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", default=None)
    known, _ = pre.parse_known_args(argv)
    return load_defaults(known.config or os.environ.get(CONFIG_ENV) or None)


def main(argv: Optional[List[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    try:
        defaults = _defaults(argv)
    except ConfigError as e:
        print(f"proof-attest: {e}", file=sys.stderr)
        return 2
    a = build_parser(defaults).parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if a.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    try:
        options = Options.create(
            defaults, name=a.name, email=a.email, home=a.home, desc=a.desc, domain=a.domain,
            template=a.template, bits=a.bits, encoding=a.encoding, algorithm=a.algorithm, output=a.out,
        )
    except ConfigError as e:
        print(f"proof-attest: {e}", file=sys.stderr)
        return 2
    try:
        result = generate(options)
    except TemplateNotFoundError as e:
        print(f"Template not found: {e.path}", file=sys.stderr)
        print("Pass an existing template file with --template.", file=sys.stderr)
        return 1
    except InternalError as e:
        logger.error(f"Internal error in stage '{e.stage}' ({e.cause_kind.value}): {e}", exc_info=e)
        return 3
    print(f"{result.algorithm} {result.hex_digest}")
    print(f"Wrote attestation to {result.path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
