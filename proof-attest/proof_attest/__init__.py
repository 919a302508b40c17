# proof_attest/__init__.py
# Content-addressed Proof-of-Ownership attestations.

__version__ = "0.1.0"

PACKAGE = {
    "name": "proof-attest",
    "version": __version__,
    "description": "Generate self-hashing Proof-of-Ownership attestations",
    "homepage": "https://github.com/proof-attest/proof-attest",
    "license": "MIT",
}
