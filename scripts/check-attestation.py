#!/usr/bin/env python3
import sys, re, hashlib
from pathlib import Path

NAME = re.compile(r"^(?P<hex>[0-9a-f]+)_(?P<algo>[a-z0-9_-]+)\.txt$")

def check(path:Path):
    m = NAME.match(path.name)
    if not m:
        print(f'FAIL: {path.name} is not named <digest>_<algorithm>.txt', file=sys.stderr)
        return 1
    algo = m.group('algo')
    if algo not in hashlib.algorithms_available:
        print(f'FAIL: unsupported algorithm {algo}', file=sys.stderr)
        return 1
    actual = hashlib.new(algo, path.read_bytes()).hexdigest()
    if actual != m.group('hex'):
        print(f'FAIL: digest mismatch, content hashes to {actual}', file=sys.stderr)
        return 1
    print('OK: digest matches')
    return 0

if __name__ == '__main__':
    if len(sys.argv)!=2:
        print('usage: check-attestation.py <attestation.txt>', file=sys.stderr)
        sys.exit(2)
    sys.exit(check(Path(sys.argv[1])))
