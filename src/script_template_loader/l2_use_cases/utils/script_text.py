"""Decoding of raw template bytes."""

from __future__ import annotations

import logging

log = logging.getLogger('stl.compiler')

UTF8_BOM = b'\xef\xbb\xbf'


def decode_script(raw: bytes, path: str) -> str:
    """Decode template bytes as UTF-8, dropping a BOM and tolerating stray bytes."""
    if raw.startswith(UTF8_BOM):
        log.info('UTF-8 BOM detected in %s', path)
        raw = raw[len(UTF8_BOM) :]
    try:
        return raw.decode('utf-8')
    except UnicodeDecodeError:
        log.warning('Potential non-UTF8 characters detected in %s', path)
        return raw.decode('utf-8', errors='replace')
