"""Shared-secret tokens for derivative URLs.

The token covers only the last path component. The same derivative name
under two mounts therefore shares one token; the handler strips mount
prefixes before it ever sees a path, and this keeps both URLs valid.
"""

from __future__ import annotations

import hashlib
import hmac
import posixpath
from urllib.parse import urlsplit


class Signer:
    """Signs and verifies paths with an optional key.

    With no key, ``sign`` returns None and ``verify`` accepts anything.
    """

    def __init__(self, key: str | None = None) -> None:
        self._key = key or None

    @property
    def enabled(self) -> bool:
        return self._key is not None

    def sign(self, path: str) -> str | None:
        if self._key is None:
            return None
        name = posixpath.basename(urlsplit(path).path)
        return hashlib.md5((self._key + name).encode("utf-8")).hexdigest()

    def verify(self, path: str, token: str | None) -> bool:
        expected = self.sign(path)
        if expected is None:
            return True
        if not token:
            return False
        return hmac.compare_digest(expected, token)
