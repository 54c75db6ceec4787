"""Request handler: one derivative path in, one delivery out.

    validate token -> scope and grammar checks -> parse -> ensure -> deliver

Every error is a ``CroppyError`` whose ``http_status`` the HTTP layer
answers with. A path that is out of scope or not in the derivative grammar
is a silent pass-through: status 200, empty body.
"""

from __future__ import annotations

import logging
import posixpath

from croppy.cache.manager import DerivativeCache
from croppy.config.schema import CroppyConfig
from croppy.errors.exceptions import SignatureMismatch
from croppy.signing import Signer
from croppy.storage.mount import Storage
from croppy.types import Delivery, Outcome, TransformRequest
from croppy.url.builder import UrlBuilder
from croppy.url.pattern import content_type_for

logger = logging.getLogger(__name__)


class RequestHandler:
    """Stateless across requests; safe to share between worker threads."""

    def __init__(
        self,
        config: CroppyConfig,
        url_builder: UrlBuilder,
        cache: DerivativeCache,
        signer: Signer | None = None,
    ) -> None:
        self._config = config
        self._url = url_builder
        self._cache = cache
        self._signer = signer or url_builder.signer

    def handle(self, path: str, token: str | None = None) -> Delivery:
        if not self._signer.verify(path, token):
            logger.warning("Token mismatch for %s", path)
            raise SignatureMismatch("Token mismatch")

        if not self._url.in_scope(path) or not self._url.matches(path):
            logger.debug("Not a derivative request, passing through: %s", path)
            return Delivery(outcome=Outcome.PASS_THROUGH)

        request = self._url.parse(path)
        if request is None:
            return Delivery(outcome=Outcome.PASS_THROUGH)

        crop_path = self._url.relative_path(path)
        storage, store_key, local_request = self._resolve(crop_path, request)

        self._cache.ensure(local_request, store_key, storage=storage, lock_key=crop_path)

        if storage.crops_are_remote():
            location = storage.crop_url(store_key) or self._url.path_to_url(crop_path)
            return Delivery(
                outcome=Outcome.REDIRECT,
                status=301,
                location=location,
                headers={"Location": location},
            )

        headers = {"Content-Type": content_type_for(crop_path) or "application/octet-stream"}
        file_path = storage.local_crop_path(store_key)
        if file_path is not None:
            return Delivery(
                outcome=Outcome.STREAM, status=200, headers=headers, file_path=file_path
            )
        return Delivery(
            outcome=Outcome.STREAM,
            status=200,
            headers=headers,
            body=storage.read_crop(store_key),
        )

    def _resolve(
        self, crop_path: str, request: TransformRequest
    ) -> tuple[Storage, str, TransformRequest]:
        """Storage, key and request relative to the mount for this path."""
        if not self._config.crops_subdir:
            return self._cache.storage, crop_path, request
        directory = posixpath.dirname(crop_path)
        storage = self._cache.mounted(directory)
        local = request.model_copy(
            update={"source_path": posixpath.basename(request.source_path)}
        )
        return storage, posixpath.basename(crop_path), local
