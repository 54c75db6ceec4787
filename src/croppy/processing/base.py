"""Image processor interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from croppy.types import ProcessorConfig


@runtime_checkable
class ImageProcessor(Protocol):
    """Turns source bytes into derivative bytes.

    ``options`` is the decoded option mapping from the URL. Any exception
    raised here is reported to the client as a processing failure.
    """

    def process(
        self,
        source: bytes,
        width: int | None,
        height: int | None,
        options: dict[str, list[str]],
        config: ProcessorConfig,
    ) -> bytes: ...
