"""
================================================================================
Download Capture
================================================================================

Race-free capture of browser downloads as an explicit two-phase protocol:

    capture = DownloadCapture(page, output_dir, timeout_ms=15000)
    await capture.arm()              # 1. listener installed
    await export_link.click()        # 2. action that triggers the download
    artifact = await capture.collect()

`capture()` bundles the three steps for the common case. Arming after the
click can miss the event, so collect() refuses to run unarmed.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional

from loguru import logger
from playwright.async_api import Download, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from clinic_tools.common import ensure_directory
from clinic_tools.report_tools.allure_utils import attach_file

from .errors import DownloadTimeout


@dataclass(frozen=True)
class DownloadArtifact:
    """
    A downloaded file after it was saved and read back.

    Attributes:
        filename: Name suggested by the server (Content-Disposition)
        path: Where the file was saved
        content: Decoded file content
        url: URL the download came from
    """
    filename: str
    path: Path
    content: str
    url: str = ""

    def non_empty_lines(self) -> List[str]:
        return [line for line in self.content.splitlines() if line.strip()]


class DownloadCapture:
    """Arms a download listener on a page and collects the resulting file."""

    def __init__(self, page: Page, output_dir: Path, timeout_ms: int = 15000):
        """
        Args:
            page: Page whose download event is awaited
            output_dir: Directory the file is saved into
            timeout_ms: Bound on the wait for the download event
        """
        self.page = page
        self.output_dir = Path(output_dir)
        self.timeout_ms = timeout_ms
        self._pending: Optional[asyncio.Future] = None

    @property
    def armed(self) -> bool:
        return self._pending is not None

    async def arm(self) -> None:
        """
        Install the download listener. Must run before the triggering action.

        Yields once to the event loop so the listener task registers before
        the caller goes on to click.

        Raises:
            RuntimeError: Already armed
        """
        if self._pending is not None:
            raise RuntimeError("DownloadCapture is already armed")
        self._pending = asyncio.ensure_future(
            self.page.wait_for_event("download", timeout=self.timeout_ms)
        )
        await asyncio.sleep(0)
        logger.debug(f"Download listener armed (timeout={self.timeout_ms} ms)")

    def disarm(self) -> None:
        """Drop a pending listener without waiting for it."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    async def collect(
        self,
        content_type: str = "text/csv",
        encoding: str = "utf-8",
    ) -> DownloadArtifact:
        """
        Await the armed download, save it and read it back.

        Args:
            content_type: Declared type for the report attachment
            encoding: Text encoding of the file

        Raises:
            RuntimeError: collect() without arm()
            DownloadTimeout: No download event within the timeout
        """
        if self._pending is None:
            raise RuntimeError("DownloadCapture.collect() called before arm()")

        pending, self._pending = self._pending, None
        try:
            download: Download = await pending
        except PlaywrightTimeoutError as e:
            raise DownloadTimeout(
                f"Expected a download within {self.timeout_ms} ms, none arrived"
            ) from e

        filename = download.suggested_filename
        path = ensure_directory(self.output_dir) / filename
        await download.save_as(path)
        # utf-8-sig drops a BOM if the server sends one
        content = path.read_text(encoding="utf-8-sig" if encoding.lower() == "utf-8" else encoding)

        attach_file(path, name=filename, content_type=content_type)
        logger.info(f"Download saved: {path} ({len(content)} chars)")
        return DownloadArtifact(filename=filename, path=path, content=content, url=download.url)

    async def capture(
        self,
        trigger: Callable[[], Awaitable[Any]],
        **collect_kwargs: Any,
    ) -> DownloadArtifact:
        """
        Arm, run `trigger`, then collect.

        Args:
            trigger: Coroutine function performing the click
        """
        await self.arm()
        try:
            await trigger()
        except BaseException:
            self.disarm()
            raise
        return await self.collect(**collect_kwargs)


__all__ = [
    "DownloadArtifact",
    "DownloadCapture",
]
