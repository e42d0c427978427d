"""Video extraction backed by yt-dlp."""
from __future__ import annotations

import logging
import subprocess
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional

import yt_dlp

from multitool_api.config import settings
from multitool_api.retry import retry_sync_call

logger = logging.getLogger(__name__)


class ExtractionError(RuntimeError):
    """Raised when the extraction tool cannot read or stream a video."""


class MediaExtractor(ABC):
    """Narrow interface over the external extraction tool."""

    @abstractmethod
    def extract_info(self, url: str) -> Dict[str, Any]:
        """Return the tool's metadata dict for a video (title, thumbnail, formats...)."""
        ...

    def extract_formats(self, url: str) -> List[Dict[str, Any]]:
        """Return the raw format descriptors for a video."""
        return list(self.extract_info(url).get("formats") or [])

    @abstractmethod
    def stream(self, url: str, format_spec: str) -> Iterator[bytes]:
        """Yield the merged video bytes for the given format selector."""
        ...


class YtDlpExtractor(MediaExtractor):
    """Extractor using the yt_dlp library for metadata and its CLI for streaming."""

    def __init__(
        self,
        binary: Optional[str] = None,
        max_attempts: Optional[int] = None,
        chunk_size: Optional[int] = None,
        max_wait_seconds: float = 10,
    ):
        self.binary = binary or settings.YTDLP_BINARY
        self.max_attempts = max_attempts or settings.EXTRACTION_MAX_ATTEMPTS
        self.chunk_size = chunk_size or settings.STREAM_CHUNK_SIZE
        self.max_wait_seconds = max_wait_seconds

    @staticmethod
    def _ydl_opts() -> Dict[str, Any]:
        return {
            "quiet": True,
            "no_warnings": True,
            "skip_download": True,
            "nocheckcertificate": True,
        }

    def _extract_once(self, url: str) -> Dict[str, Any]:
        with yt_dlp.YoutubeDL(self._ydl_opts()) as ydl:
            info = ydl.extract_info(url, download=False)
        if not isinstance(info, dict):
            raise ExtractionError(f"No video information returned for {url}")
        return info

    def extract_info(self, url: str) -> Dict[str, Any]:
        """
        Extract video metadata without downloading.

        Transient failures (rate limits, timeouts, connection resets) are
        retried with exponential backoff.

        Raises:
            ExtractionError: If the video cannot be read
        """
        try:
            return retry_sync_call(
                self._extract_once,
                url,
                max_attempts=self.max_attempts,
                min_wait_seconds=min(1, self.max_wait_seconds),
                max_wait_seconds=self.max_wait_seconds,
            )
        except ExtractionError:
            raise
        except Exception as e:
            logger.error(f"yt-dlp extraction failed for {url}: {e}")
            raise ExtractionError(f"Could not get video information: {e}") from e

    def build_command(self, url: str, format_spec: str) -> List[str]:
        return [
            self.binary,
            "--quiet",
            "--no-warnings",
            "--format", format_spec,
            "--merge-output-format", "mp4",
            "--add-metadata",
            "--output", "-",
            url,
        ]

    def stream(self, url: str, format_spec: str) -> Iterator[bytes]:
        """
        Run yt-dlp with output to stdout and yield it in chunks.

        The process is killed if the consumer stops iterating early
        (e.g. the HTTP client disconnects).

        Raises:
            ExtractionError: If yt-dlp cannot be started, or exits with an
                error before producing any output
        """
        cmd = self.build_command(url, format_spec)
        logger.info(f"Streaming {url} with format: {format_spec}")
        try:
            process = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        except OSError as e:
            raise ExtractionError(f"Could not start {self.binary}: {e}") from e

        stderr_lines: List[str] = []
        stderr_thread = threading.Thread(
            target=self._drain_stderr, args=(process, stderr_lines), daemon=True
        )
        stderr_thread.start()

        produced = 0
        try:
            while True:
                chunk = process.stdout.read(self.chunk_size)
                if not chunk:
                    break
                produced += len(chunk)
                yield chunk
            returncode = process.wait()
            stderr_thread.join(timeout=1)
            if returncode != 0 and produced == 0:
                detail = stderr_lines[-1] if stderr_lines else f"exit code {returncode}"
                raise ExtractionError(f"yt-dlp failed: {detail}")
            if returncode != 0:
                logger.warning(f"yt-dlp exited with {returncode} after {produced} bytes for {url}")
        finally:
            if process.poll() is None:
                logger.info(f"Stopping yt-dlp for {url} after {produced} bytes")
                process.kill()
                process.wait()
            process.stdout.close()

    @staticmethod
    def _drain_stderr(process: subprocess.Popen, sink: List[str]) -> None:
        for raw in iter(process.stderr.readline, b""):
            line = raw.decode("utf-8", errors="replace").rstrip()
            if line:
                sink.append(line)
                logger.warning(f"yt-dlp stderr: {line}")
        process.stderr.close()


def get_extractor() -> MediaExtractor:
    """Return the extractor used by the routes (FastAPI dependency)."""
    return YtDlpExtractor()
