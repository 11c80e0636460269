"""HTTP downloader writing through the content cache."""

from __future__ import annotations

import base64
import binascii
import logging
import tempfile
import time
import zipfile
import zlib
from typing import Iterable, Optional, Tuple

import httpx

from updatecenter.modules.repository.cache import CacheEntry, ContentCache
from updatecenter.modules.repository.domain import RepositoryError

ARCHIVE_MEMBER_SEPARATOR = "!"
CHUNK_SIZE = 65536
SPOOL_MAX_SIZE = 8 * 1024 * 1024


def hex_to_base64(hex_digest: str) -> str:
    """Re-encode a hexadecimal digest as base64."""
    try:
        raw = binascii.unhexlify(hex_digest)
    except (binascii.Error, ValueError, TypeError) as exc:
        raise RepositoryError.decode_failure(f"failed to convert hex to base64: {hex_digest!r}") from exc
    return base64.b64encode(raw).decode("ascii")


def split_archive_member(request_url: str) -> Tuple[str, Optional[str]]:
    """Split ``<archive url>!<member path>`` into its two parts."""
    if ARCHIVE_MEMBER_SEPARATOR not in request_url:
        return request_url, None
    url, member = request_url.split(ARCHIVE_MEMBER_SEPARATOR, 1)
    return url, member


class Downloader:
    """Fetch remote content once and serve every later request from the cache."""

    def __init__(
        self,
        cache: ContentCache,
        client: Optional[httpx.Client] = None,
        auth: Optional[Tuple[str, str]] = None,
        timeout: float = 30,
    ) -> None:
        self.cache = cache
        self._auth = auth
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)
        self.log = logging.getLogger(self.__class__.__name__)

    def fetch(self, request_url: str) -> CacheEntry:
        """Return the cache entry for ``request_url``, downloading it if needed.

        A previously failed request fails again without touching the network.
        When the URL carries an archive member selector only that member of
        the remote zip archive is cached.
        """
        entry = self.cache.lookup(request_url)
        if entry.negative:
            raise RepositoryError.network_failure(f"Failed to retrieve content of {request_url} (cached)")
        if entry.present:
            return entry

        url, member = split_archive_member(request_url)
        self.log.info("Downloading : %s (not found in cache)", url)
        start_time = time.time()
        try:
            with self._client.stream("GET", url, auth=self._auth) as response:
                if not response.is_success:
                    self.log.info("Received HTTP error response: %s for URL: %s", response.status_code, url)
                    self.cache.mark_negative(request_url)
                    raise RepositoryError.network_failure(
                        f"Failed to retrieve content of {request_url} (HTTP {response.status_code})"
                    )
                total = int(response.headers.get("content-length") or 0)
                chunks = self._iter_with_progress(response.iter_bytes(CHUNK_SIZE), url, total)
                if member is None:
                    data = b"".join(chunks)
                else:
                    data = self._extract_member(chunks, member, url)
        except httpx.HTTPError as exc:
            raise RepositoryError.network_failure(f"Failed to retrieve content of {url}: {exc}") from exc

        elapsed = max(time.time() - start_time, 1e-3)
        self.log.info(
            "Downloaded %s%s (%d bytes, %.2fs)",
            url,
            f" member={member}" if member is not None else "",
            len(data),
            elapsed,
        )
        try:
            stored = self.cache.store(request_url, data)
        except OSError as exc:
            raise RepositoryError.illegal_state(f"Failed to write cache entry for {request_url}: {exc}") from exc
        if not stored.present:
            # a concurrent failure marked the request negative first
            raise RepositoryError.network_failure(f"Failed to retrieve content of {request_url} (cached)")
        return stored

    def fetch_text(self, request_url: str) -> str:
        self.fetch(request_url)
        return self.cache.read_text(request_url) or ""

    def _iter_with_progress(self, chunks: Iterable[bytes], url: str, total: int) -> Iterable[bytes]:
        downloaded = 0
        next_percent = 10
        for chunk in chunks:
            if not chunk:
                continue
            downloaded += len(chunk)
            if total:
                percent = int(downloaded * 100 / total)
                if percent >= next_percent:
                    self.log.debug("Download progress %s %s%% (%d/%d bytes)", url, percent, downloaded, total)
                    next_percent = (percent // 10 + 1) * 10
            yield chunk

    def _extract_member(self, chunks: Iterable[bytes], member: str, url: str) -> bytes:
        with tempfile.SpooledTemporaryFile(max_size=SPOOL_MAX_SIZE) as spool:
            for chunk in chunks:
                spool.write(chunk)
            spool.seek(0)
            try:
                with zipfile.ZipFile(spool) as zf:
                    for info in zf.infolist():
                        if info.filename == member:
                            with zf.open(info) as fh:
                                return fh.read()
            except (zipfile.BadZipFile, zlib.error, RuntimeError, NotImplementedError, EOFError) as exc:
                raise RepositoryError.decode_failure(f"cannot read {member} from archive {url}: {exc}") from exc
        self.log.info("Archive %s has no entry %s", url, member)
        return b""
