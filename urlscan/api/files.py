"""
File download endpoint (Pro).

Downloads are password-protected ZIP archives of files observed during scans.
"""

import asyncio
from typing import Iterable, Optional

from urlscan.constants import Endpoints
from urlscan.core import get_logger
from urlscan.core.exceptions import UrlScanError

from .base import BaseApi, path_param, require

logger = get_logger(__name__)

SHA256_HEX_LENGTH = 64
DEFAULT_ZIP_PASSWORD = "urlscan!"
DEFAULT_DOWNLOAD_CONCURRENCY = 10


class FilesApi(BaseApi):
    """Download files captured during scans by their SHA256 hash."""

    async def download_file(
        self,
        file_hash: str,
        password: str = DEFAULT_ZIP_PASSWORD,
        filename: Optional[str] = None,
    ) -> bytes:
        """
        Download one file as a password-protected ZIP archive.

        Args:
            file_hash: SHA256 of the file (64 hex characters)
            password: Password for the ZIP archive
            filename: Name of the file inside the archive

        Returns:
            ZIP archive bytes
        """
        require(bool(file_hash and file_hash.strip()), "File hash cannot be blank")
        require(len(file_hash) == SHA256_HEX_LENGTH, "File hash must be a 64-character SHA256 hash")
        require(bool(password and password.strip()), "Password cannot be blank")

        return await self._get_bytes(
            Endpoints.DOWNLOAD.format(file_hash=path_param(file_hash)),
            {"password": password, "filename": filename},
            accept="application/zip",
        )

    async def download_files(
        self,
        file_hashes: Iterable[str],
        password: str = DEFAULT_ZIP_PASSWORD,
        concurrency: int = DEFAULT_DOWNLOAD_CONCURRENCY,
        filename: Optional[str] = None,
    ) -> dict[str, bytes | UrlScanError | ValueError]:
        """
        Download several files concurrently.

        A failed download does not abort the others. Its error, either an
        API failure or the ValueError for a malformed hash, is returned in
        place of the archive bytes.
        """
        require(concurrency > 0, "Concurrency must be positive")
        hashes = list(dict.fromkeys(file_hashes))
        semaphore = asyncio.Semaphore(concurrency)

        async def fetch(file_hash: str) -> bytes | UrlScanError | ValueError:
            async with semaphore:
                try:
                    return await self.download_file(file_hash, password, filename)
                except (UrlScanError, ValueError) as e:
                    logger.warning(f"Download of {file_hash} failed: {e}")
                    return e

        results = await asyncio.gather(*(fetch(h) for h in hashes))
        return dict(zip(hashes, results))
