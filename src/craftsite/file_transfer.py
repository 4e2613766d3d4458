"""FileTransfer: downloads a remote archive, following redirects by hand."""

import os
import posixpath
import urllib.parse
from typing import Optional

import requests

from craftsite.errors import TransferError

DEFAULT_MAX_REDIRECTS = 10
DEFAULT_TIMEOUT = 60
CHUNK_SIZE = 64 * 1024
FALLBACK_FILENAME = "download"


def filename_for(url: str) -> str:
    """Return the local file name for *url*: the last path segment."""
    path = urllib.parse.urlparse(url).path
    name = posixpath.basename(path.rstrip("/"))
    return name or FALLBACK_FILENAME


class FileTransfer:
    """Streams a remote resource into a local directory.

    Redirects are followed by hand, at most max_redirects hops.
    """

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._http = session or requests.Session()
        self._max_redirects = max_redirects
        self._timeout = timeout

    def download(self, url: str, dest_dir: str) -> str:
        """Download *url* into *dest_dir* and return the local file path.

        Args:
            url: The https URL to fetch.
            dest_dir: Scratch directory; created if missing.

        Returns:
            Path of the written file, named after the original URL.

        Raises:
            TransferError: On a non-2xx final status, a redirect without a
                Location header, too many redirects, or a network/stream
                error. No partial file is left behind.
        """
        os.makedirs(dest_dir, exist_ok=True)
        dest_path = os.path.join(dest_dir, filename_for(url))

        current = url
        for _ in range(self._max_redirects + 1):
            response = self._get(current)
            try:
                status = response.status_code
                if 300 <= status < 400:
                    location = response.headers.get("Location")
                    if not location:
                        raise TransferError(
                            f"HTTP {status} from {current} without a Location header",
                            url=current, status_code=status,
                        )
                    current = urllib.parse.urljoin(current, location)
                    continue
                if 200 <= status < 300:
                    self._write_body(response, current, dest_path)
                    return dest_path
                raise TransferError(
                    f"Download of {current} failed with HTTP {status}",
                    url=current, status_code=status,
                )
            finally:
                response.close()

        raise TransferError(
            f"Too many redirects (more than {self._max_redirects}) while fetching {url}",
            url=url,
        )

    def _get(self, url):
        try:
            return self._http.get(
                url,
                allow_redirects=False,
                stream=True,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise TransferError(f"Request to {url} failed: {exc}", url=url) from exc

    def _write_body(self, response, url, dest_path):
        try:
            with open(dest_path, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
        except (requests.RequestException, OSError) as exc:
            _remove_partial(dest_path)
            raise TransferError(f"Download of {url} was interrupted: {exc}", url=url) from exc


def _remove_partial(path):
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
