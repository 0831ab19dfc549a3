"""HTTP client abstraction for the catalog.

This module provides:
- HttpClient: Protocol for HTTP operations (injectable for tests)
- RealHttpClient: urllib implementation with short timeouts and manual,
  bounded redirect handling
- MockHttpClient: canned responses for tests
"""

from __future__ import annotations

import json
import os
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, cast, runtime_checkable
from urllib.parse import urljoin

from jprov import __version__
from jprov.core.result import Err, Ok, Result
from jprov.core.structured import as_str_dict

if TYPE_CHECKING:
    from collections.abc import Callable
    from http.client import HTTPResponse

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
]

DEFAULT_TIMEOUT = 5.0
MAX_REDIRECTS = 3

_REDIRECT_CODES = frozenset({301, 302, 303, 307, 308})


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    @property
    def not_found(self) -> bool:
        return self.status == 404

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP operations."""

    def get_json(self, url: str) -> Result[dict[str, Any], HttpError]:
        """Fetch URL and parse the body as a JSON object."""
        ...

    def get_text(self, url: str) -> Result[str, HttpError]:
        """Fetch URL and return the body as text."""
        ...

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        """Download URL to ``dest``; ``progress(downloaded, total)`` per chunk."""
        ...


class _NoRedirect(urllib.request.HTTPRedirectHandler):
    # Surface 3xx responses as HTTPError so hops can be counted
    def redirect_request(self, req, fp, code, msg, headers, newurl):  # type: ignore[no-untyped-def]
        return None


class RealHttpClient:
    """HTTP client using urllib.

    Handles:
    - HTTPS with system certificates
    - at most ``max_redirects`` redirects; one more is an error
    - 404 reported as ``HttpError`` with ``not_found`` set
    - connect/read timeout of a few seconds
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = f"jprov/{__version__}",
        max_redirects: int = MAX_REDIRECTS,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.max_redirects = max_redirects
        self._opener = urllib.request.build_opener(
            _NoRedirect(),
            urllib.request.HTTPSHandler(context=ssl.create_default_context()),
        )

    def _open(self, url: str, accept: str) -> Result[HTTPResponse, HttpError]:
        """GET ``url``, following redirects by hand."""
        current = url
        for _ in range(self.max_redirects + 1):
            req = urllib.request.Request(
                current,
                headers={"User-Agent": self.user_agent, "Accept": accept},
            )
            try:
                return Ok(cast("HTTPResponse", self._opener.open(req, timeout=self.timeout)))
            except urllib.error.HTTPError as e:
                location = e.headers.get("Location") if e.code in _REDIRECT_CODES else None
                e.close()
                if location is None:
                    return Err(HttpError(url=current, status=e.code, message=str(e.reason)))
                current = urljoin(current, location)
            except urllib.error.URLError as e:
                return Err(HttpError(url=current, status=0, message=str(e.reason)))
            except TimeoutError:
                return Err(HttpError(url=current, status=0, message="Request timed out"))
            except ValueError as e:
                return Err(HttpError(url=current, status=0, message=str(e)))
            except OSError as e:
                return Err(HttpError(url=current, status=0, message=str(e)))

        return Err(
            HttpError(url=url, status=0, message=f"Too many redirects (max {self.max_redirects})")
        )

    def _read(self, url: str, accept: str) -> Result[bytes, HttpError]:
        opened = self._open(url, accept)
        if isinstance(opened, Err):
            return opened
        try:
            with opened.value as response:
                return Ok(response.read())
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Read timed out"))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

    def get_json(self, url: str) -> Result[dict[str, Any], HttpError]:
        result = self._read(url, "application/json")
        if isinstance(result, Err):
            return result

        try:
            data_obj: object = json.loads(result.value.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(HttpError(url=url, status=0, message="Expected JSON object"))
        return Ok(cast(dict[str, Any], data))

    def get_text(self, url: str) -> Result[str, HttpError]:
        result = self._read(url, "*/*")
        if isinstance(result, Err):
            return result

        try:
            return Ok(result.value.decode("utf-8"))
        except UnicodeDecodeError as e:
            return Err(HttpError(url=url, status=0, message=f"Decode error: {e}"))

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        """Stream ``url`` into ``dest``; a failed download leaves nothing behind."""
        opened = self._open(url, "*/*")
        if isinstance(opened, Err):
            return opened

        dest.parent.mkdir(parents=True, exist_ok=True)
        partial = dest.with_name(dest.name + ".part")
        try:
            with opened.value as response, open(partial, "wb") as f:
                total = int(response.headers.get("Content-Length") or 0)
                downloaded = 0
                while chunk := response.read(64 * 1024):
                    f.write(chunk)
                    downloaded += len(chunk)
                    if progress:
                        progress(downloaded, total)
            os.replace(partial, dest)
            return Ok(dest)
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Download timed out"))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        finally:
            partial.unlink(missing_ok=True)


class MockHttpClient:
    """Mock HTTP client for testing.

    Usage:
        client = MockHttpClient()
        client.set_json("https://api.example.com/data", {"result": []})
        result = client.get_json("https://api.example.com/data")
        assert result == Ok({"result": []})
    """

    def __init__(self) -> None:
        self._json_responses: dict[str, dict[str, Any] | HttpError] = {}
        self._text_responses: dict[str, str | HttpError] = {}
        self._download_responses: dict[str, bytes | HttpError] = {}
        self.calls: list[tuple[str, str]] = []

    def set_json(self, url: str, response: dict[str, Any] | HttpError) -> None:
        self._json_responses[url] = response

    def set_text(self, url: str, response: str | HttpError) -> None:
        self._text_responses[url] = response

    def set_download(self, url: str, response: bytes | HttpError) -> None:
        self._download_responses[url] = response

    def calls_to(self, method: str) -> list[str]:
        """URLs requested through ``method`` (``get_json``, ``get_text``, ``download``)."""
        return [url for m, url in self.calls if m == method]

    def get_json(self, url: str) -> Result[dict[str, Any], HttpError]:
        self.calls.append(("get_json", url))

        if url not in self._json_responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self._json_responses[url]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def get_text(self, url: str) -> Result[str, HttpError]:
        self.calls.append(("get_text", url))

        if url not in self._text_responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self._text_responses[url]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        self.calls.append(("download", url))

        if url not in self._download_responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self._download_responses[url]
        if isinstance(response, HttpError):
            return Err(response)

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(response)
        if progress:
            progress(len(response), len(response))
        return Ok(dest)
