"""A small blocking HTTP client built on a requests session."""

from __future__ import annotations

import io
import threading
from dataclasses import dataclass
from typing import BinaryIO, Callable, Iterable, Mapping
from urllib.parse import quote

import requests

ProgressCallback = Callable[[int, int], None]

_CHUNK_SIZE = 16 * 1024


class HttpError(Exception):
    """Raised when a transfer fails or the server answers with an error status."""


@dataclass(frozen=True)
class Range:
    """A byte range, both ends inclusive."""

    start: int = 0
    end: int = 0


@dataclass(frozen=True)
class Cookie:
    name: str
    value: str
    domain: str = ""
    path: str = ""
    http_only: bool = False


def _escape(value: str) -> str:
    return quote(value, safe="")


def encode_form(form: Mapping[str, str]) -> str:
    """Encode a mapping as ``key=value`` pairs joined by ``&``, escaping values."""
    return "&".join(f"{key}={_escape(value)}" for key, value in form.items())


class HTTP:
    """One reusable connection context with per-request options."""

    TIMEOUT = 3000
    PROXY_STATUS = False
    PROXY = ""

    def __init__(self):
        self._session = requests.Session()
        self._session.verify = False
        self._user_agent: str | None = None
        self._headers: dict[str, str] = {}
        self._range: str | None = None
        self._cookie: str | None = None
        self._auth: tuple[str, str] | None = None
        self._timeout: float | None = None
        self._cancel: threading.Event | None = None
        self._callbacks: list[ProgressCallback] = []
        self._content_type: str | None = None

    def __enter__(self) -> "HTTP":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def set_user_agent(self, agent: str) -> None:
        self._user_agent = agent

    def set_basic_auth(self, user: str, password: str) -> None:
        self._auth = (user, password)

    def set_headers(self, headers: Iterable[str]) -> None:
        """Replace the custom headers with ``"Name: value"`` lines."""
        parsed = {}
        for line in headers:
            name, _, value = line.partition(":")
            parsed[name.strip()] = value.strip()
        self._headers = parsed

    def set_range(self, byte_range: Range) -> None:
        self._range = f"bytes={byte_range.start}-{byte_range.end}"

    def set_timeout(self, timeout_ms: int | None = None) -> None:
        """Set both connect and transfer timeout, in milliseconds."""
        if timeout_ms is None:
            timeout_ms = self.TIMEOUT
        self._timeout = timeout_ms / 1000.0

    def set_cancel(self, cancel: threading.Event) -> None:
        self._cancel = cancel

    def set_cookies(self, cookies: Iterable[Cookie]) -> None:
        self._cookie = "".join(f"{c.name}={_escape(c.value)}; " for c in cookies)

    def add_progress_callback(self, callback: ProgressCallback) -> None:
        """Register ``callback(total, received)`` to be told of download progress."""
        self._callbacks.append(callback)

    def configure(self, **kwargs) -> None:
        """Apply several options at once by keyword."""
        setters = {
            "headers": self.set_headers,
            "byte_range": self.set_range,
            "timeout": self.set_timeout,
            "cancel": self.set_cancel,
            "cookies": self.set_cookies,
            "progress": self.add_progress_callback,
            "user_agent": self.set_user_agent,
        }
        for key, value in kwargs.items():
            try:
                setter = setters[key]
            except KeyError:
                raise TypeError(f"unknown HTTP option: {key!r}") from None
            setter(value)

    def _request_headers(self) -> dict[str, str]:
        headers = {}
        if self._user_agent is not None:
            headers["User-Agent"] = self._user_agent
        if self._range is not None:
            headers["Range"] = self._range
        if self._cookie is not None:
            headers["Cookie"] = self._cookie
        headers.update(self._headers)
        return headers

    def _report(self, total: int, received: int) -> None:
        for callback in self._callbacks:
            callback(total, received)
        if self._cancel is not None and self._cancel.is_set():
            raise HttpError("transfer aborted by callback")

    def _perform(self, method: str, url: str, out: BinaryIO, data: bytes | None = None) -> int:
        watching = self._cancel is not None or bool(self._callbacks)
        if self._cancel is not None and self._cancel.is_set():
            raise HttpError("transfer aborted by callback")
        proxies = {"http": self.PROXY, "https": self.PROXY} if self.PROXY_STATUS else None
        try:
            response = self._session.request(
                method,
                url,
                data=data,
                headers=self._request_headers(),
                auth=self._auth,
                timeout=self._timeout,
                proxies=proxies,
                stream=True,
                allow_redirects=True,
            )
        except requests.RequestException as exc:
            raise HttpError(str(exc)) from exc
        with response:
            self._content_type = response.headers.get("Content-Type")
            try:
                total = int(response.headers.get("Content-Length") or 0)
            except ValueError:
                total = 0
            received = 0
            if watching:
                self._report(total, received)
            try:
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    out.write(chunk)
                    received += len(chunk)
                    if watching:
                        self._report(total, received)
            except requests.RequestException as exc:
                raise HttpError(str(exc)) from exc
            return response.status_code

    def fetch(self, url: str, out: BinaryIO) -> None:
        """GET ``url`` and write the body to ``out``."""
        code = self._perform("GET", url, out)
        if code >= 400:
            raise HttpError(f"http status {code}")

    def content_type(self) -> str | None:
        """The Content-Type of the last response, if it had one."""
        return self._content_type

    def propfind(self, url: str, out: BinaryIO) -> int:
        """Send a PROPFIND request and return the status code."""
        return self._perform("PROPFIND", url, out)

    def send_post(self, url: str, data: str | bytes) -> str:
        """POST ``data`` to ``url`` and return the response body as text."""
        payload = data.encode("utf-8") if isinstance(data, str) else data
        body = io.BytesIO()
        code = self._perform("POST", url, body, data=payload)
        if code >= 400:
            raise HttpError(f"http status {code}")
        return body.getvalue().decode("utf-8", errors="replace")

    def close(self) -> None:
        self._session.close()


def get(url: str, **kwargs) -> str:
    """GET ``url`` and return the body as text."""
    body = io.BytesIO()
    with HTTP() as session:
        session.configure(**kwargs)
        session.fetch(url, body)
    return body.getvalue().decode("utf-8", errors="replace")


def download(url: str, path, **kwargs) -> None:
    """GET ``url`` and store the body in the file at ``path``."""
    with HTTP() as session, open(path, "wb") as out:
        session.configure(**kwargs)
        session.fetch(url, out)


def post(url: str, data, **kwargs) -> str:
    """POST a string, bytes or form mapping to ``url`` and return the body."""
    if isinstance(data, Mapping):
        data = encode_form(data)
    with HTTP() as session:
        session.configure(**kwargs)
        return session.send_post(url, data)