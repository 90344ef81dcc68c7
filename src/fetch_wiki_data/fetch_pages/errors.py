"""Errors raised by the wiki API client."""

from __future__ import annotations


class WikiRequestError(Exception):
    """A wiki API request failed, by HTTP status or by an error body."""

    def __init__(self, url: str, status: int, code: str | None = None):
        if code:
            message = f"API error {code} (HTTP {status}) for {url}"
        else:
            message = f"HTTP {status} for {url}"
        super().__init__(message)
        self.url = url
        self.status = status
        self.code = code


class MissingPageDetailsError(Exception):
    """A detail fetch came back without any of the requested pages."""
