"""Source URI model used for dispatch and cache-key derivation.

A source URI may carry a *marker scheme* that only routes dispatch and is
stripped before the URI is handed to an external tool:

- nested form: ``git:https://host/repo`` (outer scheme wraps a full URI)
- plus form: ``git+ssh://host/repo`` (only for distributed VCS names)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional
from urllib.parse import quote, urlsplit, urlunsplit

from depstage.errors import InvalidSourceError

# Only these names act as "+" markers; svn+ssh is a genuine subversion scheme.
PLUS_MARKERS = frozenset({"git", "hg"})

_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.-]*):")
_WINDOWS_DRIVE_RE = re.compile(r"^[A-Za-z]:[\\/]")

# Characters left untouched when producing the canonical ASCII form.
_SAFE_CHARS = "/:@!$&'()*+,;=-._~%?#[]"


@dataclass(frozen=True)
class SourceURI:
    """Immutable source URI.

    Attributes:
        scheme: URI scheme (possibly a marker scheme).
        rest: Everything between ``scheme:`` and ``#``.
        fragment: Branch, tag or revision selector, if any.
    """

    scheme: str
    rest: str
    fragment: Optional[str] = None

    @classmethod
    def parse(cls, text: str) -> "SourceURI":
        """Parse a URI string.

        Bare filesystem paths (no scheme, or a Windows drive letter) become
        ``file:`` URIs of their absolute path.

        Args:
            text: URI or local path.

        Returns:
            SourceURI: Parsed URI.
        """
        text = text.strip()
        if not _SCHEME_RE.match(text) or _WINDOWS_DRIVE_RE.match(text):
            return cls.from_path(Path(text))

        body, sep, fragment = text.partition("#")
        scheme, _, rest = body.partition(":")
        return cls(scheme.lower(), rest, fragment if sep else None)

    @classmethod
    def from_path(cls, path: Path) -> "SourceURI":
        """Build a ``file:`` URI from a local path."""
        try:
            uri = path.expanduser().resolve().as_uri()
        except (RuntimeError, OSError) as e:
            # e.g. "~nosuchuser/x"
            raise InvalidSourceError(f"Cannot interpret local path {path}: {e}") from e
        return cls("file", uri[len("file:"):], None)

    @property
    def has_fragment(self) -> bool:
        return self.fragment is not None

    @property
    def marker(self) -> Optional[str]:
        """Marker scheme, or None when the URI is unmarked."""
        if _SCHEME_RE.match(self.rest):
            return self.scheme
        head, plus, _ = self.scheme.partition("+")
        if plus and head in PLUS_MARKERS:
            return head
        return None

    @property
    def has_marker_scheme(self) -> bool:
        return self.marker is not None

    @property
    def dispatch_key(self) -> str:
        """Key used to pick a resolver from the dispatch table."""
        return self.marker or self.scheme

    @property
    def path(self) -> str:
        """Path component of the URI (percent-decoding is left to callers)."""
        return urlsplit(self.to_ascii_string()).path

    def without_marker_scheme(self) -> "SourceURI":
        """Return the URI with its marker scheme stripped."""
        if _SCHEME_RE.match(self.rest):
            inner = SourceURI.parse(self.rest)
            return replace(inner, fragment=self.fragment)
        head, plus, tail = self.scheme.partition("+")
        if plus and head in PLUS_MARKERS:
            return replace(self, scheme=tail)
        return self

    def without_fragment(self) -> "SourceURI":
        return replace(self, fragment=None)

    def with_scheme(self, scheme: str) -> "SourceURI":
        return replace(self, scheme=scheme)

    def to_ascii_string(self) -> str:
        """Canonical ASCII representation.

        Non-ASCII characters are percent-encoded (host names via IDNA), so the
        result is stable across platforms and safe to hand to external tools.
        """
        text = f"{self.scheme}:{self.rest}"
        if self.fragment is not None:
            text = f"{text}#{self.fragment}"
        if text.isascii():
            return text

        parts = urlsplit(text)
        netloc = parts.netloc
        if parts.hostname and not parts.hostname.isascii():
            userinfo, at, _ = netloc.rpartition("@")
            netloc = parts.hostname.encode("idna").decode("ascii")
            if parts.port is not None:
                netloc = f"{netloc}:{parts.port}"
            if at:
                netloc = f"{userinfo}@{netloc}"
        return urlunsplit(
            (
                parts.scheme,
                quote(netloc, safe=_SAFE_CHARS),
                quote(parts.path, safe=_SAFE_CHARS),
                quote(parts.query, safe=_SAFE_CHARS),
                quote(parts.fragment, safe=_SAFE_CHARS),
            )
        )

    def __str__(self) -> str:
        return self.to_ascii_string()


__all__ = ["PLUS_MARKERS", "SourceURI"]
