# src/crawler/utils/url_utils.py
import re
import logging
from typing import Optional
from urllib.parse import urlparse, urljoin, urlunparse

from crawler.model import UrlValidation

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r'^https?://', re.IGNORECASE)
_SURROUNDING_NOISE = "'\" \t\r\n"
# Letters, digits, hyphen, dot and underscore; IDNs must arrive punycoded or as unicode letters
_HOST_RE = re.compile(r'^[\w.-]+$', re.UNICODE)
DEFAULT_PORTS = {"http": 80, "https": 443}


class UrlUtils:
    """A collection of static methods for URL parsing, validation and manipulation."""

    @staticmethod
    def clean_input(raw: str) -> str:
        """
        Strips surrounding quotes and whitespace from user input and
        prepends https:// when no http(s) scheme is present.
        """
        cleaned = (raw or "").strip(_SURROUNDING_NOISE)
        if cleaned and not _SCHEME_RE.match(cleaned):
            cleaned = "https://" + cleaned
        return cleaned

    @staticmethod
    def validate_url(raw: str) -> UrlValidation:
        """
        Normalizes raw user text into an absolute http(s) URL.
        Pure: performs no network calls.
        """
        if raw is None or not str(raw).strip(_SURROUNDING_NOISE):
            return UrlValidation(is_valid=False, url="", error="URL is required")

        cleaned = UrlUtils.clean_input(str(raw))

        try:
            parsed = urlparse(cleaned)
            hostname = parsed.hostname or ""
            # Accessing .port raises ValueError for out-of-range or non-numeric ports
            _ = parsed.port
        except ValueError as e:
            logger.debug("URL validation failed for %r: %s", cleaned, e)
            return UrlValidation(is_valid=False, url=cleaned, error="Malformed URL")

        if parsed.scheme.lower() not in ("http", "https"):
            return UrlValidation(is_valid=False, url=cleaned, error="Only http and https URLs are supported")
        if not hostname:
            return UrlValidation(is_valid=False, url=cleaned, error="URL has no hostname")
        if hostname == "localhost":
            return UrlValidation(is_valid=False, url=cleaned, error="localhost URLs are not allowed")
        if "." not in hostname or ".." in hostname or hostname.startswith(".") or hostname.endswith("."):
            return UrlValidation(is_valid=False, url=cleaned, error="Invalid domain format")
        if not _HOST_RE.match(hostname) or any(ch.isspace() for ch in cleaned):
            return UrlValidation(is_valid=False, url=cleaned, error="URL contains invalid characters")

        if parsed.username or parsed.password:
            return UrlValidation(is_valid=False, url=cleaned, error="URLs with credentials are not allowed")

        scheme = parsed.scheme.lower()
        normalized = urlunparse((
            scheme,
            UrlUtils.build_netloc(scheme, hostname, parsed.port),
            parsed.path or "/",
            parsed.params,
            parsed.query,
            "",
        ))
        return UrlValidation(is_valid=True, url=normalized)

    @staticmethod
    def build_netloc(scheme: str, hostname: str, port: Optional[int]) -> str:
        """Host (already lower-cased by urlparse) plus the port, unless it is the scheme's default."""
        host = f"[{hostname}]" if ":" in hostname else hostname
        if port is None or DEFAULT_PORTS.get(scheme) == port:
            return host
        return f"{host}:{port}"

    @staticmethod
    def normalize_url(base_url: str, url: str) -> str:
        """
        Creates a clean, absolute URL from a base URL and a potentially relative URL.
        Scheme and host are lower-cased and default ports dropped, so spellings
        of the same page compare equal.
        Raises ValueError for an unparseable port.
        """
        absolute_url = urljoin(base_url, url)
        parsed_url = urlparse(absolute_url)
        scheme = parsed_url.scheme.lower()

        netloc = parsed_url.netloc
        if parsed_url.hostname:
            userinfo, _, _ = netloc.rpartition("@")
            host = UrlUtils.build_netloc(scheme, parsed_url.hostname, parsed_url.port)
            netloc = f"{userinfo}@{host}" if userinfo else host

        # Fragments are client-side only
        return urlunparse(parsed_url._replace(
            scheme=scheme,
            netloc=netloc,
            path=parsed_url.path or "/",
            fragment="",
        ))

    @staticmethod
    def get_hostname(url: str) -> str:
        try:
            return (urlparse(url).hostname or "").lower()
        except ValueError:
            return ""

    @staticmethod
    def is_same_origin(url: str, base_url: str) -> bool:
        """Same-origin here means an identical hostname; scheme and port are ignored."""
        host = UrlUtils.get_hostname(url)
        return bool(host) and host == UrlUtils.get_hostname(base_url)
