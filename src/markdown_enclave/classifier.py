"""Classification of image destinations into embed providers.

An image destination is matched against an ordered table of rules, one per
provider. The first rule whose predicate accepts the URL decides the
provider; its extractor pulls out the object id, theme and options. When no
rule matches, the destination is treated as a generic image and may still
carry caption and size hints:

    ![alt](https://example.com/image.jpg?w=200&h=100)
    ![alt](https://example.com/image.jpg|200x100)
    ![alt|200](https://example.com/image.jpg "Caption")
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from urllib.parse import SplitResult, parse_qs, urlsplit

from .entity import Classification, Provider
from .errors import UrlParseError

_CONTROL_CHAR_PATTERN = re.compile(r"[\x00-\x1f\x7f]")
# A percent sign not followed by two hex digits
_BAD_ESCAPE_PATTERN = re.compile(r"%(?![0-9A-Fa-f]{2})")

# Size suffix appended to a destination or alt text: |200 or |200x100
SIZE_SUFFIX_PATTERN = re.compile(r"\|(\d+)(?:x(\d+))?")

_QUAIL_LIST_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
_QUAIL_POST_PATTERN = re.compile(r"^[A-Za-z0-9_-]+/p/[A-Za-z0-9_-]+$")
_SPOTIFY_TRACK_PATTERN = re.compile(r"^track/([A-Za-z0-9_-]+)$")

TWITTER_HOSTS = frozenset({"twitter.com", "m.twitter.com", "x.com"})
TRADINGVIEW_HOSTS = frozenset({"tradingview.com", "www.tradingview.com"})
QUAIL_HOSTS = frozenset({"quail.ink", "dev.quail.ink", "quaily.com"})


def parse_url(destination: str) -> SplitResult:
    """Split a destination into URL components.

    Raises:
        UrlParseError: If the destination contains control characters, has
            malformed brackets, an invalid port, or an invalid percent
            escape in its host, path or fragment
    """
    match = _CONTROL_CHAR_PATTERN.search(destination)
    if match:
        raise UrlParseError(
            destination, f"invalid control character {match.group(0)!r} in URL"
        )

    try:
        parts = urlsplit(destination)
        # urlsplit validates the port lazily
        parts.port
    except ValueError as e:
        raise UrlParseError(destination, str(e)) from e

    # The query is left raw, as browsers accept stray percent signs there
    for component in (parts.netloc, parts.path, parts.fragment):
        match = _BAD_ESCAPE_PATTERN.search(component)
        if match:
            escape = component[match.start() : match.start() + 3]
            raise UrlParseError(destination, f'invalid URL escape "{escape}"')

    return parts


def _host(parts: SplitResult) -> str:
    """Host with port, without user info."""
    return parts.netloc.rpartition("@")[2]


def _query(parts: SplitResult, name: str) -> str:
    """First value of a query parameter, or an empty string."""
    return parse_qs(parts.query).get(name, [""])[0]


def _trimmed_path(parts: SplitResult) -> str:
    return parts.path.strip("/")


@dataclass(frozen=True)
class Rule:
    """A provider rule: a host/path predicate and an id extractor."""

    name: str
    matches: Callable[[SplitResult], bool]
    extract: Callable[[str, SplitResult], Classification]


def _youtube_watch(destination: str, parts: SplitResult) -> Classification:
    return Classification(Provider.YOUTUBE, _query(parts, "v"), parts)


def _youtube_short(destination: str, parts: SplitResult) -> Classification:
    return Classification(Provider.YOUTUBE, _trimmed_path(parts), parts)


def _bilibili(destination: str, parts: SplitResult) -> Classification:
    video_id = parts.path[len("/video/") :].strip("/")
    return Classification(Provider.BILIBILI, video_id, parts)


def _twitter(destination: str, parts: SplitResult) -> Classification:
    object_id = destination
    if _host(parts) == "x.com":
        # Twitter's embed script does not accept x.com sources
        object_id = destination.replace("x.com", "twitter.com", 1)
    return Classification(
        Provider.TWITTER, object_id, parts, theme=_query(parts, "theme")
    )


def _tradingview(destination: str, parts: SplitResult) -> Classification:
    return Classification(
        Provider.TRADINGVIEW,
        _query(parts, "symbol"),
        parts,
        theme=_query(parts, "theme"),
    )


def _dify(destination: str, parts: SplitResult) -> Classification:
    if parts.scheme == "dify":
        object_id = f"https://{_host(parts)}{parts.path}"
    else:
        object_id = destination
    return Classification(Provider.DIFY_WIDGET, object_id, parts)


def _quail_widget(destination: str, parts: SplitResult) -> Classification:
    path = _trimmed_path(parts)
    if not (_QUAIL_LIST_PATTERN.match(path) or _QUAIL_POST_PATTERN.match(path)):
        return Classification(Provider.QUAIL_WIDGET, "", parts)

    return Classification(
        Provider.QUAIL_WIDGET,
        destination,
        parts,
        theme=_query(parts, "theme"),
        params={"layout": _query(parts, "layout")},
    )


def _spotify(destination: str, parts: SplitResult) -> Classification:
    match = _SPOTIFY_TRACK_PATTERN.match(_trimmed_path(parts))
    track_id = match.group(1) if match else ""
    return Classification(Provider.SPOTIFY, track_id, parts)


def _html5_audio(destination: str, parts: SplitResult) -> Classification:
    return Classification(Provider.HTML5_AUDIO, destination, parts)


# Evaluated in order, first match wins
RULES: tuple[Rule, ...] = (
    Rule(
        "youtube",
        lambda u: _host(u) == "www.youtube.com" and u.path == "/watch",
        _youtube_watch,
    ),
    Rule("youtube-short", lambda u: _host(u) == "youtu.be", _youtube_short),
    Rule(
        "bilibili",
        lambda u: _host(u) == "www.bilibili.com" and u.path.startswith("/video/"),
        _bilibili,
    ),
    Rule("twitter", lambda u: _host(u) in TWITTER_HOSTS, _twitter),
    Rule("tradingview", lambda u: _host(u) in TRADINGVIEW_HOSTS, _tradingview),
    Rule("dify", lambda u: _host(u) == "udify.app" or u.scheme == "dify", _dify),
    Rule("quail-widget", lambda u: _host(u) in QUAIL_HOSTS, _quail_widget),
    Rule("spotify", lambda u: _host(u) == "open.spotify.com", _spotify),
    Rule("html5-audio", lambda u: u.path.lower().endswith(".mp3"), _html5_audio),
)


def find_rule(parts: SplitResult) -> Rule | None:
    """Return the first provider rule accepting the URL, if any."""
    for rule in RULES:
        if rule.matches(parts):
            return rule
    return None


def extract_size_hint(text: str) -> tuple[str, str] | None:
    """Find a |WIDTH or |WIDTHxHEIGHT suffix in text.

    Returns:
        (width, height) with height possibly empty, or None if there is no
        suffix
    """
    if "|" not in text:
        return None
    match = SIZE_SUFFIX_PATTERN.search(text)
    if match is None:
        return None
    return match.group(1), match.group(2) or ""


def _classify_image(
    destination: str, parts: SplitResult, title: str, alt: str
) -> Classification:
    """Classify a destination no provider rule claimed."""
    width = _query(parts, "w") or _query(parts, "width")
    height = _query(parts, "h") or _query(parts, "height")

    # The alt hint is applied last and wins
    for text in (destination, alt):
        hint = extract_size_hint(text)
        if hint is not None:
            width, height = hint

    if "|" in destination:
        destination = destination.split("|", 1)[0]

    try:
        parts = parse_url(destination)
    except UrlParseError:
        return Classification(Provider.NONE, "", parts)

    if not (title or width or height):
        return Classification(Provider.REGULAR_IMAGE, destination, parts)

    candidates = {
        "title": title,
        "alt": alt,
        "width": width,
        "height": height,
        "align": _query(parts, "align"),
    }
    params = {key: value for key, value in candidates.items() if value}
    return Classification(Provider.QUAIL_IMAGE, destination, parts, params=params)


def classify(destination: str, title: str = "", alt: str = "") -> Classification:
    """Decide which provider, if any, an image destination belongs to.

    Args:
        destination: Raw image destination
        title: Image title, empty if absent
        alt: Reconstructed alt text

    Returns:
        Classification. Its provider is NONE when no object id could be
        resolved, whether a provider host matched or the destination is an
        empty image source.

    Raises:
        UrlParseError: If the destination cannot be parsed as a URL
    """
    title = title or ""
    alt = alt or ""
    parts = parse_url(destination)

    rule = find_rule(parts)
    if rule is None:
        result = _classify_image(destination, parts, title, alt)
    else:
        result = rule.extract(destination, parts)

    if not result.object_id:
        return Classification(Provider.NONE, "", parts)
    return result
