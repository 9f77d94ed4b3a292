"""Enclave entities: classified, rendering-ready image references."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from urllib.parse import SplitResult


class Provider(Enum):
    """Embed types an image destination can resolve to."""

    NONE = ""
    YOUTUBE = "youtube"
    BILIBILI = "bilibili"
    TWITTER = "twitter"
    TRADINGVIEW = "tradingview"
    DIFY_WIDGET = "dify-widget"
    QUAIL_WIDGET = "quail-widget"
    QUAIL_IMAGE = "quail-image"
    SPOTIFY = "spotify"
    HTML5_AUDIO = "html5-audio"
    REGULAR_IMAGE = "regular-image"

    @property
    def is_widget(self) -> bool:
        """Whether this provider embeds third-party content in an iframe."""
        return self in _WIDGET_PROVIDERS


_WIDGET_PROVIDERS = frozenset(
    {
        Provider.YOUTUBE,
        Provider.BILIBILI,
        Provider.TWITTER,
        Provider.TRADINGVIEW,
        Provider.DIFY_WIDGET,
        Provider.QUAIL_WIDGET,
        Provider.SPOTIFY,
    }
)

THEME_LIGHT = "light"
THEME_DARK = "dark"


def normalize_theme(theme: str | None) -> str:
    """Collapse a theme hint to "dark" or "light"."""
    return THEME_DARK if theme == THEME_DARK else THEME_LIGHT


@dataclass(frozen=True)
class Classification:
    """Result of matching an image destination against the provider rules."""

    provider: Provider
    object_id: str
    url: SplitResult
    theme: str = ""
    params: dict[str, str] = field(default_factory=dict)

    @property
    def matched(self) -> bool:
        return self.provider is not Provider.NONE and bool(self.object_id)


@dataclass(frozen=True)
class Enclave:
    """A classified image reference ready to be rendered."""

    provider: Provider
    object_id: str
    url: SplitResult
    title: str = ""
    alt: str = ""
    theme: str = THEME_LIGHT
    params: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    iframe_disabled: bool = False

    @property
    def canonical_url(self) -> str:
        """scheme://host/path of the destination, without query or fragment."""
        return f"{self.url.scheme}://{self.url.netloc}{self.url.path}"


def build_enclave(
    classification: Classification,
    title: str = "",
    alt: str = "",
    iframe_disabled: bool = False,
    default_theme: str = THEME_LIGHT,
) -> Enclave:
    """Build the enclave for a successful classification.

    Args:
        classification: Output of the classifier
        title: Image title as written in the markdown
        alt: Reconstructed alt text
        iframe_disabled: Render widgets as plain links instead of iframes
        default_theme: Theme used when the destination carries no hint

    Returns:
        Immutable Enclave with a normalized theme

    Raises:
        ValueError: If the classification did not resolve a provider
    """
    if not classification.matched:
        raise ValueError(
            f"cannot build an enclave for unmatched destination "
            f"{classification.url.geturl()!r}"
        )

    return Enclave(
        provider=classification.provider,
        object_id=classification.object_id,
        url=classification.url,
        title=title or "",
        alt=alt or "",
        theme=normalize_theme(classification.theme or default_theme),
        params=MappingProxyType(dict(classification.params)),
        iframe_disabled=iframe_disabled,
    )
