"""HTML renderers for enclaves, one per provider."""

from collections.abc import Callable, Mapping
from functools import wraps
from urllib.parse import quote, urlencode

from jinja2 import Template, TemplateError

from .entity import THEME_DARK, Enclave, Provider
from .errors import RenderError
from .size import normalize_size
from .templates import compile_templates

Templates = Mapping[str, Template]
Renderer = Callable[..., str]

RENDERERS: dict[Provider, Renderer] = {}

QUAIL_LAYOUT_HEIGHTS = {
    "subscribe_form": "390px",
    "subscribe_form_mini": "142px",
}

ALIGN_MARGINS = {
    "left": "0 auto 0 0",
    "right": "0 0 0 auto",
}


def _render_template(key: str, templates: Templates | None, **context) -> str:
    if templates is None:
        templates = compile_templates()
    try:
        return templates[key].render(**context)
    except (KeyError, TemplateError) as e:
        raise RenderError(f"failed to render {key} embed: {e}") from e


def render_no_iframe(enclave: Enclave, templates: Templates | None = None) -> str:
    """Render a plain link to the destination instead of an embed."""
    return _render_template(
        "no-iframe",
        templates,
        href=enclave.canonical_url,
        text=enclave.title or enclave.object_id,
    )


def renderer(provider: Provider):
    """Register a function as the renderer for provider.

    Renderers of widget providers fall back to render_no_iframe when the
    enclave has iframes disabled.
    """

    def decorator(func: Renderer) -> Renderer:
        if provider.is_widget:

            @wraps(func)
            def wrapper(enclave: Enclave, templates: Templates | None = None) -> str:
                if enclave.iframe_disabled:
                    return render_no_iframe(enclave, templates)
                return func(enclave, templates)

        else:
            wrapper = func

        RENDERERS[provider] = wrapper
        return wrapper

    return decorator


@renderer(Provider.YOUTUBE)
def render_youtube(enclave: Enclave, templates: Templates | None = None) -> str:
    src = f"https://www.youtube.com/embed/{quote(enclave.object_id, safe='')}"
    return _render_template("youtube", templates, src=src)


@renderer(Provider.BILIBILI)
def render_bilibili(enclave: Enclave, templates: Templates | None = None) -> str:
    query = urlencode({"bvid": enclave.object_id, "page": "1", "autoplay": "0"})
    src = f"https://player.bilibili.com/player.html?{query}"
    return _render_template("bilibili", templates, src=src)


@renderer(Provider.TWITTER)
def render_twitter(enclave: Enclave, templates: Templates | None = None) -> str:
    return _render_template(
        "twitter", templates, tweet_url=enclave.object_id, theme=enclave.theme
    )


@renderer(Provider.TRADINGVIEW)
def render_tradingview(enclave: Enclave, templates: Templates | None = None) -> str:
    query = urlencode(
        {
            "symbol": enclave.object_id,
            "interval": "D",
            "theme": enclave.theme,
            "style": "1",
            "locale": "en",
        }
    )
    src = f"https://s.tradingview.com/widgetembed/?{query}"
    return _render_template("tradingview", templates, src=src, theme=enclave.theme)


@renderer(Provider.DIFY_WIDGET)
def render_dify_widget(enclave: Enclave, templates: Templates | None = None) -> str:
    return _render_template("dify-widget", templates, src=enclave.object_id)


def quail_widget_height(enclave: Enclave) -> str:
    """Height of a quail widget iframe, from its path and layout."""
    if "/p/" in enclave.url.path:
        return "128px"
    return QUAIL_LAYOUT_HEIGHTS.get(enclave.params.get("layout", ""), "auto")


@renderer(Provider.QUAIL_WIDGET)
def render_quail_widget(enclave: Enclave, templates: Templates | None = None) -> str:
    layout = enclave.params.get("layout", "")
    query = urlencode({"theme": enclave.theme, "layout": layout, "logged": "ignore"})
    return _render_template(
        "quail-widget",
        templates,
        src=f"{enclave.canonical_url}/widget?{query}",
        theme=enclave.theme,
        height=quail_widget_height(enclave),
    )


@renderer(Provider.SPOTIFY)
def render_spotify(enclave: Enclave, templates: Templates | None = None) -> str:
    params = {"utm_source": "generator"}
    if enclave.theme == THEME_DARK:
        params["theme"] = "0"
    track = quote(enclave.object_id, safe="")
    src = f"https://open.spotify.com/embed/track/{track}?{urlencode(params)}"
    return _render_template("spotify", templates, src=src)


@renderer(Provider.HTML5_AUDIO)
def render_html5_audio(enclave: Enclave, templates: Templates | None = None) -> str:
    return _render_template("html5-audio", templates, src=enclave.object_id)


@renderer(Provider.QUAIL_IMAGE)
def render_quail_image(enclave: Enclave, templates: Templates | None = None) -> str:
    """Render an image inside a figure with caption, size and alignment."""
    width = normalize_size(enclave.params.get("width", ""))
    height = normalize_size(enclave.params.get("height", ""))
    margin = ALIGN_MARGINS.get(enclave.params.get("align", ""), "0 auto")

    return _render_template(
        "quail-image",
        templates,
        src=enclave.url.geturl(),
        alt=enclave.alt,
        title=enclave.title,
        width=width,
        height=height,
        margin=margin,
    )


def render_quail_ad(enclave: Enclave, templates: Templates | None = None) -> str:
    """Render an empty ad container hydrated client-side by its uuid."""
    return _render_template("quail-ad", templates, object_id=enclave.object_id)


def render(enclave: Enclave, templates: Templates | None = None) -> str:
    """Render an enclave with the renderer registered for its provider.

    Args:
        enclave: Enclave to render
        templates: Compiled templates, defaults to the bundled ones

    Returns:
        HTML fragment

    Raises:
        RenderError: If the provider has no renderer or its template fails
    """
    func = RENDERERS.get(enclave.provider)
    if func is None:
        raise RenderError(f"no renderer for provider {enclave.provider.name}")
    return func(enclave, templates)
