"""Embed template management for markdown-enclave."""

import importlib.resources
from functools import lru_cache
from pathlib import Path

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    Template,
    TemplateError,
    TemplateNotFound,
)

from .errors import RenderError

EMBEDS_PACKAGE = "markdown_enclave.defaults.embeds"

# Template file per renderer key
TEMPLATE_NAMES = {
    "youtube": "youtube.html",
    "bilibili": "bilibili.html",
    "twitter": "twitter.html",
    "tradingview": "tradingview.html",
    "dify-widget": "dify_widget.html",
    "quail-widget": "quail_widget.html",
    "quail-image": "quail_image.html",
    "quail-ad": "quail_ad.html",
    "spotify": "spotify.html",
    "html5-audio": "html5_audio.html",
    "no-iframe": "no_iframe.html",
}


class PackageLoader(BaseLoader):
    """Jinja2 loader that loads templates from a Python package."""

    def __init__(self, package: str):
        self.package = package

    def get_source(self, environment, template):
        try:
            pkg = importlib.resources.files(self.package)
            template_file = pkg.joinpath(template)
            if template_file.is_file():
                source = template_file.read_text(encoding="utf-8")
                return source, str(template_file), lambda: True
        except (TypeError, FileNotFoundError):
            pass
        raise TemplateNotFound(template)

    def list_templates(self):
        templates = []
        try:
            pkg = importlib.resources.files(self.package)
            for item in pkg.iterdir():
                if item.is_file() and item.name.endswith(".html"):
                    templates.append(item.name)
        except (TypeError, FileNotFoundError):
            pass
        return sorted(templates)


def get_template_loader(templates_dir: Path | None = None) -> ChoiceLoader:
    """Get a Jinja2 loader with override support.

    Template resolution order:
    1. User templates in templates_dir, if it exists
    2. Bundled embed templates

    Args:
        templates_dir: Optional directory holding user overrides

    Returns:
        ChoiceLoader that checks user templates first, then bundled defaults
    """
    loaders = []

    if templates_dir is not None and templates_dir.exists():
        loaders.append(FileSystemLoader(str(templates_dir)))

    loaders.append(PackageLoader(EMBEDS_PACKAGE))

    return ChoiceLoader(loaders)


@lru_cache(maxsize=8)
def get_embed_environment(templates_dir: Path | None = None) -> Environment:
    """Get or create a cached Jinja2 environment for embed templates."""
    return Environment(
        loader=get_template_loader(templates_dir),
        autoescape=True,
    )


@lru_cache(maxsize=8)
def compile_templates(templates_dir: Path | None = None) -> dict[str, Template]:
    """Compile every embed template once.

    Args:
        templates_dir: Optional directory holding user overrides

    Returns:
        Dict mapping renderer keys to compiled templates

    Raises:
        RenderError: If a template is missing or fails to compile
    """
    env = get_embed_environment(templates_dir)
    compiled = {}
    for key, name in TEMPLATE_NAMES.items():
        try:
            compiled[key] = env.get_template(name)
        except TemplateError as e:
            raise RenderError(f"invalid embed template {name}: {e}") from e
    return compiled


def list_available_templates(templates_dir: Path | None = None) -> dict[str, str]:
    """List all embed templates and their sources.

    Args:
        templates_dir: Optional directory holding user overrides

    Returns:
        Dict mapping template names to their source ("user" or "bundled")
    """
    templates = {
        name: "bundled" for name in PackageLoader(EMBEDS_PACKAGE).list_templates()
    }

    if templates_dir is not None and templates_dir.exists():
        for template_file in templates_dir.glob("*.html"):
            if template_file.name in templates:
                templates[template_file.name] = "user"

    return templates
