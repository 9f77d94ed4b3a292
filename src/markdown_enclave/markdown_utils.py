"""Markdown processing utilities for markdown-enclave."""

from functools import lru_cache
from pathlib import Path

import frontmatter
import markdown

from .config import EnclaveConfig
from .extension import EnclaveExtension
from .logging import warning

# Markdown extensions used alongside the enclave extension
MARKDOWN_EXTENSIONS = [
    "extra",  # tables, footnotes, etc.
    "sane_lists",
]


def parse_markdown_file(filepath: Path) -> tuple[dict, str]:
    """Parse a markdown file with YAML frontmatter.

    Args:
        filepath: Path to the markdown file

    Returns:
        Tuple of (metadata dict, markdown content string)
    """
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            post = frontmatter.load(f)
        return dict(post.metadata), post.content
    except Exception as e:
        warning(f"YAML parsing error in {filepath}: {e}")
        return {}, ""


@lru_cache(maxsize=8)
def get_markdown_converter(
    iframe_disabled: bool = False,
    default_theme: str = "light",
    templates_dir: str = "",
) -> markdown.Markdown:
    """Get or create a cached Markdown converter for the given options."""
    return markdown.Markdown(
        extensions=[
            *MARKDOWN_EXTENSIONS,
            EnclaveExtension(
                iframe_disabled=iframe_disabled,
                default_theme=default_theme,
                templates_dir=templates_dir,
            ),
        ],
    )


def render_markdown(content: str, config: EnclaveConfig | None = None) -> str:
    """Render markdown to HTML with embeds.

    Args:
        content: Markdown content
        config: Enclave options, defaults when omitted

    Returns:
        HTML string
    """
    config = config or EnclaveConfig()
    md = get_markdown_converter(**config.to_extension_config())
    md.reset()
    return md.convert(content)
