"""
Markdown extension that turns image references into rich embeds.

    ![](https://www.youtube.com/watch?v=dQw4w9WgXcQ)    -> YouTube iframe
    ![](https://x.com/user/status/1?theme=dark)         -> embedded tweet
    ![Cat|300x200](cat.png "A cat")                     -> captioned figure
"""

import xml.etree.ElementTree as etree
from pathlib import Path

from markdown import Extension
from markdown.treeprocessors import Treeprocessor

from .classifier import classify
from .entity import Provider, build_enclave
from .errors import RenderError, UrlParseError
from .logging import debug, error, warning
from .renderers import render
from .templates import compile_templates

DIAGNOSTIC_PREFIX = "goldmark-enclave"


def reconstruct_alt(element: etree.Element) -> str:
    """Return the literal label text of an image element.

    Python-Markdown stores the bracketed label in the alt attribute; any
    descendant text is appended in document order.
    """
    return element.get("alt", "") + "".join(element.itertext())


def _insert_after(parent: etree.Element, node: etree.Element, new: etree.Element):
    """Insert new directly after node, taking over node's tail text."""
    index = list(parent).index(node)
    new.tail = node.tail
    node.tail = None
    parent.insert(index + 1, new)


def _replace_with_text(parent: etree.Element, node: etree.Element, text: str):
    """Remove node from parent, leaving text where it stood."""
    index = list(parent).index(node)
    text += node.tail or ""
    if index == 0:
        parent.text = (parent.text or "") + text
    else:
        previous = parent[index - 1]
        previous.tail = (previous.tail or "") + text
    parent.remove(node)


class EnclaveTreeprocessor(Treeprocessor):
    """Treeprocessor replacing recognized images with rendered enclaves."""

    def __init__(
        self,
        md,
        iframe_disabled: bool = False,
        default_theme: str = "light",
        templates_dir: Path | None = None,
    ):
        super().__init__(md)
        self.iframe_disabled = iframe_disabled
        self.default_theme = default_theme
        # Compiled up front so broken templates fail at startup
        self.templates = compile_templates(templates_dir)

    def run(self, root):
        parents = {child: parent for parent in root.iter() for child in parent}

        # Collect first, the tree is mutated below
        for img in list(root.iter("img")):
            self.process_image(parents[img], img)

    def insert_failed_hint(self, parent: etree.Element, img: etree.Element, msg: str):
        """Insert a diagnostic comment right after img."""
        comment = etree.Comment(f" {DIAGNOSTIC_PREFIX}: {msg} ")
        _insert_after(parent, img, comment)

    def process_image(self, parent: etree.Element, img: etree.Element) -> None:
        destination = img.get("src", "")
        title = img.get("title", "")
        alt = reconstruct_alt(img)

        try:
            classification = classify(destination, title, alt)
        except UrlParseError as e:
            warning(str(e))
            self.insert_failed_hint(parent, img, str(e))
            return

        provider = classification.provider
        if provider in (Provider.NONE, Provider.REGULAR_IMAGE):
            return

        enclave = build_enclave(
            classification,
            title=title,
            alt=alt,
            iframe_disabled=self.iframe_disabled,
            default_theme=self.default_theme,
        )

        try:
            html = render(enclave, self.templates)
        except RenderError as e:
            error(f"{destination}: {e}")
            return

        debug(f"  Embedded {provider.value}: {enclave.object_id}")
        _replace_with_text(parent, img, self.md.htmlStash.store(html))


class EnclaveExtension(Extension):
    """Markdown extension for provider embeds in image syntax."""

    def __init__(self, **kwargs):
        self.config = {
            "iframe_disabled": [
                False,
                "Render widgets as plain links instead of iframes - Default: False",
            ],
            "default_theme": [
                "light",
                "Theme used when a destination has no theme hint - Default: light",
            ],
            "templates_dir": [
                "",
                "Directory with embed template overrides - Default: none",
            ],
        }
        super().__init__(**kwargs)

    def extendMarkdown(self, md):
        """Register the treeprocessor with markdown."""
        templates_dir = self.getConfig("templates_dir")
        processor = EnclaveTreeprocessor(
            md,
            iframe_disabled=bool(self.getConfig("iframe_disabled")),
            default_theme=self.getConfig("default_theme"),
            templates_dir=Path(templates_dir) if templates_dir else None,
        )
        # After inline processing (20) has created the img elements
        md.treeprocessors.register(processor, "enclave", 15)
        md.registerExtension(self)


def makeExtension(**kwargs):
    """Entry point for markdown extension."""
    return EnclaveExtension(**kwargs)
