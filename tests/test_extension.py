"""Tests for the enclave markdown extension."""

import xml.etree.ElementTree as etree

import markdown
import pytest
from bs4 import BeautifulSoup

from markdown_enclave.extension import EnclaveExtension, reconstruct_alt


def render_markdown(text, **config):
    """Helper to render markdown with the enclave extension."""
    md = markdown.Markdown(extensions=[EnclaveExtension(**config)])
    return md.convert(text)


class TestEmbeds:
    """Tests for images replaced by embeds."""

    def test_youtube_replaces_image(self):
        result = render_markdown("![](https://www.youtube.com/watch?v=abc123)")
        assert 'src="https://www.youtube.com/embed/abc123"' in result
        assert "<img" not in result

    def test_preserves_surrounding_text(self):
        result = render_markdown("Before ![](https://youtu.be/abc123) after.")
        assert "Before " in result
        assert " after." in result
        assert result.index("Before") < result.index("<iframe") < result.index("after")

    def test_multiple_embeds_in_one_paragraph(self):
        result = render_markdown(
            "![](https://youtu.be/one) and ![](https://youtu.be/two)"
        )
        assert result.index("embed/one") < result.index(" and ") < result.index(
            "embed/two"
        )
        assert "<img" not in result

    def test_audio(self):
        result = render_markdown("![song](https://example.com/song.mp3)")
        audio = BeautifulSoup(result, "html.parser").find("audio")
        assert audio["src"] == "https://example.com/song.mp3"

    def test_linked_image(self):
        result = render_markdown("[![](https://youtu.be/abc123)](https://example.com)")
        link = BeautifulSoup(result, "html.parser").find("a")
        assert link.find("iframe") is not None

    def test_iframe_disabled(self):
        result = render_markdown(
            "![](https://www.youtube.com/watch?v=abc123)", iframe_disabled=True
        )
        assert "<iframe" not in result
        link = BeautifulSoup(result, "html.parser").find("a")
        assert link["href"] == "https://www.youtube.com/watch"

    def test_default_theme(self):
        result = render_markdown(
            "![](https://twitter.com/user/status/1)", default_theme="dark"
        )
        assert 'data-theme="dark"' in result

    def test_loads_by_module_name(self):
        md = markdown.Markdown(
            extensions=["markdown_enclave"],
            extension_configs={"markdown_enclave": {"iframe_disabled": True}},
        )
        result = md.convert("![](https://youtu.be/abc123)")
        assert "<iframe" not in result
        assert "youtu.be/abc123" in result


class TestImages:
    """Tests for captioned and plain images."""

    def test_regular_image_untouched(self):
        result = render_markdown("![cat](https://example.com/cat.png)")
        img = BeautifulSoup(result, "html.parser").find("img")
        assert img["src"] == "https://example.com/cat.png"
        assert img["alt"] == "cat"
        assert "<figure" not in result

    def test_title_adds_caption(self):
        result = render_markdown('![cat](https://example.com/cat.png "A cat")')
        figure = BeautifulSoup(result, "html.parser").find("figure")
        assert figure.find("figcaption").get_text() == "A cat"
        assert figure.find("img")["alt"] == "cat"

    def test_alt_size_suffix(self):
        result = render_markdown("![Cat|300x200](cat.png)")
        figure = BeautifulSoup(result, "html.parser").find("figure")
        assert "width: 300px; height: 200px" in figure["style"]
        assert figure.find("img")["src"] == "cat.png"

    def test_destination_size_suffix_is_stripped(self):
        result = render_markdown("![cat](https://example.com/cat.png|200)")
        figure = BeautifulSoup(result, "html.parser").find("figure")
        assert figure.find("img")["src"] == "https://example.com/cat.png"
        assert "width: 200px; height: auto" in figure["style"]


class TestEmptySources:
    """Tests for images without a usable source."""

    @pytest.mark.parametrize(
        "text",
        [
            "![cat|300]()",
            '![cat](<> "A cat")',
            "![cat](|200)",
        ],
    )
    def test_image_left_untouched(self, text):
        result = render_markdown(text)
        assert "<figure" not in result
        assert "goldmark-enclave" not in result
        img = BeautifulSoup(result, "html.parser").find("img")
        assert img["alt"].startswith("cat")

    def test_other_images_still_embed(self):
        result = render_markdown("![cat|300]()\n\n![](https://youtu.be/abc123)")
        assert "youtube.com/embed/abc123" in result


class TestFailures:
    """Tests for destinations that cannot be parsed."""

    def test_inserts_diagnostic_comment(self):
        result = render_markdown("![x](http://[::1/x.png)")
        assert result.count("<!-- goldmark-enclave: failed to parse url") == 1
        assert "http://[::1/x.png" in result
        # The original image is left in place
        img = BeautifulSoup(result, "html.parser").find("img")
        assert img["src"] == "http://[::1/x.png"
        assert img["alt"] == "x"

    def test_comment_follows_image(self):
        result = render_markdown("![x](http://[::1/x.png) tail")
        assert result.index("<img") < result.index("<!--") < result.index("tail")

    def test_failure_does_not_stop_other_images(self):
        result = render_markdown(
            "![x](http://[::1/x.png)\n\n![](https://youtu.be/abc123)"
        )
        assert "failed to parse url" in result
        assert "youtube.com/embed/abc123" in result

    def test_invalid_percent_escape_inserts_comment(self):
        result = render_markdown("![x](https://example.com/%zz.png)")
        assert result.count("<!-- goldmark-enclave: failed to parse url") == 1
        assert 'invalid URL escape "%zz"' in result
        img = BeautifulSoup(result, "html.parser").find("img")
        assert img["src"] == "https://example.com/%zz.png"

    def test_failure_is_logged(self, capsys):
        render_markdown("![x](http://[::1/x.png)")
        captured = capsys.readouterr()
        assert "Warning: failed to parse url" in captured.err


class TestReconstructAlt:
    """Tests for reconstruct_alt function."""

    def test_reads_alt_attribute(self):
        assert reconstruct_alt(etree.Element("img", alt="Simple alt text")) == (
            "Simple alt text"
        )

    def test_missing_alt(self):
        assert reconstruct_alt(etree.Element("img")) == ""

    def test_appends_descendant_text(self):
        img = etree.Element("img", alt="a")
        child = etree.SubElement(img, "span")
        child.text = "b"
        child.tail = "c"
        assert reconstruct_alt(img) == "abc"
