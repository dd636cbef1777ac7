import pytest

from plugins.bookimport.errors import (
    FileNotFound,
    InvalidEncoding,
    InvertedTagOrder,
    MissingEndTag,
    MissingStartTag,
)
from plugins.bookimport.tags import TagExtractor, extract

FIXTURE_CSS = """\
.this-will-not-be-included {
  display: none;
}

/* @import start cool-css */
.this-will-be-included {
  display: block;
}
/* @import end cool-css */

.neither-will-this {}
"""


class TestTagExtractor:
    """Extraction of the lines between start/end marker lines."""

    def test_basic_region(self):
        """Test: The lines between the start and end markers are returned."""
        content = "@import start cool-css\n.box { display:block; }\n@import end cool-css\n"
        assert extract(content, "cool-css") == ".box { display:block; }"

    def test_markers_inside_comments(self):
        """Test: Marker lines wrapped in comments are recognized."""
        assert extract(FIXTURE_CSS, "cool-css") == ".this-will-be-included {\n  display: block;\n}"

    def test_returns_exact_lines_between_markers(self):
        """Test: Only lines strictly between the markers are returned."""
        before = ["noise", "@import end other", "more noise"]
        region = ["  line one", "", "line three  "]
        after = ["trailing", "@import start late"]
        lines = before + ["# @import start t"] + region + ["# @import end t"] + after
        assert extract("\n".join(lines), "t") == "\n".join(region)

    def test_empty_region(self):
        """Test: Adjacent markers yield an empty string."""
        assert extract("@import start t\n@import end t", "t") == ""

    def test_preserves_crlf_separator(self):
        """Test: CRLF files are re-joined with CRLF."""
        content = b"@import start t\r\nfirst\r\nsecond\r\n@import end t\r\n"
        assert extract(content, "t") == "first\r\nsecond"

    def test_bytes_are_decoded_as_utf8(self):
        """Test: Byte content is decoded as UTF-8."""
        content = "# @import start t\nnaïve — café\n# @import end t\n".encode("utf-8")
        assert extract(content, "t") == "naïve — café"

    def test_invalid_encoding(self):
        """Test: Non UTF-8 content raises InvalidEncoding."""
        with pytest.raises(InvalidEncoding):
            extract(b"@import start t\n\xff\xfe\n@import end t\n", "t")

    def test_tag_prefix_does_not_collide(self):
        """Test: A tag that prefixes another tag matches only its own markers."""
        content = (
            "@import start foo-bar\n"
            "from foo-bar\n"
            "@import end foo-bar\n"
            "@import start foo\n"
            "from foo\n"
            "@import end foo\n"
        )
        assert extract(content, "foo") == "from foo"
        assert extract(content, "foo-bar") == "from foo-bar"

    def test_missing_start_tag(self):
        """Test: A missing start marker raises MissingStartTag."""
        with pytest.raises(MissingStartTag) as excinfo:
            extract("line\n@import end t\n", "t")
        assert excinfo.value.tag == "t"

    def test_missing_end_tag(self):
        """Test: A missing end marker raises MissingEndTag."""
        with pytest.raises(MissingEndTag):
            extract("@import start t\nline\n", "t")

    def test_missing_end_tag_is_not_empty_substitution(self):
        """Test: A lone start marker fails instead of yielding an empty region."""
        with pytest.raises(MissingEndTag):
            extract("@import start t\n", "t")

    def test_inverted_tag_order(self):
        """Test: An end marker before the start marker raises InvertedTagOrder."""
        with pytest.raises(InvertedTagOrder):
            extract("@import end t\nline\n@import start t\n", "t")

    def test_custom_marker(self):
        """Test: The marker keyword can be configured."""
        extractor = TagExtractor(marker="@book")
        content = "# @book start book-section\n[preprocessor.bookimport]\n# @book end book-section\n"
        assert extractor.extract(content, "book-section") == "[preprocessor.bookimport]"
        with pytest.raises(MissingStartTag):
            extract(content, "book-section")

    def test_read_from_disk(self, tmp_path):
        """Test: A region is read from a file on disk."""
        path = tmp_path / "fixture.css"
        path.write_text(FIXTURE_CSS, encoding="utf-8")
        assert TagExtractor().read(path, "cool-css").startswith(".this-will-be-included")

    def test_read_missing_file(self, tmp_path):
        """Test: A missing file raises FileNotFound with its path."""
        with pytest.raises(FileNotFound) as excinfo:
            TagExtractor().read(tmp_path / "absent.txt", "t")
        assert excinfo.value.path == tmp_path / "absent.txt"

    def test_read_directory_is_not_a_file(self, tmp_path):
        """Test: A directory is not accepted as an import source."""
        with pytest.raises(FileNotFound):
            TagExtractor().read(tmp_path, "t")

    def test_comment_closer_glued_to_tag(self):
        """Test: A comment closer glued to the tag still ends the tag token."""
        content = "<!-- @import start foo-->\nx\n<!-- @import end foo-->\n<!-- @import start foo-bar-->\ny\n"
        assert extract(content, "foo") == "x"

    def test_read_unreadable_path(self, tmp_path):
        """Test: OS errors while reading surface as FileNotFound."""
        path = tmp_path / ("a" * 300 + ".txt")
        with pytest.raises(FileNotFound) as excinfo:
            TagExtractor().read(path, "t")
        assert excinfo.value.path == path
