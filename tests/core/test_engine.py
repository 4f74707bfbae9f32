import pytest

from svg_inliner.core import inliner
from svg_inliner.core.engine import transform
from svg_inliner.core.exceptions import ConfigurationError, LoadError, UnresolvedReferenceError


@pytest.fixture
def load_spy(monkeypatch):
    """Record every file the inliner asks the loader for."""
    calls = []
    real_load = inliner.load_svg

    def _spy(reference, document):
        calls.append(reference.raw_path)
        return real_load(reference, document)

    monkeypatch.setattr(inliner, "load_svg", _spy)
    return calls


class TestInlining:
    """Replacing referencing elements with their SVG markup."""

    def test_svg_element_is_replaced(self, read_fixture, make_options, parse_html):
        result = transform(read_fixture("svg.html"), make_options())
        doc = parse_html(result)

        svgs = doc.xpath("//svg")
        assert len(svgs) == 1
        svg = svgs[0]
        assert svg.get("src") is None
        assert svg.get("some-attr") == "test"
        assert svg.get("class") == "github-icon"
        assert svg.get("xmlns") == "http://www.w3.org/2000/svg"
        assert len(svg.xpath("path")) == 1

    def test_img_element_is_replaced(self, read_fixture, make_options, parse_html):
        result = transform(read_fixture("img.html"), make_options())
        doc = parse_html(result)

        assert not doc.xpath("//img")
        svg = doc.xpath("//svg")[0]
        assert svg.get("alt") == "a svg"
        assert svg.get("some-attr") == "test"
        assert svg.get("src") is None

    def test_surrounding_content_is_kept(self, read_fixture, make_options, parse_html):
        result = transform(read_fixture("img.html"), make_options())
        doc = parse_html(result)

        svg = doc.xpath("//svg")[0]
        assert svg.getprevious().tag == "p"
        assert svg.getprevious().text == "before"
        assert svg.tail.startswith(" tail text")
        assert [p.text for p in doc.xpath("//p")] == ["before", "after"]
        assert doc.xpath("//title")[0].text == "img tag"

    def test_svg_name_case_is_preserved(self, read_fixture, make_options):
        result = transform(read_fixture("svg.html"), make_options())
        assert 'viewBox="0 0 16 16"' in result

    def test_every_matched_element_gets_its_own_copy(self, read_fixture, make_options, parse_html):
        result = transform(
            read_fixture("custom-selectors.html"),
            make_options(selectors=[".select-me", ".also-select-me"]),
        )
        doc = parse_html(result)

        selected = doc.xpath("//svg[@class='select-me']") + doc.xpath("//svg[@class='also-select-me']")
        assert len(selected) == 2
        assert all(len(svg.xpath("path")) == 1 for svg in selected)
        assert selected[0].xpath("path")[0] is not selected[1].xpath("path")[0]

    def test_unselected_elements_are_untouched(self, read_fixture, make_options, parse_html):
        result = transform(
            read_fixture("custom-selectors.html"),
            make_options(selectors=[".select-me", ".also-select-me"]),
        )
        doc = parse_html(result)

        untouched = doc.xpath("//svg[@src]")
        assert len(untouched) == 1
        assert untouched[0].get("src") == "do-not-select-me.svg"

    def test_nested_reference_is_skipped(self, make_options, parse_html, load_spy):
        text = (
            "<!DOCTYPE html><html><body>"
            '<svg src="github.svg"><img src="github.svg"></svg>'
            "</body></html>"
        )
        result = transform(text, make_options())
        doc = parse_html(result)

        assert len(doc.xpath("//svg")) == 1
        assert not doc.xpath("//img")
        assert load_spy == ["github.svg"]


class TestAttributeFilter:
    """The ``attrs`` option decides what is copied from the referencing element."""

    def test_match_everything_keeps_src(self, read_fixture, make_options, parse_html):
        result = transform(read_fixture("svg.html"), make_options(attrs=".*"))
        svg = parse_html(result).xpath("//svg")[0]
        assert svg.get("src") == "github.svg"
        assert svg.get("some-attr") == "test"

    def test_specific_attribute(self, read_fixture, make_options, parse_html):
        result = transform(read_fixture("specific-attr.html"), make_options(attrs="some-attr"))
        svg = parse_html(result).xpath("//svg")[0]
        assert svg.get("some-attr") == "test"
        assert svg.get("another-attr") is None
        assert svg.get("src") is None

    def test_referencing_element_wins_on_conflict(self, make_options, parse_html):
        text = '<html><body><img src="github.svg" class="mine"></body></html>'
        svg = parse_html(transform(text, make_options())).xpath("//svg")[0]
        assert svg.get("class") == "mine"


class TestRoot:
    def test_references_resolve_against_root(self, read_fixture, fixtures_dir, parse_html):
        result = transform(read_fixture("svg-root.html"), {"root": str(fixtures_dir / "svg-root")})
        svg = parse_html(result).xpath("//svg")[0]
        assert svg.get("class") == "root-icon"

    def test_default_root_is_working_directory(self, read_fixture, fixtures_dir, monkeypatch, parse_html):
        monkeypatch.chdir(fixtures_dir / "svg-root")
        result = transform(read_fixture("svg-root.html"))
        svg = parse_html(result).xpath("//svg")[0]
        assert svg.get("class") == "root-icon"

    def test_missing_root_directory(self, read_fixture, fixtures_dir):
        with pytest.raises(ConfigurationError) as info:
            transform(read_fixture("svg-root.html"), {"root": str(fixtures_dir / "nowhere")})
        assert info.value.option == "root"


class TestPassThrough:
    """Documents without matches come back exactly as they went in."""

    def test_document_without_references(self, read_fixture, make_options):
        text = read_fixture("no-img.html")
        assert transform(text, make_options()) == text

    def test_entities_survive_pass_through(self, read_fixture, make_options):
        result = transform(read_fixture("no-img.html"), make_options())
        assert "Nothing&nbsp;to &amp; inline." in result

    @pytest.mark.parametrize("text", ["", "   \n"])
    def test_blank_document(self, text, make_options):
        assert transform(text, make_options()) == text


class TestErrors:
    """Every failure aborts the document before any output exists."""

    @pytest.mark.parametrize("selectors", [{"foo": "bar"}, 42, []])
    def test_invalid_selectors(self, selectors, read_fixture, make_options, load_spy):
        with pytest.raises(ConfigurationError) as info:
            transform(read_fixture("svg.html"), {"selectors": selectors})
        assert info.value.option == "selectors"
        assert load_spy == []

    def test_invalid_attrs(self, read_fixture, load_spy):
        with pytest.raises(ConfigurationError) as info:
            transform(read_fixture("svg.html"), {"attrs": {"foo": "bar"}})
        assert info.value.option == "attrs"
        assert load_spy == []

    def test_nonexistent_source(self, read_fixture, make_options, load_spy):
        with pytest.raises(UnresolvedReferenceError) as info:
            transform(read_fixture("nonexistent-src.html"), make_options())
        assert info.value.raw_path == "does-not-exist.svg"
        assert "Invalid source path" in str(info.value)
        # the valid reference before it is never loaded either
        assert load_spy == []

    def test_unparseable_svg(self, tmp_path):
        (tmp_path / "broken.svg").write_bytes(b"")
        text = '<html><body><img src="broken.svg"></body></html>'
        with pytest.raises(LoadError) as info:
            transform(text, {"root": str(tmp_path)})
        assert info.value.path == tmp_path / "broken.svg"


class TestSerialization:
    TEXT = (
        "<!DOCTYPE html>\n<html><body>"
        "<p>café&nbsp;&amp; more</p>"
        '<img src="github.svg">'
        "</body></html>"
    )

    def test_character_references_by_default(self, make_options, parse_html):
        result = transform(self.TEXT, make_options())
        assert result.isascii()
        assert "café" not in result
        assert parse_html(result).xpath("//p")[0].text == "café\xa0& more"

    def test_decoded_characters(self, make_options, parse_html):
        result = transform(self.TEXT, make_options(decodeEntities=True))
        assert "café" in result
        assert parse_html(result).xpath("//p")[0].text == "café\xa0& more"

    def test_doctype_is_kept(self, read_fixture, make_options):
        result = transform(read_fixture("svg.html"), make_options())
        assert result.startswith("<!DOCTYPE html>\n<html>")

    def test_no_doctype_added(self, make_options):
        result = transform('<html><body><img src="github.svg"></body></html>', make_options())
        assert "<!DOCTYPE" not in result
        assert result.startswith("<html>")


class TestStatelessness:
    def test_repeated_calls_are_independent(self, read_fixture, make_options):
        options = make_options()
        first = transform(read_fixture("svg.html"), options)
        second = transform(read_fixture("svg.html"), options)
        assert first == second

    def test_mapping_options_are_resolved(self, read_fixture, fixtures_dir):
        result = transform(read_fixture("svg.html"), {"root": str(fixtures_dir)})
        assert "<svg" in result
