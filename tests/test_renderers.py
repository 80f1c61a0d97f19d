"""Tests for the XML writer, the DocBook renderer and the full pipeline."""

import io

import pytest

from helpers import DOCBOOK, XML_ID, parse_docbook
from nixdoc.config import NixdocConfig
from nixdoc.errors import ErrorPhase, RenderError, SourceParseError, SourceReadError
from nixdoc.models import ManualEntry, Parameter
from nixdoc.orchestrator import DocumentationOrchestrator
from nixdoc.renderers import DOCBOOK_NAMESPACES, DocBookRenderer, DocBookWriter, write_section_xml


class FailingStream(io.StringIO):
    """StringIO that raises OSError when asked to write ``trigger``."""

    def __init__(self, trigger: str, once: bool = True):
        super().__init__()
        self.trigger = trigger
        self.once = once
        self.failed = False

    def write(self, text):
        if self.trigger in text and not (self.once and self.failed):
            self.failed = True
            raise OSError(28, "No space left on device")
        return super().write(text)


# =============================================================================
# DocBookWriter
# =============================================================================


class TestDocBookWriter:
    """Tests for the event-style XML writer."""

    def test_text_element_on_one_line(self):
        out = io.StringIO()
        with DocBookWriter(out) as writer:
            writer.start_element("para")
            writer.characters("Hello")
            writer.end_element()

        assert out.getvalue() == '<?xml version="1.0" encoding="utf-8"?>\n<para>Hello</para>\n'

    def test_nested_elements_are_indented(self):
        out = io.StringIO()
        with DocBookWriter(out, write_declaration=False) as writer:
            writer.start_element("title")
            writer.start_element("function")
            writer.characters("lib.a.b")
            writer.end_element()
            writer.end_element()

        assert out.getvalue() == "<title>\n  <function>lib.a.b</function>\n</title>\n"

    def test_no_indentation(self):
        out = io.StringIO()
        with DocBookWriter(out, indent="", write_declaration=False) as writer:
            writer.start_element("a")
            writer.start_element("b")
            writer.end_element()
            writer.end_element()

        assert out.getvalue() == "<a><b /></a>\n"

    def test_empty_element_is_self_closing(self):
        out = io.StringIO()
        with DocBookWriter(out, write_declaration=False) as writer:
            writer.start_element("para")
            writer.end_element()

        assert out.getvalue() == "<para />\n"

    def test_escaping(self):
        out = io.StringIO()
        with DocBookWriter(out, write_declaration=False) as writer:
            writer.start_element("literal", {"role": 'a "quoted" <value>'})
            writer.characters("int -> <a> & b")
            writer.end_element()

        root = parse_docbook(out.getvalue())
        assert root.text == "int -> <a> & b"
        assert root.get("role") == 'a "quoted" <value>'
        assert "&lt;a&gt; &amp; b" in out.getvalue()

    def test_attributes_keep_order(self):
        out = io.StringIO()
        with DocBookWriter(out, write_declaration=False) as writer:
            writer.start_element("section", {"b": "2", "a": "1"})
            writer.end_element()

        assert out.getvalue() == '<section b="2" a="1" />\n'

    def test_end_without_start(self):
        writer = DocBookWriter(io.StringIO())
        with pytest.raises(RenderError):
            writer.end_element()

    def test_characters_outside_element(self):
        writer = DocBookWriter(io.StringIO())
        with pytest.raises(RenderError):
            writer.characters("stray")

    def test_start_after_close(self):
        writer = DocBookWriter(io.StringIO())
        writer.close()
        with pytest.raises(RenderError):
            writer.start_element("section")

    def test_depth(self):
        writer = DocBookWriter(io.StringIO())
        writer.start_element("a")
        writer.start_element("b")
        assert writer.depth == 2
        writer.close()
        assert writer.depth == 0

    def test_close_is_idempotent(self):
        out = io.StringIO()
        writer = DocBookWriter(out, write_declaration=False)
        writer.start_element("a")
        writer.close()
        writer.close()
        assert out.getvalue() == "<a />\n"

    def test_exception_closes_open_elements(self):
        out = io.StringIO()
        with pytest.raises(ValueError):
            with DocBookWriter(out) as writer:
                writer.start_element("section")
                writer.start_element("para")
                raise ValueError("boom")

        root = parse_docbook(out.getvalue())
        assert root.tag == "section"
        assert root.find("para") is not None

    def test_os_error_becomes_render_error(self):
        writer = DocBookWriter(FailingStream("<para"), write_declaration=False)
        writer.start_element("section")

        with pytest.raises(RenderError) as exc_info:
            writer.start_element("para")

        assert exc_info.value.phase is ErrorPhase.RENDER
        assert isinstance(exc_info.value.cause, OSError)

    def test_close_failure_does_not_mask_original_error(self):
        stream = FailingStream("</", once=False)
        with pytest.raises(RuntimeError):
            with DocBookWriter(stream) as writer:
                writer.start_element("section")
                writer.start_element("para")
                writer.characters("partial")
                raise RuntimeError("render failed")


# =============================================================================
# Section rendering
# =============================================================================


def _render(entries, category="strings", description="String functions", **writer_kwargs) -> str:
    out = io.StringIO()
    with DocBookWriter(out, **writer_kwargs) as writer:
        DocBookRenderer(category, description).render(entries, writer)
    return out.getvalue()


class TestWriteSectionXml:
    """Tests for write_section_xml()."""

    def test_identifier_and_title(self):
        entry = ManualEntry(category="strings", name="concat", description="Joins.")
        out = io.StringIO()
        with DocBookWriter(out, write_declaration=False) as writer:
            write_section_xml(entry, writer)

        section = parse_docbook(out.getvalue())
        assert section.get(XML_ID) == "function-library-lib.strings.concat"
        assert section.find("title/function").text == "lib.strings.concat"

    def test_type_becomes_subtitle(self):
        entry = ManualEntry(category="lists", name="head", description="First.", fn_type="[a] -> a")
        out = io.StringIO()
        with DocBookWriter(out, write_declaration=False) as writer:
            write_section_xml(entry, writer)

        section = parse_docbook(out.getvalue())
        assert section.find("subtitle/literal").text == "[a] -> a"
        assert [child.tag for child in section] == ["title", "subtitle", "para"]

    def test_no_type_no_subtitle(self):
        entry = ManualEntry(category="lists", name="head", description="First.")
        out = io.StringIO()
        with DocBookWriter(out, write_declaration=False) as writer:
            write_section_xml(entry, writer)

        section = parse_docbook(out.getvalue())
        assert section.find("subtitle") is None
        assert [child.tag for child in section] == ["title", "para"]

    def test_description_is_verbatim(self):
        description = "First line.\n\nSecond paragraph with <tags> & *stars*."
        entry = ManualEntry(category="lists", name="head", description=description)
        out = io.StringIO()
        with DocBookWriter(out, write_declaration=False) as writer:
            write_section_xml(entry, writer)

        paras = parse_docbook(out.getvalue()).findall("para")
        assert len(paras) == 1
        assert paras[0].text == description

    def test_parameters_render_as_variablelist(self):
        entry = ManualEntry(
            category="lists",
            name="map",
            description="Maps.",
            parameters=[Parameter(name="f", description="Function to apply"), Parameter(name="list")],
        )
        out = io.StringIO()
        with DocBookWriter(out, write_declaration=False) as writer:
            write_section_xml(entry, writer)

        section = parse_docbook(out.getvalue())
        names = [v.text for v in section.findall("variablelist/varlistentry/term/varname")]
        assert names == ["f", "list"]
        assert section.find("variablelist/varlistentry/listitem/para").text == "Function to apply"


class TestDocBookRenderer:
    """Tests for the wrapping category section."""

    def test_wrapper_attributes(self):
        root = parse_docbook(_render([], category="strings"))

        assert root.tag == f"{DOCBOOK}section"
        assert root.get(XML_ID) == "sec-functions-library-strings"

    def test_namespace_declarations_are_literal(self):
        text = _render([])
        for name, uri in DOCBOOK_NAMESPACES.items():
            assert f'{name}="{uri}"' in text

    def test_empty_category_has_title_only(self):
        root = parse_docbook(_render([], description="Nothing here"))

        assert [child.tag for child in root] == [f"{DOCBOOK}title"]
        assert root.find(f"{DOCBOOK}title").text == "Nothing here"

    def test_entries_keep_order(self):
        entries = [
            ManualEntry(category="strings", name=name, description=name)
            for name in ["zeta", "alpha", "mid"]
        ]
        root = parse_docbook(_render(entries))

        ids = [s.get(XML_ID) for s in root.findall(f"{DOCBOOK}section")]
        assert ids == [
            "function-library-lib.strings.zeta",
            "function-library-lib.strings.alpha",
            "function-library-lib.strings.mid",
        ]

    def test_render_returns_count(self):
        entries = [ManualEntry(category="c", name="a", description="")]
        out = io.StringIO()
        with DocBookWriter(out) as writer:
            assert DocBookRenderer("c", "C").render(entries, writer) == 1

    def test_failure_mid_entry_still_closes_wrapper(self):
        entries = [
            ManualEntry(category="c", name="ok", description="fine"),
            ManualEntry(category="c", name="bad", description="BOOM"),
        ]
        stream = FailingStream("BOOM")

        with pytest.raises(RenderError):
            with DocBookWriter(stream) as writer:
                DocBookRenderer("c", "C").render(entries, writer)

        root = parse_docbook(stream.getvalue())
        assert len(root.findall(f"{DOCBOOK}section")) == 2


# =============================================================================
# Full pipeline
# =============================================================================


class TestDocumentationOrchestrator:
    """End-to-end tests through DocumentationOrchestrator."""

    def _config(self, path, **kwargs):
        return NixdocConfig(file=path, category=kwargs.pop("category", "math"),
                            description=kwargs.pop("description", "Math functions"), **kwargs)

    def test_double_scenario(self, tmp_path, double_source):
        path = tmp_path / "math.nix"
        path.write_text(double_source)
        out = io.StringIO()

        count = DocumentationOrchestrator(self._config(path)).generate(out)

        assert count == 1
        assert out.getvalue() == (
            '<?xml version="1.0" encoding="utf-8"?>\n'
            '<section xmlns="http://docbook.org/ns/docbook"'
            ' xmlns:xlink="http://www.w3.org/1999/xlink"'
            ' xmlns:xi="http://www.w3.org/2001/XInclude"'
            ' xml:id="sec-functions-library-math">\n'
            "  <title>Math functions</title>\n"
            '  <section xml:id="function-library-lib.math.double">\n'
            "    <title>\n"
            "      <function>lib.math.double</function>\n"
            "    </title>\n"
            "    <subtitle>\n"
            "      <literal>int -&gt; int</literal>\n"
            "    </subtitle>\n"
            "    <para>Doubles a number.</para>\n"
            "  </section>\n"
            "</section>\n"
        )

    def test_strings_fixture(self, strings_nix):
        out = io.StringIO()
        config = self._config(strings_nix, category="strings", description="String manipulation functions")

        DocumentationOrchestrator(config).generate(out)

        root = parse_docbook(out.getvalue())
        sections = root.findall(f"{DOCBOOK}section")
        assert [s.find(f"{DOCBOOK}title/{DOCBOOK}function").text for s in sections] == [
            "lib.strings.concatStrings",
            "lib.strings.concatMapStrings",
            "lib.strings.isEmpty",
        ]
        assert sections[2].find(f"{DOCBOOK}subtitle") is None

    def test_no_documented_identifiers(self, tmp_path):
        path = tmp_path / "empty.nix"
        path.write_text("{ a = 1; b = 2; }\n")
        out = io.StringIO()

        assert DocumentationOrchestrator(self._config(path)).generate(out) == 0

        root = parse_docbook(out.getvalue())
        assert [child.tag for child in root] == [f"{DOCBOOK}title"]

    def test_indent_and_declaration_settings(self, tmp_path, double_source):
        path = tmp_path / "math.nix"
        path.write_text(double_source)
        out = io.StringIO()

        DocumentationOrchestrator(self._config(path, indent=0, write_declaration=False)).generate(out)

        assert out.getvalue().startswith("<section ")
        assert "\n" not in out.getvalue().rstrip("\n")

    def test_read_failure_writes_nothing(self, tmp_path):
        out = io.StringIO()
        with pytest.raises(SourceReadError):
            DocumentationOrchestrator(self._config(tmp_path / "missing.nix")).generate(out)
        assert out.getvalue() == ""

    def test_parse_failure_writes_nothing(self, broken_nix):
        out = io.StringIO()
        with pytest.raises(SourceParseError):
            DocumentationOrchestrator(self._config(broken_nix)).generate(out)
        assert out.getvalue() == ""

    def test_extract_and_build_entries(self, strings_nix):
        orchestrator = DocumentationOrchestrator(self._config(strings_nix, category="strings"))

        entries = orchestrator.build_entries()

        assert entries[0] == ManualEntry(
            category="strings",
            name="concatStrings",
            description="Concatenate a list of strings.",
            fn_type="concatStrings :: [string] -> string",
        )
        assert all(entry.parameters == [] for entry in entries)
