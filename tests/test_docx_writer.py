"""Tests for Word document export."""

from docx import Document

from seo_section_writer.density import analyze_keyword_density
from seo_section_writer.docx_writer import (
    DocxWriter,
    sanitize_for_xml,
    write_generation_report,
)
from seo_section_writer.models import BilingualText, GeneratedContent


def _content(section_id: str, english: str, chinese: str = "中文内容") -> GeneratedContent:
    return GeneratedContent.from_text(section_id, BilingualText(english, chinese), timestamp=0)


def _headings(doc, level: int) -> list[str]:
    return [p.text for p in doc.paragraphs if p.style.name == f"Heading {level}"]


class TestSanitizeForXml:
    """Tests for XML sanitization."""

    def test_removes_control_characters(self):
        assert sanitize_for_xml("Hello\x00 World\x0b!") == "Hello World!"

    def test_keeps_newlines_tabs_and_cjk(self):
        assert sanitize_for_xml("a\tb\nc 中文") == "a\tb\nc 中文"

    def test_empty(self):
        assert sanitize_for_xml("") == ""


class TestDocxWriter:
    """Tests for the DocxWriter class."""

    def test_sections_written_in_catalogue_order(self, tmp_path):
        contents = [
            _content("faq", "Question: Is it free?\nAnswer: Yes."),
            _content("hero", "Title: Fast SEO tool"),
        ]

        path = DocxWriter().write(contents, tmp_path / "page.docx")
        doc = Document(str(path))

        assert _headings(doc, 2) == ["Hero 核心区域", "FAQ 常见问题"]
        assert _headings(doc, 3) == ["English", "中文", "English", "中文"]

    def test_label_lines_are_bold(self, tmp_path):
        path = DocxWriter().write([_content("hero", "Title: Fast SEO tool")], tmp_path / "page.docx")
        doc = Document(str(path))

        para = next(p for p in doc.paragraphs if p.text == "Title: Fast SEO tool")
        assert para.runs[0].text == "Title:"
        assert para.runs[0].bold is True
        assert para.runs[1].text == " Fast SEO tool"

    def test_adds_docx_suffix_and_creates_parent(self, tmp_path):
        path = DocxWriter().write([_content("cta", "Try it now")], tmp_path / "out" / "page")
        assert path.suffix == ".docx"
        assert path.exists()

    def test_density_table(self, tmp_path):
        contents = [_content("hero", "seo tool seo rank filler")]
        report = analyze_keyword_density(contents, ["seo"], ["rank"], mandatory_target=2.0)

        path = write_generation_report(
            contents,
            tmp_path / "page.docx",
            density_report=report,
            mandatory_keywords=["seo"],
            optional_keywords=["rank"],
        )
        doc = Document(str(path))

        assert "Keyword Density" in _headings(doc, 2)
        assert "Keyword Configuration" in _headings(doc, 2)
        table = doc.tables[0]
        rows = [[cell.text for cell in row.cells] for row in table.rows]
        assert rows[0] == ["Keyword", "Type", "Count", "Density"]
        assert rows[1] == ["seo", "Mandatory", "2", "40.00%"]
        assert rows[2] == ["rank", "Optional", "1", "20.00%"]
        assert any("Mandatory sum: 40.00%" in p.text for p in doc.paragraphs)

    def test_empty_density_report(self, tmp_path):
        report = analyze_keyword_density([], ["seo"], [])
        path = write_generation_report([], tmp_path / "page.docx", density_report=report)
        doc = Document(str(path))

        assert doc.tables == []
        assert any(p.text == "No generated content to analyze." for p in doc.paragraphs)
