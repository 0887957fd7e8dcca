"""
Word document export for generated section copy.

The output document contains:
- Keyword configuration summary
- Keyword density report table with group sums
- Each generated section with its English copy and Chinese translation
"""

import re
from pathlib import Path
from typing import Optional, Union

from docx import Document
from docx.enum.table import WD_TABLE_ALIGNMENT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt

from .models import DensityReport, GeneratedContent
from .sections import SECTION_CONFIGS, get_section_config

# Invalid XML 1.0 characters (control characters Word refuses to open)
_INVALID_XML_CHARS_RE = re.compile(
    r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]"
)

FONT_NAME = "Poppins"


def sanitize_for_xml(text: str) -> str:
    """
    Remove invalid XML characters from text to prevent Word "unreadable content" errors.

    Args:
        text: Input text that may contain invalid XML characters.

    Returns:
        Sanitized text safe for XML/DOCX.
    """
    if not text:
        return text
    return _INVALID_XML_CHARS_RE.sub("", text)


def set_cell_shading(cell, color: str) -> None:
    """Set background color/shading for a table cell."""
    tc = cell._tc
    tcPr = tc.get_or_add_tcPr()
    shd = OxmlElement("w:shd")
    shd.set(qn("w:fill"), color)
    tcPr.append(shd)


class DocxWriter:
    """
    Writes a generation session to a Word document.

    Sections are written in catalogue order, so the document reads like the
    final page regardless of the order results were produced in.
    """

    def __init__(self):
        """Initialize the document writer."""
        self.doc = Document()
        self._setup_styles()

    def _setup_styles(self) -> None:
        """Configure document styles with Poppins font and consistent spacing."""
        normal_style = self.doc.styles["Normal"]
        normal_style.font.name = FONT_NAME
        normal_style.font.size = Pt(11)
        normal_style.paragraph_format.space_before = Pt(6)
        normal_style.paragraph_format.space_after = Pt(6)
        normal_style.paragraph_format.line_spacing = 1.15

        # East Asian fallback so the Chinese copy uses the same font settings
        normal_style._element.get_or_add_rPr().get_or_add_rFonts().set(qn("w:eastAsia"), FONT_NAME)

        for style_name, font_size in (("Heading 1", Pt(20)), ("Heading 2", Pt(16)), ("Heading 3", Pt(13))):
            if style_name in self.doc.styles:
                style = self.doc.styles[style_name]
                style.font.name = FONT_NAME
                style.font.size = font_size
                style.font.bold = True

        if "Table Grid" in self.doc.styles:
            self.doc.styles["Table Grid"].font.size = Pt(10)

    def write(
        self,
        contents: list[GeneratedContent],
        output_path: Union[str, Path],
        density_report: Optional[DensityReport] = None,
        mandatory_keywords: Optional[list[str]] = None,
        optional_keywords: Optional[list[str]] = None,
        document_title: str = "SEO Page Copy",
    ) -> Path:
        """
        Write generated sections (and optionally the density report) to .docx.

        Args:
            contents: Generated content for any subset of sections.
            output_path: Path for the output .docx file.
            density_report: Optional density report to include.
            mandatory_keywords: Mandatory keywords to list in the summary.
            optional_keywords: Optional pool to list in the summary.
            document_title: Title at the top of the document.

        Returns:
            Path to the created document.
        """
        output_path = Path(output_path)
        if output_path.suffix.lower() != ".docx":
            output_path = output_path.with_suffix(".docx")

        title_para = self.doc.add_paragraph()
        title_para.style = "Title"
        title_para.add_run(document_title)

        if mandatory_keywords or optional_keywords:
            self._add_keyword_summary(mandatory_keywords or [], optional_keywords or [])

        if density_report is not None:
            self._add_density_table(density_report)

        by_id = {content.section_id: content for content in contents}
        ordered = [by_id.pop(section.id) for section in SECTION_CONFIGS if section.id in by_id]
        ordered.extend(by_id.values())

        for content in ordered:
            self._add_section(content)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.doc.save(str(output_path))
        return output_path

    def _add_keyword_summary(self, mandatory: list[str], optional: list[str]) -> None:
        self.doc.add_heading("Keyword Configuration", level=2)
        para = self.doc.add_paragraph()
        para.add_run("Mandatory: ").bold = True
        para.add_run(sanitize_for_xml(", ".join(mandatory)) or "(none)")
        para = self.doc.add_paragraph()
        para.add_run("Optional pool: ").bold = True
        para.add_run(sanitize_for_xml(", ".join(optional)) or "(none)")

    def _add_density_table(self, report: DensityReport) -> None:
        """Add the keyword density table and the per-group sums."""
        self.doc.add_heading("Keyword Density", level=2)

        if report.is_empty:
            self.doc.add_paragraph("No generated content to analyze.")
            return

        summary = self.doc.add_paragraph()
        summary.add_run(f"Total words: {report.total_words}    ")
        summary.add_run(f"Mandatory sum: {report.mandatory_sum}")
        if report.mandatory_target is not None:
            summary.add_run(f" (target {report.mandatory_target:g}%)")
        summary.add_run(f"    Optional sum: {report.optional_sum}")
        if report.optional_target is not None:
            summary.add_run(f" (target {report.optional_target:g}%)")

        table = self.doc.add_table(rows=1, cols=4)
        table.style = "Table Grid"
        table.alignment = WD_TABLE_ALIGNMENT.LEFT

        widths = [Inches(2.8), Inches(1.2), Inches(1.0), Inches(1.0)]
        for i, width in enumerate(widths):
            table.columns[i].width = width

        header_cells = table.rows[0].cells
        for i, header in enumerate(["Keyword", "Type", "Count", "Density"]):
            header_cells[i].text = header
            for paragraph in header_cells[i].paragraphs:
                for run in paragraph.runs:
                    run.font.bold = True
            set_cell_shading(header_cells[i], "D9D9D9")

        for entry in report.entries:
            cells = table.add_row().cells
            cells[0].text = sanitize_for_xml(entry.keyword)
            cells[1].text = "Mandatory" if entry.is_mandatory else "Optional"
            cells[2].text = str(entry.count)
            cells[3].text = entry.density

        self.doc.add_paragraph()

    def _add_section(self, content: GeneratedContent) -> None:
        section = get_section_config(content.section_id)
        label = section.label if section else content.section_id
        self.doc.add_heading(label, level=2)

        stats = self.doc.add_paragraph()
        stats.add_run(f"{content.word_count} words, {content.char_count} characters").italic = True

        self.doc.add_heading("English", level=3)
        self._add_lines(content.english)
        self.doc.add_heading("中文", level=3)
        self._add_lines(content.chinese)

    def _add_lines(self, text: str) -> None:
        """One paragraph per non-blank line; labels like 'Title:' in bold."""
        for line in sanitize_for_xml(text).splitlines():
            line = line.strip()
            if not line:
                continue
            para = self.doc.add_paragraph()
            label, sep, rest = line.partition(":")
            if sep and len(label) <= 30:
                para.add_run(f"{label}:").bold = True
                para.add_run(rest)
            else:
                para.add_run(line)


def write_generation_report(
    contents: list[GeneratedContent],
    output_path: Union[str, Path],
    density_report: Optional[DensityReport] = None,
    **kwargs,
) -> Path:
    """
    Convenience function to write generated sections to docx.

    Args:
        contents: Generated content to write.
        output_path: Output file path.
        density_report: Optional density report.
        **kwargs: Passed through to DocxWriter.write.

    Returns:
        Path to created document.
    """
    writer = DocxWriter()
    return writer.write(contents, output_path, density_report=density_report, **kwargs)
