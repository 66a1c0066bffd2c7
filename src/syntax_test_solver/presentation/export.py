from __future__ import annotations

import html
from pathlib import Path
from typing import List, Union

from ..result.models import Question, TestResult
from .render import sorted_questions

EXPORT_FILENAME = "test-review.doc"
EXPORT_MIME_TYPE = "application/msword"

_STYLE = """\
    body { font-family: 'Times New Roman', Times, serif; }
    h1, h2, h3 { color: #333; }
    .question { margin-bottom: 2em; border-bottom: 1px solid #ccc; padding-bottom: 1em; }
    .section-title { font-weight: bold; margin-top: 1em; }"""


def _text(value: str) -> str:
    return html.escape(value, quote=False)


def _multiline(value: str) -> str:
    """Escape and turn newlines into <br/> so Word keeps the line structure."""
    normalized = value.replace("\r\n", "\n").replace("\r", "\n")
    return _text(normalized).replace("\n", "<br/>")


def _question_block(q: Question) -> List[str]:
    return [
        '<div class="question">',
        f"  <h2>Question {q.question_number}</h2>",
        '  <p class="section-title">English:</p>',
        f"  <p><em>{_multiline(q.english.prompt)}</em></p>",
        f"  <p>{_multiline(q.english.content)}</p>",
        '  <p class="section-title">Vietnamese Translation:</p>',
        f"  <p><em>{_multiline(q.vietnamese.prompt)}</em></p>",
        f"  <p>{_multiline(q.vietnamese.content)}</p>",
        '  <p class="section-title">Solution (English):</p>',
        f"  <div>{_multiline(q.solution.english)}</div>",
        '  <p class="section-title">Solution (Vietnamese):</p>',
        f"  <div>{_multiline(q.solution.vietnamese)}</div>",
        "</div>",
    ]


def build_export_html(result: TestResult) -> str:
    """
    Render the whole result as one self-contained HTML document that Word
    opens as a .doc. Questions appear in the same sorted order as on screen.
    """
    lines: List[str] = []
    lines.append("<!DOCTYPE html>")
    lines.append('<html lang="en">')
    lines.append("<head>")
    lines.append('  <meta charset="UTF-8">')
    lines.append(f"  <title>{_text(result.title)}</title>")
    lines.append("  <style>")
    lines.append(_STYLE)
    lines.append("  </style>")
    lines.append("</head>")
    lines.append("<body>")
    lines.append(f"<h1>{_text(result.title)}</h1>")
    lines.append(f"<p><strong>Time Allotted:</strong> {_text(result.time_allotted)}</p>")
    lines.append("<hr/>")

    for q in sorted_questions(result):
        lines += _question_block(q)

    lines.append("</body>")
    lines.append("</html>")
    return "\n".join(lines)


def save_export(result: TestResult, out_dir: Union[str, Path]) -> Path:
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    path = out / EXPORT_FILENAME
    path.write_text(build_export_html(result), encoding="utf-8")
    return path
