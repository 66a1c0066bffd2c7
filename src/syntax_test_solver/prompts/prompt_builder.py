from __future__ import annotations

from typing import List


def build_prompt_text(num_images: int = 1) -> str:
    lines: List[str] = []
    lines.append(
        "You are an expert in English syntax and a helpful teaching assistant. "
        "Your task is to analyze the provided images of an English syntax test, "
        "extract the questions, translate them to Vietnamese, and provide detailed "
        "solutions for each."
    )

    if num_images > 1:
        lines.append("")
        lines.append(
            f"The test spans {num_images} images. They are pages of one test, "
            "attached in reading order; keep the question numbering printed on the pages."
        )

    lines.append("")
    lines.append("Follow these instructions carefully:")
    lines.append(
        "1.  Accurately extract all questions, including their numbers and any "
        "associated text or sentences."
    )
    lines.append("2.  For each question, provide a precise Vietnamese translation.")
    lines.append(
        "3.  For each question, write a clear, step-by-step solution. Explain the "
        "grammatical rules and concepts involved. Use markdown for formatting if needed."
    )
    lines.append("4.  Translate the solution into Vietnamese.")
    lines.append(
        "5.  Format the entire output as a single JSON object that strictly adheres "
        "to the provided schema. Do not include any text or markdown formatting "
        "(like ```json) outside of the JSON object itself. Ensure all text, especially "
        "content with multiple lines or special characters, is correctly escaped "
        "within the JSON strings."
    )

    return "\n".join(lines)
