"""Prompt templates for exam question generation.

The generation prompt has two parts: a certification-specific brief built
from the exam catalog (exam specifications and domain weighting), and a
fixed output contract describing the JSON array the parser expects.
"""

import math
from typing import List, Optional

from ..exam_catalog import ExamCatalogLoader, ExamDefinition, get_exam_catalog

OUTPUT_FORMAT_TEMPLATE = """CRITICAL: Return ONLY valid JSON array. No markdown, no text, no code fences.

FORMAT (exactly {count} unique questions):
[
  {{
    "questionType": "multiple-choice",
    "question": "Question text here?",
    "options": [
      "First option text without letter prefix",
      "Second option text without letter prefix",
      "Third option text without letter prefix",
      "Fourth option text without letter prefix"
    ],
    "answer": "A",
    "explanation": "Detailed explanation text."
  }}
]

STRICT RULES:
1. NO letter prefixes in options (no "A.", "B.", etc.)
2. Answer must be single letter: "A", "B", "C", or "D"
3. All strings in double quotes
4. Use commas between all items and properties
5. NO trailing commas before ] or }}
6. Escape quotes inside strings with backslash
7. Each question must have ALL required fields
8. Generate exactly {count} complete, unique questions

For True/False questions:
{{
  "questionType": "true-false",
  "question": "Statement to evaluate?",
  "options": ["True", "False"],
  "answer": "True",
  "explanation": "Explanation text."
}}"""


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _format_domains(exam: ExamDefinition, count: int) -> List[str]:
    lines = []
    for position, domain in enumerate(exam.domains, start=1):
        if exam.show_domain_counts:
            domain_count = _round_half_up(count * domain.weight / 100)
            lines.append(
                f"{position}. {domain.name} (~{domain.weight}% = {domain_count} questions)"
            )
        else:
            lines.append(f"{position}. {domain.name} (~{domain.weight}%)")
        lines.extend(f"   - {topic}" for topic in domain.topics)
        if domain.topics and position < len(exam.domains):
            lines.append("")
    return lines


def build_certification_prompt(exam: ExamDefinition, count: int) -> str:
    """Build the certification brief for a batch of ``count`` questions.

    Args:
        exam: Exam definition from the catalog
        count: Number of questions requested in this batch

    Returns:
        Multi-paragraph brief with specifications and domain coverage
    """
    certification = exam.certification
    if exam.level:
        certification = f"{certification} ({exam.level})"

    sections = [f"You are {exam.expert_role}."]

    specs = [
        "EXAM SPECIFICATIONS:",
        f"- Certification: {certification}",
        f"- Total Questions: {count} questions",
    ]
    if exam.official_duration_minutes:
        specs.append(f"- Duration: {exam.official_duration_minutes} minutes")
    if exam.official_passing_score is not None:
        specs.append(f"- Passing Score: {exam.official_passing_score}%")
    sections.append("\n".join(specs))

    if exam.domains:
        header = (
            "DOMAIN COVERAGE (distribute questions proportionally):"
            if exam.show_domain_counts
            else "DOMAIN COVERAGE:"
        )
        sections.append("\n".join([header] + _format_domains(exam, count)))

    if exam.difficulty_mix:
        mix = [f"- {label}: {share}%" for label, share in exam.difficulty_mix.items()]
        sections.append("\n".join(["QUESTION DIFFICULTY:"] + mix))

    sections.append(
        f"CRITICAL: Generate {count} UNIQUE questions {exam.closing_instruction}."
    )
    return "\n\n".join(sections)


def build_generation_prompt(
    certification_name: str,
    count: int,
    catalog: Optional[ExamCatalogLoader] = None,
) -> str:
    """Build the full prompt for one generation batch.

    Unknown certification names fall back to the catalog's default exam.

    Args:
        certification_name: Exam name or official certification name
        count: Number of questions requested in this batch
        catalog: Exam catalog (global catalog if None)

    Returns:
        Certification brief followed by the JSON output contract
    """
    loader = catalog or get_exam_catalog()
    exam = loader.resolve(certification_name)
    brief = build_certification_prompt(exam, count)
    return f"{brief}\n\n{OUTPUT_FORMAT_TEMPLATE.format(count=count)}"
