#!/usr/bin/env python3
"""Standalone question generation script.

Generates a practice exam for one certification and writes the questions,
together with a run summary, as JSON.

Exit Codes:
    0 - Success (the requested questions were generated)
    1 - Below threshold (some questions generated, fewer than the acceptance threshold)
    2 - Complete failure (no questions generated)
    3 - Configuration error (unknown exam, no API keys, model not recognized)
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from certprep.config import Settings, settings
from certprep.exam_catalog import ExamCatalogLoader, initialize_exam_catalog
from certprep.exceptions import BelowThresholdError, NoQuestionsGeneratedError
from certprep.generation import QuestionGenerator
from certprep.logging_config import setup_logging
from certprep.models import ExamRequest
from certprep.providers import LLMProviderError

# Exit codes
EXIT_SUCCESS = 0
EXIT_BELOW_THRESHOLD = 1
EXIT_COMPLETE_FAILURE = 2
EXIT_CONFIG_ERROR = 3


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Generate certification practice exam questions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate the exam's default number of questions
  python run_generation.py --exam "Salesforce Associate Certification"

  # Generate 20 questions and save them to a file
  python run_generation.py --exam "Salesforce AI Agentforce" --count 20 --output exam.json

  # List configured exams
  python run_generation.py --list-exams
        """,
    )

    parser.add_argument(
        "--exam",
        type=str,
        help="Exam name from the catalog (or official certification name)",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=None,
        help="Number of questions to generate (default: exam's question count)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write JSON output to this file instead of stdout",
    )
    parser.add_argument(
        "--catalog",
        type=str,
        default=None,
        help="Path to an exam catalog YAML file",
    )
    parser.add_argument(
        "--list-exams",
        action="store_true",
        help="List configured exams and exit",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    args = parser.parse_args(argv)
    if not args.list_exams and not args.exam:
        parser.error("--exam is required unless --list-exams is given")
    if args.count is not None and args.count < 1:
        parser.error("--count must be at least 1")
    return args


def list_exams(catalog: ExamCatalogLoader) -> Dict[str, Any]:
    """Describe every configured exam."""
    exams = {}
    for name in catalog.get_exam_names():
        exam = catalog.catalog.exams[name]
        exams[name] = {
            "certification": exam.certification,
            "description": exam.description,
            "question_count": exam.question_count,
            "pass_mark": exam.pass_mark,
            "time_limit_minutes": exam.time_limit_minutes,
        }
    return exams


def write_output(data: Dict[str, Any], output: Optional[str]) -> None:
    """Write JSON to a file or stdout."""
    text = json.dumps(data, indent=2, ensure_ascii=False)
    if output:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
    else:
        print(text)


async def run_generation(
    request: ExamRequest, config: Settings, catalog: ExamCatalogLoader
) -> Dict[str, Any]:
    """Run the generator and build the JSON document."""
    generator = QuestionGenerator(settings=config, catalog=catalog)
    run = await generator.run(request)
    return {
        "exam": request.certification_name,
        "questions": [q.model_dump(mode="json") for q in run.questions],
        "summary": run.summary.to_dict(),
    }


def main(argv: Optional[List[str]] = None, config: Optional[Settings] = None) -> int:
    """Main entry point for the question generation script.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    args = parse_arguments(argv)
    config = config or settings

    setup_logging(config, level_override="DEBUG" if args.verbose else None)
    logger = logging.getLogger(__name__)

    try:
        catalog = initialize_exam_catalog(args.catalog or config.exam_catalog_path)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Failed to load exam catalog: {e}")
        return EXIT_CONFIG_ERROR

    if args.list_exams:
        write_output(list_exams(catalog), args.output)
        return EXIT_SUCCESS

    exam = catalog.get(args.exam)
    if exam is None:
        logger.error(
            f"Unknown exam '{args.exam}'. Available: {catalog.get_exam_names()}"
        )
        return EXIT_CONFIG_ERROR

    count = args.count or exam.question_count
    request = ExamRequest(certification_name=args.exam, target_question_count=count)

    logger.info("=" * 80)
    logger.info(f"Question generation: exam={args.exam}, count={count}")
    logger.info("=" * 80)

    try:
        result = asyncio.run(run_generation(request, config, catalog))
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR
    except LLMProviderError as e:
        logger.error(f"Fatal provider error: {e}")
        return EXIT_CONFIG_ERROR
    except BelowThresholdError as e:
        logger.error(str(e))
        return EXIT_BELOW_THRESHOLD
    except NoQuestionsGeneratedError as e:
        logger.error(str(e))
        return EXIT_COMPLETE_FAILURE

    write_output(result, args.output)
    logger.info(
        f"Wrote {len(result['questions'])} questions"
        + (f" to {args.output}" if args.output else "")
    )
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
