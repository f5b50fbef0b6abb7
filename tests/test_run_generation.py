"""Tests for the run_generation command-line entry point."""

import json
from unittest.mock import AsyncMock, Mock, patch

import pytest
from conftest import EXAM_NAME, make_question

import run_generation
from certprep.error_classifier import ErrorClassifier
from certprep.exceptions import BelowThresholdError, NoQuestionsGeneratedError
from certprep.generation import GenerationRun
from certprep.providers import LLMProviderError
from certprep.reporting import RunSummary


@pytest.fixture
def mock_generator():
    """Patch QuestionGenerator so no provider is called."""
    with patch("run_generation.QuestionGenerator") as mock_cls:
        generator = Mock()
        generator.run = AsyncMock()
        mock_cls.return_value = generator
        yield mock_cls, generator


def successful_run(count):
    summary = RunSummary(certification_name=EXAM_NAME, questions_requested=count)
    summary.questions_returned = count
    return GenerationRun(
        questions=[make_question(i) for i in range(count)], summary=summary
    )


class TestParseArguments:
    """Tests for argument parsing."""

    def test_exam_and_count(self):
        args = run_generation.parse_arguments(["--exam", EXAM_NAME, "--count", "5"])
        assert args.exam == EXAM_NAME
        assert args.count == 5
        assert args.output is None
        assert not args.verbose

    def test_exam_required(self):
        with pytest.raises(SystemExit):
            run_generation.parse_arguments([])

    def test_list_exams_without_exam(self):
        args = run_generation.parse_arguments(["--list-exams"])
        assert args.list_exams

    def test_count_must_be_positive(self):
        with pytest.raises(SystemExit):
            run_generation.parse_arguments(["--exam", EXAM_NAME, "--count", "0"])


class TestMain:
    """Tests for main() exit codes and output."""

    def test_success_writes_output(self, mock_generator, test_settings, tmp_path):
        mock_cls, generator = mock_generator
        generator.run.return_value = successful_run(3)
        output = tmp_path / "out" / "exam.json"

        exit_code = run_generation.main(
            ["--exam", EXAM_NAME, "--count", "3", "--output", str(output)],
            config=test_settings,
        )

        assert exit_code == run_generation.EXIT_SUCCESS
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["exam"] == EXAM_NAME
        assert len(data["questions"]) == 3
        assert data["questions"][0]["question_type"] == "multiple-choice"
        assert data["summary"]["questions_returned"] == 3

        request = generator.run.call_args.args[0]
        assert request.certification_name == EXAM_NAME
        assert request.target_question_count == 3
        assert mock_cls.call_args.kwargs["settings"] is test_settings

    def test_default_count_from_catalog(self, mock_generator, test_settings, capsys):
        _, generator = mock_generator
        generator.run.return_value = successful_run(40)

        exit_code = run_generation.main(["--exam", EXAM_NAME], config=test_settings)

        assert exit_code == run_generation.EXIT_SUCCESS
        assert generator.run.call_args.args[0].target_question_count == 40
        assert len(json.loads(capsys.readouterr().out)["questions"]) == 40

    def test_below_threshold(self, mock_generator, test_settings):
        _, generator = mock_generator
        generator.run.side_effect = BelowThresholdError(
            "Only generated 5/10 questions (50%). Please try again.", generated=5, target=10
        )

        exit_code = run_generation.main(
            ["--exam", EXAM_NAME, "--count", "10"], config=test_settings
        )

        assert exit_code == run_generation.EXIT_BELOW_THRESHOLD

    def test_no_questions(self, mock_generator, test_settings):
        _, generator = mock_generator
        generator.run.side_effect = NoQuestionsGeneratedError(
            "Failed to generate any questions.", generated=0, target=10
        )

        exit_code = run_generation.main(["--exam", EXAM_NAME], config=test_settings)

        assert exit_code == run_generation.EXIT_COMPLETE_FAILURE

    def test_fatal_provider_error(self, mock_generator, test_settings):
        _, generator = mock_generator
        classified = ErrorClassifier.classify_error(
            Exception("not found"), provider="gemini", status_code=404
        )
        generator.run.side_effect = LLMProviderError(classified)

        exit_code = run_generation.main(["--exam", EXAM_NAME], config=test_settings)

        assert exit_code == run_generation.EXIT_CONFIG_ERROR

    def test_no_providers_configured(self, mock_generator, test_settings):
        mock_cls, _ = mock_generator
        mock_cls.side_effect = ValueError("At least one LLM provider must be configured")

        exit_code = run_generation.main(["--exam", EXAM_NAME], config=test_settings)

        assert exit_code == run_generation.EXIT_CONFIG_ERROR

    def test_unknown_exam(self, mock_generator, test_settings):
        mock_cls, _ = mock_generator

        exit_code = run_generation.main(["--exam", "Nonexistent Exam"], config=test_settings)

        assert exit_code == run_generation.EXIT_CONFIG_ERROR
        mock_cls.assert_not_called()

    def test_missing_catalog_file(self, test_settings, tmp_path):
        exit_code = run_generation.main(
            ["--exam", EXAM_NAME, "--catalog", str(tmp_path / "missing.yaml")],
            config=test_settings,
        )
        assert exit_code == run_generation.EXIT_CONFIG_ERROR

    def test_list_exams(self, test_settings, capsys):
        exit_code = run_generation.main(["--list-exams"], config=test_settings)

        assert exit_code == run_generation.EXIT_SUCCESS
        exams = json.loads(capsys.readouterr().out)
        assert exams["Salesforce Administrator Certification"]["question_count"] == 60
        assert exams["Salesforce AI Agentforce"]["pass_mark"] == 70
