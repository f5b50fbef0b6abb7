"""Tests for exam catalog loading."""

import pytest
import yaml

import certprep.exam_catalog as exam_catalog_module
from certprep.exam_catalog import (
    ExamCatalogLoader,
    ExamDefinition,
    get_exam_catalog,
    initialize_exam_catalog,
)

MINIMAL_CATALOG = {
    "version": "2.0",
    "default_exam": "Cloud Basics",
    "exams": {
        "Cloud Basics": {
            "certification": "Certified Cloud Basics",
            "question_count": 20,
            "pass_mark": 65,
            "time_limit_minutes": 30,
            "domains": [
                {"name": "Compute", "weight": 60},
                {"name": "Storage", "weight": 40},
            ],
        }
    },
}


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "exams.yaml"
    path.write_text(yaml.safe_dump(MINIMAL_CATALOG), encoding="utf-8")
    return path


@pytest.fixture
def reset_global_loader():
    original = exam_catalog_module._loader
    exam_catalog_module._loader = None
    yield
    exam_catalog_module._loader = original


class TestPackagedCatalog:
    """Tests for the catalog shipped with the package."""

    def test_three_exams(self, exam_catalog):
        assert exam_catalog.get_exam_names() == [
            "Salesforce Associate Certification",
            "Salesforce Administrator Certification",
            "Salesforce AI Agentforce",
        ]

    @pytest.mark.parametrize(
        "name,count,pass_mark,minutes",
        [
            ("Salesforce Associate Certification", 40, 62, 90),
            ("Salesforce Administrator Certification", 60, 70, 120),
            ("Salesforce AI Agentforce", 40, 70, 90),
        ],
    )
    def test_exam_parameters(self, exam_catalog, name, count, pass_mark, minutes):
        exam = exam_catalog.get(name)
        assert exam.question_count == count
        assert exam.pass_mark == pass_mark
        assert exam.time_limit_minutes == minutes

    def test_default_exam(self, exam_catalog):
        assert exam_catalog.catalog.default_exam == "Salesforce Associate Certification"


class TestExamCatalogLoader:
    """Tests for ExamCatalogLoader."""

    def test_load_custom_file(self, catalog_file):
        loader = ExamCatalogLoader(catalog_file)
        catalog = loader.load()

        assert catalog.version == "2.0"
        exam = loader.get("Cloud Basics")
        assert exam.expert_role == "a certification expert creating practice exam questions"
        assert exam.closing_instruction == "with NO repetition"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ExamCatalogLoader(tmp_path / "missing.yaml").load()

    def test_catalog_before_load(self):
        with pytest.raises(RuntimeError, match="not loaded"):
            ExamCatalogLoader().catalog

    def test_get_by_certification_name(self, catalog_file):
        loader = ExamCatalogLoader(catalog_file)
        loader.load()
        assert loader.get("Certified Cloud Basics").question_count == 20

    def test_get_unknown_returns_none(self, catalog_file):
        loader = ExamCatalogLoader(catalog_file)
        loader.load()
        assert loader.get("Nope") is None

    def test_resolve_unknown_falls_back_to_default(self, catalog_file):
        loader = ExamCatalogLoader(catalog_file)
        loader.load()
        assert loader.resolve("Nope").certification == "Certified Cloud Basics"

    def test_invalid_default_exam(self, tmp_path):
        data = dict(MINIMAL_CATALOG, default_exam="Missing")
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump(data), encoding="utf-8")

        with pytest.raises(ValueError, match="default_exam"):
            ExamCatalogLoader(path).load()


class TestExamDefinition:
    """Tests for ExamDefinition validation."""

    def test_domain_weights_must_sum_to_100(self):
        with pytest.raises(ValueError, match="sum to 100"):
            ExamDefinition(
                certification="X",
                question_count=10,
                pass_mark=70,
                time_limit_minutes=20,
                domains=[{"name": "A", "weight": 50}, {"name": "B", "weight": 30}],
            )

    def test_no_domains_allowed(self):
        exam = ExamDefinition(
            certification="X", question_count=10, pass_mark=70, time_limit_minutes=20
        )
        assert exam.domains == []


class TestGlobalLoader:
    """Tests for the module-level loader helpers."""

    def test_get_loads_packaged_default(self, reset_global_loader):
        loader = get_exam_catalog()
        assert "Salesforce AI Agentforce" in loader.get_exam_names()
        assert get_exam_catalog() is loader

    def test_initialize_replaces_loader(self, reset_global_loader, catalog_file):
        loader = initialize_exam_catalog(catalog_file)
        assert get_exam_catalog() is loader
        assert loader.get_exam_names() == ["Cloud Basics"]
