"""Exam catalog management.

This module loads the certification table from YAML: per-exam question
count, pass mark and time limit, plus the domain weighting that generation
prompts embed so batches cover the exam blueprint.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "exams.yaml"


class ExamDomain(BaseModel):
    """One weighted domain of an exam blueprint.

    Attributes:
        name: Domain name as published in the exam guide
        weight: Share of the exam in percent
        topics: Optional sub-topics listed under the domain
    """

    name: str = Field(..., min_length=1)
    weight: int = Field(..., ge=1, le=100)
    topics: List[str] = Field(default_factory=list)


class ExamDefinition(BaseModel):
    """Configuration for a single certification exam.

    Attributes:
        certification: Official certification name used in prompts
        expert_role: Persona the model is asked to adopt
        level: Optional certification level (e.g. "Associate")
        description: Short human-readable summary
        question_count: Default number of questions for a practice exam
        pass_mark: Pass mark in percent for the practice exam
        time_limit_minutes: Time limit for the practice exam
        official_duration_minutes: Duration of the real exam (prompt context)
        official_passing_score: Passing score of the real exam (prompt context)
        domains: Weighted domain blueprint
        show_domain_counts: Whether prompts spell out per-domain counts
        difficulty_mix: Optional difficulty label -> percent mapping
        closing_instruction: Tail of the final uniqueness instruction
    """

    certification: str = Field(..., min_length=1)
    expert_role: str = "a certification expert creating practice exam questions"
    level: Optional[str] = None
    description: str = ""
    question_count: int = Field(..., ge=1)
    pass_mark: int = Field(..., ge=0, le=100)
    time_limit_minutes: int = Field(..., ge=1)
    official_duration_minutes: Optional[int] = Field(None, ge=1)
    official_passing_score: Optional[int] = Field(None, ge=0, le=100)
    domains: List[ExamDomain] = Field(default_factory=list)
    show_domain_counts: bool = False
    difficulty_mix: Dict[str, int] = Field(default_factory=dict)
    closing_instruction: str = "with NO repetition"

    @field_validator("domains")
    @classmethod
    def validate_domain_weights(cls, v: List[ExamDomain]) -> List[ExamDomain]:
        """Validate that domain weights cover the whole exam."""
        if v:
            total = sum(domain.weight for domain in v)
            if total != 100:
                raise ValueError(f"Domain weights must sum to 100, got {total}")
        return v


class ExamCatalog(BaseModel):
    """Complete exam catalog.

    Attributes:
        version: Catalog version
        default_exam: Exam used when a requested name is unknown
        exams: Mapping of exam names to definitions
    """

    version: str
    default_exam: str
    exams: Dict[str, ExamDefinition]

    @model_validator(mode="after")
    def validate_default_exam(self) -> "ExamCatalog":
        """Validate that the default exam exists."""
        if self.default_exam not in self.exams:
            raise ValueError(
                f"default_exam '{self.default_exam}' is not defined in exams"
            )
        return self


class ExamCatalogLoader:
    """Loader for exam catalog files.

    This class handles loading, parsing, and validating the exam catalog
    from YAML files.
    """

    def __init__(self, catalog_path: Optional[str | Path] = None):
        """Initialize the catalog loader.

        Args:
            catalog_path: Path to the catalog YAML (packaged default if None)
        """
        self.catalog_path = Path(catalog_path) if catalog_path else DEFAULT_CATALOG_PATH
        self._catalog: Optional[ExamCatalog] = None

    def load(self) -> ExamCatalog:
        """Load and parse the catalog file.

        Returns:
            Parsed and validated exam catalog

        Raises:
            FileNotFoundError: If the catalog file doesn't exist
            ValueError: If the catalog is invalid
            yaml.YAMLError: If YAML parsing fails
        """
        if not self.catalog_path.exists():
            raise FileNotFoundError(f"Exam catalog file not found: {self.catalog_path}")

        logger.info(f"Loading exam catalog from {self.catalog_path}")

        try:
            with open(self.catalog_path, "r", encoding="utf-8") as f:
                raw_catalog = yaml.safe_load(f)

            self._catalog = ExamCatalog(**raw_catalog)
            logger.info(
                f"Successfully loaded exam catalog "
                f"(version {self._catalog.version}, {len(self._catalog.exams)} exams)"
            )
            return self._catalog

        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML exam catalog: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to load exam catalog: {e}")
            raise

    @property
    def catalog(self) -> ExamCatalog:
        """Get the loaded catalog.

        Raises:
            RuntimeError: If the catalog hasn't been loaded yet
        """
        if self._catalog is None:
            raise RuntimeError("Exam catalog not loaded. Call load() first.")
        return self._catalog

    def get(self, exam_name: str) -> Optional[ExamDefinition]:
        """Look up an exam by catalog key or official certification name."""
        exams = self.catalog.exams
        if exam_name in exams:
            return exams[exam_name]
        for exam in exams.values():
            if exam.certification == exam_name:
                return exam
        return None

    def resolve(self, exam_name: str) -> ExamDefinition:
        """Look up an exam, falling back to the default exam if unknown."""
        exam = self.get(exam_name)
        if exam is not None:
            return exam
        logger.warning(
            f"No exam definition for '{exam_name}', "
            f"using default '{self.catalog.default_exam}'"
        )
        return self.catalog.exams[self.catalog.default_exam]

    def get_exam_names(self) -> List[str]:
        """Get all configured exam names."""
        return list(self.catalog.exams.keys())


# Global loader instance (lazily initialized with the packaged catalog)
_loader: Optional[ExamCatalogLoader] = None


def initialize_exam_catalog(catalog_path: Optional[str | Path] = None) -> ExamCatalogLoader:
    """Initialize the global exam catalog loader.

    Args:
        catalog_path: Path to the catalog YAML (packaged default if None)

    Raises:
        FileNotFoundError: If the catalog file doesn't exist
        ValueError: If the catalog is invalid
    """
    global _loader
    loader = ExamCatalogLoader(catalog_path)
    loader.load()
    _loader = loader
    return _loader


def get_exam_catalog() -> ExamCatalogLoader:
    """Get the global exam catalog loader, loading the packaged default on first use."""
    if _loader is None:
        return initialize_exam_catalog()
    return _loader
