"""Read-only student and job catalog."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Protocol

import yaml  # type: ignore[import-untyped]

from elvia.contracts.models import Job, Student
from elvia.contracts.types import EmploymentType, WorkModel

DEFAULT_CATALOG_PATH = Path(__file__).with_name("catalog.yaml")


class DataSource(Protocol):
    """Query contract the core relies on."""

    def find_student(self, student_id: int) -> Student | None: ...
    def find_students_by_graduation_date(self, graduation_date: date) -> list[Student]: ...
    def find_jobs(
        self,
        employment_type: EmploymentType | None = None,
        work_model: WorkModel | None = None,
    ) -> list[Job]: ...
    def all_jobs(self) -> list[Job]: ...
    def all_students(self) -> list[Student]: ...


@dataclass(slots=True)
class InMemoryDataSource:
    """Catalog held in memory, in insertion order."""

    students: dict[int, Student] = field(default_factory=dict)
    jobs: list[Job] = field(default_factory=list)

    @classmethod
    def from_records(
        cls, students: Iterable[Student], jobs: Iterable[Job]
    ) -> InMemoryDataSource:
        return cls(students={s.id: s for s in students}, jobs=list(jobs))

    @classmethod
    def load(cls, path: Path = DEFAULT_CATALOG_PATH) -> InMemoryDataSource:
        data: dict[str, Any] = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return cls.from_records(
            students=[Student.model_validate(item) for item in data.get("students", [])],
            jobs=[Job.model_validate(item) for item in data.get("jobs", [])],
        )

    def find_student(self, student_id: int) -> Student | None:
        return self.students.get(student_id)

    def find_students_by_graduation_date(self, graduation_date: date) -> list[Student]:
        return [s for s in self.students.values() if s.graduation_date == graduation_date]

    def find_jobs(
        self,
        employment_type: EmploymentType | None = None,
        work_model: WorkModel | None = None,
    ) -> list[Job]:
        return [
            job
            for job in self.jobs
            if (employment_type is None or job.employment_type == employment_type)
            and (work_model is None or job.work_model == work_model)
        ]

    def all_jobs(self) -> list[Job]:
        return list(self.jobs)

    def all_students(self) -> list[Student]:
        return list(self.students.values())
