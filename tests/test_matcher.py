"""Tests for preference-based job matching."""

from __future__ import annotations

from elvia.contracts.models import Job, Preferences
from elvia.contracts.types import EmploymentType, WorkModel
from elvia.matching.matcher import match_jobs, match_preferences
from elvia.registry.data_source import InMemoryDataSource


def _ids(jobs: list[Job]) -> list[int]:
    return [job.id for job in jobs]


def test_exact_preferences_match_single_job(data_source: InMemoryDataSource) -> None:
    jobs = match_jobs(data_source.all_jobs(), EmploymentType.FULL_TIME, WorkModel.REMOTE)
    assert _ids(jobs) == [101]


def test_unknown_work_model_only_filters_employment(data_source: InMemoryDataSource) -> None:
    jobs = match_jobs(data_source.all_jobs(), EmploymentType.FULL_TIME, WorkModel.UNKNOWN)
    assert _ids(jobs) == [101, 103]


def test_unknown_employment_only_filters_work_model(data_source: InMemoryDataSource) -> None:
    jobs = match_jobs(data_source.all_jobs(), EmploymentType.UNKNOWN, WorkModel.ON_SITE)
    assert _ids(jobs) == [103, 104]


def test_both_unknown_returns_full_catalog(data_source: InMemoryDataSource) -> None:
    jobs = match_jobs(data_source.all_jobs(), EmploymentType.UNKNOWN, WorkModel.UNKNOWN)
    assert _ids(jobs) == [101, 102, 103, 104]


def test_no_match_returns_empty(data_source: InMemoryDataSource) -> None:
    assert match_jobs(data_source.all_jobs(), EmploymentType.PART_TIME, WorkModel.HYBRID) == []


def test_match_preferences_uses_collected_values(data_source: InMemoryDataSource) -> None:
    preferences = Preferences(employment_type=EmploymentType.PART_TIME, work_model=WorkModel.REMOTE)
    assert _ids(match_preferences(data_source, preferences)) == [102]


def test_match_jobs_is_pure_over_any_sequence() -> None:
    jobs = [
        Job(id=7, title="Ilustrador", employment_type=EmploymentType.PART_TIME, work_model=WorkModel.HYBRID),
        Job(id=8, title="Animador", employment_type=EmploymentType.FULL_TIME, work_model=WorkModel.HYBRID),
    ]
    assert _ids(match_jobs(jobs, None, WorkModel.HYBRID)) == [7, 8]
    assert _ids(match_jobs(jobs, EmploymentType.FULL_TIME, None)) == [8]
    assert _ids(match_jobs(jobs)) == [7, 8]
