"""Preference-based job matching."""

from __future__ import annotations

from collections.abc import Iterable

from elvia.contracts.models import Job, Preferences
from elvia.contracts.types import EmploymentType, WorkModel
from elvia.registry.data_source import DataSource


def match_jobs(
    jobs: Iterable[Job],
    employment_type: EmploymentType | None = None,
    work_model: WorkModel | None = None,
) -> list[Job]:
    """Return the jobs compatible with the given preferences.

    A preference that is missing or ``UNKNOWN`` does not filter, so when both
    are ``UNKNOWN`` every job is returned. Input order is preserved.
    """
    wanted_type = None if employment_type is EmploymentType.UNKNOWN else employment_type
    wanted_model = None if work_model is WorkModel.UNKNOWN else work_model
    return [
        job
        for job in jobs
        if (wanted_type is None or job.employment_type == wanted_type)
        and (wanted_model is None or job.work_model == wanted_model)
    ]


def match_preferences(catalog: DataSource, preferences: Preferences) -> list[Job]:
    return match_jobs(catalog.all_jobs(), preferences.employment_type, preferences.work_model)
