"""Outbound message texts sent to students."""

from __future__ import annotations

from collections.abc import Sequence

from elvia.contracts.models import Job, Preferences, Student
from elvia.contracts.types import EmploymentType, WorkModel

_EMPLOYMENT_OPTIONS = "1️⃣ Tiempo completo (full-time)\n2️⃣ Tiempo parcial (part-time)"
_DONT_KNOW_HINT = 'O responde "no sé" si no estás seguro.'

_EMPLOYMENT_LABELS = {
    EmploymentType.FULL_TIME: "tiempo completo",
    EmploymentType.PART_TIME: "tiempo parcial",
}
_WORK_MODEL_LABELS = {
    WorkModel.REMOTE: "remoto",
    WorkModel.ON_SITE: "presencial",
    WorkModel.HYBRID: "híbrido",
}


def greeting(student: Student) -> str:
    return (
        f"¡Felicitaciones {student.name}! 🎓\n\n"
        f"Has completado tu {student.title} en {student.institution}. "
        "¡Es un logro increíble!\n\n"
        "Para ayudarte a encontrar tu próximo paso profesional, necesito conocer "
        "tus preferencias de trabajo.\n\n"
        "¿Qué tipo de empleo prefieres?\n\n"
        f"{_EMPLOYMENT_OPTIONS}"
    )


def employment_type_question() -> str:
    return f"Por favor, elige una opción:\n\n{_EMPLOYMENT_OPTIONS}\n\n{_DONT_KNOW_HINT}"


def work_model_question() -> str:
    return (
        "¡Perfecto! Ahora, ¿qué modelo de trabajo prefieres?\n\n"
        "1️⃣ Remoto (trabajar desde casa)\n"
        "2️⃣ Presencial (en oficina)\n"
        "3️⃣ Híbrido (combinación de ambos)\n\n"
        f"{_DONT_KNOW_HINT}"
    )


def _preference_labels(preferences: Preferences) -> list[str]:
    labels: list[str] = []
    if preferences.employment_type in _EMPLOYMENT_LABELS:
        labels.append(_EMPLOYMENT_LABELS[preferences.employment_type])
    if preferences.work_model in _WORK_MODEL_LABELS:
        labels.append(_WORK_MODEL_LABELS[preferences.work_model])
    return labels


def job_matches(jobs: Sequence[Job], preferences: Preferences) -> str:
    """Render the final results message for the collected preferences."""
    header = "🎯 Basándome en tus preferencias"
    labels = _preference_labels(preferences)
    if labels:
        header += f" ({', '.join(labels)})"
    lines = [f"{header}, aquí tienes {len(jobs)} oportunidades que podrían interesarte:", ""]

    if not jobs:
        lines += [
            "😔 No encontré trabajos que coincidan exactamente con tus preferencias. "
            "Te sugiero:",
            "",
            "• Revisar todas las oportunidades disponibles",
            "• Considerar opciones más flexibles",
            "• Contactar a nuestro equipo de reclutamiento",
            "",
            "¡Gracias por usar nuestro servicio! 🚀",
        ]
        return "\n".join(lines)

    for index, job in enumerate(jobs, start=1):
        lines += [
            f"{index}. {job.title}",
            f"   📋 {_EMPLOYMENT_LABELS[job.employment_type].capitalize()}",
            f"   🏢 {_WORK_MODEL_LABELS[job.work_model].capitalize()}",
            "",
        ]
    lines += [
        "¡Esperamos que encuentres la oportunidad perfecta! 🚀",
        "",
        "Para más información, visita nuestra plataforma o contacta a nuestro equipo.",
    ]
    return "\n".join(lines)
