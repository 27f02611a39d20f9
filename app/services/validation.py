"""Submit-eligibility of a service request, derived from the current form state."""
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from app.core.enums import ServiceType
from app.schemas.quote import Quote
from app.schemas.validation import ValidationState

DESCRIPTION_MIN_LENGTH = 20
DESCRIPTION_FIELDS = ("description", "problem_description", "additionalInfo")
ALLOWED_SERVICE_TYPES = frozenset(t.value for t in ServiceType)


@dataclass(frozen=True)
class FieldIssue:
    field: str
    message: str
    missing: bool = True


def _service_id(service: Any) -> Optional[Any]:
    if service is None:
        return None
    if isinstance(service, Mapping):
        return service.get("id")
    return getattr(service, "id", None)


def derive_description(form_data: Mapping[str, Any]) -> str:
    for key in DESCRIPTION_FIELDS:
        value = form_data.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def _collect_issues(form_data, quote, service, selected_date) -> List[FieldIssue]:
    issues = []

    if not _service_id(service):
        issues.append(FieldIssue("servicio", "Debes seleccionar un servicio"))

    if quote is None:
        issues.append(FieldIssue("cotización", "Debes completar el formulario para obtener una cotización"))

    if not selected_date:
        issues.append(FieldIssue("fecha", "Debes seleccionar una fecha para el servicio"))

    if len(derive_description(form_data)) < DESCRIPTION_MIN_LENGTH:
        issues.append(FieldIssue(
            "descripción",
            f"La descripción debe tener al menos {DESCRIPTION_MIN_LENGTH} caracteres",
        ))

    service_type = form_data.get("service_type")
    if service_type and (not isinstance(service_type, str) or service_type not in ALLOWED_SERVICE_TYPES):
        issues.append(FieldIssue("service_type", "Tipo de servicio inválido", missing=False))

    return issues


def validate(
    form_data: Optional[Mapping[str, Any]],
    quote: Optional[Quote],
    service: Any,
    selected_date: Any,
) -> ValidationState:
    """
    Run every check and report all problems at once.

    can_submit re-checks quote, service and date on top of is_valid so a state
    built while a quote is being recomputed never reads as submittable.
    """
    issues = _collect_issues(form_data or {}, quote, service, selected_date)

    is_valid = not issues
    can_submit = is_valid and quote is not None and bool(service) and bool(selected_date)

    return ValidationState(
        is_valid=is_valid,
        missing_fields=[i.field for i in issues if i.missing],
        errors={i.field: i.message for i in issues},
        can_submit=can_submit,
    )
