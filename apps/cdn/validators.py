"""Input validation shared by the activation workflow and the Pulumi providers."""

from typing import Any

from apps.cdn.exceptions import MutualExclusionError

CERTIFICATE_REF_FIELDS = ("certificate_id", "certificate_template_id")


def _is_set(value: Any) -> bool:
    return value is not None and value != "" and value != 0


def mutual_exclusion_errors(
    values: dict[str, Any], fields: tuple[str, ...]
) -> list[str]:
    """Return a message per violated exclusion, empty when the inputs are valid."""
    present = [name for name in fields if _is_set(values.get(name))]
    if len(present) > 1:
        return [str(MutualExclusionError(fields))]
    return []


def ensure_mutually_exclusive(values: dict[str, Any], fields: tuple[str, ...]) -> None:
    """
    Fail if more than one of ``fields`` is set in ``values``.

    Raises:
        MutualExclusionError: If two or more fields are set.
    """
    if mutual_exclusion_errors(values, fields):
        raise MutualExclusionError(fields)


def ensure_single_certificate_ref(
    certificate_id: int | None, certificate_template_id: int | None
) -> None:
    """A site activation takes a certificate or a template, never both."""
    ensure_mutually_exclusive(
        {
            "certificate_id": certificate_id,
            "certificate_template_id": certificate_template_id,
        },
        CERTIFICATE_REF_FIELDS,
    )


def require_id(value: Any, name: str) -> None:
    """Raise ValueError for an empty identifier argument."""
    if value is None or value == "":
        raise ValueError(f"{name} is required")
