"""Field-name heuristics that map a field to a personal-data generator."""

from typing import Optional

PERSON_NAME_FIELDS = {
    "full_name", "fullName", "customer_name", "user_name", "person_name",
    "employee_name", "client_name", "member_name", "patient_name",
    "student_name", "teacher_name", "owner_name", "manager_name", "first_name",
    "firstName", "last_name", "lastName",
}

PERSON_PREFIXES = (
    "driver", "rider", "customer", "user", "person", "employee", "client",
    "member", "patient", "student", "teacher", "owner", "manager", "admin",
)


def guess_data_kind(field_name: str) -> Optional[str]:
    """
    Guess which kind of personal data a field holds from its name.

    Args:
        field_name: Name of the field

    Returns:
        One of "email", "phone", "person_name", "address", "city", "country",
        "company", "job", or None when nothing matches
    """
    name = field_name.lower()

    if "email" in name or "e_mail" in name:
        return "email"
    if "phone" in name or name in ("tel", "telephone", "mobile"):
        return "phone"
    if field_name in PERSON_NAME_FIELDS:
        return "person_name"
    if name.endswith("_name") and name[: -len("_name")] in PERSON_PREFIXES:
        return "person_name"
    if "address" in name or "street" in name:
        return "address"
    if name in ("city", "town", "municipality"):
        return "city"
    if name in ("country", "nation"):
        return "country"
    if name in ("company", "employer", "organization", "organisation"):
        return "company"
    if name in ("job", "occupation", "position", "jobtitle", "job_title"):
        return "job"
    return None
