from datetime import date, datetime
import pydantic
from neonflow.exceptions import ValidationError


def coerce_date(value):
    """ISO date or datetime string (date part kept) -> date"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and 'T' in value:
        return value.split('T', 1)[0]
    return value


def parse_date(value, field='date'):
    """Optional query-string date; empty means no bound"""
    if value in (None, ''):
        return None
    if isinstance(value, date):
        return coerce_date(value)
    try:
        return date.fromisoformat(coerce_date(str(value)))
    except ValueError:
        raise ValidationError(f"Invalid {field}: {value!r}, expected YYYY-MM-DD")


def validate_payload(schema, payload):
    """
    Validate a raw payload against a pydantic schema.
    pydantic errors become a single ValidationError listing every problem.
    """
    if isinstance(payload, schema):
        return payload
    if payload is None:
        raise ValidationError("Request body is required")
    try:
        return schema.model_validate(payload)
    except pydantic.ValidationError as e:
        problems = []
        for err in e.errors():
            loc = '.'.join(str(p) for p in err['loc']) or 'body'
            problems.append(f"{loc}: {err['msg']}")
        raise ValidationError('; '.join(problems), payload={'errors': problems})
