import re
import logging
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, EmailStr, Field, TypeAdapter, ValidationError

from permit_portal.forms.attachments import FileReference, is_attachment_metadata
from permit_portal.forms.fields import (
    PHONE_PATTERN,
    ConditionalRule,
    FieldFormat,
    FieldSpec,
    FieldType,
    FormSchema,
    get_path,
)

logger = logging.getLogger(__name__)

_email_adapter = TypeAdapter(EmailStr)


class FormValidationResult(BaseModel):
    valid: bool
    errors: Dict[str, str] = Field(default_factory=dict, description="Violation message keyed by field path")


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def _in_scope(path: str, paths: Optional[Iterable[str]]) -> bool:
    if paths is None:
        return True
    return any(path == p or path.startswith(p + ".") for p in paths)


def _check_boolean_set(spec: FieldSpec, value: Any) -> Optional[str]:
    if not spec.at_least_one:
        return None
    # Undeclared keys and truthy non-booleans never count as a selection
    selected = isinstance(value, Mapping) and any(value.get(option) is True for option in spec.option_ids)
    if not selected:
        return spec.required_message or f"Please select at least one {spec.label.lower()}"
    return None


def _check_boolean(spec: FieldSpec, value: Any) -> Optional[str]:
    if spec.must_be_true and value is not True:
        return spec.required_message or f"{spec.label} must be accepted"
    if spec.required and value is None:
        return spec.message_for_required()
    return None


def _check_date(spec: FieldSpec, value: Any) -> Optional[str]:
    if isinstance(value, (date, datetime)):
        return None
    if isinstance(value, str):
        try:
            datetime.fromisoformat(value.replace("Z", "+00:00"))
            return None
        except ValueError:
            pass
    return f"{spec.label} must be a valid date"


def _check_text(spec: FieldSpec, value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return f"{spec.label} must be text"
    text = value.strip()
    if spec.min_length is not None and len(text) < spec.min_length:
        return f"{spec.label} must be at least {spec.min_length} characters"
    if spec.max_length is not None and len(text) > spec.max_length:
        return f"{spec.label} must be at most {spec.max_length} characters"
    if spec.pattern and not re.fullmatch(spec.pattern, text):
        return spec.pattern_message or f"{spec.label} is invalid"
    if spec.format == FieldFormat.email:
        try:
            _email_adapter.validate_python(text)
        except ValidationError:
            return "Invalid email address"
    elif spec.format == FieldFormat.phone:
        if not re.fullmatch(PHONE_PATTERN, text):
            return "Invalid phone number format"
    return None


def check_field(spec: FieldSpec, value: Any) -> Optional[str]:
    """Independent constraints of one field. Returns a message or None."""
    if spec.type == FieldType.boolean_set:
        return _check_boolean_set(spec, value)
    if spec.type == FieldType.boolean:
        return _check_boolean(spec, value)

    if is_empty(value):
        return spec.message_for_required() if spec.required else None

    if spec.type == FieldType.attachment:
        # A multi-file input arrives as a list of references
        items = value if isinstance(value, list) else [value]
        if all(isinstance(item, FileReference) or is_attachment_metadata(item) for item in items):
            return None
        return f"{spec.label} must be an uploaded file"
    if spec.type == FieldType.choice:
        if value not in spec.option_ids:
            return f"Please select a valid {spec.label.lower()}"
        return None
    if spec.type == FieldType.date:
        return _check_date(spec, value)
    return _check_text(spec, value)


def rule_applies(rule: ConditionalRule, values: Mapping[str, Any]) -> bool:
    return get_path(values, rule.condition_path) == rule.condition_value


def rule_in_scope(rule: ConditionalRule, paths: Optional[Iterable[str]]) -> bool:
    if paths is None:
        return True
    if _in_scope(rule.target_path, paths):
        return True
    return rule.inline and _in_scope(rule.condition_path, paths)


def validate(schema: FormSchema, values: Mapping[str, Any], paths: Optional[List[str]] = None) -> FormValidationResult:
    """Validate a value tree against a schema.

    Independent field constraints run first, then conditional rules. A rule is
    skipped when its condition field or its target already carries a violation.
    With ``paths`` only the named fields (and rules touching them) are checked.
    Values at paths the schema does not declare are ignored.
    """
    values = values or {}
    errors: Dict[str, str] = {}

    for spec in schema.fields:
        if not _in_scope(spec.path, paths):
            continue
        message = check_field(spec, get_path(values, spec.path))
        if message:
            errors[spec.path] = message

    for rule in schema.rules:
        if not rule_in_scope(rule, paths):
            continue
        if rule.target_path in errors or any(_in_scope(rule.condition_path, [p]) for p in errors):
            continue
        if rule_applies(rule, values) and is_empty(get_path(values, rule.target_path)):
            errors[rule.target_path] = rule.message

    if errors:
        logger.debug("Form '%s' failed validation on %d field(s)", schema.slug, len(errors))
    return FormValidationResult(valid=not errors, errors=errors)
