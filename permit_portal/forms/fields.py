"""Declarative building blocks for permit application forms.

A permit type is described by a :class:`FormSchema`: the fields it collects,
the cross-field rules between them and the ordered steps of its wizard.
Field paths are dot-separated, so ``"docResidential.architecturalDrawings"``
addresses a slot nested inside a named attachment group and
``"outdoorActivity.signboard"`` addresses one option of a checkbox group.
"""

import copy
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

PHONE_PATTERN = r"^\+?[0-9\s\-()]+$"


class FieldType(str, Enum):
    text = "text"
    choice = "choice"
    date = "date"
    boolean = "boolean"
    boolean_set = "boolean_set"
    attachment = "attachment"


class FieldFormat(str, Enum):
    email = "email"
    phone = "phone"


class Option(BaseModel):
    id: str
    label: str


class FieldSpec(BaseModel):
    path: str = Field(..., description="Dot-separated location of the value in the form tree")
    label: str = Field(..., description="Human readable label")
    type: FieldType = FieldType.text
    required: bool = False
    required_message: Optional[str] = None
    pattern: Optional[str] = None
    pattern_message: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    format: Optional[FieldFormat] = None
    options: List[Option] = Field(default_factory=list, description="Choices or checkbox options")
    must_be_true: bool = Field(False, description="Boolean that has to be checked, e.g. a declaration")
    at_least_one: bool = Field(False, description="Checkbox group that needs one selected option")
    default: Any = None

    @property
    def option_ids(self) -> List[str]:
        return [option.id for option in self.options]

    def message_for_required(self) -> str:
        return self.required_message or f"{self.label} is required"


class RuleConstraint(str, Enum):
    required = "required"


class ConditionalRule(BaseModel):
    """`target_path` takes on `constraint` when `condition_path` equals `condition_value`."""
    condition_path: str
    condition_value: Any
    target_path: str
    constraint: RuleConstraint = RuleConstraint.required
    message: str
    # Also checked on the step holding the condition field, even when the
    # target sits on a later step
    inline: bool = False


class Step(BaseModel):
    id: int
    name: str
    fields: List[str] = Field(default_factory=list)


class FormSchema(BaseModel):
    slug: str = Field(..., description="URL friendly identifier")
    type: str = Field(..., description="Application type recorded on submission")
    title: str
    fields: List[FieldSpec]
    rules: List[ConditionalRule] = Field(default_factory=list)
    steps: List[Step] = Field(default_factory=list)
    applicant_name_paths: List[str] = Field(
        default_factory=list,
        description="Fields joined with a space to build the applicant display name",
    )

    @model_validator(mode="after")
    def _check_references(self) -> "FormSchema":
        known = {spec.path for spec in self.fields}
        for step in self.steps:
            unknown = [path for path in step.fields if path not in known]
            if unknown:
                raise ValueError(f"Step '{step.name}' references unknown fields: {unknown}")
        for rule in self.rules:
            if rule.target_path not in known:
                raise ValueError(f"Rule targets unknown field '{rule.target_path}'")
        if not self.steps:
            self.steps = [Step(id=1, name=self.title, fields=[spec.path for spec in self.fields])]
        return self

    def field(self, path: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.path == path:
                return spec
        return None

    def defaults(self) -> Dict[str, Any]:
        """Initial value tree with every declared default filled in."""
        values: Dict[str, Any] = {}
        for spec in self.fields:
            if spec.default is not None:
                set_path(values, spec.path, copy.deepcopy(spec.default))
        return values


_MISSING = object()


def get_path(values: Any, path: str, default: Any = None) -> Any:
    current = values
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def set_path(values: Dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    current = values
    for part in parts[:-1]:
        nested = current.get(part, _MISSING)
        if not isinstance(nested, dict):
            nested = {}
            current[part] = nested
        current = nested
    current[parts[-1]] = value
