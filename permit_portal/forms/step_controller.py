import logging
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field

from permit_portal.forms.fields import FormSchema, Step
from permit_portal.forms.rule_engine import validate

logger = logging.getLogger(__name__)


class StepResult(BaseModel):
    advanced: bool
    position: int
    ready_to_submit: bool = False
    errors: Dict[str, str] = Field(default_factory=dict)


class StepController:
    """Tracks the wizard position for one schema and gates forward navigation.

    Positions are 1-based. Advancing from the last step does not move the
    position; it marks the wizard ready to submit instead.
    """

    def __init__(self, schema: FormSchema, position: int = 1):
        if not 1 <= position <= len(schema.steps):
            raise ValueError(f"Step {position} is outside 1..{len(schema.steps)}")
        self.schema = schema
        self.position = position
        self.ready_to_submit = False

    @property
    def total_steps(self) -> int:
        return len(self.schema.steps)

    @property
    def current_step(self) -> Step:
        return self.schema.steps[self.position - 1]

    @property
    def is_last_step(self) -> bool:
        return self.position == self.total_steps

    def validate_step(self, values: Mapping[str, Any], position: Optional[int] = None) -> Dict[str, str]:
        step = self.schema.steps[(position or self.position) - 1]
        if not step.fields:
            return {}
        return validate(self.schema, values, paths=step.fields).errors

    def advance(self, values: Mapping[str, Any]) -> StepResult:
        if self.ready_to_submit:
            return StepResult(advanced=False, position=self.position, ready_to_submit=True)

        errors = self.validate_step(values)
        if errors:
            logger.debug("Step %d of '%s' blocked: %s", self.position, self.schema.slug, list(errors))
            return StepResult(advanced=False, position=self.position, errors=errors)

        if self.is_last_step:
            self.ready_to_submit = True
        else:
            self.position += 1
        return StepResult(advanced=True, position=self.position, ready_to_submit=self.ready_to_submit)

    def retreat(self) -> StepResult:
        if self.ready_to_submit:
            self.ready_to_submit = False
            return StepResult(advanced=False, position=self.position)
        if self.position > 1:
            self.position -= 1
        return StepResult(advanced=False, position=self.position)
