from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field
from typing import Any, Dict, List
import logging

from permit_portal.forms import FormSchema, FormValidationResult, StepController, StepResult, get_schema, list_schemas, validate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/forms", tags=["Forms"])


class FormValuesRequest(BaseModel):
    values: Dict[str, Any] = Field(default_factory=dict, description="Serialized form value tree")


def _schema_or_404(slug: str) -> FormSchema:
    schema = get_schema(slug)
    if schema is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown permit form '{slug}'")
    return schema


# Lists the permit forms an applicant can start
@router.get("", response_model=List[Dict[str, Any]])
async def get_forms():
    return [
        {
            "slug": schema.slug,
            "type": schema.type,
            "title": schema.title,
            "steps": [{"id": step.id, "name": step.name} for step in schema.steps],
        }
        for schema in list_schemas()
    ]


@router.get("/{slug}", response_model=Dict[str, Any])
async def get_form(slug: str):
    schema = _schema_or_404(slug)
    return {**schema.model_dump(mode="json"), "defaults": schema.defaults()}


# Validates a whole value tree, as done before the final submit
@router.post("/{slug}/validate", response_model=FormValidationResult)
async def validate_form(slug: str, request: FormValuesRequest):
    schema = _schema_or_404(slug)
    return validate(schema, request.values)


# Checks one step's fields and reports where the wizard would move
@router.post("/{slug}/steps/{step}/advance", response_model=StepResult)
async def advance_step(slug: str, step: int, request: FormValuesRequest):
    schema = _schema_or_404(slug)
    try:
        controller = StepController(schema, position=step)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return controller.advance(request.values)
