from permit_portal.forms.fields import (
    FieldSpec,
    FieldType,
    FieldFormat,
    ConditionalRule,
    FormSchema,
    Option,
    Step,
    get_path,
    set_path,
)
from permit_portal.forms.attachments import (
    FileReference,
    serialize_value_tree,
    encode_payload,
    decode_payload,
    is_attachment_metadata,
)
from permit_portal.forms.rule_engine import FormValidationResult, validate
from permit_portal.forms.step_controller import StepController, StepResult
from permit_portal.forms.permit_schemas import (
    PERMIT_SCHEMAS,
    DEFAULT_APPLICANT_NAME,
    derive_applicant_name,
    get_schema,
    list_schemas,
)
