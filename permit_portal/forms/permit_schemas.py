"""Form schemas for every permit type the portal accepts.

Each schema lists its fields box by box, groups them into wizard steps and
declares the cross-field rules of the paper form it replaces.
"""

from typing import Dict, List, Optional

from permit_portal.forms.fields import (
    ConditionalRule,
    FieldFormat,
    FieldSpec,
    FieldType,
    FormSchema,
    Option,
    Step,
    get_path,
)

DECLARATION_MESSAGE = "You must agree to the declaration to submit the application."
PRIVATE_LAND_MESSAGE = "Proof of Ownership is required for Private land"

IDENTIFICATION_OPTIONS = [
    Option(id="internationalPassport", label="International Passport"),
    Option(id="taxIdCard", label="Tax Identification Card"),
    Option(id="nationalIdCard", label="National ID Card"),
    Option(id="driversLicense", label="Driver's License"),
    Option(id="voterRegCard", label="Voter Registration Card"),
]

# Outdoor advertisement forms accept fewer documents for the representative
ADVERTISING_REP_ID_OPTIONS = [
    Option(id="internationalPassport", label="International Passport"),
    Option(id="voterRegCard", label="Voter Registration Card"),
    Option(id="driversLicense", label="Driver's License"),
    Option(id="nationalIdCard", label="National ID Card"),
]

GENDER_OPTIONS = [Option(id="Male", label="Male"), Option(id="Female", label="Female")]
LAND_TYPE_OPTIONS = [Option(id="Public", label="Public"), Option(id="Private", label="Private")]


def _options(*ids: str) -> List[Option]:
    return [Option(id=i, label=i) for i in ids]


def _text(path: str, label: str, required: bool = False, message: Optional[str] = None, **kwargs) -> FieldSpec:
    return FieldSpec(path=path, label=label, required=required, required_message=message, **kwargs)


def _phone(path: str, label: str, required: bool = False, message: Optional[str] = None, checked: bool = True) -> FieldSpec:
    return FieldSpec(
        path=path, label=label, required=required, required_message=message,
        format=FieldFormat.phone if checked else None,
    )


def _email(path: str, label: str, required: bool = False, message: Optional[str] = None) -> FieldSpec:
    return FieldSpec(path=path, label=label, required=required, required_message=message, format=FieldFormat.email)


def _choice(path: str, label: str, options: List[Option], message: Optional[str] = None, required: bool = True) -> FieldSpec:
    return FieldSpec(
        path=path, label=label, type=FieldType.choice, options=options,
        required=required, required_message=message,
    )


def _date(path: str, label: str, required: bool = False, message: Optional[str] = None) -> FieldSpec:
    return FieldSpec(path=path, label=label, type=FieldType.date, required=required, required_message=message)


def _checkboxes(path: str, label: str, options: List[Option], at_least_one: bool = False, message: Optional[str] = None) -> FieldSpec:
    return FieldSpec(
        path=path, label=label, type=FieldType.boolean_set, options=options,
        at_least_one=at_least_one, required_message=message, default={},
    )


def _checklist(documents: Dict[str, str]) -> List[FieldSpec]:
    return [
        FieldSpec(path=doc_id, label=label, type=FieldType.boolean, default=False)
        for doc_id, label in documents.items()
    ]


def _attachments(group: str, slots: Dict[str, str], required: bool = False) -> List[FieldSpec]:
    return [
        FieldSpec(path=f"{group}.{slot}", label=label, type=FieldType.attachment, required=required)
        for slot, label in slots.items()
    ]


def _declaration(message: str = DECLARATION_MESSAGE) -> FieldSpec:
    return FieldSpec(
        path="declaration", label="Declaration", type=FieldType.boolean,
        must_be_true=True, required_message=message, default=False,
    )


def _paths(fields: List[FieldSpec]) -> List[str]:
    return [spec.path for spec in fields]


def _personal_fields(phone_message: str = "Phone 1 is required", phone_format: bool = True) -> List[FieldSpec]:
    return [
        _text("title", "Title"),
        _text("firstName", "First name", required=True, message="First name is required"),
        _text("middleName", "Middle name"),
        _text("surname", "Surname", required=True, message="Surname is required"),
        _choice("gender", "Gender", GENDER_OPTIONS, message="Gender is required"),
        _date("dateOfBirth", "Date of birth", required=True, message="Date of birth is required"),
        _text("occupation", "Occupation"),
        _text("nationality", "Nationality", default="Nigerian"),
        _text("stateOfOrigin", "State of origin"),
        _text("localGov", "Local government"),
        _phone("phone1", "Phone 1", required=True, message=phone_message, checked=phone_format),
        _phone("phone2", "Phone 2", checked=phone_format),
        _phone("phone3", "Phone 3", checked=phone_format),
        _email("email", "Email"),
        _checkboxes("identificationType", "Identification type", IDENTIFICATION_OPTIONS),
        _text("idNumber", "ID number"),
    ]


def _address_fields(prefix: str) -> List[FieldSpec]:
    return [
        _text(f"{prefix}HouseNo", "House number"),
        _text(f"{prefix}StreetName", "Street name"),
        _text(f"{prefix}District", "District"),
        _text(f"{prefix}CityTown", "City/Town"),
        _text(f"{prefix}State", "State", default="Kaduna"),
        _text(f"{prefix}Country", "Country", default="Nigeria"),
        _text(f"{prefix}POBox", "P.O. Box"),
        _text(f"{prefix}CO", "C/O"),
        _text(f"{prefix}AdditionalAddressInfo", "Additional address information"),
    ]


def _representative_fields(id_options: List[Option] = IDENTIFICATION_OPTIONS, phone_format: bool = True) -> List[FieldSpec]:
    return [
        _text("repFirstName", "Representative first name"),
        _text("repMiddleName", "Representative middle name"),
        _text("repSurname", "Representative surname"),
        _phone("repPhone1", "Representative phone 1", checked=phone_format),
        _phone("repPhone2", "Representative phone 2", checked=phone_format),
        _email("repEmail", "Representative email"),
        _checkboxes("repIdentificationType", "Representative identification type", id_options),
        _text("repIdNumber", "Representative ID number"),
    ]


def _organisation_fields(tax_id_path: str = "orgTin") -> List[FieldSpec]:
    return [
        _text("orgName", "Name of Organisation", required=True, message="Name of Organisation is required"),
        _text("cacNumber", "CAC number"),
        _date("dateOfRegistration", "Date of registration"),
        _text(tax_id_path, "Organisation TIN"),
        _phone("orgPhone", "Organisation phone", required=True, message="Organisation phone is required"),
        _email("orgEmail", "Organisation email"),
        _text("ceoTitle", "CEO title"),
        _text("ceoFirstName", "CEO first name", required=True, message="CEO First Name is required"),
        _text("ceoMiddleName", "CEO middle name"),
        _text("ceoSurname", "CEO surname", required=True, message="CEO Surname is required"),
        _text("ceoDesignation", "CEO designation"),
        _phone("ceoPhone", "CEO phone"),
        _email("ceoEmail", "CEO email"),
        _checkboxes("ceoIdentificationType", "CEO identification type", IDENTIFICATION_OPTIONS),
        _text("ceoIdNumber", "CEO ID number"),
    ]


def _site_fields() -> List[FieldSpec]:
    return [
        _text("siteStreetName", "Street Name", required=True, message="Street Name is required"),
        _text("siteCityTown", "City/Town", required=True, message="City/Town is required"),
        _text("siteLGA", "L.G.A", required=True, message="L.G.A is required"),
        _text("siteState", "State", default="Kaduna"),
        _text("siteCoordLong", "Longitude"),
        _text("siteCoordLat", "Latitude"),
        _choice("siteTypeOfLand", "Type of Land", LAND_TYPE_OPTIONS, message="Type of Land is required"),
        _text("siteProofOfOwnership", "Proof of ownership"),
        _text("siteAddInfo", "Additional information"),
    ]


def _private_land_rule() -> ConditionalRule:
    return ConditionalRule(
        condition_path="siteTypeOfLand",
        condition_value="Private",
        target_path="siteProofOfOwnership",
        message=PRIVATE_LAND_MESSAGE,
    )


def residential_building_permit() -> FormSchema:
    # Phone numbers on this form are free text; only Phone 1 must be present
    applicant = _personal_fields(phone_format=False)
    applicant_address = _address_fields("app")
    representative = _representative_fields(phone_format=False)
    representative_address = _address_fields("rep")
    plot = [
        _text("landUse", "Land use"),
        _text("purpose", "Purpose"),
        _text("plotDistrict", "Plot district"),
        _text("plotLGA", "Plot L.G.A"),
        _text("plotDescriptionAddress", "Plot Description/Address", required=True,
              message="Plot Description/Address is required"),
    ]
    documents = _attachments("docResidential", {
        "certificateOfOccupancy": "Certificate of Occupancy",
        "architecturalDrawings": "Architectural Drawings",
        "structuralDrawings": "Structural Drawings",
        "siteAnalysisReport": "Site Analysis Report",
    })
    boxes = [
        ("Applicant", applicant),
        ("Applicant Address", applicant_address),
        ("Representative", representative),
        ("Representative Address", representative_address),
        ("Plot", plot),
        ("Documents", documents),
    ]
    return FormSchema(
        slug="residential-building-permit",
        type="Building Permit (Individual)",
        title="Residential Building Permit Application",
        fields=[spec for _, group in boxes for spec in group],
        steps=[Step(id=i, name=name, fields=_paths(group)) for i, (name, group) in enumerate(boxes, start=1)],
        applicant_name_paths=["firstName", "surname"],
    )


def organisation_building_permit() -> FormSchema:
    organisation = [_text("kbpNumber", "KBP number"), _text("kdlNumber", "KDL number")]
    organisation += _organisation_fields(tax_id_path="orgTaxIdNumber")
    organisation_address = _address_fields("org")
    representative = _representative_fields()
    plot = [
        _text("plotLandUse", "Land use"),
        _text("plotPurpose", "Purpose"),
        _text("plotDistrict", "Plot district"),
        _text("plotLGA", "Plot L.G.A"),
        _text("plotDescriptionAddress", "Plot Description/Address", required=True,
              message="Plot Description/Address is required"),
    ]
    documents = _checklist({
        "docDigitalCertOfOccupancy": "Digital Certificate of Occupancy",
        "docKadgisAcknowledgement": "KADGIS Acknowledgement",
        "docStructuralCalculations": "Structural Calculations",
        "docArchitecturalDrawings": "Architectural Drawings",
        "docMechanicalElectricalDrawings": "Mechanical & Electrical Drawings",
        "docStructuralDrawings": "Structural Drawings",
        "docSiteAnalysisReport": "Site Analysis Report",
        "docKepasEnvImpactAssessment": "KEPA Environmental Impact Assessment",
        "docKadgisDlaSketchPlan": "KADGIS DLA Sketch Plan",
        "docSoilInvestigationReport": "Soil Investigation Report",
        "docServiceApprovals": "Service Approvals",
        "docTaxClearanceCert": "Tax Clearance Certificate",
    })
    declaration = [_declaration()]
    boxes = [
        ("Organisation Details", organisation),
        ("Organisation Address", organisation_address),
        ("Representative", representative),
        ("Plot Details", plot),
        ("Required Documents", documents),
        ("Declaration", declaration),
    ]
    return FormSchema(
        slug="commercial-industrial-other-permit",
        type="Building Permit (Organization)",
        title="Commercial, Industrial & Other Building Permit Application",
        fields=[spec for _, group in boxes for spec in group],
        steps=[Step(id=i, name=name, fields=_paths(group)) for i, (name, group) in enumerate(boxes, start=1)],
        applicant_name_paths=["orgName"],
    )


def mast_permit() -> FormSchema:
    applicant = [_text("kopNumber", "KOP number"), _text("kdlNumber", "KDL number")] + _organisation_fields()
    site = _site_fields()
    representative = _representative_fields()
    purpose = [
        _choice("mastType", "Type of Mast", [
            Option(id="Radio", label="Radio"),
            Option(id="TV", label="TV"),
            Option(id="GSM", label="GSM"),
            Option(id="Other", label="Other (Specify)"),
        ], message="Type of Mast is required"),
        _text("mastTypeOther", "Other mast type"),
        _text("mastDuration", "Duration"),
        _date("mastCommencementDate", "Commencement date"),
        _text("mastCoordinates", "Coordinates"),
        _text("mastLocationOfShield", "Location of shield"),
    ]
    closing = _checklist({
        "docLeaseAgreement": "Lease title, agreement and power of attorney",
        "docStructuralDrawings": "2 Copies of Structural Drawings and Details",
        "docSiteAnalysisReport": "Site Analysis Report",
        "docKepasEnvImpactAssessment": "Copy of KEPA's Environment Impact Assessment",
        "docSoilInvestigationReport": "Soil Investigation Report",
        "docTelecommunicationDesigns": "Telecommunication Designs",
        "docStructuralCalculationSheets": "Structural Calculation Sheets",
        "docElectricalWorksDrawings": "Electrical Works Drawings and Details",
        "docPoliceReport": "Police Report",
        "docConsentLetter": "Consent Letter",
        "docProofOfOutrightPurchase": "Proof of Outright Purchase",
        "docSitePlan": "Site Plan",
        "docNAMAApproval": "Nigerian Airspace Management Authority (NAMA) approval",
        "docNCAAApproval": "Nigerian Civil Aviation Authority (NCAA) approval",
        "docLetterOfAttestation": "Letter of Attestation of Design",
        "docMechanicalWorksDrawings": "Mechanical Works Drawings and Details",
        "docArchitecturalWorksDrawings": "Architectural Works Drawings and Details",
        "docFireServiceReport": "Fire Service Report",
    }) + [_declaration()]
    boxes = [
        ("Applicant (Organisation)", applicant),
        ("Site Address", site),
        ("Representative", representative),
        ("Purpose of Application", purpose),
        ("Documents & Declaration", closing),
    ]
    return FormSchema(
        slug="mast-permit",
        type="Mast Permit",
        title="Mast Permit Application",
        fields=[spec for _, group in boxes for spec in group],
        rules=[
            _private_land_rule(),
            ConditionalRule(
                condition_path="mastType", condition_value="Other",
                target_path="mastTypeOther", message="Specify 'Other' for mast type", inline=True,
            ),
        ],
        steps=[Step(id=i, name=name, fields=_paths(group)) for i, (name, group) in enumerate(boxes, start=1)],
        applicant_name_paths=["orgName"],
    )


def street_naming_permit() -> FormSchema:
    applicant = [_text("kopNumber", "KOP number")] + _personal_fields() + [
        _text("children", "Number of children"),
        _choice("maritalStatus", "Marital status",
                _options("Single", "Married", "Separated", "Divorced", "Widowed"),
                message="Marital status is required"),
        _choice("educationLevel", "Education level", [
            Option(id="Primary", label="Primary"),
            Option(id="Secondary", label="Secondary"),
            Option(id="Tertiary", label="Tertiary"),
            Option(id="BachelorDegree", label="Bachelor Degree"),
            Option(id="MasterDegree", label="Master Degree"),
            Option(id="Doctorate", label="Doctorate"),
            Option(id="Other", label="Other (Specify)"),
        ], message="Education level is required"),
        _text("otherEducation", "Other education level"),
        _text("tin", "TIN"),
    ]
    address = _address_fields("app")
    representative = _representative_fields()
    street = [
        _choice("typeOfRoad", "Type of road", _options("Primary", "Secondary", "Local", "Access"),
                message="Type of road is required"),
        _text("roadLength", "Road length"),
        _text("coordinates", "Coordinates"),
        _text("locationOfSite", "Location of site", required=True, message="Location of site is required"),
    ]
    closing = _checklist({
        "docImageShowingSite": "Image showing the site",
        "docConsentLetter": "Consent Letter",
    }) + [_declaration()]
    boxes = [
        ("Applicant Details", applicant),
        ("Applicant Address", address),
        ("Representative", representative),
        ("Street Information", street),
        ("Documents & Declaration", closing),
    ]
    return FormSchema(
        slug="street-naming-permit",
        type="Street Naming Permit",
        title="Street Naming Permit Application",
        fields=[spec for _, group in boxes for spec in group],
        rules=[
            ConditionalRule(
                condition_path="educationLevel", condition_value="Other",
                target_path="otherEducation", message="Specify 'Other' education level", inline=True,
            ),
        ],
        steps=[Step(id=i, name=name, fields=_paths(group)) for i, (name, group) in enumerate(boxes, start=1)],
        applicant_name_paths=["firstName", "surname"],
    )


def outdoor_advertisement_permit() -> FormSchema:
    applicant = [
        _text("kopNumber", "KOP number"),
        _text("applicantCompanyNameIndividual", "Company Name/Individual", required=True,
              message="Company Name/Individual is required"),
        _phone("applicantPhone", "Phone Number", required=True, message="Phone Number is required"),
        _email("applicantEmail", "Email"),
        _text("applicantFullNameContact", "Full Name and Contact of Applicant", required=True,
              message="Full Name and Contact of Applicant is required"),
        _checkboxes("outdoorActivity", "Outdoor activity", [
            Option(id="signboard", label="Signboard"),
            Option(id="carWash", label="Car Wash"),
            Option(id="blockIndustry", label="Block Industry"),
            Option(id="horticulture", label="Horticulture"),
            Option(id="kiosk", label="Kiosk"),
            Option(id="makeshift", label="Makeshift"),
            Option(id="others", label="Others"),
        ], at_least_one=True, message="At least one type of outdoor activity must be selected."),
        _text("outdoorActivitySignboardSize", "Signboard size"),
        _text("outdoorActivityOthersSpecify", "Other outdoor activity"),
    ]
    site = _site_fields()
    representative = _representative_fields(ADVERTISING_REP_ID_OPTIONS)
    closing = _checklist({
        "docConsentLetter": "Consent Letter",
        "docProofOfOutrightPurchase": "Proof of Outright Purchase",
        "docImagerySketch": "Imagery & Sketch",
        "docSiteLocationInstallationCoordinates": "Site Location & Type of Installation with Coordinates",
        "docLeaseAgreementLetter": "Lease Agreement Letter",
    }) + [_declaration()]
    boxes = [
        ("Applicant Details", applicant),
        ("Site Address", site),
        ("Representative", representative),
        ("Documents & Declaration", closing),
    ]
    return FormSchema(
        slug="outdoor-advertisement-permit",
        type="Outdoor Advertisement Permit",
        title="Outdoor Advertisement Permit Application",
        fields=[spec for _, group in boxes for spec in group],
        rules=[
            ConditionalRule(
                condition_path="outdoorActivity.signboard", condition_value=True,
                target_path="outdoorActivitySignboardSize",
                message="Specify Size for Signboard is required", inline=True,
            ),
            ConditionalRule(
                condition_path="outdoorActivity.others", condition_value=True,
                target_path="outdoorActivityOthersSpecify",
                message="Specify 'Others' for outdoor activity", inline=True,
            ),
            _private_land_rule(),
        ],
        steps=[Step(id=i, name=name, fields=_paths(group)) for i, (name, group) in enumerate(boxes, start=1)],
        applicant_name_paths=["applicantCompanyNameIndividual"],
    )


def outdoor_advertisement_structure_permit() -> FormSchema:
    applicant = [
        _text("kopNumber", "KOP number"),
        _text("companyName", "Company Name", required=True, message="Company Name is required"),
        _text("kasupdaLicenseNo", "KASUPDA license number"),
        _phone("phoneNo", "Phone Number", required=True, message="Phone Number is required"),
        _email("emailAddress", "Email address"),
        _text("ceoNameContact", "CEO Name and Contact", required=True, message="CEO Name and Contact is required"),
        _text("apconRegNo", "APCON registration number"),
        _checkboxes("boardInstallations", "Board installation", [
            Option(id="ledDigitalBillboard", label="LED/Digital Billboard"),
            Option(id="unipoleSpectacular", label="Unipole Spectacular"),
            Option(id="lightBox", label="LightBox"),
            Option(id="portraitUnipole", label="Portrait Unipole"),
            Option(id="largeFormat", label="Large Format"),
            Option(id="lightedBillboard", label="Lighted Billboard"),
            Option(id="lampPost", label="Lamp Post"),
            Option(id="gantry", label="Gantry"),
            Option(id="othersSpecify", label="Others Specify"),
        ], at_least_one=True, message="At least one type of board installation must be selected."),
        _text("boardInstallationOthersText", "Other board installation"),
    ]
    site = _site_fields()
    representative = [
        _text("repFirstName", "Representative first name", required=True,
              message="Representative First Name is required"),
        _text("repMiddleName", "Representative middle name"),
        _text("repSurname", "Representative surname", required=True,
              message="Representative Surname is required"),
        _phone("repPhone1", "Representative phone 1", required=True,
               message="Representative Phone 1 is required"),
        _phone("repPhone2", "Representative phone 2"),
        _email("repEmail", "Representative email", required=True, message="Representative Email is required"),
        _checkboxes("repIdentificationType", "Representative identification type", ADVERTISING_REP_ID_OPTIONS,
                    at_least_one=True,
                    message="At least one identification type must be selected for the representative."),
        _text("repIdNumber", "Representative ID number", required=True,
              message="Representative ID Number is required"),
    ]
    closing = _checklist({
        "docKasupdaLicense": "KASUPDA License to Practice Outdoor Advertisement",
        "docSoilInvestigation": "Soil Investigation Report",
        "docCorporateArconLicense": "Corporate ARCON License",
        "docTelecommunicationDesigns": "Telecommunication Designs",
        "docSiteAnalysisReport": "Site Analysis Report (SAR)",
        "docLeaseAgreement": "Lease Agreement Letter",
        "docFireServiceReport": "Fire Service Report",
        "docPoliceReport": "Police Report",
        "docArchitecturalDrawing": "Architectural drawing and details of proposed installations",
        "docTaxClearance": "Copy of Tax Clearance Certificate",
        "docSiteLocationType": "Site Location & Type of Installation with Coordinates",
        "docKepaEiaApproval": "KEPA EIA Approval Certificate",
        "docStructuralWorkDrawings": "Structural Work Drawings and Details",
        "docProofOfOutrightPurchase": "Proof of Outright Purchase",
        "docConsentLetter": "Consent Letter",
    }) + [_declaration()]
    boxes = [
        ("Applicant Details", applicant),
        ("Site Address", site),
        ("Representative", representative),
        ("Documents & Declaration", closing),
    ]
    return FormSchema(
        slug="outdoor-advertisement-structure-permit",
        type="Outdoor Advertisement Structure Permit",
        title="Outdoor Advertisement Structure Permit Application",
        fields=[spec for _, group in boxes for spec in group],
        rules=[
            ConditionalRule(
                condition_path="boardInstallations.othersSpecify", condition_value=True,
                target_path="boardInstallationOthersText",
                message="Specify 'Others' for board installation", inline=True,
            ),
            _private_land_rule(),
        ],
        steps=[Step(id=i, name=name, fields=_paths(group)) for i, (name, group) in enumerate(boxes, start=1)],
        applicant_name_paths=["companyName"],
    )


def shop_owners_permit() -> FormSchema:
    applicant = [_text("kopNumber", "KOP number")] + _personal_fields()
    address = _address_fields("app")
    update = [
        _text("typeOfDevelopment", "Type of development", required=True, message="Type of development is required"),
        _text("categoryOfBusiness", "Category of business", required=True, message="Category of business is required"),
        _text("plotDistrict", "Plot district"),
        _text("plotLGA", "Plot L.G.A"),
        _text("plotAddressDescription", "Address/Description of plot", required=True,
              message="Address/Description of plot is required"),
    ]
    boxes = [
        ("Main Applicant", applicant),
        ("Applicant Address", address),
        ("Application Update", update),
        ("Signature", [_declaration()]),
    ]
    return FormSchema(
        slug="shop-owners-permit",
        type="Shop Owners Permit",
        title="Shop Owners Permit Application",
        fields=[spec for _, group in boxes for spec in group],
        steps=[Step(id=i, name=name, fields=_paths(group)) for i, (name, group) in enumerate(boxes, start=1)],
        applicant_name_paths=["firstName", "surname"],
    )


def stage_approval_application() -> FormSchema:
    applicant = [
        _text("title", "Title"),
        _text("firstName", "First name", required=True, message="First name is required"),
        _text("middleName", "Middle name"),
        _text("surname", "Surname", required=True, message="Surname is required"),
        _choice("gender", "Gender", GENDER_OPTIONS, message="Gender is required"),
        _date("dateOfBirth", "Date of birth", required=True, message="Date of birth is required"),
        _phone("phone1", "Phone number", required=True, message="Phone number is required"),
        _email("email", "Email"),
    ]
    project = [
        _text("originalPermitId", "Original Permit ID", required=True, min_length=5,
              message="Original Permit ID is required"),
        _text("fileNumber", "File number"),
        _text("kdlNumber", "KDL number"),
        FieldSpec(path="docCO", label="C of O Upload", type=FieldType.attachment),
    ]
    boxes = [
        ("Applicant Details", applicant),
        ("Project Details", project),
        ("Declaration", [_declaration()]),
    ]
    return FormSchema(
        slug="stage-approval",
        type="Stage Approval Application",
        title="Stage Approval Application",
        fields=[spec for _, group in boxes for spec in group],
        steps=[Step(id=i, name=name, fields=_paths(group)) for i, (name, group) in enumerate(boxes, start=1)],
        applicant_name_paths=["firstName", "surname"],
    )


def din_application() -> FormSchema:
    fields = _personal_fields() + [_declaration("You must agree to the declaration to submit.")]
    return FormSchema(
        slug="din-application",
        type="DIN Application",
        title="Development Identification Number (DIN) Application",
        fields=fields,
        applicant_name_paths=["firstName", "surname"],
    )


PERMIT_SCHEMAS: Dict[str, FormSchema] = {
    schema.slug: schema
    for schema in (
        residential_building_permit(),
        organisation_building_permit(),
        mast_permit(),
        street_naming_permit(),
        outdoor_advertisement_permit(),
        outdoor_advertisement_structure_permit(),
        shop_owners_permit(),
        stage_approval_application(),
        din_application(),
    )
}


def list_schemas() -> List[FormSchema]:
    return list(PERMIT_SCHEMAS.values())


def get_schema(key: str) -> Optional[FormSchema]:
    """Look a schema up by slug or by the application type it records."""
    if key in PERMIT_SCHEMAS:
        return PERMIT_SCHEMAS[key]
    for schema in PERMIT_SCHEMAS.values():
        if schema.type == key:
            return schema
    return None


DEFAULT_APPLICANT_NAME = "KASUPDA Applicant"


def derive_applicant_name(schema: FormSchema, values: Dict, fallback: Optional[str] = None) -> str:
    """Join the schema's name fields; fall back to the actor's name, then a fixed label."""
    parts = []
    for path in schema.applicant_name_paths:
        value = get_path(values, path)
        if isinstance(value, str) and value.strip():
            parts.append(value.strip())
    if parts:
        return " ".join(parts)
    if fallback and fallback.strip():
        return fallback.strip()
    return DEFAULT_APPLICANT_NAME
