"""
Pydantic Schemas for ``pubchem`` tool requests.

Each method of the unified tool has its own request model; together they
form a tagged union keyed by ``method``. Validation happens once, before any
upstream call. Fields that belong to other methods are ignored.
"""

from typing import Any, Callable, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    confloat,
    conint,
    constr,
    model_validator,
)

from pubchem_mcp.core.enums import (
    BatchOperation,
    ConformerType,
    OutputFormat,
    PubChemMethod,
    SearchType,
)

# =============================================================================
# Limits
# =============================================================================

MAX_RECORDS_LIMIT = 10000
THRESHOLD_MIN = 0
THRESHOLD_MAX = 100
BATCH_MAX_ACCEPTED = 200

# =============================================================================
# Field types
# =============================================================================

# Booleans are never accepted where a number is expected.
MaxRecords = Union[
    conint(strict=True, gt=0, le=MAX_RECORDS_LIMIT),
    confloat(strict=True, gt=0, le=MAX_RECORDS_LIMIT),
]
Threshold = Union[
    conint(strict=True, ge=THRESHOLD_MIN, le=THRESHOLD_MAX),
    confloat(strict=True, ge=THRESHOLD_MIN, le=THRESHOLD_MAX),
]
PositiveNumber = Union[conint(strict=True, gt=0), confloat(strict=True, gt=0)]
CompoundId = Union[
    conint(strict=True),
    confloat(strict=True),
    constr(strict=True, min_length=1),
]
NonEmptyStr = constr(strict=True, min_length=1)
CasNumber = constr(strict=True, pattern=r"^\d{2,7}-\d{2}-\d$")


# =============================================================================
# Request models
# =============================================================================


class MethodRequestBase(BaseModel):
    """Common configuration for all method requests."""

    model_config = ConfigDict(extra="ignore", frozen=True)


class SearchCompoundsRequest(MethodRequestBase):
    """Search by name, SMILES, InChI, SDF, CID or formula."""

    method: Literal["search_compounds"] = "search_compounds"
    query: NonEmptyStr = Field(..., description="Search query string")
    search_type: SearchType = Field(default=SearchType.NAME, description="Input namespace")
    max_records: Optional[MaxRecords] = Field(None, description="Maximum CIDs to resolve")


class CompoundInfoRequest(MethodRequestBase):
    """Full compound record by CID."""

    method: Literal["get_compound_info"] = "get_compound_info"
    cid: CompoundId
    format: OutputFormat = OutputFormat.JSON


class SmilesSearchRequest(MethodRequestBase):
    """Exact SMILES lookup."""

    method: Literal["search_by_smiles"] = "search_by_smiles"
    smiles: NonEmptyStr
    threshold: Optional[Threshold] = None
    max_records: Optional[MaxRecords] = None


class InchiSearchRequest(MethodRequestBase):
    """InChI or InChIKey lookup."""

    method: Literal["search_by_inchi"] = "search_by_inchi"
    inchi: NonEmptyStr


class CasSearchRequest(MethodRequestBase):
    """CAS Registry Number lookup."""

    method: Literal["search_by_cas_number"] = "search_by_cas_number"
    cas_number: CasNumber = Field(..., description="CAS Registry Number, e.g. 50-78-2")


class CompoundSynonymsRequest(MethodRequestBase):
    method: Literal["get_compound_synonyms"] = "get_compound_synonyms"
    cid: CompoundId
    format: OutputFormat = OutputFormat.JSON


class SimilaritySearchRequest(MethodRequestBase):
    """2D similarity search against a SMILES query."""

    method: Literal["search_similar_compounds"] = "search_similar_compounds"
    smiles: NonEmptyStr
    threshold: Optional[Threshold] = None
    max_records: Optional[MaxRecords] = None


class ConformerRequest(MethodRequestBase):
    method: Literal["get_3d_conformers"] = "get_3d_conformers"
    cid: CompoundId
    conformer_type: ConformerType = ConformerType.THREE_D


class StereochemistryRequest(MethodRequestBase):
    method: Literal["analyze_stereochemistry"] = "analyze_stereochemistry"
    cid: CompoundId
    format: OutputFormat = OutputFormat.JSON


class CompoundPropertiesRequest(MethodRequestBase):
    method: Literal["get_compound_properties"] = "get_compound_properties"
    cid: CompoundId
    properties: Optional[list[constr(strict=True)]] = Field(
        None, description="PUG REST property names; defaults apply when omitted or empty"
    )


class AssayInfoRequest(MethodRequestBase):
    method: Literal["get_assay_info"] = "get_assay_info"
    aid: PositiveNumber


class BioactivitiesRequest(MethodRequestBase):
    method: Literal["get_compound_bioactivities"] = "get_compound_bioactivities"
    cid: CompoundId


class SafetyDataRequest(MethodRequestBase):
    method: Literal["get_safety_data"] = "get_safety_data"
    cid: CompoundId
    format: OutputFormat = OutputFormat.JSON


class BatchLookupRequest(MethodRequestBase):
    """Bulk lookup; at most ``BATCH_MAX_ACCEPTED`` CIDs are accepted."""

    method: Literal["batch_compound_lookup"] = "batch_compound_lookup"
    cids: list[PositiveNumber] = Field(..., min_length=1, max_length=BATCH_MAX_ACCEPTED)
    operation: BatchOperation = BatchOperation.PROPERTY


class ExternalReferencesRequest(MethodRequestBase):
    method: Literal["get_external_references"] = "get_external_references"
    cid: CompoundId


class PatentIdsRequest(MethodRequestBase):
    """Patent identifiers by CID, or by SMILES resolved to a CID."""

    method: Literal["get_patent_ids"] = "get_patent_ids"
    cid: Optional[CompoundId] = None
    smiles: Optional[NonEmptyStr] = None

    @model_validator(mode="after")
    def cid_or_smiles(self) -> "PatentIdsRequest":
        """Ensure at least one identifier is supplied."""
        if self.cid is None and self.smiles is None:
            raise ValueError('Either "cid" or "smiles" is required for get_patent_ids')
        return self


MethodRequest = Union[
    SearchCompoundsRequest,
    CompoundInfoRequest,
    SmilesSearchRequest,
    InchiSearchRequest,
    CasSearchRequest,
    CompoundSynonymsRequest,
    SimilaritySearchRequest,
    ConformerRequest,
    StereochemistryRequest,
    CompoundPropertiesRequest,
    AssayInfoRequest,
    BioactivitiesRequest,
    SafetyDataRequest,
    BatchLookupRequest,
    ExternalReferencesRequest,
    PatentIdsRequest,
]

METHOD_MODELS: dict[PubChemMethod, type[MethodRequestBase]] = {
    PubChemMethod.SEARCH_COMPOUNDS: SearchCompoundsRequest,
    PubChemMethod.GET_COMPOUND_INFO: CompoundInfoRequest,
    PubChemMethod.SEARCH_BY_SMILES: SmilesSearchRequest,
    PubChemMethod.SEARCH_BY_INCHI: InchiSearchRequest,
    PubChemMethod.SEARCH_BY_CAS_NUMBER: CasSearchRequest,
    PubChemMethod.GET_COMPOUND_SYNONYMS: CompoundSynonymsRequest,
    PubChemMethod.SEARCH_SIMILAR_COMPOUNDS: SimilaritySearchRequest,
    PubChemMethod.GET_3D_CONFORMERS: ConformerRequest,
    PubChemMethod.ANALYZE_STEREOCHEMISTRY: StereochemistryRequest,
    PubChemMethod.GET_COMPOUND_PROPERTIES: CompoundPropertiesRequest,
    PubChemMethod.GET_ASSAY_INFO: AssayInfoRequest,
    PubChemMethod.GET_COMPOUND_BIOACTIVITIES: BioactivitiesRequest,
    PubChemMethod.GET_SAFETY_DATA: SafetyDataRequest,
    PubChemMethod.BATCH_COMPOUND_LOOKUP: BatchLookupRequest,
    PubChemMethod.GET_EXTERNAL_REFERENCES: ExternalReferencesRequest,
    PubChemMethod.GET_PATENT_IDS: PatentIdsRequest,
}


# =============================================================================
# Validation entry points
# =============================================================================


def parse_method_request(method: PubChemMethod, arguments: Any) -> MethodRequest:
    """
    Validate ``arguments`` against the model registered for ``method``.

    Raises:
        pydantic.ValidationError: if the argument bag does not fit the method
    """
    payload = arguments
    if isinstance(arguments, dict):
        payload = {**arguments, "method": method.value}
    return METHOD_MODELS[method].model_validate(payload)  # type: ignore[return-value]


def _make_predicate(method: PubChemMethod) -> Callable[[Any], bool]:
    def is_valid(arguments: Any) -> bool:
        try:
            parse_method_request(method, arguments)
        except ValidationError:
            return False
        return True

    is_valid.__name__ = f"is_valid_{method.value}_args"
    return is_valid


VALIDATORS: dict[PubChemMethod, Callable[[Any], bool]] = {
    method: _make_predicate(method) for method in METHOD_MODELS
}


def is_valid_request(method: PubChemMethod, arguments: Any) -> bool:
    """Pure predicate: does ``arguments`` satisfy ``method``'s constraints?"""
    return VALIDATORS[method](arguments)


def summarize_validation_error(exc: ValidationError, limit: int = 3) -> str:
    """Render the first few validation problems as ``field: message`` pairs."""
    parts: list[str] = []
    seen: set[str] = set()
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "arguments"
        if field in seen:
            continue
        seen.add(field)
        parts.append(f"{field}: {error['msg']}")
        if len(parts) >= limit:
            break
    return "; ".join(parts)
