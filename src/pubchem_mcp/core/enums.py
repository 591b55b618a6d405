"""
Core Enumerations for the PubChem MCP Server.
Source: https://pubchem.ncbi.nlm.nih.gov/docs/pug-rest
Verified: 2026-10-19
"""

from enum import Enum


# =============================================================================
# Tool Methods
# =============================================================================


class PubChemMethod(str, Enum):
    """Operations accepted by the unified ``pubchem`` tool."""

    # Chemical search & retrieval
    SEARCH_COMPOUNDS = "search_compounds"
    GET_COMPOUND_INFO = "get_compound_info"
    SEARCH_BY_SMILES = "search_by_smiles"
    SEARCH_BY_INCHI = "search_by_inchi"
    SEARCH_BY_CAS_NUMBER = "search_by_cas_number"
    GET_COMPOUND_SYNONYMS = "get_compound_synonyms"

    # Structure analysis & similarity
    SEARCH_SIMILAR_COMPOUNDS = "search_similar_compounds"
    GET_3D_CONFORMERS = "get_3d_conformers"
    ANALYZE_STEREOCHEMISTRY = "analyze_stereochemistry"

    # Properties & descriptors
    GET_COMPOUND_PROPERTIES = "get_compound_properties"

    # Bioassay & activity
    GET_ASSAY_INFO = "get_assay_info"
    GET_COMPOUND_BIOACTIVITIES = "get_compound_bioactivities"

    # Safety
    GET_SAFETY_DATA = "get_safety_data"

    # Cross-references & batch
    BATCH_COMPOUND_LOOKUP = "batch_compound_lookup"
    GET_EXTERNAL_REFERENCES = "get_external_references"
    GET_PATENT_IDS = "get_patent_ids"


# =============================================================================
# Argument Enums
# =============================================================================


class SearchType(str, Enum):
    """Input namespaces for compound searches."""

    NAME = "name"
    SMILES = "smiles"
    INCHI = "inchi"
    SDF = "sdf"
    CID = "cid"
    FORMULA = "formula"


class OutputFormat(str, Enum):
    """Record formats for compound retrieval."""

    JSON = "json"
    SDF = "sdf"
    XML = "xml"
    ASNT = "asnt"  # ASN.1 text
    ASNB = "asnb"  # ASN.1 binary


class ConformerType(str, Enum):
    """Conformer dimensionality."""

    THREE_D = "3d"
    TWO_D = "2d"


class DescriptorType(str, Enum):
    """Descriptor groups (advertised only, not computed locally)."""

    ALL = "all"
    BASIC = "basic"
    TOPOLOGICAL = "topological"
    THREE_D = "3d"


class ActivityOutcome(str, Enum):
    """Bioassay activity outcome filter (advertised only)."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    INCONCLUSIVE = "inconclusive"
    ALL = "all"


class BatchOperation(str, Enum):
    """Per-compound operation for batch lookups."""

    PROPERTY = "property"
    SYNONYMS = "synonyms"
    CLASSIFICATION = "classification"
    DESCRIPTION = "description"
