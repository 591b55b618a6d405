"""
PubChem Method Handlers.

Source: https://pubchem.ncbi.nlm.nih.gov/docs/pug-rest
Verified: 2026-10-19

One coroutine per ``pubchem`` tool method. Every handler receives an
already-validated request model and returns the payload to serialize:
a JSON-compatible object, or raw text for non-JSON record formats
(base64 for binary ASN.1).
Upstream failures surface as ``GatewayError`` and are converted to error
results by the dispatcher; only batch lookups catch them per element.

Three call shapes are used:
- single-shot passthrough (one GET/POST, body returned unchanged)
- resolve-then-fetch (query -> CIDs -> property summary of a CID prefix)
- bounded fan-out (one sequential call per CID, failures isolated)
"""

import base64
import re
from typing import Any, Awaitable, Callable, Optional

from pubchem_mcp.core.config import get_settings
from pubchem_mcp.core.enums import BatchOperation, OutputFormat, PubChemMethod
from pubchem_mcp.gateways.base import GatewayError, UpstreamNotFoundError
from pubchem_mcp.gateways.pubchem_gateway import (
    PubChemGateway,
    get_pubchem_gateway,
    quote_segment,
)
from pubchem_mcp.schemas.requests import (
    AssayInfoRequest,
    BatchLookupRequest,
    BioactivitiesRequest,
    CasSearchRequest,
    CompoundInfoRequest,
    CompoundPropertiesRequest,
    CompoundSynonymsRequest,
    ConformerRequest,
    ExternalReferencesRequest,
    InchiSearchRequest,
    MethodRequest,
    PatentIdsRequest,
    SafetyDataRequest,
    SearchCompoundsRequest,
    SimilaritySearchRequest,
    SmilesSearchRequest,
    StereochemistryRequest,
)
from pubchem_mcp.utils.logging import get_logger

logger = get_logger(__name__)

# =============================================================================
# Constants
# =============================================================================

DEFAULT_MAX_RECORDS = 100
DEFAULT_SIMILARITY_THRESHOLD = 90

# Resolve-then-fetch only summarizes the first CIDs of a hit list.
RESOLVE_DETAIL_LIMIT = 10

# Up to BATCH_MAX_ACCEPTED CIDs validate, but only this many are looked up.
BATCH_MAX_PROCESSED = 10

PATENT_URL_LIMIT = 20

SUMMARY_PROPERTIES = ("MolecularFormula", "MolecularWeight", "CanonicalSMILES", "IUPACName")
BATCH_PROPERTIES = ("MolecularWeight", "CanonicalSMILES", "IUPACName")
CONFORMER_PROPERTIES = ("Volume3D", "ConformerCount3D")
STEREO_PROPERTIES = (
    "AtomStereoCount",
    "DefinedAtomStereoCount",
    "BondStereoCount",
    "DefinedBondStereoCount",
    "IsomericSMILES",
)
DEFAULT_COMPOUND_PROPERTIES = (
    "MolecularWeight",
    "XLogP",
    "TPSA",
    "HBondDonorCount",
    "HBondAcceptorCount",
    "RotatableBondCount",
    "Complexity",
    "HeavyAtomCount",
    "Charge",
)
EXTERNAL_REFERENCE_TYPES = ("RegistryID", "RN", "PubMedID", "DBURL")

INCHIKEY_PATTERN = re.compile(r"^[A-Z]{14}-[A-Z]{10}-[A-Z]$")

Handler = Callable[[Any], Awaitable[Any]]


def format_identifier(value: Any) -> str:
    """Render a CID/AID for a URL path; integral floats lose their ``.0``."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return quote_segment(value)


def format_number(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def split_property_names(names: list[str]) -> tuple[str, ...]:
    """
    Flatten property names into single path-safe tokens.

    Elements may themselves be comma-separated (``"MolecularWeight,XLogP"``);
    blanks are dropped.
    """
    return tuple(
        quote_segment(part.strip())
        for name in names
        for part in name.split(",")
        if part.strip()
    )


def extract_cids(payload: Any) -> list[Any]:
    """Pull ``IdentifierList.CID`` out of a PUG REST response, tolerating gaps."""
    if not isinstance(payload, dict):
        return []
    cids = (payload.get("IdentifierList") or {}).get("CID") or []
    return list(cids) if isinstance(cids, list) else []


def extract_patent_ids(payload: Any) -> list[str]:
    """Pull ``InformationList.Information[0].PatentID`` out of an xrefs response."""
    if not isinstance(payload, dict):
        return []
    information = (payload.get("InformationList") or {}).get("Information") or []
    if not information or not isinstance(information[0], dict):
        return []
    return list(information[0].get("PatentID") or [])


class PubChemService:
    """
    Executes validated ``pubchem`` tool requests against PUG REST.

    The gateway is injected so tests can stub the upstream; by default the
    process-wide gateway is used.
    """

    def __init__(
        self,
        gateway: Optional[PubChemGateway] = None,
        patent_url_template: Optional[str] = None,
    ):
        self.gateway = gateway or get_pubchem_gateway()
        self.patent_url_template = patent_url_template or get_settings().PATENT_URL_TEMPLATE
        self._handlers: dict[PubChemMethod, Handler] = {
            PubChemMethod.SEARCH_COMPOUNDS: self.search_compounds,
            PubChemMethod.GET_COMPOUND_INFO: self.get_compound_info,
            PubChemMethod.SEARCH_BY_SMILES: self.search_by_smiles,
            PubChemMethod.SEARCH_BY_INCHI: self.search_by_inchi,
            PubChemMethod.SEARCH_BY_CAS_NUMBER: self.search_by_cas_number,
            PubChemMethod.GET_COMPOUND_SYNONYMS: self.get_compound_synonyms,
            PubChemMethod.SEARCH_SIMILAR_COMPOUNDS: self.search_similar_compounds,
            PubChemMethod.GET_3D_CONFORMERS: self.get_3d_conformers,
            PubChemMethod.ANALYZE_STEREOCHEMISTRY: self.analyze_stereochemistry,
            PubChemMethod.GET_COMPOUND_PROPERTIES: self.get_compound_properties,
            PubChemMethod.GET_ASSAY_INFO: self.get_assay_info,
            PubChemMethod.GET_COMPOUND_BIOACTIVITIES: self.get_compound_bioactivities,
            PubChemMethod.GET_SAFETY_DATA: self.get_safety_data,
            PubChemMethod.BATCH_COMPOUND_LOOKUP: self.batch_compound_lookup,
            PubChemMethod.GET_EXTERNAL_REFERENCES: self.get_external_references,
            PubChemMethod.GET_PATENT_IDS: self.get_patent_ids,
        }

    async def execute(self, request: MethodRequest) -> Any:
        """Run the handler registered for ``request.method``."""
        handler = self._handlers[PubChemMethod(request.method)]
        return await handler(request)

    # =========================================================================
    # Shared steps
    # =========================================================================

    async def _resolve_cids(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
        form: Optional[dict[str, Any]] = None,
    ) -> list[Any]:
        """
        Translate a query into CIDs.

        PUG REST answers 404 when nothing matches; that is reported as an
        empty list so callers can return a "not found" payload.
        """
        try:
            if form is not None:
                payload = await self.gateway.post_form(path, form)
            else:
                payload = await self.gateway.get_json(path, params=params)
        except UpstreamNotFoundError:
            logger.info(f"No CIDs matched {path}")
            return []
        return extract_cids(payload)

    async def _fetch_summary(self, cids: list[Any]) -> Any:
        cid_list = ",".join(format_identifier(cid) for cid in cids)
        return await self.gateway.get_json(
            f"/compound/cid/{cid_list}/property/{','.join(SUMMARY_PROPERTIES)}/JSON"
        )

    async def _get_cid_properties(self, cid: Any, properties: tuple[str, ...]) -> Any:
        return await self.gateway.get_json(
            f"/compound/cid/{format_identifier(cid)}/property/{','.join(properties)}/JSON"
        )

    # =========================================================================
    # Chemical search & retrieval
    # =========================================================================

    async def search_compounds(self, request: SearchCompoundsRequest) -> dict[str, Any]:
        search_type = request.search_type.value
        max_records = format_number(request.max_records or DEFAULT_MAX_RECORDS)

        cids = await self._resolve_cids(
            f"/compound/{search_type}/{quote_segment(request.query)}/cids/JSON",
            params={"MaxRecords": max_records},
        )
        if not cids:
            return {"message": "No compounds found", "query": request.query}

        details = await self._fetch_summary(cids[:RESOLVE_DETAIL_LIMIT])
        return {
            "query": request.query,
            "search_type": search_type,
            "total_found": len(cids),
            "details": details,
        }

    async def get_compound_info(self, request: CompoundInfoRequest) -> Any:
        cid = format_identifier(request.cid)
        if request.format == OutputFormat.JSON:
            return await self.gateway.get_json(f"/compound/cid/{cid}/JSON")

        path = f"/compound/cid/{cid}/{request.format.value.upper()}"
        if request.format == OutputFormat.ASNB:
            # Binary ASN.1 does not survive text decoding
            body = await self.gateway.get_bytes(path)
            return base64.b64encode(body).decode("ascii")
        return await self.gateway.get_text(path)

    async def search_by_smiles(self, request: SmilesSearchRequest) -> dict[str, Any]:
        cids = await self._resolve_cids(
            f"/compound/smiles/{quote_segment(request.smiles)}/cids/JSON"
        )
        if not cids:
            return {"message": "No exact match found", "query_smiles": request.smiles}

        cid = cids[0]
        details = await self._fetch_summary([cid])
        return {"query_smiles": request.smiles, "found_cid": cid, "details": details}

    async def search_by_inchi(self, request: InchiSearchRequest) -> dict[str, Any]:
        """InChIKeys go in the URL; full InChI strings must be POSTed."""
        if INCHIKEY_PATTERN.match(request.inchi):
            cids = await self._resolve_cids(
                f"/compound/inchikey/{quote_segment(request.inchi)}/cids/JSON"
            )
        else:
            cids = await self._resolve_cids("/compound/inchi/cids/JSON", form={"inchi": request.inchi})

        if not cids:
            return {"message": "No compounds found", "query_inchi": request.inchi}

        details = await self._fetch_summary(cids[:RESOLVE_DETAIL_LIMIT])
        return {"query_inchi": request.inchi, "total_found": len(cids), "details": details}

    async def search_by_cas_number(self, request: CasSearchRequest) -> dict[str, Any]:
        # PubChem indexes CAS numbers as synonyms
        cids = await self._resolve_cids(
            f"/compound/name/{quote_segment(request.cas_number)}/cids/JSON"
        )
        if not cids:
            return {"message": "No compounds found", "cas_number": request.cas_number}

        details = await self._fetch_summary(cids[:RESOLVE_DETAIL_LIMIT])
        return {"cas_number": request.cas_number, "total_found": len(cids), "details": details}

    async def get_compound_synonyms(self, request: CompoundSynonymsRequest) -> Any:
        return await self.gateway.get_json(
            f"/compound/cid/{format_identifier(request.cid)}/synonyms/JSON"
        )

    # =========================================================================
    # Structure analysis & similarity
    # =========================================================================

    async def search_similar_compounds(self, request: SimilaritySearchRequest) -> Any:
        threshold = request.threshold if request.threshold is not None else DEFAULT_SIMILARITY_THRESHOLD
        max_records = request.max_records or DEFAULT_MAX_RECORDS
        return await self.gateway.post_json(
            "/compound/similarity/smiles/JSON",
            {
                "smiles": request.smiles,
                "Threshold": format_number(threshold),
                "MaxRecords": format_number(max_records),
            },
        )

    async def get_3d_conformers(self, request: ConformerRequest) -> dict[str, Any]:
        properties = await self._get_cid_properties(request.cid, CONFORMER_PROPERTIES)
        return {
            "cid": request.cid,
            "conformer_type": request.conformer_type.value,
            "properties": properties,
        }

    async def analyze_stereochemistry(self, request: StereochemistryRequest) -> dict[str, Any]:
        stereochemistry = await self._get_cid_properties(request.cid, STEREO_PROPERTIES)
        return {"cid": request.cid, "stereochemistry": stereochemistry}

    # =========================================================================
    # Properties, bioassays, safety
    # =========================================================================

    async def get_compound_properties(self, request: CompoundPropertiesRequest) -> Any:
        properties = split_property_names(request.properties or []) or DEFAULT_COMPOUND_PROPERTIES
        return await self._get_cid_properties(request.cid, properties)

    async def get_assay_info(self, request: AssayInfoRequest) -> Any:
        return await self.gateway.get_json(f"/assay/aid/{format_identifier(request.aid)}/JSON")

    async def get_compound_bioactivities(self, request: BioactivitiesRequest) -> Any:
        return await self.gateway.get_json(
            f"/compound/cid/{format_identifier(request.cid)}/assaysummary/JSON"
        )

    async def get_safety_data(self, request: SafetyDataRequest) -> Any:
        return await self.gateway.get_json(
            f"/compound/cid/{format_identifier(request.cid)}/classification/JSON"
        )

    # =========================================================================
    # Cross-references & batch
    # =========================================================================

    def _batch_path(self, cid: Any, operation: BatchOperation) -> str:
        cid_segment = format_identifier(cid)
        if operation == BatchOperation.PROPERTY:
            return f"/compound/cid/{cid_segment}/property/{','.join(BATCH_PROPERTIES)}/JSON"
        return f"/compound/cid/{cid_segment}/{operation.value}/JSON"

    async def batch_compound_lookup(self, request: BatchLookupRequest) -> dict[str, Any]:
        """
        Look up each CID in turn.

        Only the first ``BATCH_MAX_PROCESSED`` CIDs are sent upstream even
        though up to 200 are accepted. A failing CID is recorded and the
        loop continues.
        """
        if len(request.cids) > BATCH_MAX_PROCESSED:
            logger.warning(
                f"Batch lookup received {len(request.cids)} CIDs; "
                f"only the first {BATCH_MAX_PROCESSED} are processed"
            )

        results: list[dict[str, Any]] = []
        for cid in request.cids[:BATCH_MAX_PROCESSED]:
            try:
                data = await self.gateway.get_json(self._batch_path(cid, request.operation))
                results.append({"cid": cid, "data": data, "success": True})
            except GatewayError as e:
                logger.warning(f"Batch lookup failed for CID {cid}: {e}")
                results.append({"cid": cid, "error": str(e), "success": False})

        return {"batch_results": results}

    async def get_external_references(self, request: ExternalReferencesRequest) -> Any:
        return await self.gateway.get_json(
            f"/compound/cid/{format_identifier(request.cid)}/xrefs/{','.join(EXTERNAL_REFERENCE_TYPES)}/JSON"
        )

    async def get_patent_ids(self, request: PatentIdsRequest) -> dict[str, Any]:
        """Patent IDs for a CID; a SMILES query is first resolved to its CID."""
        cid = request.cid
        if cid is None:
            cids = await self._resolve_cids(
                f"/compound/smiles/{quote_segment(request.smiles)}/cids/JSON"
            )
            if not cids:
                return {
                    "message": "No compound found for the given SMILES",
                    "smiles": request.smiles,
                }
            cid = cids[0]

        payload = await self.gateway.get_json(
            f"/compound/cid/{format_identifier(cid)}/xrefs/PatentID/JSON"
        )
        patent_ids = extract_patent_ids(payload)

        return {
            "cid": cid,
            "smiles": request.smiles,
            "patent_count": len(patent_ids),
            "patent_ids": patent_ids,
            "patent_urls": [
                self.patent_url_template.format(patent_id=patent_id)
                for patent_id in patent_ids[:PATENT_URL_LIMIT]
            ],
        }
