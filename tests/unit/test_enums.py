"""
Unit tests for core enumerations.
"""

import pytest

from pubchem_mcp.core.enums import (
    BatchOperation,
    ConformerType,
    OutputFormat,
    PubChemMethod,
    SearchType,
)


@pytest.mark.unit
class TestPubChemMethod:
    """Tests for the tool method enumeration."""

    def test_method_count(self):
        assert len(PubChemMethod) == 16

    def test_core_methods_present(self):
        values = {method.value for method in PubChemMethod}
        assert {
            "search_compounds",
            "get_compound_info",
            "search_by_smiles",
            "batch_compound_lookup",
            "get_patent_ids",
        } <= values

    def test_string_comparison(self):
        """Enum members compare equal to their wire values."""
        assert PubChemMethod.GET_ASSAY_INFO == "get_assay_info"
        assert PubChemMethod("get_safety_data") is PubChemMethod.GET_SAFETY_DATA

    def test_unknown_value_rejected(self):
        with pytest.raises(ValueError):
            PubChemMethod("fly_to_the_moon")


@pytest.mark.unit
class TestArgumentEnums:
    """Tests for argument enumerations."""

    def test_search_types(self):
        assert [t.value for t in SearchType] == ["name", "smiles", "inchi", "sdf", "cid", "formula"]

    def test_output_formats(self):
        assert [f.value for f in OutputFormat] == ["json", "sdf", "xml", "asnt", "asnb"]

    def test_conformer_types(self):
        assert ConformerType("3d") is ConformerType.THREE_D
        assert ConformerType("2d") is ConformerType.TWO_D

    def test_batch_operation_default_is_first(self):
        assert list(BatchOperation)[0] is BatchOperation.PROPERTY
