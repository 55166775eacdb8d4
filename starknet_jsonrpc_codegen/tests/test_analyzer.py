import logging
from pathlib import Path
from unittest import TestCase

import pytest

from starknet_jsonrpc_codegen.pipeline import CodeGeneratorConfig, get_profile
from starknet_jsonrpc_codegen.pipeline.analyzer import EnumKind, SchemaAnalyzer, StructKind, UnitKind
from starknet_jsonrpc_codegen.pipeline.config import FixedField
from starknet_jsonrpc_codegen.pipeline.errors import UnsupportedSchemaError
from starknet_jsonrpc_codegen.pipeline.schema_ast import (
    SpecificationParser,
    load_specification,
    merge_specifications,
)

TEST_DATA_DIR = Path(__file__).parent / "test_data"
SPECS_DIR = TEST_DATA_DIR / "specs" / "0.3.0"


def load_fixture():
    return merge_specifications(
        load_specification(SPECS_DIR / "starknet_api_openrpc.json"),
        load_specification(SPECS_DIR / "starknet_write_api.json"),
    )


class TestSchemaAnalyzer(TestCase):
    def setUp(self):
        self.ir = SchemaAnalyzer(get_profile("0.3.0")).analyze(load_fixture())
        self.types = {type_def.name: type_def for type_def in self.ir.types}

    def fields(self, type_name):
        return {field.name: field for field in self.types[type_name].kind.fields}

    def test_model_types(self):
        self.assertEqual(
            [type_def.name for type_def in self.ir.model_types],
            [
                "BlockStatus",
                "BlockTag",
                "BlockWithTxHashes",
                "BroadcastedDeclareTransactionV1",
                "ContractClass",
                "InvokeTransactionV1",
                "PendingBlockMeta",
                "PendingBlockWithTxHashes",
                "StarknetError",
            ],
        )

    def test_request_types(self):
        self.assertEqual(
            [type_def.name for type_def in self.ir.request_types],
            [
                "AddDeclareTransactionRequest",
                "BlockNumberRequest",
                "GetBlockWithTxHashesRequest",
                "GetClassHashAtRequest",
                "GetEventsRequest",
                "GetStorageAtRequest",
            ],
        )

    def test_not_implemented(self):
        self.assertEqual(self.ir.not_implemented, ["BLOCK_ID"])
        self.assertEqual(self.ir.ignored, [])

    def test_enum(self):
        kind = self.types["BlockStatus"].kind
        self.assertIsInstance(kind, EnumKind)
        self.assertFalse(kind.is_error)
        self.assertEqual(
            [(variant.name, variant.wire_name) for variant in kind.variants],
            [
                ("Pending", "PENDING"),
                ("AcceptedOnL2", "ACCEPTED_ON_L2"),
                ("AcceptedOnL1", "ACCEPTED_ON_L1"),
                ("Rejected", "REJECTED"),
            ],
        )
        self.assertEqual(self.types["BlockStatus"].title, "Block status.")
        self.assertEqual(self.types["BlockStatus"].description, "The status of the block.")

    def test_allof_fields_are_merged_in_order(self):
        self.assertEqual(
            list(self.fields("BlockWithTxHashes")),
            [
                "status",
                "block_hash",
                "parent_hash",
                "block_number",
                "timestamp",
                "sequencer_address",
                "transactions",
            ],
        )

        sequencer = self.fields("BlockWithTxHashes")["sequencer_address"]
        self.assertEqual(sequencer.description, "The Starknet identity of the sequencer submitting this block")
        self.assertEqual(sequencer.codec.expr, "UfeHex")

        transactions = self.fields("BlockWithTxHashes")["transactions"]
        self.assertEqual(transactions.type_name, "list[FieldElement]")
        self.assertEqual(transactions.codec.expr, "SeqOf(UfeHex)")

    def test_non_selected_fragment_becomes_flatten_field(self):
        fields = self.fields("PendingBlockWithTxHashes")
        self.assertEqual(list(fields), ["transactions", "pending_block_meta"])

        meta = fields["pending_block_meta"]
        self.assertTrue(meta.flatten)
        self.assertEqual(meta.type_name, "PendingBlockMeta")
        self.assertFalse(meta.optional)

    def test_optional_fields(self):
        fields = self.fields("ContractClass")
        self.assertFalse(fields["sierra_program"].optional)

        program = fields["program"]
        self.assertTrue(program.optional)
        self.assertEqual(program.type_name, "bytes | None")
        self.assertEqual(program.codec.expr, "OptionOf(Base64)")
        self.assertEqual(fields["abi"].type_name, "str | None")

    def test_fixed_fields(self):
        fields = self.fields("InvokeTransactionV1")
        self.assertEqual(
            list(fields),
            [
                "transaction_hash",
                "max_fee",
                "version",
                "signature",
                "nonce",
                "type",
                "sender_address",
                "calldata",
            ],
        )
        self.assertEqual(fields["type"].fixed, FixedField("type", "INVOKE"))
        self.assertEqual(fields["version"].fixed, FixedField("version", 1))
        self.assertIsNone(fields["nonce"].fixed)
        self.assertTrue(self.types["InvokeTransactionV1"].needs_custom_codec())

    def test_shared_fields(self):
        fields = self.fields("BroadcastedDeclareTransactionV1")
        self.assertTrue(fields["contract_class"].shared)
        self.assertEqual(fields["contract_class"].type_name, "Shared[ContractClass]")
        self.assertEqual(fields["contract_class"].codec.expr, "SharedOf(Nested(lambda: ContractClass))")
        self.assertFalse(fields["sender_address"].shared)
        self.assertEqual(fields["version"].fixed, FixedField("version", 1))
        self.assertEqual(fields["type"].fixed, FixedField("type", "DECLARE"))

    def test_plain_struct_has_no_custom_codec(self):
        self.assertFalse(self.types["ContractClass"].needs_custom_codec())
        self.assertFalse(self.types["BlockWithTxHashes"].needs_custom_codec())

    def test_flatten_field_needs_custom_codec(self):
        self.assertTrue(self.types["PendingBlockWithTxHashes"].needs_custom_codec())
        meta = self.fields("PendingBlockWithTxHashes")["pending_block_meta"]
        self.assertEqual(meta.nested.ref, "PendingBlockMeta")

    def test_error_enum(self):
        error_type = self.types["StarknetError"]
        self.assertEqual(error_type.title, "JSON-RPC error codes")
        self.assertTrue(error_type.kind.is_error)
        self.assertEqual(
            [(variant.name, variant.error_code, variant.error_text) for variant in error_type.kind.variants],
            [
                ("ContractNotFound", 20, "Contract not found"),
                ("BlockNotFound", 24, "Block not found"),
                ("InvalidTransactionIndex", 27, "Invalid transaction index in a block"),
                ("ClassHashNotFound", 28, "Class hash not found"),
            ],
        )

    def test_request_with_params(self):
        request = self.types["GetStorageAtRequest"]
        self.assertEqual(request.title, "Request for method starknet_getStorageAt")
        self.assertIsInstance(request.kind, StructKind)
        self.assertTrue(request.kind.array_encoded)
        self.assertTrue(request.kind.has_ref_view)

        fields = self.fields("GetStorageAtRequest")
        self.assertEqual(list(fields), ["contract_address", "key", "block_number"])
        self.assertEqual(fields["contract_address"].description, "The address of the contract to read from")
        self.assertEqual(fields["key"].type_name, "FieldElement")
        self.assertEqual(fields["block_number"].type_name, "int")

    def test_request_optional_param(self):
        fields = self.fields("GetEventsRequest")
        self.assertFalse(fields["from_block"].optional)
        self.assertIsNone(fields["from_block"].description)
        self.assertTrue(fields["continuation_token"].optional)
        self.assertEqual(fields["continuation_token"].type_name, "str | None")

    def test_request_without_params(self):
        kind = self.types["BlockNumberRequest"].kind
        self.assertIsInstance(kind, UnitKind)
        self.assertTrue(kind.array_encoded)
        self.assertTrue(self.types["BlockNumberRequest"].needs_custom_codec())

    def test_write_request_resolves_cross_document_reference(self):
        fields = self.fields("AddDeclareTransactionRequest")
        self.assertEqual(fields["declare_transaction"].type_name, "BroadcastedDeclareTransactionV1")
        self.assertEqual(fields["declare_transaction"].nested.expr, "Nested(lambda: BroadcastedDeclareTransactionV1)")


def test_ignore_types_from_config():
    profile = get_profile("0.3.0").with_config(CodeGeneratorConfig(ignore_types=["BLOCK_STATUS"]))
    ir = SchemaAnalyzer(profile).analyze(load_fixture())

    assert "BlockStatus" not in [type_def.name for type_def in ir.model_types]
    assert ir.ignored == ["BLOCK_STATUS"]


def test_empty_flatten_list_keeps_fragments_as_fields():
    profile = get_profile("0.3.0").with_config(CodeGeneratorConfig(flatten_types=[]))
    ir = SchemaAnalyzer(profile).analyze(load_fixture())
    types = {type_def.name: type_def for type_def in ir.model_types}

    assert "BlockHeader" in types
    fields = types["BlockWithTxHashes"].kind.fields
    assert [field.name for field in fields] == ["status", "block_header", "block_body_with_tx_hashes"]
    assert [field.flatten for field in fields] == [False, True, True]


def test_request_params_are_kept_as_written():
    spec = SpecificationParser().parse(
        {
            "methods": [
                {
                    "name": "starknet_call",
                    "params": [
                        {
                            "name": "blockId",
                            "description": "the block to run the call in",
                            "required": True,
                            "schema": {"type": "integer"},
                        }
                    ],
                }
            ],
            "components": {"schemas": {}, "errors": {}},
        }
    )

    ir = SchemaAnalyzer(get_profile("0.3.0")).analyze(spec)
    [param] = ir.request_types[0].kind.fields

    assert param.name == "blockId"
    assert param.rename is None
    assert param.description == "the block to run the call in"


def test_error_reference_is_rejected():
    spec = SpecificationParser().parse(
        {
            "components": {
                "errors": {
                    "CONTRACT_NOT_FOUND": {"code": 20, "message": "Contract not found"},
                    "ALIAS": {"$ref": "#/components/errors/CONTRACT_NOT_FOUND"},
                }
            }
        }
    )

    with pytest.raises(UnsupportedSchemaError):
        SchemaAnalyzer(get_profile("0.3.0")).analyze(spec)


def test_unsupported_schema_degrades_to_not_implemented(caplog):
    spec = load_specification(TEST_DATA_DIR / "degradation_spec.json")

    with caplog.at_level(logging.WARNING):
        ir = SchemaAnalyzer(get_profile("0.3.0")).analyze(spec)

    assert ir.not_implemented == ["TXN"]
    assert [type_def.name for type_def in ir.model_types] == [
        "DeployTransaction",
        "InvokeTransaction",
        "StarknetError",
        "TransactionStatus",
    ]
    assert "Type not generated for TXN" in caplog.text


if __name__ == "__main__":
    pytest.main([__file__])
