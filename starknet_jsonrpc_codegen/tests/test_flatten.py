import json
from pathlib import Path

import pytest

from starknet_jsonrpc_codegen.pipeline.analyzer import FLATTEN_VETO, get_flatten_only_schemas
from starknet_jsonrpc_codegen.pipeline.config import FlattenOption
from starknet_jsonrpc_codegen.pipeline.profiles import get_profile
from starknet_jsonrpc_codegen.pipeline.schema_ast import SpecificationParser, load_specification, merge_specifications

TEST_DATA_DIR = Path(__file__).parent / "test_data"

with open(TEST_DATA_DIR / "flatten_tests.json") as f:
    FLATTEN_CASES = json.load(f)


@pytest.mark.parametrize("case", FLATTEN_CASES, ids=[case["name"] for case in FLATTEN_CASES])
def test_flatten_only_schemas(case):
    spec = SpecificationParser().parse({"components": {"schemas": case["schemas"]}})
    if case["flatten_types"] is None:
        option = FlattenOption.all()
    else:
        option = FlattenOption.only(case["flatten_types"])

    assert get_flatten_only_schemas(spec, option) == frozenset(case["expected"])


def test_veto_list():
    assert FLATTEN_VETO == ("FUNCTION_CALL", "PENDING_STATE_UPDATE")


def test_flatten_only_schemas_of_fixture():
    specs_dir = TEST_DATA_DIR / "specs" / "0.3.0"
    spec = merge_specifications(
        load_specification(specs_dir / "starknet_api_openrpc.json"),
        load_specification(specs_dir / "starknet_write_api.json"),
    )

    result = get_flatten_only_schemas(spec, get_profile("0.3.0").flatten_options)

    assert result == {
        "BLOCK_HEADER",
        "BLOCK_BODY_WITH_TX_HASHES",
        "BROADCASTED_TXN_COMMON_PROPERTIES",
        "COMMON_TXN_PROPERTIES",
    }


if __name__ == "__main__":
    pytest.main([__file__])
