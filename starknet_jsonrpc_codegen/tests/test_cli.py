import ast
import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from starknet_jsonrpc_codegen import __version__
from starknet_jsonrpc_codegen.starknet_jsonrpc_codegen import starknet_jsonrpc_codegen

SPECS_DIR = Path(__file__).parent / "test_data" / "specs"


@pytest.fixture
def runner():
    return CliRunner()


def test_generate(runner):
    result = runner.invoke(starknet_jsonrpc_codegen, ["--spec", "0.3.0", "--specs-dir", str(SPECS_DIR)])

    assert result.exit_code == 0, result.output
    ast.parse(result.stdout)
    assert result.stdout.startswith("# AUTO-GENERATED CODE. DO NOT EDIT\n")
    assert "#     starknet_jsonrpc_codegen --spec 0.3.0 --specs-dir specs\n" in result.stdout
    assert f"#     starknet_jsonrpc_codegen {__version__} <Unable to determine Git commit hash>\n" in result.stdout
    assert "class GetStorageAtRequest(DataClassJsonMixin):" in result.stdout


def test_not_implemented_types_are_logged(runner):
    result = runner.invoke(starknet_jsonrpc_codegen, ["--spec", "0.3.0", "--specs-dir", str(SPECS_DIR)])

    assert result.exit_code == 0
    assert "Type not generated for BLOCK_ID" in result.stderr
    assert "Type not generated" not in result.stdout


def test_verbose_logs_pipeline_stages(runner):
    result = runner.invoke(starknet_jsonrpc_codegen, ["--spec", "0.3.0", "--specs-dir", str(SPECS_DIR), "-v"])

    assert result.exit_code == 0
    assert "Flatten-only schemas" in result.stderr
    assert "Generated" in result.stderr


def test_version_with_prefix(runner):
    result = runner.invoke(starknet_jsonrpc_codegen, ["--spec", "v0.3.0", "--specs-dir", str(SPECS_DIR)])
    assert result.exit_code == 0


def test_spec_from_environment(runner):
    result = runner.invoke(starknet_jsonrpc_codegen, ["--specs-dir", str(SPECS_DIR)], env={"SPEC": "0.3.0"})

    assert result.exit_code == 0
    assert "class StarknetError(str, Enum):" in result.stdout


def test_commit_hash(runner):
    result = runner.invoke(
        starknet_jsonrpc_codegen,
        ["--spec", "0.3.0", "--specs-dir", str(SPECS_DIR), "--commit", "0123abc"],
    )

    assert result.exit_code == 0
    assert f"#     starknet_jsonrpc_codegen {__version__} (0123abc)\n" in result.stdout
    assert "--commit" not in result.stdout


def test_commit_hash_from_environment(runner):
    result = runner.invoke(
        starknet_jsonrpc_codegen,
        ["--spec", "0.3.0", "--specs-dir", str(SPECS_DIR)],
        env={"CODEGEN_COMMIT_HASH": "fedcba9"},
    )

    assert result.exit_code == 0
    assert "(fedcba9)" in result.stdout


def test_config_file(runner, tmp_path):
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"ignore_types": ["BLOCK_STATUS"], "manual_types_module": "my_types"}))

    result = runner.invoke(
        starknet_jsonrpc_codegen,
        ["--spec", "0.3.0", "--specs-dir", str(SPECS_DIR), "--config", str(config)],
    )

    assert result.exit_code == 0, result.output
    assert "# - `BLOCK_STATUS`" in result.stdout
    assert "from my_types import BlockId, BlockStatus" in result.stdout
    assert "--config config.json" in result.stdout


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_invalid_config_file(runner, tmp_path, content):
    config = tmp_path / "config.json"
    config.write_text(content)

    result = runner.invoke(
        starknet_jsonrpc_codegen,
        ["--spec", "0.3.0", "--specs-dir", str(SPECS_DIR), "--config", str(config)],
    )

    assert result.exit_code == 1
    assert "Invalid config file" in result.stderr
    assert result.stdout == ""


def test_unknown_version(runner):
    result = runner.invoke(starknet_jsonrpc_codegen, ["--spec", "9.9.9", "--specs-dir", str(SPECS_DIR)])

    assert result.exit_code == 1
    assert "unknown spec version: 9.9.9" in result.stderr
    assert result.stdout == ""


def test_missing_documents(runner):
    # No 0.1.0 documents in the test data
    result = runner.invoke(starknet_jsonrpc_codegen, ["--spec", "0.1.0", "--specs-dir", str(SPECS_DIR)])

    assert result.exit_code == 1
    assert "Specification document not found" in result.stderr
    assert result.stdout == ""


@pytest.mark.parametrize("version", ["0.1.0", "0.2.1", "0.3.0"])
def test_bundled_documents(runner, version):
    result = runner.invoke(starknet_jsonrpc_codegen, ["--spec", version])

    assert result.exit_code == 0, result.output
    ast.parse(result.stdout)
    assert "class GetStorageAtRequest(DataClassJsonMixin):" in result.stdout
    assert "    block_id: BlockId\n" in result.stdout


def test_spec_is_required(runner):
    result = runner.invoke(starknet_jsonrpc_codegen, ["--specs-dir", str(SPECS_DIR)], env={"SPEC": None})
    assert result.exit_code == 2


if __name__ == "__main__":
    pytest.main([__file__])
