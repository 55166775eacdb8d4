"""
Generation profiles of the supported specification versions.
"""

from __future__ import annotations

from .config import (
    FixedField,
    FixedFieldsOptions,
    FlattenOption,
    GenerationProfile,
    RawSpecs,
    SharedFieldsOptions,
    SpecVersion,
    TypeWithFixedFields,
    TypeWithSharedFields,
)
from .errors import UnknownSpecVersionError

MAIN_SPEC_FILE = "starknet_api_openrpc.json"
WRITE_SPEC_FILE = "starknet_write_api.json"


def _raw_specs(version: SpecVersion) -> RawSpecs:
    return RawSpecs(main=f"{version.value}/{MAIN_SPEC_FILE}", write=f"{version.value}/{WRITE_SPEC_FILE}")


def _typed(name: str, txn_type: str, version: int | None = None) -> TypeWithFixedFields:
    fields = [FixedField("type", txn_type)]
    if version is not None:
        fields.append(FixedField("version", version))
    return TypeWithFixedFields(name=name, fields=tuple(fields))


_FLATTEN_V0_2 = (
    "FUNCTION_CALL",
    "EVENT",
    "TYPED_PARAMETER",
    "BLOCK_BODY_WITH_TXS",
    "BLOCK_BODY_WITH_TX_HASHES",
    "BLOCK_HEADER",
    "BROADCASTED_TXN_COMMON_PROPERTIES",
    "DEPLOY_ACCOUNT_TXN_PROPERTIES",
    "DEPLOY_TXN_PROPERTIES",
    "EVENT_CONTENT",
    "PENDING_COMMON_RECEIPT_PROPERTIES",
    "COMMON_TXN_PROPERTIES",
    "COMMON_RECEIPT_PROPERTIES",
)

# Transaction type and version are implied by the network but not stated by the
# schemas, so they cannot be derived.
_TRANSACTION_FIXED_FIELDS = (
    _typed("DeclareTransactionV1", "DECLARE", 1),
    _typed("DeclareTransactionV2", "DECLARE", 2),
    _typed("BroadcastedDeclareTransactionV1", "DECLARE", 1),
    _typed("BroadcastedDeclareTransactionV2", "DECLARE", 2),
    _typed("DeployAccountTransaction", "DEPLOY_ACCOUNT", 1),
    _typed("BroadcastedDeployAccountTransaction", "DEPLOY_ACCOUNT", 1),
    _typed("DeployTransaction", "DEPLOY"),
    _typed("InvokeTransactionV0", "INVOKE", 0),
    _typed("InvokeTransactionV1", "INVOKE", 1),
    _typed("BroadcastedInvokeTransactionV0", "INVOKE", 0),
    _typed("BroadcastedInvokeTransactionV1", "INVOKE", 1),
    _typed("L1HandlerTransaction", "L1_HANDLER"),
)

_RECEIPT_FIXED_FIELDS = (
    _typed("InvokeTransactionReceipt", "INVOKE"),
    _typed("DeclareTransactionReceipt", "DECLARE"),
    _typed("DeployAccountTransactionReceipt", "DEPLOY_ACCOUNT"),
    _typed("DeployTransactionReceipt", "DEPLOY"),
    _typed("L1HandlerTransactionReceipt", "L1_HANDLER"),
    _typed("PendingInvokeTransactionReceipt", "INVOKE"),
    _typed("PendingDeclareTransactionReceipt", "DECLARE"),
    _typed("PendingDeployAccountTransactionReceipt", "DEPLOY_ACCOUNT"),
    _typed("PendingDeployTransactionReceipt", "DEPLOY"),
    _typed("PendingL1HandlerTransactionReceipt", "L1_HANDLER"),
)

_SHARED_CONTRACT_CLASS = SharedFieldsOptions(
    shared_field_types=(
        TypeWithSharedFields(name="BroadcastedDeclareTransactionV1", fields=("contract_class",)),
        TypeWithSharedFields(name="BroadcastedDeclareTransactionV2", fields=("contract_class",)),
    )
)

PROFILES: dict[SpecVersion, GenerationProfile] = {
    SpecVersion.V0_1_0: GenerationProfile(
        version=SpecVersion.V0_1_0,
        raw_specs=_raw_specs(SpecVersion.V0_1_0),
        flatten_options=FlattenOption.only(["BLOCK_BODY_WITH_TXS", "BLOCK_BODY_WITH_TX_HASHES"]),
    ),
    SpecVersion.V0_2_1: GenerationProfile(
        version=SpecVersion.V0_2_1,
        raw_specs=_raw_specs(SpecVersion.V0_2_1),
        flatten_options=FlattenOption.only(_FLATTEN_V0_2),
        fixed_field_types=FixedFieldsOptions(
            fixed_field_types=(
                *_TRANSACTION_FIXED_FIELDS[:7],
                _typed("BroadcastedDeployTransaction", "DEPLOY"),
                *_TRANSACTION_FIXED_FIELDS[7:],
                *_RECEIPT_FIXED_FIELDS,
            )
        ),
        shared_field_types=_SHARED_CONTRACT_CLASS,
    ),
    SpecVersion.V0_3_0: GenerationProfile(
        version=SpecVersion.V0_3_0,
        raw_specs=_raw_specs(SpecVersion.V0_3_0),
        flatten_options=FlattenOption.only((*_FLATTEN_V0_2, "PENDING_STATE_UPDATE", "DECLARE_TXN_V1")),
        fixed_field_types=FixedFieldsOptions(fixed_field_types=(*_TRANSACTION_FIXED_FIELDS, *_RECEIPT_FIXED_FIELDS)),
        shared_field_types=_SHARED_CONTRACT_CLASS,
    ),
}


def get_profile(version: SpecVersion | str) -> GenerationProfile:
    """Look up the profile of a version, parsing version strings."""
    if not isinstance(version, SpecVersion):
        version = SpecVersion.parse(version)

    try:
        return PROFILES[version]
    except KeyError:
        raise UnknownSpecVersionError(f"no generation profile for spec version {version.value}") from None
