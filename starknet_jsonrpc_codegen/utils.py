"""
Naming and documentation transforms for the Starknet JSON-RPC code generator.
"""

import keyword
import re

# Fixed renames applied after PascalCase conversion. No value may also be a key,
# otherwise renaming would not be idempotent.
TYPE_RENAMES = {
    "CommonTransactionProperties": "TransactionMeta",
    "CommonReceiptProperties": "TransactionReceiptMeta",
    "InvokeTransactionReceiptProperties": "InvokeTransactionReceiptData",
    "PendingCommonReceiptProperties": "PendingTransactionReceiptMeta",
    "SierraContractClass": "FlattenedSierraClass",
    "LegacyContractClass": "CompressedLegacyContractClass",
    "DeprecatedContractClass": "CompressedLegacyContractClass",
    "ContractAbiEntry": "LegacyContractAbiEntry",
    "FunctionAbiEntry": "LegacyFunctionAbiEntry",
    "EventAbiEntry": "LegacyEventAbiEntry",
    "StructAbiEntry": "LegacyStructAbiEntry",
    "FunctionAbiType": "LegacyFunctionAbiType",
    "EventAbiType": "LegacyEventAbiType",
    "StructAbiType": "LegacyStructAbiType",
    "StructMember": "LegacyStructMember",
    "TypedParameter": "LegacyTypedParameter",
    "DeprecatedEntryPointsByType": "LegacyEntryPointsByType",
    "DeprecatedCairoEntryPoint": "LegacyContractEntryPoint",
}

# Proper nouns and abbreviations restored after sentence casing, in order
DOC_REPLACEMENTS = [
    (re.compile(r"(?i)\bethereum\b"), "Ethereum"),
    (re.compile(r"(?i)\bstarknet\b"), "Starknet"),
    (re.compile(r"(?i)\bstarknet\.io\b"), "starknet.io"),
    (re.compile(r"\bl1\b"), "L1"),
    (re.compile(r"\bl2\b"), "L2"),
    (re.compile(r"\bunix\b"), "Unix"),
]

_ALL_UPPER_PATTERN = re.compile(r"^[A-Z]+$")
_CAMEL_BOUNDARY_PATTERN = re.compile(r"(?<!^)(?=[A-Z])")


def to_pascal_case(name: str) -> str:
    """Convert an UPPER_SNAKE or snake_case name to PascalCase.

    Names with no underscore that are not all-uppercase are taken to be
    PascalCase already: only their first letter is raised.

    Examples:
        "BLOCK_HEADER" -> "BlockHeader"
        "FELT" -> "Felt"
        "BlockHeader" -> "BlockHeader"
    """
    if not name:
        return ""

    if "_" not in name and not _ALL_UPPER_PATTERN.match(name):
        return name[0].upper() + name[1:]

    return "".join(part[0].upper() + part[1:].lower() for part in name.split("_") if part)


def to_type_name(name: str) -> str:
    """Convert a schema name to the generated type name.

    Applies PascalCase, expands the `Txn` abbreviation, then the fixed
    rename table. Applying it to its own output is a no-op.
    """
    name = to_pascal_case(name).replace("Txn", "Transaction")
    return TYPE_RENAMES.get(name, name)


def camel_to_snake_case(name: str) -> str:
    """Convert camelCase or PascalCase to snake_case."""
    return _CAMEL_BOUNDARY_PATTERN.sub("_", name).lower()


def to_field_name(name: str) -> str:
    """Convert a wire property name to a Python attribute name.

    All-uppercase names and names that already contain an underscore are
    lower-cased as-is so that acronyms stay one token. Keywords get a
    trailing underscore.
    """
    if _ALL_UPPER_PATTERN.match(name) or "_" in name:
        field_name = name.lower()
    else:
        field_name = camel_to_snake_case(name)

    if keyword.iskeyword(field_name):
        field_name += "_"

    return field_name


def to_constant_name(type_name: str) -> str:
    """Convert a PascalCase name to an UPPER_SNAKE enum member name."""
    member = re.sub(r"\W", "_", camel_to_snake_case(type_name)).upper()
    if member[:1].isdigit():
        member = "N" + member
    return member


def to_sentence_case(text: str) -> str:
    """Lower-case text except the first character and each sentence start.

    A sentence starts two characters after a period when the character in
    between is a space.
    """
    result = []
    last_period = None
    last_char = None

    for index, character in enumerate(text):
        if character == ".":
            last_period = index

        if last_period is None:
            uppercase = index == 0
        else:
            uppercase = index == last_period + 2 and last_char == " "

        result.append(character.upper() if uppercase else character.lower())
        last_char = character

    return "".join(result)


def to_doc(text: str, force_period: bool) -> str:
    """Normalize documentation text.

    Args:
        text: Raw description, title or summary
        force_period: Whether a trailing period is enforced (type docs) or not (field docs)
    """
    doc = to_sentence_case(text)

    for pattern, target in DOC_REPLACEMENTS:
        doc = pattern.sub(target, doc)

    if force_period and not doc.endswith("."):
        doc += "."

    return doc


def method_request_name(method_name: str) -> str:
    """Name of the request type generated for a JSON-RPC method.

    Example:
        "starknet_getBlockWithTxHashes" -> "GetBlockWithTxHashesRequest"
    """
    trimmed = method_name.removeprefix("starknet_")
    return f"{to_type_name(camel_to_snake_case(trimmed))}Request"
