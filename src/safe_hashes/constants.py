# keccak256("EIP712Domain(uint256 chainId,address verifyingContract)")
DOMAIN_SEPARATOR_TYPEHASH = (
    "0x47e79534a245952e8b16893a336b85a3d9ea9fa8c573f3d803afb92a79469218"
)
# keccak256("EIP712Domain(address verifyingContract)")
DOMAIN_SEPARATOR_TYPEHASH_OLD = (
    "0x035aff83d86937d35b32e04f0ddc6ff469290eef2f1b692d8a815c89404d4749"
)
# keccak256("SafeTx(address to,uint256 value,bytes data,uint8 operation,uint256 safeTxGas,uint256 baseGas,uint256 gasPrice,address gasToken,address refundReceiver,uint256 nonce)")
SAFE_TX_TYPEHASH = "0xbb8310d486368db6bd6f849402fdd73ad53d316b5a4b2644ad6efe0f941286d8"
# Same layout with `dataGas` in place of `baseGas` (Safe < 1.0.0).
SAFE_TX_TYPEHASH_OLD = (
    "0x14d461bc7412367e924637b363c7bf29b8f47e2f84869f4426e5633d8af47b20"
)
# keccak256("SafeMessage(bytes message)")
SAFE_MSG_TYPEHASH = "0x60b3cbf8b4a223d68d641b3b6ddf9a298e7f33710cf3d3a9d1146b5a6150fbca"

# bytes4(keccak256("approveHash(bytes32)"))
APPROVE_HASH_SELECTOR = "0xd4d9bdcd"

MIN_SUPPORTED_VERSION = "0.1.0"
UNKNOWN_VERSION = "0.0.0"

# Contracts the Safe Transaction Service trusts as DELEGATECALL targets.
MULTI_SEND_CALL_ONLY_ADDRESSES = (
    "0x40A2aCCbd92BCA938b02010E17A5b8929b49130D",  # v1.3.0 (canonical)
    "0xA1dabEF33b3B82c7814B6D82A79e50F4AC44102B",  # v1.3.0 (eip155)
    "0xf220D3b4DFb23C4ade8C88E526C1353AbAcbC38F",  # v1.3.0 (zksync)
    "0x9641d764fc13c8B624c04430C7356C1C7C8102e2",  # v1.4.1 (canonical)
    "0x0408EF011960d02349d50286D20531229BCef773",  # v1.4.1 (zksync)
    "0xA83c336B20401Af773B6219BA5027174338D1836",  # v1.5.0 (canonical)
)
SAFE_MIGRATION_ADDRESSES = (
    "0x526643F69b81B008F46d95CD5ced5eC0edFFDaC6",  # v1.4.1 (canonical)
    "0x817756C6c555A94BCEE39eB5a102AbC1678b09A7",  # v1.4.1 (zksync)
    "0x6439e7ABD8Bb915A5263094784C5CF561c4172AC",  # v1.5.0 (canonical)
)
SIGN_MESSAGE_LIB_ADDRESSES = (
    "0xA65387F16B013cf2Af4605Ad8aA5ec25a2cbA3a2",  # v1.3.0 (canonical)
    "0x98FFBBF51bb33A056B08ddf711f289936AafF717",  # v1.3.0 (eip155)
    "0x357147caf9C0cCa67DfA0CF5369318d8193c8407",  # v1.3.0 (zksync)
    "0xd53cd0aB83D845Ac265BE939c57F53AD838012c9",  # v1.4.1 (canonical)
    "0xAca1ec0a1A575CDCCF1DC3d5d296202Eb6061888",  # v1.4.1 (zksync)
    "0x4FfeF8222648872B3dE295Ba1e49110E61f5b5aa",  # v1.5.0 (canonical)
)

# Safe methods that modify the owners or the threshold.
SENSITIVE_METHODS = frozenset(
    (
        "addOwnerWithThreshold",
        "removeOwner",
        "swapOwner",
        "changeThreshold",
    )
)

SYMBOL_CAUTION = "⚠"
SYMBOL_CHECK = "✔"
SYMBOL_CROSS = "✘"
SYMBOL_WARNING = "⚠️"
