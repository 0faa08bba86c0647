# domain separation tags (RFC 9380 suite BLS12381G2_XMD:SHA-256_SSWU_RO_)
DST_POP = b"BLS_SIG_BLS12381G2_XMD:SHA-256_SSWU_RO_POP_"
DST_NUL = b"BLS_SIG_BLS12381G2_XMD:SHA-256_SSWU_RO_NUL_"
DEFAULT_DST = DST_POP

# native (blst / zcash) sizes
SECRET_KEY_BYTE_LENGTH = 32
FP_BYTE_LENGTH = 48
FP2_BYTE_LENGTH = 96
G1_COMPRESSED_BYTE_LENGTH = 48
G2_COMPRESSED_BYTE_LENGTH = 96

# EIP-2537 sizes
EIP2537_FP_PADDING = 16
EIP2537_FP_BYTE_LENGTH = 64
EIP2537_FP2_BYTE_LENGTH = 128
EIP2537_G1_BYTE_LENGTH = 128
EIP2537_G2_BYTE_LENGTH = 256

# zcash compression flags (first byte)
COMPRESSION_FLAG = 0x80
INFINITY_FLAG = 0x40
SIGN_FLAG = 0x20
