"""
Crypto Utils - Encryption parameters for DLP permission entries
Role: Produces the IV and ephemeral key sent with every proof request

The parameters are generated once per process so that every request made by
this process carries the same values.
"""

import secrets
from functools import lru_cache

from shared.schemas.proof_schema import EncryptionParameters

IV_BYTES = 16
EPHEMERAL_KEY_BYTES = 32


def generate_encryption_parameters() -> EncryptionParameters:
    return EncryptionParameters(
        iv_hex=secrets.token_bytes(IV_BYTES).hex(),
        ephemeral_key_hex=secrets.token_bytes(EPHEMERAL_KEY_BYTES).hex(),
    )


@lru_cache(maxsize=1)
def get_encryption_parameters() -> EncryptionParameters:
    """Process-wide encryption parameters (created on first use)"""
    return generate_encryption_parameters()
