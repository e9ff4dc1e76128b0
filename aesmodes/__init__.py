"""Pure-Python AES with ECB, CBC, CFB and CTR modes"""
from aesmodes.common import (
    Mode,
    CipherError, InvalidKeyLengthError, MissingIVError, InvalidIVLengthError,
    InvalidInputLengthError, PartialBlockContinuationError, UnsupportedModeError,
)
from aesmodes.rijndael import BLOCK_SIZE, KeySchedule, encrypt_block, decrypt_block
from aesmodes.session import CipherSession

__all__ = [
    'Mode', 'CipherSession', 'KeySchedule', 'encrypt_block', 'decrypt_block',
    'BLOCK_SIZE', 'CipherError', 'InvalidKeyLengthError', 'MissingIVError',
    'InvalidIVLengthError', 'InvalidInputLengthError',
    'PartialBlockContinuationError', 'UnsupportedModeError',
]
