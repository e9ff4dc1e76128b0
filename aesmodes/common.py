"""enums and exceptions used in multiple places"""
import enum


class CipherError(Exception):
    """the requested cipher operation could not be performed"""


class InvalidKeyLengthError(CipherError, ValueError):
    """key is not 16, 24 or 32 bytes long"""


class MissingIVError(CipherError, ValueError):
    """the mode needs an IV but none was given"""


class InvalidIVLengthError(CipherError, ValueError):
    """IV length differs from the block size"""


class InvalidInputLengthError(CipherError, ValueError):
    """input is not a whole number of blocks"""


class PartialBlockContinuationError(CipherError):
    """data was fed after a call that ended in a partial block"""


class UnsupportedModeError(CipherError, ValueError):
    """mode name is not one of ECB, CBC, CFB, CTR"""


class Mode(enum.Enum):
    def __new__(cls, label, needs_iv, block_aligned):
        inst = object.__new__(cls)
        inst._value_ = label
        inst.needs_iv = needs_iv
        inst.block_aligned = block_aligned
        return inst

    ECB = 'ECB', False, True
    CBC = 'CBC', True, True
    CFB = 'CFB', True, False
    CTR = 'CTR', True, False

    @classmethod
    def _missing_(cls, value):
        """accept mode names in any case"""
        if isinstance(value, str):
            for member in cls:
                if member.value == value.upper():
                    return member
        raise UnsupportedModeError(f'{value!r} is not a supported mode')
