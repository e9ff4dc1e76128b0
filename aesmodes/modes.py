"""Block cipher modes of operation (ECB, CBC, CFB, CTR)

Each driver owns the chaining state of one session. A call computes its
output and the next state first and only then stores the state, so a call
rejected half way leaves the driver untouched.
"""
import typing

from aesmodes import rijndael
from aesmodes.common import Mode, InvalidInputLengthError, PartialBlockContinuationError
from aesmodes.helpers import seq_xor, split_blocks, increment_counter
from aesmodes.rijndael import BLOCK_SIZE, KeySchedule

drivers: typing.Dict[Mode, typing.Type['ModeDriver']] = {}


def mode_driver(mode: Mode):
    def wrapper(cls):
        cls.mode = mode
        drivers[mode] = cls
        return cls
    return wrapper


def create_driver(mode: Mode, schedule: KeySchedule,
                  iv: typing.Optional[bytes]) -> 'ModeDriver':
    """instantiate the driver registered for mode"""
    return drivers[mode](schedule, iv)


class ModeDriver:
    mode: Mode
    _truncated = False

    def __init__(self, schedule: KeySchedule, iv: typing.Optional[bytes]):
        self.schedule = schedule
        self._state = None if iv is None else bytes(iv)

    @property
    def iv(self) -> typing.Optional[bytes]:
        """the current chaining state"""
        return self._state

    @property
    def truncated(self) -> bool:
        """whether the last call ended in a partial block"""
        return self._truncated

    def encrypt(self, data: bytes) -> bytes:
        raise NotImplementedError

    def decrypt(self, data: bytes) -> bytes:
        raise NotImplementedError

    def _encrypt_block(self, block: bytes) -> bytes:
        return rijndael.encrypt_block(block, self.schedule)

    def _decrypt_block(self, block: bytes) -> bytes:
        return rijndael.decrypt_block(block, self.schedule)


class BlockModeDriver(ModeDriver):
    """modes that only work on whole blocks"""

    def _check_length(self, data: bytes):
        if len(data) % BLOCK_SIZE:
            raise InvalidInputLengthError(
                f'{self.mode.name} input must be a multiple of {BLOCK_SIZE} bytes,'
                f' got {len(data)}')


@mode_driver(Mode.ECB)
class ECBDriver(BlockModeDriver):
    def __init__(self, schedule: KeySchedule, iv: typing.Optional[bytes] = None):
        super().__init__(schedule, None)

    def encrypt(self, data: bytes) -> bytes:
        self._check_length(data)
        return b''.join(map(self._encrypt_block, split_blocks(data, BLOCK_SIZE)))

    def decrypt(self, data: bytes) -> bytes:
        self._check_length(data)
        return b''.join(map(self._decrypt_block, split_blocks(data, BLOCK_SIZE)))


@mode_driver(Mode.CBC)
class CBCDriver(BlockModeDriver):
    def encrypt(self, data: bytes) -> bytes:
        self._check_length(data)
        ciphertexts = [self._state]
        for block in split_blocks(data, BLOCK_SIZE):
            ciphertexts.append(self._encrypt_block(seq_xor(block, ciphertexts[-1])))
        self._state = ciphertexts[-1]
        return b''.join(ciphertexts[1:])

    def decrypt(self, data: bytes) -> bytes:
        self._check_length(data)
        plaintexts = []
        last_ciphertext = self._state
        for block in split_blocks(data, BLOCK_SIZE):
            plaintexts.append(seq_xor(self._decrypt_block(block), last_ciphertext))
            last_ciphertext = bytes(block)
        self._state = last_ciphertext
        return b''.join(plaintexts)


class StreamModeDriver(ModeDriver):
    """modes that xor the data with a keystream of E(state) blocks

    A short final block uses a prefix of the keystream block. The state still
    moves on by one block, but the stream cannot be continued afterwards.
    """

    def next_state(self, state: bytes, ciphertext: bytes) -> bytes:
        """the state following one (possibly short) block"""
        raise NotImplementedError

    def _process(self, data: bytes, encrypting: bool) -> bytes:
        if not data:
            return b''
        if self._truncated:
            raise PartialBlockContinuationError(
                f'{self.mode.name} stream already ended in a partial block')
        output = []
        state = self._state
        for block in split_blocks(data, BLOCK_SIZE):
            result = seq_xor(block, self._encrypt_block(state))
            output.append(result)
            state = self.next_state(state, result if encrypting else bytes(block))
        self._state = state
        self._truncated = len(data) % BLOCK_SIZE != 0
        return b''.join(output)

    def encrypt(self, data: bytes) -> bytes:
        return self._process(data, encrypting=True)

    def decrypt(self, data: bytes) -> bytes:
        return self._process(data, encrypting=False)


@mode_driver(Mode.CFB)
class CFBDriver(StreamModeDriver):
    def next_state(self, state: bytes, ciphertext: bytes) -> bytes:
        # a short block is shifted into the feedback register
        return state[len(ciphertext):] + ciphertext


@mode_driver(Mode.CTR)
class CTRDriver(StreamModeDriver):
    def next_state(self, state: bytes, ciphertext: bytes) -> bytes:
        return increment_counter(state)
