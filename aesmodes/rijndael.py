"""AES key schedule and single-block transform (FIPS-197)

The state is kept as a list of four columns of four bytes each, the same
column-major order in which a block is read from and written to bytes.
All constant tables are computed once when the module is imported.
"""
import dataclasses
import typing

from aesmodes.common import InvalidKeyLengthError, InvalidInputLengthError


ByteMatrix = typing.MutableSequence[typing.MutableSequence[int]]
Word = bytes

BLOCK_SIZE = 16
NB = 4  # columns in the state
ROUNDS = {16: 10, 24: 12, 32: 14}
M_POLYNOMIAL = 0b100011011
C_VECTOR = (2, 1, 1, 3)
D_VECTOR = (0xe, 9, 0xd, 0xb)


def xtime(num: int) -> int:
    """perform the xtime operation"""
    num <<= 1
    if num & 0x100:
        num ^= M_POLYNOMIAL
    return num


def byte_mul(a: int, b: int) -> int:
    """implement byte multiplication"""
    r = 0
    for mul in (1, 2, 4, 8, 16, 32, 64, 128):
        if b & mul:
            r ^= a
        a = xtime(a)
    return r


def _rotl8(num: int, shift: int) -> int:
    return ((num << shift) | (num >> (8 - shift))) & 0xff


def _make_s_boxes() -> typing.Tuple[bytes, bytes]:
    """build the S-box from multiplicative inverses and the affine map"""
    exp = [0] * 255
    log = [0] * 256
    value = 1
    for power in range(255):
        exp[power] = value
        log[value] = power
        value ^= xtime(value)  # times 0x03, a generator of GF(2^8)*

    s_box = bytearray(256)
    for a in range(256):
        inv = exp[-log[a] % 255] if a else 0
        s_box[a] = (inv ^ _rotl8(inv, 1) ^ _rotl8(inv, 2)
                    ^ _rotl8(inv, 3) ^ _rotl8(inv, 4) ^ 0x63)
    inv_s_box = bytearray(256)
    for a, s in enumerate(s_box):
        inv_s_box[s] = a
    return bytes(s_box), bytes(inv_s_box)


def _make_rcon(count: int) -> bytes:
    """round constants x^(i-1); index 0 is unused"""
    r = [0]
    value = 1
    for _ in range(count):
        r.append(value)
        value = xtime(value)
    return bytes(r)


S_BOX, INV_S_BOX = _make_s_boxes()
RCON = _make_rcon(10)
# multiplication tables for every MixColumns coefficient: GF_MUL[c][x] == c*x
GF_MUL = {c: bytes(byte_mul(x, c) for x in range(256))
          for c in set(C_VECTOR + D_VECTOR)}


def to_matrix(data: typing.Sequence[int]) -> ByteMatrix:
    """transform linear bytes to a 4x4 matrix of columns"""
    return list(map(list, zip(*([iter(data)]*4))))


def from_matrix(data: ByteMatrix) -> typing.Iterable[int]:
    """transform a matrix to linear data"""
    for column in data:
        for value in column:
            yield value


def sub_word(word: Word) -> Word:
    return bytes(S_BOX[b] for b in word)


def rot_word(word: Word) -> Word:
    return word[1:] + word[:1]


def expand_key(key: bytes) -> typing.List[Word]:
    """expand the key into the 4*(Nr+1) words of the key schedule"""
    if len(key) not in ROUNDS:
        raise InvalidKeyLengthError(
            f'key must be 16, 24 or 32 bytes long, not {len(key)}')
    Nk = len(key) // 4
    Nr = ROUNDS[len(key)]
    W = [bytes(key[4*i:4*(i+1)]) for i in range(Nk)]

    for i in range(Nk, NB*(Nr+1)):
        temp = W[i-1]
        if i % Nk == 0:
            temp = sub_word(rot_word(temp))
            temp = bytes([temp[0] ^ RCON[i // Nk]]) + temp[1:]
        elif Nk > 6 and i % Nk == 4:
            temp = sub_word(temp)
        W.append(bytes(a ^ b for a, b in zip(W[i-Nk], temp)))
    return W


@dataclasses.dataclass(frozen=True)
class KeySchedule:
    """the round keys of one cipher key, four words each"""
    key_size: int
    round_keys: typing.Tuple[typing.Tuple[Word, ...], ...] = dataclasses.field(repr=False)

    @classmethod
    def expand(cls, key: bytes) -> 'KeySchedule':
        words = expand_key(key)
        return cls(
            key_size=len(key),
            round_keys=tuple(zip(*([iter(words)]*NB))),
        )

    @property
    def rounds(self) -> int:
        return len(self.round_keys) - 1


def _check_block(block: bytes):
    if len(block) != BLOCK_SIZE:
        raise InvalidInputLengthError(
            f'a block is {BLOCK_SIZE} bytes long, got {len(block)}')


def encrypt_block(plaintext: bytes, schedule: KeySchedule) -> bytes:
    """encrypt a block"""
    _check_block(plaintext)
    state = to_matrix(plaintext)
    keys = iter(schedule.round_keys)

    do_AddRoundKey(state, next(keys))
    for i in reversed(range(schedule.rounds)):
        do_SubBytes(state, S_BOX)
        do_ShiftRows(state, 1)
        if i:
            do_MixColumns(state, C_VECTOR)
        do_AddRoundKey(state, next(keys))

    return bytes(from_matrix(state))


def decrypt_block(ciphertext: bytes, schedule: KeySchedule) -> bytes:
    """decrypt a block"""
    _check_block(ciphertext)
    state = to_matrix(ciphertext)
    keys = reversed(schedule.round_keys)

    do_AddRoundKey(state, next(keys))
    for i in reversed(range(schedule.rounds)):
        do_ShiftRows(state, -1)
        do_SubBytes(state, INV_S_BOX)
        do_AddRoundKey(state, next(keys))
        if i:
            do_MixColumns(state, D_VECTOR)

    return bytes(from_matrix(state))


def do_SubBytes(state: ByteMatrix, s_box: typing.Sequence[int]):
    """perform the SubBytes operation with the given s-box"""
    for vec in state:
        for i in range(len(vec)):
            vec[i] = s_box[vec[i]]


def do_ShiftRows(state: ByteMatrix, direction: int):
    """perform the ShiftRows operation for en-(1) or de(-1)cryption"""
    for row in range(1, 4):
        amount = row * direction
        row_values = [column[row] for column in state]
        row_values = row_values[amount:] + row_values[:amount]
        for column, val in zip(state, row_values):
            column[row] = val


def do_MixColumns(state: ByteMatrix, mul_vector: typing.Sequence[int]):
    """multiply every column by mul_vector modulo x^4 + 1"""
    for col, vec in enumerate(state):
        new = [0] * 4
        for i, a in enumerate(vec):
            for j, b in enumerate(mul_vector):
                new[(i+j) % 4] ^= GF_MUL[b][a]
        state[col] = new


def do_AddRoundKey(state: ByteMatrix, key: typing.Sequence[Word]):
    """perform the AddRoundKey operation"""
    for text_vec, key_vec in zip(state, key):
        for i, (text, k) in enumerate(zip(text_vec, key_vec)):
            text_vec[i] = text ^ k
