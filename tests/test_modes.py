import pytest

from aesmodes import modes, rijndael
from aesmodes.common import Mode, InvalidInputLengthError, PartialBlockContinuationError
from aesmodes.helpers import increment_counter, seq_xor, split_blocks
from aesmodes.rijndael import KeySchedule

# NIST SP 800-38A appendix F, AES-128
KEY = bytes.fromhex('2b7e151628aed2a6abf7158809cf4f3c')
IV = bytes.fromhex('000102030405060708090a0b0c0d0e0f')
COUNTER = bytes.fromhex('f0f1f2f3f4f5f6f7f8f9fafbfcfdfeff')
PLAINTEXT = bytes.fromhex(
    '6bc1bee22e409f96e93d7e117393172a'
    'ae2d8a571e03ac9c9eb76fac45af8e51'
    '30c81c46a35ce411e5fbc1191a0a52ef'
    'f69f2445df4f9b17ad2b417be66c3710')
CIPHERTEXTS = {
    Mode.ECB: bytes.fromhex(
        '3ad77bb40d7a3660a89ecaf32466ef97'
        'f5d3d58503b9699de785895a96fdbaaf'
        '43b1cd7f598ece23881b00e3ed030688'
        '7b0c785e27e8ad3f8223207104725dd4'),
    Mode.CBC: bytes.fromhex(
        '7649abac8119b246cee98e9b12e9197d'
        '5086cb9b507219ee95db113a917678b2'
        '73bed6b8e3c1743b7116e69e22229516'
        '3ff1caa1681fac09120eca307586e1a7'),
    Mode.CFB: bytes.fromhex(
        '3b3fd92eb72dad20333449f8e83cfb4a'
        'c8a64537a0b3a93fcde3cdad9f1ce58b'
        '26751f67a3cbb140b1808cf187a4f4df'
        'c04b05357c5d1c0eeac4c66f9ff7f2e6'),
    Mode.CTR: bytes.fromhex(
        '874d6191b620e3261bef6864990db6ce'
        '9806f66b7970fdff8617187bb9fffdff'
        '5ae4df3edbd5d35e5b4f09020db03eab'
        '1e031dda2fbe03d1792170a0f3009cee'),
}
SCHEDULE = KeySchedule.expand(KEY)


def make_driver(mode: Mode) -> modes.ModeDriver:
    iv = {Mode.ECB: None, Mode.CTR: COUNTER}.get(mode, IV)
    return modes.create_driver(mode, SCHEDULE, iv)


def test_registry() -> None:
    assert set(modes.drivers) == set(Mode)
    assert all(cls.mode is mode for mode, cls in modes.drivers.items())


@pytest.mark.parametrize('mode', list(Mode))
def test_sp800_38a_encrypt(mode: Mode) -> None:
    assert make_driver(mode).encrypt(PLAINTEXT) == CIPHERTEXTS[mode]


@pytest.mark.parametrize('mode', list(Mode))
def test_sp800_38a_decrypt(mode: Mode) -> None:
    assert make_driver(mode).decrypt(CIPHERTEXTS[mode]) == PLAINTEXT


@pytest.mark.parametrize('mode', list(Mode))
@pytest.mark.parametrize('split', [0, 16, 32, 48, 64])
def test_split_calls(mode: Mode, split: int) -> None:
    whole = make_driver(mode)
    expected = whole.encrypt(PLAINTEXT)

    driver = make_driver(mode)
    result = driver.encrypt(PLAINTEXT[:split]) + driver.encrypt(PLAINTEXT[split:])
    assert result == expected
    assert driver.iv == whole.iv

    driver = make_driver(mode)
    result = driver.decrypt(expected[:split]) + driver.decrypt(expected[split:])
    assert result == PLAINTEXT


def test_state_after_vectors() -> None:
    assert make_driver(Mode.ECB).iv is None
    cbc = make_driver(Mode.CBC)
    cbc.encrypt(PLAINTEXT)
    assert cbc.iv == CIPHERTEXTS[Mode.CBC][-16:]
    cfb = make_driver(Mode.CFB)
    cfb.decrypt(CIPHERTEXTS[Mode.CFB])
    assert cfb.iv == CIPHERTEXTS[Mode.CFB][-16:]
    ctr = make_driver(Mode.CTR)
    ctr.encrypt(PLAINTEXT)
    assert ctr.iv == bytes.fromhex('f0f1f2f3f4f5f6f7f8f9fafbfcfdff03')


def test_cfb_keystream_uses_encryption() -> None:
    driver = make_driver(Mode.CFB)
    first = driver.decrypt(CIPHERTEXTS[Mode.CFB][:16])
    # E(IV) xor C, not D(IV) xor C
    assert first == seq_xor(rijndael.encrypt_block(IV, SCHEDULE),
                            CIPHERTEXTS[Mode.CFB][:16])


@pytest.mark.parametrize('mode', [Mode.CFB, Mode.CTR])
@pytest.mark.parametrize('length', [1, 15, 20, 63])
def test_partial_block(mode: Mode, length: int) -> None:
    driver = make_driver(mode)
    assert driver.encrypt(PLAINTEXT[:length]) == CIPHERTEXTS[mode][:length]
    state = driver.iv
    assert len(state) == 16
    with pytest.raises(PartialBlockContinuationError):
        driver.encrypt(PLAINTEXT[length:])
    assert driver.iv == state
    assert driver.encrypt(b'') == b''

    driver = make_driver(mode)
    assert driver.decrypt(CIPHERTEXTS[mode][:length]) == PLAINTEXT[:length]
    with pytest.raises(PartialBlockContinuationError):
        driver.decrypt(CIPHERTEXTS[mode][length:])


def test_partial_block_state() -> None:
    ctr = make_driver(Mode.CTR)
    ctr.encrypt(PLAINTEXT[:20])
    assert ctr.iv == increment_counter(increment_counter(COUNTER))
    cfb = make_driver(Mode.CFB)
    cfb.encrypt(PLAINTEXT[:20])
    tail = CIPHERTEXTS[Mode.CFB][16:20]
    assert cfb.iv == CIPHERTEXTS[Mode.CFB][4:16] + tail


@pytest.mark.parametrize('mode', [Mode.ECB, Mode.CBC])
@pytest.mark.parametrize('length', [1, 17, 63])
def test_misaligned_input(mode: Mode, length: int) -> None:
    driver = make_driver(mode)
    state = driver.iv
    with pytest.raises(InvalidInputLengthError):
        driver.encrypt(PLAINTEXT[:length])
    with pytest.raises(InvalidInputLengthError):
        driver.decrypt(CIPHERTEXTS[mode][:length])
    assert driver.iv == state
    assert driver.encrypt(PLAINTEXT) == CIPHERTEXTS[mode]


def test_ecb_ignores_iv() -> None:
    driver = modes.create_driver(Mode.ECB, SCHEDULE, IV)
    assert driver.iv is None
    assert driver.encrypt(PLAINTEXT) == CIPHERTEXTS[Mode.ECB]


def test_counter_wraparound() -> None:
    assert increment_counter(b'\xff' * 16) == bytes(16)
    assert increment_counter(bytes(15) + b'\xff') == bytes(14) + b'\x01\x00'

    driver = modes.create_driver(Mode.CTR, SCHEDULE, b'\xff' * 16)
    keystream = driver.encrypt(bytes(32))
    assert driver.iv == bytes(15) + b'\x01'
    assert keystream[16:] == rijndael.encrypt_block(bytes(16), SCHEDULE)


def test_split_blocks() -> None:
    assert list(split_blocks(b'', 16)) == []
    assert list(split_blocks(bytes(40), 16)) == [bytes(16), bytes(16), bytes(8)]



@pytest.mark.parametrize('mode', list(Mode))
def test_reused_input_buffer(mode: Mode) -> None:
    buf = bytearray(32)
    driver = make_driver(mode)
    result = b''
    for i in (0, 32):
        buf[:] = CIPHERTEXTS[mode][i:i+32]
        result += driver.decrypt(memoryview(buf))
    assert result == PLAINTEXT
    assert driver.iv is None or type(driver.iv) is bytes


@pytest.mark.parametrize('mode', [Mode.CBC, Mode.CFB, Mode.CTR])
def test_state_is_bytes(mode: Mode) -> None:
    driver = make_driver(mode)
    driver.decrypt(bytearray(CIPHERTEXTS[mode][:32]))
    assert type(driver.iv) is bytes
    driver.encrypt(bytearray(PLAINTEXT[32:]))
    assert type(driver.iv) is bytes


def test_truncated_flag() -> None:
    for mode in Mode:
        assert not make_driver(mode).truncated
    driver = make_driver(Mode.CFB)
    driver.encrypt(PLAINTEXT[:16])
    assert not driver.truncated
    driver.encrypt(PLAINTEXT[16:20])
    assert driver.truncated
