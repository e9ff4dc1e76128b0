"""The cipher object handed out to callers"""
from __future__ import annotations

import logging
from typing import Optional, Union

from aesmodes import modes
from aesmodes.common import (
    Mode, MissingIVError, InvalidIVLengthError, PartialBlockContinuationError,
)
from aesmodes.rijndael import BLOCK_SIZE, KeySchedule

logger = logging.getLogger(__name__)


class CipherSession:
    """AES with a fixed key and mode, keeping the chaining state between calls

    Encrypting and decrypting with a chaining mode need two sessions built
    from the same key and IV; ``resume`` builds the second one without
    expanding the key again. One session must not be used from two threads
    at the same time.
    """

    block_size = BLOCK_SIZE

    def __init__(self, key: bytes, mode: Union[Mode, str], iv: Optional[bytes] = None):
        schedule = KeySchedule.expand(key)
        self._setup(schedule, Mode(mode), iv)
        logger.debug(f'new {self.mode.name} session with a {8*self.key_size}-bit key')

    @classmethod
    def _from_schedule(cls, schedule: KeySchedule, mode: Mode,
                       iv: Optional[bytes]) -> CipherSession:
        inst = cls.__new__(cls)
        inst._setup(schedule, mode, iv)
        return inst

    def _setup(self, schedule: KeySchedule, mode: Mode, iv: Optional[bytes]):
        if not mode.needs_iv:
            if iv is not None:
                logger.debug(f'{mode.name} does not use an IV, ignoring it')
            iv = None
        elif iv is None:
            raise MissingIVError(f'{mode.name} needs an IV')
        elif len(iv) != BLOCK_SIZE:
            raise InvalidIVLengthError(
                f'IV must be {BLOCK_SIZE} bytes long, not {len(iv)}')
        self._schedule = schedule
        self._mode = mode
        self._driver = modes.create_driver(mode, schedule, iv)

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def key_size(self) -> int:
        return self._schedule.key_size

    @property
    def iv(self) -> Optional[bytes]:
        """current chaining state (None for ECB)"""
        return self._driver.iv

    def encrypt(self, plaintext: bytes) -> bytes:
        return self._driver.encrypt(plaintext)

    def decrypt(self, ciphertext: bytes) -> bytes:
        return self._driver.decrypt(ciphertext)

    def resume(self, iv: Optional[bytes] = None) -> CipherSession:
        """a new session with the same key and mode, starting at iv

        iv defaults to the current chaining state of this session. That state
        does not continue a stream that ended in a partial block, so an explicit
        iv is required then.
        """
        if iv is None:
            if self._driver.truncated:
                raise PartialBlockContinuationError(
                    f'{self.mode.name} stream ended in a partial block,'
                    ' pass an explicit iv')
            iv = self.iv
        logger.debug(f'resuming {self.mode.name} session')
        return self._from_schedule(self._schedule, self._mode, iv)

    def __repr__(self):
        iv = 'None' if self.iv is None else self.iv.hex()
        return (f'{type(self).__name__}(mode={self.mode.name},'
                f' key_size={self.key_size}, iv={iv})')
