"""12-byte object identifiers rendered as 24 hex characters

Layout: 4-byte big-endian unix seconds, 5 random bytes fixed per process,
3-byte counter seeded randomly.
"""

import itertools
import os
import re
import secrets
import threading
import time

from biplatform.core.exceptions import ValidationFailedError

OBJECT_ID_LENGTH = 24
OBJECT_ID_PATTERN = re.compile(r"[0-9a-f]{24}")

_process_random = secrets.token_bytes(5)
_process_pid = os.getpid()
_counter = itertools.count(secrets.randbelow(0xFFFFFF))
_counter_lock = threading.Lock()


def generate_object_id() -> str:
    """returns a new 24 character hex id"""
    global _process_random, _process_pid  # pylint: disable=global-statement
    if os.getpid() != _process_pid:
        # forked worker; avoid sharing the parent's random block
        _process_pid = os.getpid()
        _process_random = secrets.token_bytes(5)
    with _counter_lock:
        counter = next(_counter) % 0x1000000
    return (
        int(time.time()).to_bytes(4, "big") + _process_random + counter.to_bytes(3, "big")
    ).hex()


def is_valid_object_id(value) -> bool:
    """checks that `value` looks like an id produced by generate_object_id"""
    return isinstance(value, str) and OBJECT_ID_PATTERN.fullmatch(value) is not None


def ensure_object_id(value, label: str = "id") -> str:
    """returns `value` if it is a well formed id, raises ValidationFailedError otherwise"""
    if not is_valid_object_id(value):
        raise ValidationFailedError(f"invalid {label}")
    return value
