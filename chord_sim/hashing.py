"""Consistent hashing onto the m-bit identifier ring."""

import hashlib
import logging

from .base import ConfigurationError, Key, generate_key_names

logger = logging.getLogger(__name__)


class IdentifierHasher:
    """Map arbitrary names to identifiers in ``[0, 2**id_bits)``.

    Names are hashed with SHA-1 and reduced modulo the ring size, so the
    same name always lands on the same identifier.  Nodes and keys share
    one hasher per simulation, which puts them in one identifier space.
    """

    def __init__(self, id_bits: int):
        if not isinstance(id_bits, int) or id_bits <= 0:
            raise ConfigurationError(
                f"id_bits must be a positive integer, got {id_bits!r}")
        self.id_bits = id_bits
        self.id_space = 2 ** id_bits

    def hash(self, name: str) -> int:
        h = hashlib.sha1(name.encode()).hexdigest()
        return int(h, 16) % self.id_space

    def __call__(self, name: str) -> int:
        return self.hash(name)

    def __repr__(self):
        return f"IdentifierHasher(id_bits={self.id_bits})"


def generate_keys(count: int, hasher: IdentifierHasher) -> list[Key]:
    """Return *count* keys named ``key 1`` .. ``key <count>``.

    Distinct key names may hash to the same identifier; such keys are
    kept, they simply share an owner.
    """
    if count < 0:
        raise ConfigurationError(f"key count must be >= 0, got {count}")
    keys = [Key(name, hasher.hash(name)) for name in generate_key_names(count)]
    logger.debug("Generated %d keys on a ring of size %d",
                 len(keys), hasher.id_space)
    return keys
