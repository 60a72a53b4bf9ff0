class PaillierError(Exception):
    """Base class for every error raised by the Paillier scheme."""


class InvalidParameterError(PaillierError, ValueError):
    """A bit length, plaintext, ciphertext or scalar is out of range."""


class RandomnessError(PaillierError):
    """The random source failed to deliver bits."""


class SamplingError(RandomnessError):
    """A rejection-sampling loop hit its attempt limit without a valid draw."""


class KeyGenerationError(PaillierError):
    """The primes given for a key pair do not form a valid Paillier key."""


class DecryptionError(PaillierError):
    """The ciphertext is not a valid encryption under the private key."""
