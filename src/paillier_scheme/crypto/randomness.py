import secrets

from gmpy2 import mpz, gcd, random_state, mpz_urandomb

from paillier_scheme.crypto.errors import InvalidParameterError, RandomnessError, SamplingError


class SecureRandomSource:
    """
    Random source backed by the operating system CSPRNG (via `secrets`).

    Holds no state, so a single instance can be shared between threads.
    """

    def randbits(self, k: int) -> int:
        if k <= 0:
            raise InvalidParameterError(f"bit count must be positive, got {k}")
        try:
            return secrets.randbits(k)
        except (OSError, NotImplementedError) as e:
            raise RandomnessError(f"system random source unavailable: {e}") from e


class SeededRandomSource:
    """
    Deterministic random source built on a gmpy2 random state.

    Meant for tests and reproducible demo runs only: the output is fully
    determined by the seed. Each instance owns its state; do not share one
    instance between threads.
    """

    def __init__(self, seed: int):
        self.seed = int(seed)
        self._state = random_state(self.seed)

    def randbits(self, k: int) -> int:
        if k <= 0:
            raise InvalidParameterError(f"bit count must be positive, got {k}")
        return int(mpz_urandomb(self._state, k))


def default_source():
    return SecureRandomSource()


def draw_unit(n, rng, max_draws: int) -> mpz:
    """
    Draws r uniformly from the units of Z_n by rejection sampling.

    Candidates have the bit length of n; a draw is kept only if 0 < r < n
    and gcd(r, n) == 1.

    Args:
        n (mpz): The modulus.
        rng: Random source exposing randbits(k).
        max_draws (int): Number of candidates tried before giving up.

    Returns:
        mpz: A unit of Z_n.

    Raises:
        SamplingError: No candidate was accepted within max_draws.
    """
    bits = n.bit_length()
    for _ in range(max_draws):
        r = mpz(rng.randbits(bits))
        if 0 < r < n and gcd(r, n) == 1:
            return r
    raise SamplingError(f"no unit of Z_N found after {max_draws} draws")
