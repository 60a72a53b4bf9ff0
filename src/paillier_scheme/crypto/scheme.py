"""
The Paillier scheme: key generation, encryption, decryption and the
homomorphic operations on ciphertexts.

Every function is pure apart from the random source passed in `rng`
(the OS CSPRNG when omitted). Integers go in and come out as Python ints;
gmpy2 does the arithmetic.
"""
from gmpy2 import mpz, gcd, invert, is_prime, powmod

from paillier_scheme.crypto.errors import (
    DecryptionError,
    InvalidParameterError,
    SamplingError,
)
from paillier_scheme.crypto.keys import MILLER_RABIN_ROUNDS, KeyPair, PrivateKey, PublicKey
from paillier_scheme.crypto.randomness import default_source, draw_unit

DEFAULT_KEY_BITS = 1024
# Smallest prime size for which distinct p, q always give gcd(N, phi(N)) == 1
MIN_PRIME_BITS = 3
MAX_DISTINCT_PRIME_DRAWS = 64
MAX_RANDOMNESS_DRAWS = 1000


def max_prime_candidates(bits: int) -> int:
    """Attempt limit for one prime draw; far above the ~0.35*bits expected."""
    return max(1000, 100 * bits)


def _check_int(value, name: str) -> mpz:
    # bool is an int subclass but never a meaningful plaintext or ciphertext
    if isinstance(value, bool) or not isinstance(value, (int, mpz)):
        raise InvalidParameterError(f"{name} must be an integer, got {type(value).__name__}")
    return mpz(value)


def _check_ciphertext(public_key: PublicKey, c, name: str = "ciphertext") -> mpz:
    c = _check_int(c, name)
    if not 0 <= c < public_key._nsquare:
        raise InvalidParameterError(f"{name} out of range [0, N^2)")
    return c


def _check_plaintext(public_key: PublicKey, m, name: str = "plaintext") -> mpz:
    m = _check_int(m, name)
    if not 0 <= m < public_key._n:
        raise InvalidParameterError(f"{name} out of range [0, N)")
    return m


# --- Key generation ---


def generate_prime(bits: int, rng=None) -> mpz:
    """
    Draws a random probable prime of exactly `bits` bits.

    The top bit is forced so the size is exact, the low bit so only odd
    candidates are tested.
    """
    if isinstance(bits, bool) or not isinstance(bits, int) or bits < 2:
        raise InvalidParameterError(f"prime size must be an integer >= 2, got {bits!r}")
    rng = rng or default_source()

    attempts = max_prime_candidates(bits)
    for _ in range(attempts):
        candidate = mpz(rng.randbits(bits))
        candidate = candidate.bit_set(bits - 1).bit_set(0)
        if is_prime(candidate, MILLER_RABIN_ROUNDS):
            return candidate
    raise SamplingError(f"no {bits}-bit prime found after {attempts} candidates")


def generate_keypair(bits: int = DEFAULT_KEY_BITS, rng=None) -> KeyPair:
    """
    Generates a Paillier key pair from two distinct `bits`-bit primes.

    N = p*q therefore has 2*bits - 1 or 2*bits bits.

    Args:
        bits (int): Bit length of each prime p and q (>= 3).
        rng: Random source exposing randbits(k). Defaults to the OS CSPRNG.

    Returns:
        KeyPair: pk = (N, N^2), sk = (N, N^2, phi(N)).

    Raises:
        InvalidParameterError: bits is not an integer >= 3.
        RandomnessError: The random source failed or a draw hit its limit.
    """
    if isinstance(bits, bool) or not isinstance(bits, int):
        raise InvalidParameterError(f"bits must be an integer, got {type(bits).__name__}")
    if bits < MIN_PRIME_BITS:
        raise InvalidParameterError(f"bits must be >= {MIN_PRIME_BITS}, got {bits}")
    rng = rng or default_source()

    p = generate_prime(bits, rng)
    for _ in range(MAX_DISTINCT_PRIME_DRAWS):
        q = generate_prime(bits, rng)
        # Ensure p != q, and N and phi coprime
        if q != p and gcd(p * q, (p - 1) * (q - 1)) == 1:
            return KeyPair.from_primes(p, q, check_primality=False)
    raise SamplingError(f"no second prime distinct from p after {MAX_DISTINCT_PRIME_DRAWS} draws")


# --- Encryption / decryption ---


def encrypt_with_randomness(public_key: PublicKey, m, r) -> int:
    """
    Encrypts m with a caller-chosen unit r: c = (1 + N)^m * r^N mod N^2.

    (1 + N)^m mod N^2 is evaluated as 1 + m*N, with m kept at full precision.
    """
    m = _check_plaintext(public_key, m)
    r = _check_int(r, "r")
    n, nsquare = public_key._n, public_key._nsquare
    if not 0 < r < n or gcd(r, n) != 1:
        raise InvalidParameterError("r must be a unit of Z_N")

    g_pow_m = (1 + m * n) % nsquare
    r_pow_n = powmod(r, n, nsquare)
    return int((g_pow_m * r_pow_n) % nsquare)


def encrypt(public_key: PublicKey, m, rng=None) -> int:
    """
    Encrypts plaintext m (0 <= m < N) under the public key.

    A fresh r is drawn on each call, so encrypting the same m twice gives
    different ciphertexts.
    """
    m = _check_plaintext(public_key, m)
    r = draw_unit(public_key._n, rng or default_source(), MAX_RANDOMNESS_DRAWS)
    return encrypt_with_randomness(public_key, m, r)


def decrypt(private_key: PrivateKey, c) -> int:
    """
    Decrypts c with the private key.

    m = L(c^phi mod N^2) * phi^-1 mod N, where L(x) = (x - 1) / N.
    The division in L must be exact; a remainder means c is not a valid
    ciphertext under this key.

    Raises:
        InvalidParameterError: c is outside [0, N^2).
        DecryptionError: c is malformed or was produced under another key.
    """
    public_key = private_key.public_key
    c = _check_ciphertext(public_key, c)
    n = public_key._n

    a = powmod(c, private_key._phi, public_key._nsquare)
    b, remainder = divmod(a - 1, n)
    if remainder != 0:
        raise DecryptionError("c^phi(N) is not 1 mod N: invalid ciphertext for this key")
    return int((b * private_key._phi_inv) % n)


# --- Homomorphic operations ---


def add(public_key: PublicKey, c1, c2) -> int:
    """E(m1) * E(m2) = E(m1 + m2 mod N)."""
    c1 = _check_ciphertext(public_key, c1, "c1")
    c2 = _check_ciphertext(public_key, c2, "c2")
    return int((c1 * c2) % public_key._nsquare)


def multiply(public_key: PublicKey, scalar, c) -> int:
    """
    E(m)^s = E(s * m mod N).

    The scalar comes first and may be any integer; a negative scalar
    raises the inverse of c to |s|.
    """
    s = _check_int(scalar, "scalar")
    c = _check_ciphertext(public_key, c)
    nsquare = public_key._nsquare
    if s < 0:
        try:
            c = invert(c, nsquare)
        except ZeroDivisionError as e:
            raise InvalidParameterError("ciphertext is not invertible mod N^2") from e
        s = -s
    return int(powmod(c, s, nsquare))


def add_plain(public_key: PublicKey, c, m) -> int:
    """E(m1) * (1 + N)^m2 = E(m1 + m2 mod N), without drawing randomness."""
    c = _check_ciphertext(public_key, c)
    m = _check_plaintext(public_key, m)
    nsquare = public_key._nsquare
    return int((c * (1 + m * public_key._n)) % nsquare)


def negate(public_key: PublicKey, c) -> int:
    """E(m)^-1 = E(-m mod N)."""
    c = _check_ciphertext(public_key, c)
    try:
        return int(invert(c, public_key._nsquare))
    except ZeroDivisionError as e:
        raise InvalidParameterError("ciphertext is not invertible mod N^2") from e


def rerandomize(public_key: PublicKey, c, rng=None) -> int:
    """Multiplies c by a fresh E(0, r): same plaintext, unlinkable ciphertext."""
    c = _check_ciphertext(public_key, c)
    n, nsquare = public_key._n, public_key._nsquare
    r = draw_unit(n, rng or default_source(), MAX_RANDOMNESS_DRAWS)
    return int((c * powmod(r, n, nsquare)) % nsquare)
