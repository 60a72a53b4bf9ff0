from paillier_scheme.crypto import scheme
from paillier_scheme.crypto.keys import KeyPair


class PaillierContext:
    """
    Holds one Paillier key pair and exposes the scheme operations on it.

    The functions in `scheme` take the keys explicitly; this class is the
    convenience wrapper for code that works with a single key pair, and it
    keeps the random source alongside the keys.
    """

    def __init__(self, key_size=scheme.DEFAULT_KEY_BITS, rng=None, keypair: KeyPair = None, verbose=False):
        """
        Initializes the context, generating keys unless a key pair is given.

        Args:
            key_size (int): Bit length of each prime p and q.
            rng: Random source exposing randbits(k). None means the OS CSPRNG.
            keypair (KeyPair): Existing keys to use instead of generating.
            verbose (bool): Print progress messages.
        """
        self.rng = rng
        self.verbose = verbose
        if keypair is None:
            self._log(f"Generating Paillier keys ({key_size}-bit primes)...")
            keypair = scheme.generate_keypair(key_size, rng)
        self.keypair = keypair
        self.public_key = keypair.public_key
        self.private_key = keypair.private_key
        self._log(f"PaillierContext initialized ({self.public_key.bit_length}-bit N).")

    def _log(self, message):
        if self.verbose:
            print(message)

    @property
    def N(self) -> int:
        return self.public_key.n

    @property
    def N2(self) -> int:
        return self.public_key.nsquare

    # --- Public Crypto API ---

    def encrypt(self, message) -> int:
        return scheme.encrypt(self.public_key, message, self.rng)

    def encrypt_with_randomness(self, message, r) -> int:
        return scheme.encrypt_with_randomness(self.public_key, message, r)

    def decrypt(self, ciphertext) -> int:
        return scheme.decrypt(self.private_key, ciphertext)

    # --- Homomorphic operations ---

    def homomorphic_add(self, c1, c2) -> int:
        """E(m1) * E(m2) = E(m1 + m2)"""
        return scheme.add(self.public_key, c1, c2)

    def add_plain(self, c, message) -> int:
        return scheme.add_plain(self.public_key, c, message)

    def multiply(self, scalar, c) -> int:
        """E(m)^s = E(s * m)"""
        return scheme.multiply(self.public_key, scalar, c)

    def negate(self, c) -> int:
        return scheme.negate(self.public_key, c)

    def rerandomize(self, c) -> int:
        return scheme.rerandomize(self.public_key, c, self.rng)
