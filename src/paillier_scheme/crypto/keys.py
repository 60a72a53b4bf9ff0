from gmpy2 import mpz, gcd, invert, is_prime

from paillier_scheme.crypto.errors import KeyGenerationError

MILLER_RABIN_ROUNDS = 25


class PublicKey:
    """
    Paillier public key (N, N^2).

    The generator is fixed to g = 1 + N, so the key is fully described by
    the modulus. Attribute names follow the 'phe' library (n, nsquare).
    """

    __slots__ = ("_n", "_nsquare")

    def __init__(self, n):
        self._n = mpz(n)
        self._nsquare = self._n * self._n

    @property
    def n(self) -> int:
        return int(self._n)

    @property
    def nsquare(self) -> int:
        return int(self._nsquare)

    @property
    def bit_length(self) -> int:
        return self._n.bit_length()

    def __eq__(self, other):
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self._n == other._n

    def __hash__(self):
        return hash(("PublicKey", int(self._n)))

    def __repr__(self):
        return f"<PublicKey {self.bit_length}-bit N={hex(int(self._n))[:12]}...>"


class PrivateKey:
    """
    Paillier private key (N, N^2, phi(N)).

    N and N^2 are read through the public key the private key was derived
    from, so both halves of a pair always agree on the modulus.
    phi(N)^-1 mod N is computed once at construction.
    """

    __slots__ = ("_public_key", "_phi", "_phi_inv")

    def __init__(self, public_key: PublicKey, phi_n):
        self._public_key = public_key
        self._phi = mpz(phi_n)
        try:
            self._phi_inv = invert(self._phi, public_key._n)
        except ZeroDivisionError as e:
            raise KeyGenerationError("phi(N) is not invertible modulo N") from e

    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    @property
    def n(self) -> int:
        return self._public_key.n

    @property
    def nsquare(self) -> int:
        return self._public_key.nsquare

    @property
    def phi_n(self) -> int:
        return int(self._phi)

    def __repr__(self):
        return f"<PrivateKey for {self._public_key!r}>"


class KeyPair:
    """
    A public/private key pair produced by one generation event.

    Build it with KeyPair.from_primes(); the private key is derived from the
    pair's own public key and cannot be swapped afterwards.
    """

    __slots__ = ("_public_key", "_private_key")

    def __init__(self, public_key: PublicKey, private_key: PrivateKey):
        if private_key.public_key is not public_key:
            raise KeyGenerationError("private key was not derived from this public key")
        self._public_key = public_key
        self._private_key = private_key

    @classmethod
    def from_primes(cls, p, q, check_primality: bool = True) -> "KeyPair":
        """
        Builds the key pair for N = p*q.

        Args:
            p, q (int): Two distinct primes.
            check_primality (bool): Run a probable-prime test on p and q.
                Key generation skips it since its primes are already tested.

        Raises:
            KeyGenerationError: p == q, a factor is not prime, or
                gcd(N, phi(N)) != 1.
        """
        p, q = mpz(p), mpz(q)
        if p == q:
            raise KeyGenerationError("p and q must be distinct")
        if check_primality:
            for name, factor in (("p", p), ("q", q)):
                if not is_prime(factor, MILLER_RABIN_ROUNDS):
                    raise KeyGenerationError(f"{name} is not prime")

        n = p * q
        phi = (p - 1) * (q - 1)
        if gcd(n, phi) != 1:
            raise KeyGenerationError("N and phi(N) are not coprime")

        public_key = PublicKey(n)
        return cls(public_key, PrivateKey(public_key, phi))

    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    @property
    def private_key(self) -> PrivateKey:
        return self._private_key

    def __iter__(self):
        # allows `pub, priv = keypair`
        yield self._public_key
        yield self._private_key

    def __repr__(self):
        return f"<KeyPair {self._public_key.bit_length}-bit>"
