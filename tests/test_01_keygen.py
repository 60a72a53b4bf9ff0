import unittest

import gmpy2

# Import from your project package (assumes `pip install -e .`)
from paillier_scheme.crypto import scheme
from paillier_scheme.crypto.errors import (
    InvalidParameterError,
    KeyGenerationError,
    SamplingError,
)
from paillier_scheme.crypto.keys import KeyPair, PrivateKey, PublicKey
from paillier_scheme.crypto.randomness import SeededRandomSource


class ConstantSource:
    """Random source that always returns the same value."""

    def __init__(self, value):
        self.value = value

    def randbits(self, k):
        return self.value


class TestKeyGeneration(unittest.TestCase):
    """
    Tests Paillier key generation and the key containers.
    """

    @classmethod
    def setUpClass(cls):
        print("\n[Test Keygen] Generating Paillier keys (64-bit primes)...")
        cls.keypair = scheme.generate_keypair(64)
        cls.public_key, cls.private_key = cls.keypair

    def test_01_key_invariants(self):
        """N^2 matches N, N has the expected size and phi(N) is coprime to N."""
        print("[Test Keygen] Running: test_01_key_invariants")
        n = self.public_key.n
        self.assertEqual(self.public_key.nsquare, n * n)
        self.assertIn(self.public_key.bit_length, (127, 128))
        self.assertEqual(gmpy2.gcd(n, self.private_key.phi_n), 1)

    def test_02_pair_shares_modulus(self):
        print("[Test Keygen] Running: test_02_pair_shares_modulus")
        self.assertIs(self.private_key.public_key, self.public_key)
        self.assertEqual(self.private_key.n, self.public_key.n)
        self.assertEqual(self.private_key.nsquare, self.public_key.nsquare)

    def test_03_primes_are_distinct(self):
        """N is never the square of a single prime."""
        print("[Test Keygen] Running: test_03_primes_are_distinct")
        for _ in range(5):
            pk, _ = scheme.generate_keypair(16)
            self.assertFalse(gmpy2.is_square(pk.n))

    def test_04_generate_prime_has_exact_size(self):
        print("[Test Keygen] Running: test_04_generate_prime_has_exact_size")
        for bits in (3, 8, 16, 100):
            p = scheme.generate_prime(bits)
            self.assertEqual(p.bit_length(), bits)
            self.assertTrue(gmpy2.is_prime(p))

    def test_05_smallest_key_size(self):
        print("[Test Keygen] Running: test_05_smallest_key_size")
        pk, sk = scheme.generate_keypair(scheme.MIN_PRIME_BITS)
        self.assertEqual(pk.n, 35)  # 5 * 7, the only 3-bit prime pair
        self.assertEqual(sk.phi_n, 24)

    def test_06_invalid_bit_lengths(self):
        print("[Test Keygen] Running: test_06_invalid_bit_lengths")
        for bits in (-1, 0, 1, 2):
            with self.assertRaises(InvalidParameterError):
                scheme.generate_keypair(bits)
        for bits in (16.0, "16", True, None):
            with self.assertRaises(InvalidParameterError):
                scheme.generate_keypair(bits)

    def test_07_seeded_source_is_reproducible(self):
        print("[Test Keygen] Running: test_07_seeded_source_is_reproducible")
        pk1, _ = scheme.generate_keypair(32, SeededRandomSource(1234))
        pk2, _ = scheme.generate_keypair(32, SeededRandomSource(1234))
        pk3, _ = scheme.generate_keypair(32, SeededRandomSource(4321))
        self.assertEqual(pk1, pk2)
        self.assertNotEqual(pk1, pk3)

    def test_08_repeated_prime_hits_draw_limit(self):
        """A source that keeps yielding the same prime cannot produce q != p."""
        print("[Test Keygen] Running: test_08_repeated_prime_hits_draw_limit")
        # 65521 is the largest 16-bit prime, already odd with the top bit set
        with self.assertRaises(SamplingError):
            scheme.generate_keypair(16, ConstantSource(65521))

    def test_09_no_prime_hits_candidate_limit(self):
        print("[Test Keygen] Running: test_09_no_prime_hits_candidate_limit")
        # 0 becomes 0x8001 = 3 * 10923 after forcing the top and low bits
        with self.assertRaises(SamplingError):
            scheme.generate_prime(16, ConstantSource(0))


class TestKeyPairFromPrimes(unittest.TestCase):

    def test_from_primes(self):
        keypair = KeyPair.from_primes(65521, 65519)
        self.assertEqual(keypair.public_key.n, 65521 * 65519)
        self.assertEqual(keypair.private_key.phi_n, 65520 * 65518)

    def test_equal_primes_rejected(self):
        with self.assertRaises(KeyGenerationError):
            KeyPair.from_primes(65521, 65521)

    def test_composite_rejected(self):
        with self.assertRaises(KeyGenerationError):
            KeyPair.from_primes(65521, 65517)

    def test_non_coprime_modulus_rejected(self):
        # N = 6, phi = 2
        with self.assertRaises(KeyGenerationError):
            KeyPair.from_primes(2, 3)

    def test_private_key_from_other_public_key_rejected(self):
        pk_a = PublicKey(65521 * 65519)
        pk_b = PublicKey(65521 * 65519)
        sk_b = PrivateKey(pk_b, 65520 * 65518)
        with self.assertRaises(KeyGenerationError):
            KeyPair(pk_a, sk_b)

    def test_non_invertible_phi_rejected(self):
        with self.assertRaises(KeyGenerationError):
            PrivateKey(PublicKey(35), 7)


if __name__ == "__main__":
    unittest.main()
