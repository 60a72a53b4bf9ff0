import numpy as np

from paillier_scheme.crypto import scheme
from paillier_scheme.crypto.errors import InvalidParameterError
from paillier_scheme.crypto.keys import PrivateKey, PublicKey


def encrypt_array(public_key: PublicKey, values, rng=None) -> np.ndarray:
    """
    Encrypts every element of an integer array.

    Args:
        public_key (PublicKey): Key to encrypt under.
        values (array-like): Non-negative integers below N, any shape.
        rng: Random source for the per-element randomness.

    Returns:
        np.ndarray: Ciphertexts (dtype=object, Python ints), same shape.
    """
    values = np.asarray(values)
    flat = values.ravel()
    encrypted_flat = np.array(
        [scheme.encrypt(public_key, int(v), rng) for v in flat],  # Cast to int
        dtype=object,
    )
    return encrypted_flat.reshape(values.shape)


def decrypt_array(private_key: PrivateKey, ciphertexts) -> np.ndarray:
    """
    Decrypts every element of a ciphertext array.

    Plaintexts can exceed int64, so the result keeps dtype=object.
    """
    ciphertexts = np.asarray(ciphertexts, dtype=object)
    decrypted_flat = np.array(
        [scheme.decrypt(private_key, int(c)) for c in ciphertexts.ravel()],
        dtype=object,
    )
    return decrypted_flat.reshape(ciphertexts.shape)


def add_arrays(public_key: PublicKey, c1, c2) -> np.ndarray:
    """Element-wise homomorphic addition of two ciphertext arrays."""
    c1 = np.asarray(c1, dtype=object)
    c2 = np.asarray(c2, dtype=object)
    if c1.shape != c2.shape:
        raise InvalidParameterError(f"shape mismatch: {c1.shape} vs {c2.shape}")

    summed = np.array(
        [scheme.add(public_key, int(a), int(b)) for a, b in zip(c1.ravel(), c2.ravel())],
        dtype=object,
    )
    return summed.reshape(c1.shape)


def multiply_array(public_key: PublicKey, scalar, ciphertexts) -> np.ndarray:
    """Multiplies every encrypted element by the same plaintext scalar."""
    ciphertexts = np.asarray(ciphertexts, dtype=object)
    scalar = int(scalar)
    scaled = np.array(
        [scheme.multiply(public_key, scalar, int(c)) for c in ciphertexts.ravel()],
        dtype=object,
    )
    return scaled.reshape(ciphertexts.shape)


def sum_encrypted(public_key: PublicKey, ciphertexts) -> int:
    """
    Homomorphic sum of all elements: the product of the ciphertexts mod N^2.

    An empty array gives 1, the encryption of 0 with r = 1.
    """
    total = 1
    for c in np.asarray(ciphertexts, dtype=object).ravel():
        total = scheme.add(public_key, total, int(c))
    return total
