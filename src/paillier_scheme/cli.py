import argparse
import time

from paillier_scheme.crypto import scheme
from paillier_scheme.crypto.errors import PaillierError
from paillier_scheme.crypto.randomness import SecureRandomSource, SeededRandomSource


def make_source(seed):
    """Seeded (reproducible) source when a seed is given, OS CSPRNG otherwise."""
    if seed is None:
        return SecureRandomSource()
    print(f"WARNING: using seeded random source (seed={seed}); output is NOT secure.")
    return SeededRandomSource(seed)


# --- Command Handlers ---


def handle_demo(args) -> int:
    """Runs the correctness, addition and multiplication checks."""
    rng = make_source(args.seed)

    print(f"Generating Paillier keys ({args.bits}-bit primes)...")
    start = time.perf_counter()
    keypair = scheme.generate_keypair(args.bits, rng)
    pk, sk = keypair
    print(f"Paillier keys generated in {(time.perf_counter() - start)*1000:.3f}ms")
    n = pk.n

    # 1. Dec(sk, Enc(pk, m)) = m
    print("Testing correctness:")
    start = time.perf_counter()
    m = args.message % n
    recovered = scheme.decrypt(sk, scheme.encrypt(pk, m, rng))
    print(f"  Initial message: {m}")
    print(f"  Message after encryption and decryption: {recovered}")
    print(f"  Round trip in {(time.perf_counter() - start)*1000:.3f} ms")
    correct = recovered == m

    # 2. Dec(sk, Add(pk, Enc(pk, m1), Enc(pk, m2))) = m1 + m2 mod N
    print("Testing homomorphic addition:")
    m1, m2 = args.m1 % n, args.m2 % n
    expected_sum = (m1 + m2) % n
    c_sum = scheme.add(pk, scheme.encrypt(pk, m1, rng), scheme.encrypt(pk, m2, rng))
    decrypted_sum = scheme.decrypt(sk, c_sum)
    print(f"  m1 + m2 mod N: {expected_sum}")
    print(f"  Decryption of addition: {decrypted_sum}")
    additive = decrypted_sum == expected_sum

    # 3. Dec(sk, Multiply(pk, m1, Enc(pk, m2))) = m1 * m2 mod N
    print("Testing homomorphic multiplication:")
    expected_product = (m1 * m2) % n
    c_product = scheme.multiply(pk, m1, scheme.encrypt(pk, m2, rng))
    decrypted_product = scheme.decrypt(sk, c_product)
    print(f"  m1 * m2 mod N: {expected_product}")
    print(f"  Decryption of multiplication: {decrypted_product}")
    multiplicative = decrypted_product == expected_product

    for name, holds in (("correctness", correct),
                        ("homomorphic addition", additive),
                        ("homomorphic multiplication", multiplicative)):
        print(f"{name}: {'PASSED' if holds else 'FAILED'}")

    return 0 if (correct and additive and multiplicative) else 1


def handle_benchmark(args) -> int:
    """Times each scheme operation, averaged over --rounds runs."""
    rng = make_source(args.seed)
    rounds = args.rounds

    print(f"--- Benchmark: {args.bits}-bit primes, {rounds} rounds ---")
    start = time.perf_counter()
    pk, sk = scheme.generate_keypair(args.bits, rng)
    print(f"Key generation: {(time.perf_counter() - start)*1000:.3f} ms")

    messages = [rng.randbits(pk.bit_length) % pk.n for _ in range(rounds)]

    start = time.perf_counter()
    ciphertexts = [scheme.encrypt(pk, m, rng) for m in messages]
    print(f"Encrypt (avg): {(time.perf_counter() - start)*1000/rounds:.3f} ms")

    start = time.perf_counter()
    for c in ciphertexts:
        scheme.decrypt(sk, c)
    print(f"Decrypt (avg): {(time.perf_counter() - start)*1000/rounds:.3f} ms")

    start = time.perf_counter()
    for c in ciphertexts:
        scheme.add(pk, c, ciphertexts[0])
    print(f"Add (avg): {(time.perf_counter() - start)*1000/rounds:.3f} ms")

    start = time.perf_counter()
    for m, c in zip(messages, ciphertexts):
        scheme.multiply(pk, m, c)
    print(f"Multiply (avg): {(time.perf_counter() - start)*1000/rounds:.3f} ms")

    print("--- Benchmark finished. ---")
    return 0


# --- Argument Parser Configuration (argparse) ---


def build_parser():
    parser = argparse.ArgumentParser(
        description="Paillier cryptosystem: demonstration and benchmarks."
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    # --- Command 1: demo ---
    parser_demo = subparsers.add_parser(
        'demo',
        help="Check round trip and both homomorphic properties on fresh keys."
    )
    parser_demo.add_argument(
        '--bits',
        type=int,
        default=55,
        help="Bit size of each prime p and q. (Default: 55)"
    )
    parser_demo.add_argument(
        '--message',
        type=int,
        default=5555,
        help="Message for the round-trip check. (Default: 5555)"
    )
    parser_demo.add_argument(
        '--m1',
        type=int,
        default=45,
        help="First operand; also the scalar for multiplication. (Default: 45)"
    )
    parser_demo.add_argument(
        '--m2',
        type=int,
        default=67,
        help="Second operand. (Default: 67)"
    )
    parser_demo.add_argument(
        '--seed',
        type=int,
        default=None,
        help="Seed for a reproducible, insecure random source."
    )
    parser_demo.set_defaults(func=handle_demo)

    # --- Command 2: benchmark ---
    parser_bench = subparsers.add_parser(
        'benchmark',
        help="Time key generation, encryption, decryption and homomorphic ops."
    )
    parser_bench.add_argument(
        '--bits',
        type=int,
        default=512,
        help="Bit size of each prime p and q. (Default: 512)"
    )
    parser_bench.add_argument(
        '--rounds',
        type=int,
        default=10,
        help="Number of timed operations per step. (Default: 10)"
    )
    parser_bench.add_argument(
        '--seed',
        type=int,
        default=None,
        help="Seed for a reproducible, insecure random source."
    )
    parser_bench.set_defaults(func=handle_benchmark)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if getattr(args, 'rounds', 1) <= 0:
        parser.error("--rounds must be positive")
    try:
        return args.func(args)
    except PaillierError as e:
        print(f"Error: {e}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
