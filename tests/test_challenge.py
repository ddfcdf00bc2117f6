from eth_utils import keccak

from pdpind.indexing.challenge import generate_challenge_index, generate_challenge_indices

SEED = bytes.fromhex("5a" * 32)


def expected(seed: bytes, set_id: int, proof_index: int, total: int) -> int:
    digest = keccak(seed.rjust(32, b"\x00") + set_id.to_bytes(32, "big") + proof_index.to_bytes(32, "big"))
    return int.from_bytes(digest, "big") % total


def test_matches_keccak_derivation() -> None:
    for proof_index in range(5):
        assert generate_challenge_index(SEED, 12, proof_index, 1000) == expected(SEED, 12, proof_index, 1000)


def test_deterministic_and_in_range() -> None:
    a = [generate_challenge_index(SEED, 3, i, 17) for i in range(50)]
    b = [generate_challenge_index(SEED, 3, i, 17) for i in range(50)]
    assert a == b
    assert all(0 <= i < 17 for i in a)


def test_depends_on_set_and_proof_index() -> None:
    by_set = {generate_challenge_index(SEED, s, 0, 2**64) for s in range(10)}
    by_proof = {generate_challenge_index(SEED, 1, p, 2**64) for p in range(10)}
    assert len(by_set) == 10
    assert len(by_proof) == 10


def test_no_leaves() -> None:
    assert generate_challenge_index(SEED, 1, 0, 0) is None
    assert list(generate_challenge_indices(SEED, 1, 5, 0)) == []


def test_short_seed_is_left_padded() -> None:
    short = b"\x01\x02"
    assert generate_challenge_index(short, 4, 2, 999) == generate_challenge_index(bytes(30) + short, 4, 2, 999)


def test_indices_sequence() -> None:
    assert list(generate_challenge_indices(SEED, 8, 3, 64)) == [expected(SEED, 8, i, 64) for i in range(3)]
