"""Unit tests for upload batch trees."""

import hashlib
import uuid

import pytest

from merkle_proofs.core.batch import build_batch_tree, build_file_tree, hash_content, hash_file
from merkle_proofs.core.merkle import EmptyInputError, build_tree, create_proof, verify_proof


def test_hash_content() -> None:
    assert hash_content(b"hello") == hashlib.sha256(b"hello").digest()


@pytest.mark.parametrize("chunk_size", [1, 3, 64 * 1024])
def test_hash_file_matches_content_hash(tmp_path, chunk_size: int) -> None:
    path = tmp_path / "data.bin"
    data = bytes(range(256)) * 10
    path.write_bytes(data)
    assert hash_file(path, chunk_size) == hash_content(data)


def test_hash_file_rejects_bad_chunk_size(tmp_path) -> None:
    path = tmp_path / "data.bin"
    path.write_bytes(b"x")
    with pytest.raises(ValueError):
        hash_file(path, 0)


def test_batch_tree_leaves_are_content_hashes() -> None:
    contents = [b"one", b"two", b"three"]
    batch_id = uuid.uuid4()
    tree = build_batch_tree(contents, batch_id=batch_id)

    assert tree.id == batch_id
    assert tree.leaf_count == 3
    assert tree.root_hash == build_tree([hash_content(c) for c in contents]).hash

    target = hash_content(b"two")
    assert verify_proof(tree.root_hash, target, create_proof(tree.root, target))


def test_empty_batch_fails() -> None:
    with pytest.raises(EmptyInputError):
        build_batch_tree([])


def test_file_tree_matches_batch_tree(tmp_path) -> None:
    contents = [b"first file", b"second file"]
    paths = []
    for i, data in enumerate(contents):
        path = tmp_path / f"file{i}.txt"
        path.write_bytes(data)
        paths.append(path)

    file_tree = build_file_tree(paths, chunk_size=4)
    assert file_tree.root_hash == build_batch_tree(contents).root_hash
    assert file_tree.id != build_file_tree(paths).id
