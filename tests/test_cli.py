"""Tests for the command line interface."""

import json
import uuid

import pytest
from click.testing import CliRunner

from merkle_proofs.cli.main import cli
from merkle_proofs.core.batch import hash_content
from merkle_proofs.core.merkle import build_tree


@pytest.fixture
def files(tmp_path):
    paths = []
    for name, data in [("a.txt", b"apple"), ("b.txt", b"banana"), ("c.txt", b"cherry")]:
        path = tmp_path / name
        path.write_bytes(data)
        paths.append(str(path))
    return paths


@pytest.fixture
def runner():
    return CliRunner()


def build(runner, files, tree_file, *extra):
    result = runner.invoke(cli, ["tree", "build", *files, "-o", str(tree_file), *extra])
    assert result.exit_code == 0, result.output
    return json.loads(tree_file.read_text())


def test_tree_build(runner, files, tmp_path) -> None:
    """Test that a built tree record holds the batch ID, root and file hashes."""
    batch_id = uuid.uuid4()
    record = build(runner, files, tmp_path / "tree.json", "--batch-id", str(batch_id))

    expected = build_tree([hash_content(d) for d in (b"apple", b"banana", b"cherry")])
    assert record["tree_id"] == str(batch_id)
    assert record["root_hash"] == expected.hash.hex()
    assert record["leaf_hashes"][1] == hash_content(b"banana").hex()


def test_tree_build_bad_batch_id(runner, files, tmp_path) -> None:
    """Test that a malformed batch ID is rejected."""
    result = runner.invoke(cli, ["tree", "build", *files, "-o", str(tmp_path / "t.json"), "--batch-id", "nope"])
    assert result.exit_code == 1
    assert "Invalid batch ID" in result.output


def test_tree_show(runner, files, tmp_path) -> None:
    """Test that tree details are printed from a record."""
    record = build(runner, files, tmp_path / "tree.json")
    result = runner.invoke(cli, ["tree", "show", str(tmp_path / "tree.json")])
    assert result.exit_code == 0
    assert "Leaves: 3" in result.output
    assert "Height: 2" in result.output
    assert record["root_hash"] in result.output


def test_proof_create_and_verify(runner, files, tmp_path) -> None:
    """Test creating a proof for a file and verifying it against the root."""
    tree_file, proof_file = tmp_path / "tree.json", tmp_path / "proof.json"
    record = build(runner, files, tree_file)

    result = runner.invoke(cli, ["proof", "create", str(tree_file), "--file", files[2], "-o", str(proof_file)])
    assert result.exit_code == 0, result.output
    proof = json.loads(proof_file.read_text())
    assert proof["leaf_hash"] == hash_content(b"cherry").hex()
    assert len(proof["steps"]) == 2

    result = runner.invoke(cli, [
        "proof", "verify", str(proof_file), "--root", record["root_hash"], "--file", files[2]
    ])
    assert result.exit_code == 0
    assert "Proof is valid" in result.output


def test_proof_create_from_leaf_hash(runner, files, tmp_path) -> None:
    """Test creating a proof from a hex leaf hash."""
    tree_file, proof_file = tmp_path / "tree.json", tmp_path / "proof.json"
    build(runner, files, tree_file)
    leaf = hash_content(b"apple").hex()

    result = runner.invoke(cli, ["proof", "create", str(tree_file), "--leaf", leaf, "-o", str(proof_file)])
    assert result.exit_code == 0, result.output
    assert runner.invoke(cli, ["proof", "verify", str(proof_file)]).exit_code == 0


def test_proof_create_missing_leaf(runner, files, tmp_path) -> None:
    """Test that no proof is written for a hash outside the tree."""
    tree_file = tmp_path / "tree.json"
    build(runner, files, tree_file)
    result = runner.invoke(cli, [
        "proof", "create", str(tree_file), "--leaf", hash_content(b"durian").hex(), "-o", str(tmp_path / "p.json")
    ])
    assert result.exit_code == 1
    assert not (tmp_path / "p.json").exists()


def test_proof_create_requires_one_target(runner, files, tmp_path) -> None:
    """Test that exactly one of --file or --leaf must be given."""
    tree_file = tmp_path / "tree.json"
    build(runner, files, tree_file)
    result = runner.invoke(cli, ["proof", "create", str(tree_file), "-o", str(tmp_path / "p.json")])
    assert result.exit_code == 1
    assert "Exactly one of --file or --leaf" in result.output


def test_proof_verify_wrong_root(runner, files, tmp_path) -> None:
    """Test that verification against another root fails."""
    tree_file, proof_file = tmp_path / "tree.json", tmp_path / "proof.json"
    build(runner, files, tree_file)
    runner.invoke(cli, ["proof", "create", str(tree_file), "--file", files[0], "-o", str(proof_file)])

    result = runner.invoke(cli, ["proof", "verify", str(proof_file), "--root", hash_content(b"x").hex()])
    assert result.exit_code == 1
    assert "Invalid proof" in result.output


def test_proof_verify_wrong_file(runner, files, tmp_path) -> None:
    """Test that verification fails when the file is not the proven leaf."""
    tree_file, proof_file = tmp_path / "tree.json", tmp_path / "proof.json"
    build(runner, files, tree_file)
    runner.invoke(cli, ["proof", "create", str(tree_file), "--file", files[0], "-o", str(proof_file)])

    result = runner.invoke(cli, ["proof", "verify", str(proof_file), "--file", files[1]])
    assert result.exit_code == 1
    assert "does not match the proven leaf" in result.output


def test_valid_log_level(runner, files, tmp_path) -> None:
    """Test that a known log level is accepted."""
    build(runner, files, tmp_path / "tree.json")
    result = runner.invoke(cli, ["--log-level", "debug", "tree", "show", str(tmp_path / "tree.json")])
    assert result.exit_code == 0, result.output


def test_invalid_log_level(runner, files, tmp_path) -> None:
    """Test that an unknown log level is a usage error."""
    build(runner, files, tmp_path / "tree.json")
    result = runner.invoke(cli, ["--log-level", "LOUD", "tree", "show", str(tmp_path / "tree.json")])
    assert result.exit_code == 2
    assert "Unknown log level" in result.output


def test_invalid_chunk_size(runner, files, tmp_path) -> None:
    """Test that a non-positive chunk size is a usage error."""
    build(runner, files, tmp_path / "tree.json")
    result = runner.invoke(cli, ["--chunk-size", "0", "tree", "show", str(tmp_path / "tree.json")])
    assert result.exit_code == 2
