"""
Merkle tree construction, inclusion proofs and proof verification.
"""

import hashlib
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class MerkleError(ValueError):
    """Base class for Merkle tree errors."""

    pass


class EmptyInputError(MerkleError):
    """Raised when a tree is requested for zero leaves."""

    def __init__(self) -> None:
        super().__init__("Cannot build a Merkle tree from an empty leaf list")


class HashNotFoundError(MerkleError):
    """Raised when a proof is requested for a hash that is not a leaf of the tree."""

    def __init__(self, target_hash: bytes):
        self.target_hash = target_hash
        super().__init__(f"Hash not found in the Merkle tree: {target_hash.hex()}")


@dataclass(frozen=True)
class Node:
    """A node in the Merkle tree."""
    hash: bytes
    left: Optional['Node'] = None
    right: Optional['Node'] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None


@dataclass(frozen=True)
class ProofStep:
    """One sibling on the path from a leaf to the root.

    ``is_left_sibling`` is True when the sibling is the left operand of the
    parent hash, i.e. the running hash goes on the right.
    """
    hash: bytes
    is_left_sibling: bool


Proof = List[ProofStep]


def combine(left: bytes, right: bytes) -> bytes:
    """Hash two child hashes into their parent hash: SHA256(left || right)."""
    return hashlib.sha256(left + right).digest()


def build_tree(leaf_hashes: Sequence[bytes]) -> Node:
    """
    Build a Merkle tree from an ordered list of precomputed leaf hashes.

    When a level has an odd number of nodes, its last node is paired with
    itself, so the last hash is combined with its own value.

    Args:
        leaf_hashes: The leaf hashes, in order. Must not be empty.

    Returns:
        The root node. For a single leaf this is the leaf itself.

    Raises:
        EmptyInputError: If ``leaf_hashes`` is empty.
    """
    nodes = []
    for leaf in leaf_hashes:
        if not isinstance(leaf, (bytes, bytearray, memoryview)):
            raise TypeError(f"Leaf hashes must be bytes, got {type(leaf).__name__}")
        nodes.append(Node(hash=bytes(leaf)))

    if not nodes:
        raise EmptyInputError()

    leaf_count = len(nodes)

    # Build the tree from the leaves up
    while len(nodes) > 1:
        # If odd number of nodes, duplicate the last one
        if len(nodes) % 2 != 0:
            nodes.append(nodes[-1])

        new_level = []
        for i in range(0, len(nodes), 2):
            left = nodes[i]
            right = nodes[i + 1]
            new_level.append(Node(hash=combine(left.hash, right.hash), left=left, right=right))

        nodes = new_level

    logger.debug("Built Merkle tree with %d leaves, root %s", leaf_count, nodes[0].hash.hex())
    return nodes[0]


def tree_height(root: Node) -> int:
    """Number of edges from the root down its leftmost path."""
    height = 0
    node = root
    while node.left is not None:
        node = node.left
        height += 1
    return height


def create_proof(root: Node, target_hash: bytes) -> Proof:
    """
    Create an inclusion proof for a leaf hash.

    The tree is searched depth-first, left subtree before right; the first
    matching leaf is used when the hash occurs more than once.

    Args:
        root: Root of the tree to search.
        target_hash: The leaf hash to prove, compared byte for byte.

    Returns:
        Proof steps ordered from the leaf up to the root. Empty when the root
        itself is the matching leaf.

    Raises:
        HashNotFoundError: If no leaf under ``root`` equals ``target_hash``.
    """
    target_hash = bytes(target_hash)

    # Each frame holds a node and the steps that lead from it to the root,
    # ordered root-first. The right child is pushed first so the left
    # subtree is explored first.
    stack: List[Tuple[Node, Tuple[ProofStep, ...]]] = [(root, ())]
    while stack:
        node, path = stack.pop()

        if node.is_leaf:
            if node.hash == target_hash:
                proof = list(reversed(path))
                logger.debug("Created proof of %d steps for %s", len(proof), target_hash.hex())
                return proof
            continue

        stack.append((node.right, path + (ProofStep(hash=node.left.hash, is_left_sibling=True),)))
        stack.append((node.left, path + (ProofStep(hash=node.right.hash, is_left_sibling=False),)))

    raise HashNotFoundError(target_hash)


def verify_proof(expected_root: bytes, leaf_hash: bytes, proof: Sequence[ProofStep]) -> bool:
    """
    Verify a Merkle inclusion proof.

    Args:
        expected_root: The root hash the proof should lead to.
        leaf_hash: The hash of the leaf to verify.
        proof: Sibling steps ordered from the leaf to the root.

    Returns:
        True if replaying the proof from ``leaf_hash`` yields ``expected_root``.
    """
    current = bytes(leaf_hash)
    for step in proof:
        if step.is_left_sibling:
            current = combine(step.hash, current)
        else:
            current = combine(current, step.hash)

    if current != expected_root:
        logger.debug("Proof mismatch: computed root %s", current.hex())
        return False
    return True
