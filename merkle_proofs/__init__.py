"""
Merkle Proofs - inclusion proofs over batches of hashed data.

This package builds binary Merkle trees from ordered leaf hashes, creates
inclusion proofs for individual leaves, verifies them against a root hash,
and keeps built trees in a thread-safe registry keyed by tree ID.
"""

from importlib.metadata import PackageNotFoundError, version

# Set up version
__version__ = "0.1.0"

try:
    __version__ = version("merkle-proofs")
except PackageNotFoundError:
    pass

# Core components
from merkle_proofs.core.batch import build_batch_tree, build_file_tree, hash_content, hash_file
from merkle_proofs.core.merkle import (
    EmptyInputError,
    HashNotFoundError,
    MerkleError,
    Node,
    Proof,
    ProofStep,
    build_tree,
    combine,
    create_proof,
    tree_height,
    verify_proof,
)
from merkle_proofs.core.models import InclusionProof, ProofStepModel, TreeRecord
from merkle_proofs.core.registry import MerkleTree, TreeNotFoundError, TreeRegistry

__all__ = [
    # Core functionality
    "combine",
    "build_tree",
    "create_proof",
    "verify_proof",
    "tree_height",
    "Node",
    "Proof",
    "ProofStep",
    "MerkleTree",
    "TreeRegistry",
    # Batches
    "hash_content",
    "hash_file",
    "build_batch_tree",
    "build_file_tree",
    # Errors
    "MerkleError",
    "EmptyInputError",
    "HashNotFoundError",
    "TreeNotFoundError",
    # Models
    "InclusionProof",
    "ProofStepModel",
    "TreeRecord",
]
