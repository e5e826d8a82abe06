"""Core Merkle tree engine: tree building, proofs, verification and the tree registry."""
