"""Serializable models for trees and inclusion proofs."""

from typing import List, Optional, Sequence
from uuid import UUID

from pydantic import BaseModel, Field, StringConstraints, field_validator
from typing_extensions import Annotated

from merkle_proofs.core.merkle import ProofStep, build_tree, verify_proof
from merkle_proofs.core.registry import MerkleTree

# Type aliases
HexHash = Annotated[str, StringConstraints(pattern=r'^(?:[0-9a-f]{2})+$')]


def _lowercase_hex(v):
    if isinstance(v, str):
        return v.lower()
    if isinstance(v, list):
        return [item.lower() if isinstance(item, str) else item for item in v]
    return v


class ProofStepModel(BaseModel):
    """A proof step with its sibling hash hex-encoded."""
    hash: HexHash = Field(
        ...,
        description="Hex-encoded sibling hash."
    )
    is_left_sibling: bool = Field(
        ...,
        description="Whether the sibling is the left operand when recomputing the parent."
    )

    @field_validator('hash', mode='before')
    @classmethod
    def lowercase_hex(cls, v):
        return _lowercase_hex(v)

    @classmethod
    def from_step(cls, step: ProofStep) -> 'ProofStepModel':
        return cls(hash=step.hash.hex(), is_left_sibling=step.is_left_sibling)

    def to_step(self) -> ProofStep:
        return ProofStep(hash=bytes.fromhex(self.hash), is_left_sibling=self.is_left_sibling)


class InclusionProof(BaseModel):
    """An inclusion proof for one leaf, ready for storage or transport."""
    tree_id: Optional[UUID] = Field(
        None,
        description="ID of the tree the proof was created from."
    )
    root_hash: HexHash = Field(
        ...,
        description="Hex-encoded root hash of the tree."
    )
    leaf_hash: HexHash = Field(
        ...,
        description="Hex-encoded hash of the proven leaf."
    )
    steps: List[ProofStepModel] = Field(
        default_factory=list,
        description="Sibling steps ordered from the leaf to the root."
    )

    @field_validator('root_hash', 'leaf_hash', mode='before')
    @classmethod
    def lowercase_hex(cls, v):
        """Accept upper-case hex digits by normalizing them."""
        return _lowercase_hex(v)

    @classmethod
    def from_proof(
        cls,
        root_hash: bytes,
        leaf_hash: bytes,
        proof: Sequence[ProofStep],
        tree_id: Optional[UUID] = None
    ) -> 'InclusionProof':
        return cls(
            tree_id=tree_id,
            root_hash=root_hash.hex(),
            leaf_hash=leaf_hash.hex(),
            steps=[ProofStepModel.from_step(step) for step in proof]
        )

    def to_steps(self) -> List[ProofStep]:
        return [step.to_step() for step in self.steps]

    def verify(self, expected_root: Optional[bytes] = None) -> bool:
        """Verify the proof against ``expected_root``, or the recorded root if omitted."""
        if expected_root is None:
            expected_root = bytes.fromhex(self.root_hash)
        return verify_proof(expected_root, bytes.fromhex(self.leaf_hash), self.to_steps())


class TreeRecord(BaseModel):
    """A tree's ID, root and ordered leaves, enough to rebuild it."""
    tree_id: UUID
    root_hash: HexHash
    leaf_hashes: List[HexHash] = Field(
        ...,
        min_length=1,
        description="Hex-encoded leaf hashes in tree order."
    )

    @field_validator('root_hash', 'leaf_hashes', mode='before')
    @classmethod
    def lowercase_hex(cls, v):
        """Accept upper-case hex digits by normalizing them."""
        return _lowercase_hex(v)

    @classmethod
    def from_tree(cls, tree: MerkleTree, leaf_hashes: Sequence[bytes]) -> 'TreeRecord':
        return cls(
            tree_id=tree.id,
            root_hash=tree.root_hash.hex(),
            leaf_hashes=[leaf.hex() for leaf in leaf_hashes]
        )

    def to_tree(self) -> MerkleTree:
        """Rebuild the tree and check it against the recorded root hash."""
        leaves = [bytes.fromhex(leaf) for leaf in self.leaf_hashes]
        root = build_tree(leaves)
        if root.hash.hex() != self.root_hash:
            raise ValueError(
                f"Rebuilt root {root.hash.hex()} does not match recorded root {self.root_hash}"
            )
        return MerkleTree(id=self.tree_id, root=root, leaf_count=len(leaves))
