"""
Merkle Proofs Command Line Interface

Provides commands for building trees over files, creating inclusion proofs
and verifying them.
"""

import json
import logging
import sys
import uuid
from typing import NoReturn, Optional, Tuple

import click
from pydantic import BaseModel, ValidationError

from merkle_proofs.config import Settings
from merkle_proofs.core.batch import DEFAULT_CHUNK_SIZE, hash_file
from merkle_proofs.core.merkle import MerkleError, create_proof
from merkle_proofs.core.models import InclusionProof, TreeRecord
from merkle_proofs.core.registry import MerkleTree

logger = logging.getLogger(__name__)

# Configure click
CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])


# Helper functions
def _fail(message: str) -> NoReturn:
    click.echo(message, err=True)
    sys.exit(1)


def load_tree_record(file_path: str) -> TreeRecord:
    """Load a tree record from a JSON file."""
    try:
        with open(file_path, 'r') as f:
            return TreeRecord.model_validate(json.load(f))
    except (OSError, ValueError) as e:
        _fail(f"Error loading tree: {e}")


def load_proof(file_path: str) -> InclusionProof:
    """Load an inclusion proof from a JSON file."""
    try:
        with open(file_path, 'r') as f:
            return InclusionProof.model_validate(json.load(f))
    except (OSError, ValueError) as e:
        _fail(f"Error loading proof: {e}")


def save_model(model: BaseModel, file_path: str) -> None:
    """Save a model as indented JSON."""
    try:
        with open(file_path, 'w') as f:
            f.write(model.model_dump_json(indent=2))
        click.echo(f"Saved to {file_path}")
    except OSError as e:
        _fail(f"Error saving {file_path}: {e}")


def parse_hex(value: str, what: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError:
        _fail(f"Invalid {what}: {value!r} is not a hex string")


# Command groups
@click.group(context_settings=CONTEXT_SETTINGS)
@click.option('--log-level', envvar='MERKLE_PROOFS_LOG_LEVEL', default='WARNING',
              show_default=True, help='Logging level')
@click.option('--chunk-size', envvar='MERKLE_PROOFS_CHUNK_SIZE', type=int, default=DEFAULT_CHUNK_SIZE,
              show_default=True, help='Bytes read per iteration when hashing files')
@click.pass_context
def cli(ctx: click.Context, log_level: str, chunk_size: int):
    """Merkle Proofs - inclusion proofs over batches of files."""
    try:
        settings = Settings(log_level=log_level, chunk_size=chunk_size)
    except ValidationError as e:
        raise click.BadParameter(str(e))
    settings.configure_logging()
    ctx.obj = settings


# Tree commands
@cli.group()
def tree():
    """Build and inspect trees."""
    pass


@tree.command()
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', required=True, help='Output file for the tree record')
@click.option('--batch-id', help='Tree ID (default: random UUID)')
@click.pass_obj
def build(settings: Settings, files: Tuple[str, ...], output: str, batch_id: Optional[str]):
    """Build a tree over the content hashes of FILES, in the given order."""
    tree_id = None
    if batch_id:
        try:
            tree_id = uuid.UUID(batch_id)
        except ValueError:
            _fail(f"Invalid batch ID: {batch_id}")

    try:
        leaves = [hash_file(path, settings.chunk_size) for path in files]
        merkle_tree = MerkleTree.build(leaves, tree_id=tree_id)
    except (OSError, MerkleError) as e:
        _fail(f"Error building tree: {e}")

    logger.info("Built tree %s over %d files", merkle_tree.id, len(files))
    save_model(TreeRecord.from_tree(merkle_tree, leaves), output)
    click.echo(f"Tree ID: {merkle_tree.id}")
    click.echo(f"Root hash: {merkle_tree.root_hash.hex()}")


@tree.command()
@click.argument('tree_file', type=click.Path(exists=True))
def show(tree_file: str):
    """Show information about a tree record."""
    record = load_tree_record(tree_file)
    try:
        merkle_tree = record.to_tree()
    except ValueError as e:
        _fail(f"Invalid tree record: {e}")

    click.echo(f"Tree ID: {merkle_tree.id}")
    click.echo(f"Leaves: {merkle_tree.leaf_count}")
    click.echo(f"Height: {merkle_tree.height}")
    click.echo(f"Root hash: {merkle_tree.root_hash.hex()}")


# Proof commands
@cli.group()
def proof():
    """Create and verify inclusion proofs."""
    pass


@proof.command()
@click.argument('tree_file', type=click.Path(exists=True))
@click.option('--file', 'file_path', type=click.Path(exists=True, dir_okay=False),
              help='File whose content hash should be proven')
@click.option('--leaf', help='Hex-encoded leaf hash to prove')
@click.option('--output', '-o', required=True, help='Output file for the proof')
@click.pass_obj
def create(settings: Settings, tree_file: str, file_path: Optional[str], leaf: Optional[str], output: str):
    """Create an inclusion proof for a leaf of a tree."""
    if bool(file_path) == bool(leaf):
        _fail("Exactly one of --file or --leaf is required")

    record = load_tree_record(tree_file)
    try:
        merkle_tree = record.to_tree()
    except ValueError as e:
        _fail(f"Invalid tree record: {e}")

    leaf_hash = hash_file(file_path, settings.chunk_size) if file_path else parse_hex(leaf, 'leaf hash')

    try:
        steps = create_proof(merkle_tree.root, leaf_hash)
    except MerkleError as e:
        _fail(str(e))

    inclusion_proof = InclusionProof.from_proof(
        merkle_tree.root_hash, leaf_hash, steps, tree_id=merkle_tree.id
    )
    save_model(inclusion_proof, output)


@proof.command()
@click.argument('proof_file', type=click.Path(exists=True))
@click.option('--root', help='Expected root hash (default: the root recorded in the proof)')
@click.option('--file', 'file_path', type=click.Path(exists=True, dir_okay=False),
              help='File that the proven leaf should be the content hash of')
@click.pass_obj
def verify(settings: Settings, proof_file: str, root: Optional[str], file_path: Optional[str]):
    """Verify an inclusion proof."""
    inclusion_proof = load_proof(proof_file)

    if file_path and hash_file(file_path, settings.chunk_size).hex() != inclusion_proof.leaf_hash:
        _fail(f"❌ {file_path} does not match the proven leaf")

    expected_root = parse_hex(root, 'root hash') if root else None
    if inclusion_proof.verify(expected_root):
        click.echo("✅ Proof is valid")
        sys.exit(0)
    else:
        _fail("❌ Invalid proof")


def main():
    cli()


# Main entry point
if __name__ == '__main__':
    main()
