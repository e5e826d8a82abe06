"""Command line interface for merkle-proofs."""
