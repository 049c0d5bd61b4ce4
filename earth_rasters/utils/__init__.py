"""Paths, logging and plotting helpers."""
