"""Nifty - layered NFT collection generator."""

__version__ = "0.1.0"
