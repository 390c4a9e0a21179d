"""baselume: score ledger, daily ranking and champion minting for the drawing game."""

__version__ = "0.1.0"
