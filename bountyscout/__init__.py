"""bountyscout - viability scoring and go/no-go decisions for bounties."""

__version__ = "0.1.0"
