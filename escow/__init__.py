"""escow: facility lookup reconciliation and breeding-record conversion."""

__version__ = "0.3.0"
