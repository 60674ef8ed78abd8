"""Library lending engine: borrowing lifecycle, penalties, audit trail and sweeps."""

__version__ = "0.1.0"
