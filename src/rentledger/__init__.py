"""rentledger — equipment rental accrual and worker payment tracking."""

__version__ = "0.1.0"
