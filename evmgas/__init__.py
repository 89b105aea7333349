"""Gas metering and execution of the EVM SLOAD and SSTORE instructions."""

__version__ = "0.1.0"
__all__ = ["storage"]