"""A Universal Machine emulator: bit fields, program loading, decoding, execution and test-program generation."""

__version__ = "0.1.0"
__all__ = ["bitpack", "cli", "decode", "loader", "machine", "testgen"]