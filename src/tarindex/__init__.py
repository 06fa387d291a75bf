"""Index the entries of TAR archives without extracting them."""
__version__ = "0.1.0"
