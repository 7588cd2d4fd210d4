"""Boot sequence, socket library, heap allocator, ELF reader and .fnk header tool for a small kernel."""

__version__ = "0.1.0"