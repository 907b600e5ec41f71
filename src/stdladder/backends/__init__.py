"""Backends for stdladder output generation (#define headers, -D flags)."""

from .defines import generate_header, result_to_defines, save_header, to_compiler_flags

__all__ = ["generate_header", "result_to_defines", "save_header", "to_compiler_flags"]
