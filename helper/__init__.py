"""
Phalcon Runtime - Helper Utilities

Stateless helpers grouped by concern:
- strings: case conversion, affixes, suffix counters, random tokens
- arrays: mapping / sequence wrappers with uniform field access
- numbers: range checks
- fs: path-name parsing
- jsonutil: JSON codec with framework exceptions

Usage:
    from helper import strings, arrays

    strings.camelize("coco_bongo")          # "CocoBongo"
    arrays.pluck(users, "name")
"""

from helper import arrays, fs, jsonutil, numbers, strings

__all__ = [
    "arrays",
    "fs",
    "jsonutil",
    "numbers",
    "strings",
]
