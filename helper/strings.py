"""
Phalcon Runtime - String Helpers

Stateless string utilities: case conversion, affix checks, numeric
suffix handling, random tokens and small path formatting helpers.
"""

from __future__ import annotations

import os
import random as _random
import re
import secrets
import string
from collections import Counter
from pathlib import PurePath
from typing import Optional

from config import get_config
from core.errors import HelperError

RANDOM_ALNUM = 0     # [a-zA-Z0-9]
RANDOM_ALPHA = 1     # [a-zA-Z]
RANDOM_HEXDEC = 2    # [0-9a-f]
RANDOM_NUMERIC = 3   # [0-9]
RANDOM_NOZERO = 4    # [1-9]
RANDOM_DISTINCT = 5  # uppercase alphanumerics without look-alikes

RANDOM_POOLS = {
    RANDOM_ALPHA: string.ascii_lowercase + string.ascii_uppercase,
    RANDOM_HEXDEC: string.digits + "abcdef",
    RANDOM_NUMERIC: string.digits,
    RANDOM_NOZERO: "123456789",
    RANDOM_DISTINCT: "2345679ACDEFHJKLMNPRSTUVWXYZ",
    RANDOM_ALNUM: string.digits + string.ascii_lowercase + string.ascii_uppercase,
}

_VOWELS = re.compile(r"[aeiou]", re.IGNORECASE)
_HUMANIZE = re.compile(r"[_-]+")
_WHITESPACE = re.compile(r"\s+")
# Collapse repeated slashes except those following a scheme colon
_DOUBLE_SLASHES = re.compile(r"(?<!:)//+")


def camelize(text: str, delimiters: Optional[str] = None) -> str:
    """
    Convert ``coco_bongo`` / ``co-co-bon-go`` style text to ``CocoBongo``.

    Every character found in `delimiters` (default ``"_-"``) is dropped;
    the character following a delimiter, or the first character, is
    upper-cased and every other character lower-cased.

    Raises:
        HelperError: if `delimiters` is an empty string
    """
    if delimiters is None:
        delimiters = "_-"
    elif delimiters == "":
        raise HelperError(
            "The second argument passed to the camelize() must be a string "
            "containing at least one character",
            helper="camelize",
        )

    result = []
    after_delimiter = True
    for char in text:
        if char in delimiters:
            after_delimiter = True
            continue
        if after_delimiter:
            result.append(char.upper())
            after_delimiter = False
        else:
            result.append(char.lower())

    return "".join(result)


def uncamelize(text: str, delimiter: Optional[str] = None) -> str:
    """
    Convert ``CocoBongo`` style text to ``coco_bongo``.

    Raises:
        HelperError: if `delimiter` is not exactly one character
    """
    if delimiter is None:
        delimiter = "_"
    elif len(delimiter) != 1:
        raise HelperError(
            "The second argument passed to the uncamelize() must be a string of one character",
            helper="uncamelize",
        )

    result = []
    for index, char in enumerate(text):
        if char.isupper():
            if index > 0:
                result.append(delimiter)
            result.append(char.lower())
        else:
            result.append(char)

    return "".join(result)


def concat(delimiter: str, *parts: str) -> str:
    """
    Join `parts` with `delimiter`, collapsing duplicated delimiters.

    A leading delimiter on the first part and a trailing one on the last
    part are kept:

        concat("/", "/tmp/", "/folder_1/", "/folder_2", "folder_3/")
        # "/tmp/folder_1/folder_2/folder_3/"

    Raises:
        HelperError: if fewer than two parts are given
    """
    if len(parts) < 2:
        raise HelperError("concat needs at least three parameters", helper="concat")

    prefix = delimiter if starts_with(parts[0], delimiter) else ""
    suffix = delimiter if ends_with(parts[-1], delimiter) else ""

    return prefix + delimiter.join(part.strip(delimiter) for part in parts) + suffix


def count_vowels(text: str) -> int:
    return len(_VOWELS.findall(text))


def decapitalize(text: str, upper_rest: bool = False) -> str:
    """Lower-case the first character; optionally upper-case the rest."""
    if not text:
        return text
    rest = text[1:].upper() if upper_rest else text[1:]
    return text[0].lower() + rest


def increment(text: str, separator: str = "_") -> str:
    """
    Add or increment the numeric suffix of `text`.

        increment("a")    # "a_1"
        increment("a_1")  # "a_2"
    """
    head, found, suffix = text.rpartition(separator)
    if found and suffix.isdigit():
        return f"{head}{separator}{int(suffix) + 1}"
    return f"{text}{separator}1"


def decrement(text: str, separator: str = "_") -> str:
    """
    Decrement the numeric suffix of `text`, dropping it once it reaches zero.

        decrement("a_2")  # "a_1"
        decrement("a_1")  # "a"
        decrement("a")    # "a"
    """
    head, found, suffix = text.rpartition(separator)
    if not (found and suffix.isdigit()):
        # No suffix counts as 1, which decrements to nothing
        return text

    number = int(suffix) - 1
    if number <= 0:
        return head
    return f"{head}{separator}{number}"


def dir_from_file(file: str) -> str:
    """
    Build a nested directory path from a file name.

        dir_from_file("file1234.jpg")  # "fi/le/12/"
    """
    name = PurePath(file).stem
    start = name[:-2].replace(".", "-")
    if not start:
        start = name[:1]

    chunks = [start[index:index + 2] for index in range(0, len(start), 2)]
    return "/".join(chunks) + "/"


def dir_separator(directory: str) -> str:
    """Ensure `directory` ends with exactly one path separator."""
    return directory.rstrip(os.sep) + os.sep


def dynamic(
    text: str,
    left_delimiter: str = "{",
    right_delimiter: str = "}",
    separator: str = "|",
) -> str:
    """
    Replace each ``{a|b|c}`` group with one randomly chosen alternative.

        dynamic("{Hi|Hello}, my name is a {Bob|Mark|Jon}!")
        # "Hello, my name is a Mark!"

    Raises:
        HelperError: if the delimiters are unbalanced
    """
    if text.count(left_delimiter) != text.count(right_delimiter):
        raise HelperError(f'Syntax error in string "{text}"', helper="dynamic")

    left = re.escape(left_delimiter)
    right = re.escape(right_delimiter)
    pattern = re.compile(f"{left}([^{left}{right}]+){right}")

    for match in list(pattern.finditer(text)):
        word = _random.choice(match.group(1).split(separator))
        text = text.replace(match.group(0), word, 1)

    return text


def starts_with(text: str, start: str, ignore_case: bool = True) -> bool:
    # fold whole strings; folding can change length ("ß" -> "ss")
    if ignore_case:
        return text.casefold().startswith(start.casefold())
    return text.startswith(start)


def ends_with(text: str, end: str, ignore_case: bool = True) -> bool:
    if ignore_case:
        return text.casefold().endswith(end.casefold())
    return text.endswith(end)


def first_between(text: str, start: str, end: str) -> str:
    """
    Return the text between the first `start` and the following `end`.

        first_between("This is a [custom] string", "[", "]")  # "custom"
    """
    begin = text.find(start)
    if begin == -1:
        return ""
    remainder = text[begin:]
    finish = remainder.find(end)
    if finish == -1:
        return ""
    return remainder[:finish].strip(start + end)


def humanize(text: str) -> str:
    """Replace runs of underscores and dashes with a single space."""
    return _HUMANIZE.sub(" ", text.strip())


def includes(needle: str, haystack: str) -> bool:
    return needle in haystack


def is_anagram(first: str, second: str) -> bool:
    return Counter(first) == Counter(second)


def is_lower(text: str) -> bool:
    return text == text.lower()


def is_palindrome(text: str) -> bool:
    return text[::-1] == text


def is_upper(text: str) -> bool:
    return text == text.upper()


def lower(text: str) -> str:
    return text.lower()


def upper(text: str) -> str:
    return text.upper()


def random(type: int = RANDOM_ALNUM, length: Optional[int] = None) -> str:
    """
    Generate a random string of `length` characters drawn from the pool
    selected by `type` (one of the RANDOM_* constants). Unknown types
    fall back to RANDOM_ALNUM; `length` defaults to the configured
    ``PHALCON_RANDOM_LENGTH`` (8).
    """
    if length is None:
        length = get_config().helper.random_length
    pool = RANDOM_POOLS.get(type, RANDOM_POOLS[RANDOM_ALNUM])
    return "".join(secrets.choice(pool) for _ in range(length))


def reduce_slashes(text: str) -> str:
    """
    Collapse repeated slashes, leaving ``scheme://`` intact.

        reduce_slashes("http://foo//bar/baz")  # "http://foo/bar/baz"
    """
    return _DOUBLE_SLASHES.sub("/", text)


def underscore(text: str) -> str:
    """Replace runs of whitespace with a single underscore."""
    return _WHITESPACE.sub("_", text.strip())
