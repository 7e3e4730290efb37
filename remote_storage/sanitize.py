"""Filename sanitization and extension splitting."""

import unicodedata

import regex

# Anything that is not a word character, dot, dash or plus. Unicode word
# characters include combining marks (Devanagari vowel signs, Arabic harakat).
SANITIZE_REGEXP = regex.compile(r"[^\w.\-+]")

# Tried in order; the first match wins
EXTENSION_MATCHERS = (
    regex.compile(r"\A(.+)\.(tar\.(?:[glx]?z|bz2))\Z"),  # "archive.tar.gz"
    regex.compile(r"\A(.+)\.([^.]+)\Z"),  # "photo.jpg"
)


def sanitize_filename(name: str, pattern: regex.Pattern = SANITIZE_REGEXP) -> str:
    """Strip directories and unsafe characters from a filename.

    Args:
        name: Raw filename, possibly including a client-side directory
        pattern: Compiled pattern (``regex`` or ``re``) matching the
            characters to replace with ``_``

    Returns:
        A non-empty, NFC-normalized filename
    """
    name = unicodedata.normalize("NFC", name)
    name = name.replace("\\", "/")
    stripped = name.rstrip("/")
    if stripped:
        name = stripped.rsplit("/", 1)[-1]
    name = pattern.sub("_", name)
    if regex.fullmatch(r"\.+", name):
        name = f"_{name}"
    if not name:
        name = "unnamed"
    return name


def split_extension(filename: str) -> tuple[str, str]:
    """Split a filename into its basename and extension.

    Compound archive extensions such as ``tar.gz`` are kept together.

    Args:
        filename: Sanitized filename

    Returns:
        Tuple of (basename, extension); extension is "" when there is none
    """
    for matcher in EXTENSION_MATCHERS:
        match = matcher.match(filename)
        if match:
            return match.group(1), match.group(2)
    return filename, ""
