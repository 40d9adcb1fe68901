"""Release-name normalization.

Strips distribution clutter (checksums, language tags, release groups,
source/format/resolution tags) from media filenames and normalizes
punctuation so the remaining title can be matched against the catalog.

Compiled pattern sets are built once per strictness variant and shared
between threads.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Callable, Union

from unidecode import unidecode

from medialens.shared.constants import LANGUAGE_MAP, ReleaseVocabulary

logger = logging.getLogger(__name__)

# ASCII character classes, matching the ASCII-only word boundaries used for
# every vocabulary pattern
PUNCT = r"!-/:-@\[-`{-~"
ALNUM = "A-Za-z0-9"

APOSTROPHE = re.compile(r"['`´‘’ʻ]+")
PUNCTUATION_OR_SPACE = re.compile(rf"[{PUNCT}\s]+")
TRAILING_PARENTHESIS = re.compile(r"(?!^)[(]([^)]*)[)]$")
TRAILING_PUNCTUATION = re.compile(r"[!?.]+$")
EMBEDDED_CHECKSUM = re.compile(r"[\(\[]([0-9A-Fa-f]{8})[\]\)]")
BRACKETS = (
    re.compile(r"\([^\(]*\)"),
    re.compile(r"\[[^\[]*\]"),
    re.compile(r"\{[^\{]*\}"),
)

# scene-style "-GROUP" suffix directly after a codec or source tag
SCENE_GROUP_SUFFIX = re.compile(
    rf"(?<![{ALNUM}])((?:x26[45]|h\.?26[45]|xvid|divx|hevc|avc|bluray|web-?dl|webrip|hdtv"
    rf"|dvdrip|bdrip|brrip|aac|ac3|dts|flac|mp3)(?:[ .]?\d\.\d)?)-[{ALNUM}]+$",
    re.IGNORECASE,
)

Replacement = Union[str, Callable[[re.Match[str]], str]]


def _join(terms: Iterable[str]) -> str:
    """Join alternatives so that longer literal prefixes are tried first."""
    return "(?:" + "|".join(sorted(terms, reverse=True)) + ")"


def _compile_word_pattern(terms: Iterable[str], flags: int = re.IGNORECASE) -> re.Pattern[str]:
    return re.compile(rf"(?<![{ALNUM}]){_join(terms)}(?![{ALNUM}])", flags)


def _quote_all(values: Iterable[str]) -> list[str]:
    return [re.escape(v) for v in values]


def normalize_punctuation(name: str) -> str:
    """Drop apostrophes and collapse punctuation and whitespace runs into one space.

    Example:
        >>> normalize_punctuation("Marvel's.Agents.of.S.H.I.E.L.D.")
        'Marvels Agents of S H I E L D'
    """
    name = APOSTROPHE.sub("", name).strip()
    return PUNCTUATION_OR_SPACE.sub(" ", name).strip()


def remove_trailing_brackets(name: str) -> str:
    """Remove one trailing parenthesis group, e.g. ``Doctor Who (2005)`` -> ``Doctor Who``."""
    return TRAILING_PARENTHESIS.sub("", name).strip()


def trim_trailing_punctuation(name: str) -> str:
    return TRAILING_PUNCTUATION.sub("", name).strip()


def normalize_brackets(name: str) -> str:
    """Replace every bracketed section with a space."""
    for pattern in BRACKETS:
        name = pattern.sub(" ", name).strip()
    return name


def get_embedded_checksum(name: str) -> str | None:
    """Return the first embedded CRC32 checksum like ``[ABCD1234]``, if any."""
    match = EMBEDDED_CHECKSUM.search(name)
    return match.group(1) if match else None


def remove_embedded_checksum(name: str) -> str:
    return EMBEDDED_CHECKSUM.sub("", name).strip()


def ascii_transliterate(name: str) -> str:
    """Transliterate to plain ASCII, e.g. ``Amélie`` -> ``Amelie``."""
    return unidecode(name)


@dataclass(frozen=True)
class _ReleasePatterns:
    """Compiled stopword and blacklist pipelines for one strictness variant."""

    stopwords: tuple[re.Pattern[str], ...]
    blacklist: tuple[tuple[re.Pattern[str], Replacement], ...]


def _language_tag_pattern(strict: bool) -> re.Pattern[str]:
    if strict:
        # [en] or -en-
        codes = _join(_quote_all(LANGUAGE_MAP))
        return re.compile(rf"(?<=[-\[{{(]){codes}(?=[-\]}})]|$)", re.IGNORECASE)

    # FR
    codes = _join(_quote_all(code.upper() for code in LANGUAGE_MAP))
    return re.compile(rf"(?<![{ALNUM}]){codes}(?![{ALNUM}])")


def _subtitle_language_suffix_pattern() -> re.Pattern[str]:
    # .en.srt or .en.forced.srt
    codes = _join(_quote_all(LANGUAGE_MAP))
    tags = _join(ReleaseVocabulary.SUBTITLE_CATEGORY_TAGS)
    return re.compile(rf"(?<=[._-]){codes}(?=(?:[._-]{tags})?$)", re.IGNORECASE)


def _clutter_bracket_pattern(strict: bool) -> re.Pattern[str]:
    # [Action, Drama] or {ENG-XViD-MP3-DVDRiP}
    contains = r"[^a-z0-9()\[\]{}]" if strict else "[A-Za-z]"
    alternatives = []
    for open_bracket, close_bracket in ("()", "[]", "{}"):
        o, c = re.escape(open_bracket), re.escape(close_bracket)
        not_open_close = rf"[^{o}{c}]+?"
        alternatives.append(rf"{o}(?:{not_open_close}{contains}{not_open_close}){c}")
    return re.compile("|".join(alternatives), re.IGNORECASE)


def _release_group_patterns(strict: bool) -> list[tuple[re.Pattern[str], Replacement]]:
    # 1..N group names, e.g. GROUP[INDEX], at the head or the tail of the name
    groups = _join(_quote_all(ReleaseVocabulary.RELEASE_GROUPS))
    group = rf"(?:(?<![{ALNUM}]){groups}(?![{ALNUM}])[{PUNCT}]??)+"
    flags = 0 if strict else re.IGNORECASE
    return [
        (re.compile(rf"^([^{ALNUM}]*){group}", flags), r"\1"),
        (re.compile(rf"{group}(?=[^{ALNUM}]*$)", flags), ""),
    ]


def _release_group_trim_pattern() -> re.Pattern[str]:
    groups = _join(_quote_all(ReleaseVocabulary.RELEASE_GROUPS))
    return re.compile(
        rf"(?:(?<=[\[(])|^){groups}(?=[\])-])|(?<=[\[(-]){groups}(?=[\])]|$)",
        re.IGNORECASE,
    )


def _video_format_pattern(strict: bool) -> re.Pattern[str]:
    if strict:
        return _compile_word_pattern(ReleaseVocabulary.VIDEO_FORMATS)
    formats = _join(ReleaseVocabulary.VIDEO_FORMATS)
    return re.compile(rf"(?<![A-Za-z]){formats}(?![A-Za-z])", re.IGNORECASE)


RESOLUTION = re.compile(rf"(?<![{ALNUM}])(\d{{4}}|[6-9]\d{{2}})x(\d{{4}}|[4-9]\d{{2}})(?![{ALNUM}])")
VIDEO_SOURCE = _compile_word_pattern(ReleaseVocabulary.VIDEO_SOURCES)
VIDEO_TAGS = _compile_word_pattern(ReleaseVocabulary.VIDEO_TAGS)
STEREOSCOPIC_3D = _compile_word_pattern(ReleaseVocabulary.STEREOSCOPIC_3D)
QUERY_BLACKLIST = _compile_word_pattern(ReleaseVocabulary.QUERY_BLACKLIST)
STRUCTURE_ROOT_NAME = re.compile(
    _join(p for p in ReleaseVocabulary.QUERY_BLACKLIST if p.startswith("^") and p.endswith("$")),
    re.IGNORECASE,
)
STRICT_VIDEO_FORMAT = _video_format_pattern(strict=True)


def _build_patterns(strict: bool) -> _ReleasePatterns:
    language_suffix = _subtitle_language_suffix_pattern()
    language_tag = _language_tag_pattern(strict)
    video_format = _video_format_pattern(strict)

    stopwords = (
        language_suffix,
        language_tag,
        VIDEO_SOURCE,
        VIDEO_TAGS,
        video_format,
        RESOLUTION,
        STEREOSCOPIC_3D,
    )
    blacklist: list[tuple[re.Pattern[str], Replacement]] = [
        (EMBEDDED_CHECKSUM, ""),
        (SCENE_GROUP_SUFFIX, r"\1"),
        (language_suffix, ""),
        (_release_group_trim_pattern(), ""),
        (QUERY_BLACKLIST, ""),
        (language_tag, ""),
        (_clutter_bracket_pattern(strict), ""),
        *_release_group_patterns(strict),
        (VIDEO_SOURCE, ""),
        (VIDEO_TAGS, ""),
        (video_format, ""),
        (RESOLUTION, ""),
        (STEREOSCOPIC_3D, ""),
    ]
    return _ReleasePatterns(stopwords=stopwords, blacklist=tuple(blacklist))


_patterns: dict[bool, _ReleasePatterns] = {}
_patterns_lock = threading.Lock()


def _get_patterns(strict: bool) -> _ReleasePatterns:
    patterns = _patterns.get(strict)
    if patterns is None:
        with _patterns_lock:
            patterns = _patterns.get(strict)
            if patterns is None:
                patterns = _build_patterns(strict)
                _patterns[strict] = patterns
                logger.debug("Compiled release patterns (strict=%s)", strict)
    return patterns


def _substring_before(item: str, stopwords: Iterable[re.Pattern[str]]) -> str:
    for pattern in stopwords:
        match = pattern.search(item)
        if match:
            head = item[: match.start()]
            # keep the original when the head would carry too little data
            if len(normalize_punctuation(head)) >= 3:
                item = head
    return item


def _clean(item: str, blacklist: Iterable[tuple[re.Pattern[str], Replacement]]) -> str:
    for pattern, replacement in blacklist:
        item = pattern.sub(replacement, item)
    return item


def _clean_once(name: str, patterns: _ReleasePatterns, strict: bool) -> str:
    head = _substring_before(name, patterns.stopwords) if strict else name
    return normalize_punctuation(_clean(head, patterns.blacklist))


def normalize_release(name: str, strict: bool) -> str:
    """Strip release clutter from a media name.

    Strict mode cuts the name at the first stopword (language, source,
    tag, format, resolution or 3D marker) as long as at least three
    significant characters remain in front of it; lenient mode deletes
    the matched spans wherever they are. Both modes then remove the
    blacklisted vocabulary and normalize punctuation.

    The cleaning pass is repeated until the output is stable, so the
    function is idempotent.

    Args:
        name: Filename or folder name, usually without extension
        strict: Use strict truncation and case-sensitive group names

    Returns:
        Punctuation-normalized name, possibly empty

    Example:
        >>> normalize_release("The.Matrix.1999.1080p.BluRay.x264-SPARKS", True)
        'The Matrix 1999'
    """
    patterns = _get_patterns(strict)
    current = name
    while True:
        cleaned = _clean_once(current, patterns, strict)
        if cleaned == current:
            return cleaned
        current = cleaned


def strip_release_info(names: Iterable[str], strict: bool) -> list[str]:
    """Normalize every name and drop the ones that come out empty."""
    return [cleaned for cleaned in (normalize_release(n, strict) for n in names) if cleaned]


def strip_blacklisted_terms(names: Iterable[str]) -> list[str]:
    """Keep only the names that still carry text once blacklisted terms are removed."""
    return [n for n in names if QUERY_BLACKLIST.sub("", n).strip()]


def strip_format_info(name: str) -> str:
    """Remove strict video-format tokens such as ``720p`` or ``x264``."""
    return STRICT_VIDEO_FORMAT.sub("", name)


def is_structure_root_name(name: str) -> bool:
    """Whether a folder name is a generic container like ``Movies`` or ``Downloads``."""
    return STRUCTURE_ROOT_NAME.fullmatch(name) is not None


__all__ = [
    "APOSTROPHE",
    "EMBEDDED_CHECKSUM",
    "PUNCTUATION_OR_SPACE",
    "ascii_transliterate",
    "get_embedded_checksum",
    "is_structure_root_name",
    "normalize_brackets",
    "normalize_punctuation",
    "normalize_release",
    "remove_embedded_checksum",
    "remove_trailing_brackets",
    "strip_blacklisted_terms",
    "strip_format_info",
    "strip_release_info",
    "trim_trailing_punctuation",
]
