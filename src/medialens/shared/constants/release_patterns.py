"""Release-clutter vocabulary used by the normalizer.

Every list here is a set of regex fragments (or literal names, where noted)
that describe distribution metadata found in media filenames. The
normalizer joins and compiles them once per strictness variant.
"""

from __future__ import annotations

from typing import ClassVar, Final


class ReleaseVocabulary:
    """Regex fragments for release clutter."""

    VIDEO_SOURCES: ClassVar[list[str]] = [
        r"CAMRip",
        r"CAM",
        r"HDCAM",
        r"TS",
        r"HDTS",
        r"TELESYNC",
        r"TELECINE",
        r"WorkPrint",
        r"PPV(?:Rip)?",
        r"Screener",
        r"SCR",
        r"DVDSCR",
        r"DVDSCREENER",
        r"BDSCR",
        r"R5(?:[.]?LINE)?",
        r"DVD(?:5|9|R|Rip)?",
        r"TVRip",
        r"DSR(?:ip)?",
        r"PDTV",
        r"HDTV(?:Rip)?",
        r"DVB(?:Rip)?",
        r"VODRip",
        r"BDRip",
        r"BRRip",
        r"BR[.]Rip",
        r"Blu[-.]?Ray",
        r"BD(?:25|50|R)?",
        r"3D[.]?BluRay",
        r"(?:BD)?Remux",
        r"HDDVD",
        r"HDRip",
        r"WEB[-.]?Rip",
        r"WEB[-.]?DL",
        r"WEB",
        r"HDWEB",
        r"iTunesHD",
        r"AMZN",
        r"NF",
        r"HULU",
        r"DSNP",
        r"VHS(?:Rip)?",
        r"VCD",
    ]

    VIDEO_TAGS: ClassVar[list[str]] = [
        r"Extended(?:[.\s]Cut|[.\s]Edition)?",
        r"Uncut",
        r"Uncensored",
        r"Unrated",
        r"Directors[.\s]Cut",
        r"Remastered",
        r"Special[.\s]Edition",
        r"Limited",
        r"Theatrical(?:[.\s]Cut)?",
        r"Alternate[.\s]Cut",
        r"Criterion",
        r"Collectors[.\s]Edition",
        r"Ultimate[.\s]Edition",
        r"IMAX",
        r"Proper",
        r"Repack",
        r"Rerip",
        r"Internal",
        r"Dubbed",
        r"Subbed",
        r"Multi(?:Subs)?",
        r"Dual[.\s]Audio",
    ]

    VIDEO_FORMATS: ClassVar[list[str]] = [
        r"DivX",
        r"XviD",
        r"AVC",
        r"[xh][.]?26[45]",
        r"HEVC",
        r"10[-]?bit",
        r"8[-]?bit",
        r"Hi10P?",
        r"AAC(?:2[.]0|5[.]1)?",
        r"AC3",
        r"E?AC3",
        r"DD[P+]?(?:5[.]1|2[.]0|7[.]1)",
        r"DTS(?:[-]HD(?:[.]MA)?)?",
        r"TrueHD",
        r"Atmos",
        r"FLAC",
        r"MP3",
        r"Opus",
        r"\d{3,4}[pi]",
        r"4K",
        r"UHD",
        r"HDR(?:10)?",
    ]

    STEREOSCOPIC_3D: ClassVar[list[str]] = [
        r"3D",
        r"H?SBS",
        r"H[-]SBS",
        r"H?OU",
        r"H?TAB",
        r"Half[-.\s]?SBS",
        r"Full[-.\s]?SBS",
    ]

    # literal names, matched case-sensitively in strict mode
    RELEASE_GROUPS: ClassVar[list[str]] = [
        "aXXo",
        "AMIABLE",
        "CtrlHD",
        "DEFLATE",
        "DIMENSION",
        "ESiR",
        "ETRG",
        "FGT",
        "FLEET",
        "GECKOS",
        "HiDt",
        "KILLERS",
        "NTb",
        "RARBG",
        "ROVERS",
        "SPARKS",
        "SVA",
        "YIFY",
        "YTS",
        "Coalgirls",
        "Commie",
        "DameDesuYo",
        "Doki",
        "EMBER",
        "Erai-raws",
        "FFF",
        "HorribleSubs",
        "Judas",
        "SubsPlease",
        "UTW",
        "Underwater",
    ]

    # Entries wrapped in ^...$ only match a whole folder name and double as
    # the structure-root folder list.
    QUERY_BLACKLIST: ClassVar[list[str]] = [
        r"^(?:TV|Video|Videos|Media|Movies?|Films?|Series|Shows|TV[.\s]Shows|TV[.\s]Series|Anime)$",
        r"^(?:Downloads?|Torrents?|Complete|Completed|Incoming|New[.\s]Folder|Unsorted|Temp)$",
        r"^(?:Users|home|Volumes|mnt|media|share|Public|Desktop|Documents|Library)$",
        r"Sample",
        r"Trailer",
        r"Extras",
        r"Featurettes?",
        r"Subs",
        r"Subtitles",
        r"www[.]\w+[.](?:com|org|net)",
    ]

    SUBTITLE_CATEGORY_TAGS: ClassVar[list[str]] = [
        r"forced",
        r"sdh",
        r"cc",
        r"default",
    ]

    # Leading articles and separators dropped before spacing-free lookups
    SPACING_PATTERN: Final[str] = r"(?i:^(?:The|A)\b)|[!-/:-@\[-`{-~\s]+"


# Language codes and English names mapped to their ISO 639-2/T code.
# "hi" is left out on purpose: in filenames it marks hearing-impaired subtitles.
LANGUAGE_MAP: Final[dict[str, str]] = {
    "ar": "ara", "ara": "ara", "arabic": "ara",
    "bg": "bul", "bul": "bul", "bulgarian": "bul",
    "ca": "cat", "cat": "cat", "catalan": "cat",
    "cs": "ces", "ces": "ces", "cze": "ces", "czech": "ces",
    "da": "dan", "dan": "dan", "danish": "dan",
    "de": "deu", "deu": "deu", "ger": "deu", "german": "deu",
    "el": "ell", "ell": "ell", "gre": "ell", "greek": "ell",
    "en": "eng", "eng": "eng", "english": "eng",
    "es": "spa", "spa": "spa", "spanish": "spa",
    "et": "est", "est": "est", "estonian": "est",
    "fa": "fas", "fas": "fas", "per": "fas", "persian": "fas",
    "fi": "fin", "fin": "fin", "finnish": "fin",
    "fr": "fra", "fra": "fra", "fre": "fra", "french": "fra",
    "he": "heb", "heb": "heb", "hebrew": "heb",
    "hin": "hin", "hindi": "hin",
    "hr": "hrv", "hrv": "hrv", "croatian": "hrv",
    "hu": "hun", "hun": "hun", "hungarian": "hun",
    "id": "ind", "ind": "ind", "indonesian": "ind",
    "is": "isl", "isl": "isl", "ice": "isl", "icelandic": "isl",
    "it": "ita", "ita": "ita", "italian": "ita",
    "ja": "jpn", "jpn": "jpn", "japanese": "jpn",
    "ko": "kor", "kor": "kor", "korean": "kor",
    "lt": "lit", "lit": "lit", "lithuanian": "lit",
    "lv": "lav", "lav": "lav", "latvian": "lav",
    "ms": "msa", "msa": "msa", "may": "msa", "malay": "msa",
    "nl": "nld", "nld": "nld", "dut": "nld", "dutch": "nld",
    "no": "nor", "nor": "nor", "norwegian": "nor",
    "pl": "pol", "pol": "pol", "polish": "pol",
    "pt": "por", "por": "por", "portuguese": "por",
    "pb": "pob", "pob": "pob", "brazilian": "pob",
    "ro": "ron", "ron": "ron", "rum": "ron", "romanian": "ron",
    "ru": "rus", "rus": "rus", "russian": "rus",
    "sk": "slk", "slk": "slk", "slo": "slk", "slovak": "slk",
    "sl": "slv", "slv": "slv", "slovenian": "slv",
    "sr": "srp", "srp": "srp", "serbian": "srp",
    "sv": "swe", "swe": "swe", "swedish": "swe",
    "th": "tha", "tha": "tha", "thai": "tha",
    "tr": "tur", "tur": "tur", "turkish": "tur",
    "uk": "ukr", "ukr": "ukr", "ukrainian": "ukr",
    "vi": "vie", "vie": "vie", "vietnamese": "vie",
    "zh": "zho", "zho": "zho", "chi": "zho", "chinese": "zho",
}


__all__ = [
    "LANGUAGE_MAP",
    "ReleaseVocabulary",
]
