"""Media detection on top of the catalog indices and the filename parsers.

MediaDetector answers the questions grouping and the rule engine ask
about a single file: does it look like an episode or a movie, which movies
does it probably show, which series names does it carry. All evidence
comes from the path, the catalog snapshot and the optional collaborators;
the detector never reads the disk itself.
"""

from __future__ import annotations

import logging
import re
from collections import deque
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path, PurePath

from medialens.config.models.grouping_settings import GroupingSettings
from medialens.config.models.matching_settings import MatchingSettings
from medialens.core.matching.index import Catalog
from medialens.core.matching.lookup import CandidateLookup
from medialens.core.matching.metrics import movie_match_metric, sort_by_similarity
from medialens.core.models.catalog import CatalogEntry, MediaKind
from medialens.core.models.file import MediaFile
from medialens.core.models.metadata import StoredMetadata
from medialens.core.models.season_episode import SimpleDate, SxE
from medialens.core.normalization import (
    is_structure_root_name,
    normalize_punctuation,
    normalize_release,
    strip_blacklisted_terms,
    strip_release_info,
    trim_trailing_punctuation,
)
from medialens.core.parser.anime_release import parse_anime_release
from medialens.core.parser.season_episode import DEFAULT_SANITY, DateMatcher, SeasonEpisodeMatcher
from medialens.core.parser.series_name import SeriesNameMatcher
from medialens.shared.constants import NamePatterns
from medialens.shared.protocols.services import MediaProbe, MetadataStore, MovieSearchService

logger = logging.getLogger(__name__)

MIN_MOVIE_YEAR = 1930
MAX_MOVIE_YEAR = 2050

INTEGER = re.compile(r"\d+")
MOVIE_NAME_YEAR_STRICT = re.compile(r"^(.+)[\[(]((?:19|20)\d{2})[\])]")
MOVIE_NAME_YEAR = re.compile(r"^(.+?)((?:19|20)\d{2})")
QUERY_YEAR = re.compile(r"(?:19|20)\d{2}")
AKA = re.compile(r"\bAKA\b", re.IGNORECASE)

VOLUME_ROOTS: frozenset[PurePath] = frozenset(
    PurePath(p) for p in ("/", "/Volumes", "/media", "/mnt", "/run/media")
)


def is_volume_root(path: PurePath | None) -> bool:
    """Whether a folder is a filesystem root, a mount root or the user home."""
    if path is None or not path.name:
        return True
    return path in VOLUME_ROOTS or path == Path.home()


def is_structure_root(path: PurePath | None) -> bool:
    """Whether a folder carries no title information.

    Volume roots, generic container folders like ``Downloads`` or
    ``Movies`` and the folders directly inside the user home qualify.
    """
    if path is None or is_volume_root(path):
        return True
    return is_structure_root_name(path.name) or path.parent == Path.home()


def list_path_tail(path: PurePath, n: int) -> list[PurePath]:
    """The path and up to ``n - 1`` of its ancestors, nearest first."""
    tail: list[PurePath] = []
    current = PurePath(path)
    while len(tail) < n and current.name:
        tail.append(current)
        current = current.parent
    return tail


def relative_path_tail(path: PurePath, n: int) -> str:
    """The last ``n`` path components joined with ``/``."""
    return "/".join(p.name for p in reversed(list_path_tail(path, n)))


def _display_name(path: PurePath, is_file: bool) -> str:
    return path.stem if is_file else path.name


def parse_movie_year(name: str) -> list[int]:
    """Integers in the name that are plausible movie years."""
    return [y for y in (int(n) for n in INTEGER.findall(name)) if MIN_MOVIE_YEAR <= y <= MAX_MOVIE_YEAR]


def grep_imdb_id(text: str) -> list[int]:
    """IMDb ids like ``tt0133093`` found in the text, as integers."""
    return [int(m.group(1)) for m in NamePatterns.IMDB_ID.finditer(text)]


def reduce_movie_name(name: str, strict: bool) -> str | None:
    """Reduce ``Name (Year) clutter`` to ``Name Year``.

    Strict mode requires the year in brackets. Returns None when the
    name has no plausible year.
    """
    pattern = MOVIE_NAME_YEAR_STRICT if strict else MOVIE_NAME_YEAR
    m = pattern.search(name)
    if m and parse_movie_year(m.group(2)):
        return f"{trim_trailing_punctuation(m.group(1))} {m.group(2)}"
    return None


def reduce_movie_name_permutations(terms: Iterable[str]) -> list[str]:
    """Movie query terms, strongest first.

    Terms with a bracketed year are reduced and moved to the front. Other
    terms are kept as they are, followed by their lenient reduction.
    """
    names: deque[str] = deque()
    for term in terms:
        reduced = reduce_movie_name(term, True)
        if reduced is not None:
            names.appendleft(reduced)
            continue
        names.append(term)
        reduced = reduce_movie_name(term, False)
        if reduced is not None:
            names.append(reduced)
    return list(dict.fromkeys(names))


def _query_key(term: str) -> str:
    return normalize_punctuation(term).lower()


def unique_query_set(exact_matches: Iterable[str], *guess_matches: Iterable[str]) -> list[str]:
    """Merge query terms, one per normalized spelling.

    Exact matches are kept verbatim. Guesses are release-stripped in both
    modes, blacklist-filtered and normalized; a guess that collides with
    an exact match is dropped.
    """
    unique: dict[str, str] = {}
    for term in exact_matches:
        key = _query_key(term) if term else ""
        if key:
            unique.setdefault(key, term)

    extra = [t for guesses in guess_matches for t in guesses if t and _query_key(t) not in unique]
    stripped = list(dict.fromkeys(strip_release_info(extra, True) + strip_release_info(extra, False)))
    for term in strip_blacklisted_terms(stripped):
        key = _query_key(term)
        if key:
            unique.setdefault(key, key)
    return list(unique.values())


@dataclass
class MediaDetector:
    """Movie and episode detection for single files.

    Args:
        catalog: Catalog owning the movie, series and anime indices
        metadata_store: Store of previously resolved metadata; authoritative when it has an entry
        probe: Container probe used by the anime heuristic
        search_service: Online movie search used for IMDb ids and free-text queries
        siblings: The other files of the batch, used for folder-level evidence
        matching: Matching thresholds
        grouping: Grouping limits

    Example:
        >>> detector = MediaDetector(Catalog(provider))
        >>> detector.is_episode_name("Breaking.Bad.S01E01.720p", strict=True)
        True
    """

    catalog: Catalog
    metadata_store: MetadataStore | None = None
    probe: MediaProbe | None = None
    search_service: MovieSearchService | None = None
    siblings: Sequence[MediaFile] = ()
    matching: MatchingSettings = field(default_factory=MatchingSettings)
    grouping: GroupingSettings = field(default_factory=GroupingSettings)

    def __post_init__(self) -> None:
        self.lookup = CandidateLookup(self.catalog, self.matching)
        self._sxe_strict = SeasonEpisodeMatcher(DEFAULT_SANITY, strict=True)
        self._sxe_lenient = SeasonEpisodeMatcher(DEFAULT_SANITY, strict=False)
        self._date_matcher = DateMatcher()
        self._series_name_strict = SeriesNameMatcher(strict=True)
        self._series_name_lenient = SeriesNameMatcher(strict=False)

    def with_siblings(self, siblings: Iterable[MediaFile]) -> MediaDetector:
        """Copy of this detector that knows the files of another batch."""
        return MediaDetector(
            catalog=self.catalog,
            metadata_store=self.metadata_store,
            probe=self.probe,
            search_service=self.search_service,
            siblings=tuple(siblings),
            matching=self.matching,
            grouping=self.grouping,
        )

    def video_siblings(self, file: MediaFile) -> list[MediaFile]:
        """Video files of the batch that share the file's folder, in batch order."""
        return [f for f in self.siblings if f.is_video and f.parent == file.parent]

    # episode parsing

    def season_episode_matcher(self, strict: bool) -> SeasonEpisodeMatcher:
        return self._sxe_strict if strict else self._sxe_lenient

    def series_name_matcher(self, strict: bool) -> SeriesNameMatcher:
        return self._series_name_strict if strict else self._series_name_lenient

    def parse_episode_number(self, name: str | PurePath, strict: bool) -> list[SxE] | None:
        """Season/episode numbers of a name, or of a path and its parent folder."""
        matcher = self.season_episode_matcher(strict)
        if isinstance(name, PurePath):
            return matcher.match_path(name)
        return matcher.match(name)

    def parse_date(self, name: str | PurePath) -> SimpleDate | None:
        if isinstance(name, PurePath):
            return self._date_matcher.match_path(name)
        return self._date_matcher.match(name)

    def is_episode_name(self, name: str, strict: bool) -> bool:
        """Whether the name carries an episode number or an air date."""
        return self.parse_episode_number(name, strict) is not None or self.parse_date(name) is not None

    def get_metadata(self, path: PurePath) -> StoredMetadata | None:
        if self.metadata_store is None:
            return None
        try:
            return self.metadata_store.get_metadata(Path(path))
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning("Metadata lookup failed for %s: %s", path, e)
            return None

    def is_episode(self, file: MediaFile, strict: bool) -> bool:
        """Whether stored metadata or the path marks the file as an episode."""
        metadata = self.get_metadata(file.path)
        if metadata is not None and metadata.is_episode:
            return True
        return self.is_episode_name(str(file.path), strict)

    # movie detection

    def is_movie(self, file: MediaFile, strict: bool) -> bool:
        """Whether the file probably is a movie.

        Stored metadata decides if present. Otherwise the file must not
        look like an episode and must either start with a known movie name
        or carry an IMDb id; strict mode verifies the id with the search
        service.
        """
        metadata = self.get_metadata(file.path)
        if metadata is not None:
            return metadata.is_movie

        if self.is_episode(file, True):
            return False

        if self.lookup.match_movie_name([file.path.name, file.parent.name], strict, 0):
            return True

        for imdb_id in grep_imdb_id(str(file.path)):
            if not strict:
                return True
            if self._verify_imdb_id(imdb_id):
                return True
        return False

    def _verify_imdb_id(self, imdb_id: int) -> bool:
        if self.search_service is None:
            return False
        try:
            movie = self.search_service.get_movie_by_imdb_id(imdb_id)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning("Failed to verify IMDb id tt%07d: %s", imdb_id, e)
            return False
        return movie is not None and movie.id > 0

    def check_movie(self, path: PurePath | None, strict: bool) -> CatalogEntry | None:
        """Best movie whose name appears near the start of a folder or file name."""
        if path is None or not path.name:
            return None
        matches = self.lookup.match_movie_name([path.name], strict, 4)
        return matches[0] if matches else None

    def guess_movie_folder(self, file: MediaFile | PurePath) -> PurePath | None:
        """The ancestor folder most likely named after the movie.

        Prefers the nearest folder (up to four levels) that names a known
        movie, strict matches first. Falls back to the first of the two
        nearest folders that is not pure release clutter, or its parent
        when only the parent names a movie.
        """
        path = file.path if isinstance(file, MediaFile) else PurePath(file)

        for strict in (True, False):
            folder = path.parent
            for _ in range(4):
                if is_structure_root(folder):
                    break
                if normalize_release(folder.name, True) and self.check_movie(folder, strict) is not None:
                    return folder
                folder = folder.parent

        folder = path.parent
        for _ in range(2):
            if is_structure_root(folder):
                break
            if normalize_release(folder.name, True):
                # double nested structures like Movie (2001)/CD1
                if self.check_movie(folder.parent, False) is not None and self.check_movie(folder, False) is None:
                    return folder.parent
                return folder
            folder = folder.parent
        return None

    def _lookup_imdb_ids(self, path: PurePath) -> list[CatalogEntry]:
        if self.search_service is None:
            return []
        options = []
        for imdb_id in grep_imdb_id(str(path)):
            movie = self.search_service.get_movie_by_imdb_id(imdb_id)
            if movie is not None:
                options.append(movie)
        return options

    def _query_movie_by_file_name(self, terms: Iterable[str]) -> list[CatalogEntry]:
        if self.search_service is None:
            return []
        metric = movie_match_metric()
        probability: dict[CatalogEntry, float] = {}
        for query in unique_query_set([], terms):
            for movie in self.search_service.search_movie(query.lower()):
                probability[movie] = max(
                    (metric.get_similarity(query, name) for name in movie.effective_names),
                    default=0.0,
                )
        return sorted(probability, key=lambda movie: probability[movie], reverse=True)

    def _sort_movies(self, options: Iterable[CatalogEntry], terms: Sequence[str]) -> list[CatalogEntry]:
        paragon = list(dict.fromkeys(strip_release_info(terms, True) + strip_release_info(terms, False)))
        return sort_by_similarity(options, paragon, movie_match_metric())

    def detect_movie(self, file: MediaFile, strict: bool) -> list[CatalogEntry]:
        """Probable movies for a file, best first.

        Raises:
            Exception: Whatever the search service raises
        """
        options: list[CatalogEntry] = []

        metadata = self.get_metadata(file.path)
        if metadata is not None and metadata.is_movie and metadata.entry is not None:
            options.append(metadata.entry)
        options.extend(self._lookup_imdb_ids(file.path))

        names = [file.name]
        movie_folder = self.guess_movie_folder(file)
        if movie_folder is not None:
            names.append(movie_folder.name)
        terms = reduce_movie_name_permutations(names)

        matches = self.lookup.match_movie_name(terms, True, 0)
        if matches:
            return self._sort_movies(options + matches, terms)

        matches = self.lookup.match_movie_name(terms, strict, 2)
        if options and matches:
            return self._sort_movies(options + matches, terms)

        # name+year failed; non-strict mode covered these cases above
        if not matches and strict:
            matches = self.lookup.match_movie_name(terms, False, 0) or self.lookup.match_movie_name(terms, False, 2)

        if not matches:
            matches = self.lookup.match_movie_without_spacing(terms, strict)
            if not matches:
                alternative_terms = strip_release_info(terms, True)
                if not set(alternative_terms) <= set(terms):
                    matches = self.lookup.match_movie_without_spacing(alternative_terms, strict)

        if self.search_service is not None:
            results = self._query_movie_by_file_name(terms)

            # release years often differ from the year in the filename
            if not results and not strict:
                last_resort = [
                    part.strip()
                    for term in terms
                    if QUERY_YEAR.search(term) or AKA.search(term)
                    for part in AKA.split(QUERY_YEAR.sub("", term))
                ]
                if last_resort:
                    results = self._query_movie_by_file_name(last_resort)

            options.extend(results)

        options.extend(matches)
        return self._sort_movies(options, terms)

    def detect_movie_with_year(self, file: MediaFile, strict: bool) -> list[CatalogEntry]:
        """Like detect_movie; strict mode requires and checks a year in the path."""
        if not strict:
            return self.detect_movie(file, strict)

        years = parse_movie_year(relative_path_tail(file.path, 3))
        if not years or self.is_episode(file, True):
            return []
        return [m for m in self.detect_movie(file, strict) if m.year in years]

    # series detection

    def _index_kind(self, anime: bool) -> MediaKind:
        return MediaKind.ANIME if anime else MediaKind.SERIES

    def detect_series_names(self, files: Sequence[MediaFile], anime: bool) -> list[str]:
        """Probable series names for a set of episode files.

        Stored series names come first. Folder and file names are then
        cross-referenced with the series (or anime) index, and finally the
        text in front of episode identifiers is used as a query.
        """
        kind = self._index_kind(anime)
        known: list[str] = []

        for f in files:
            metadata = self.get_metadata(f.path)
            if metadata is not None and metadata.is_episode and metadata.series_name:
                known.append(metadata.series_name)

        # all files tagged
        if files and len(known) == len(files):
            return unique_query_set(known)

        strict_matcher = self.series_name_matcher(True)
        known.extend(self._match_series_structure(files, kind, strict_matcher))

        queries: dict[str, None] = {}
        for strict in (True, False):
            if queries:
                break
            matcher = self.series_name_matcher(strict)
            queries.update(dict.fromkeys(matcher.match_all_files(f.path for f in files)))
            if queries:
                break

            for f in files:
                for i, path in enumerate(list_path_tail(f.path, 2)):
                    fn = _display_name(path, i == 0)
                    # movie years make non-strict series name parsing unreliable
                    if not strict and parse_movie_year(fn):
                        break
                    sn = matcher.match_by_episode_identifier(fn)
                    if sn:
                        if not strict:
                            by_separator = matcher.match_by_separator(fn)
                            if by_separator and len(by_separator) < len(sn):
                                sn = by_separator
                        queries[sn] = None
                        break
                    # Firefly/S01E01 - Pilot
                    if sn is None and i > 0:
                        queries.update(dict.fromkeys(strip_blacklisted_terms(strip_release_info([path.name], True))))

        if anime and not queries and not known:
            for f in files:
                title = parse_anime_release(f.path.name).title
                if title:
                    queries[title] = None

        logger.debug("Match series name => %s %s", known, list(queries))
        return unique_query_set(known, queries)

    def _match_series_structure(
        self,
        files: Sequence[MediaFile],
        kind: MediaKind,
        strict_matcher: SeriesNameMatcher,
    ) -> list[str]:
        folders: dict[str, None] = {}
        filenames: dict[str, None] = {}
        for f in files:
            for i, path in enumerate(list_path_tail(f.path, 3)):
                if is_structure_root(path):
                    break
                fn = _display_name(path, i == 0)
                # try to minimize noise
                fn = strict_matcher.match_by_episode_identifier(fn) or fn
                (filenames if i == 0 else folders)[fn] = None

        matches = self.lookup.match_series_by_name(folders, 0, kind)
        if not matches:
            matches = self.lookup.match_series_by_name(filenames, 0, kind)
            matches += self.lookup.match_series_by_name(strip_release_info(filenames, False), 0, kind)

        if matches:
            # offset 0 matches are trusted
            return matches

        names = [strict_matcher.match_by_episode_identifier(n) or n for n in [*folders, *filenames]]
        fallback = [
            entry.name
            for entry in self.lookup.match_series_without_spacing(strip_release_info(names, False), True, kind)
        ]
        fallback += self.lookup.match_series_by_name(folders, 2, kind)
        fallback += self.lookup.match_series_by_name(filenames, 2, kind)
        return strip_blacklisted_terms(fallback)


__all__ = [
    "MediaDetector",
    "grep_imdb_id",
    "is_structure_root",
    "is_volume_root",
    "list_path_tail",
    "parse_movie_year",
    "reduce_movie_name",
    "reduce_movie_name_permutations",
    "unique_query_set",
]
