"""Movie-versus-series rule engine.

When a file matches both movie and series candidates, a fixed list of
weighted rules votes on what it is. Every rule that holds adds its series
and movie deltas to two running scores; as soon as one side reaches +1
while the other is at -1 or below, that side wins and the losing slot of
the file's Group is cleared. If no side wins, both slots are kept.

Rule order matters: later rules never run once a decision is made, so the
cheap and decisive rules come first.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Union

from medialens.core.detection import MediaDetector, list_path_tail
from medialens.core.matching.metrics import NameSimilarity
from medialens.core.models.catalog import CatalogEntry
from medialens.core.models.file import MediaFile
from medialens.core.models.grouping import Group
from medialens.core.normalization import ascii_transliterate, normalize_punctuation, normalize_release
from medialens.shared.constants import NamePatterns
from medialens.shared.errors import create_classification_error

logger = logging.getLogger(__name__)

MIN_MOVIE_YEAR_EVIDENCE = 1950
SIMILAR_NAME_THRESHOLD = 0.8
SIMILAR_NAME_MARGIN = 0.2


class Classification(str, Enum):
    """Outcome of the rule engine."""

    SERIES = "series"
    MOVIE = "movie"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True)
class Ok:
    value: bool


@dataclass(frozen=True)
class Err:
    error: Exception


RuleResult = Union[Ok, Err]


@dataclass(frozen=True)
class Rule:
    """A named predicate with the score deltas it contributes when it holds."""

    name: str
    series_score: int
    movie_score: int
    predicate: Callable[[], RuleResult]

    def evaluate(self) -> RuleResult:
        return self.predicate()


@dataclass(frozen=True)
class ClassificationResult:
    """Decision of the rule engine for one file.

    Attributes:
        classification: Series, Movie or Ambiguous
        group: The file's Group with the losing slot cleared
        series_score: Final series score
        movie_score: Final movie score
        decisive_rule: Name of the rule that settled the decision, if any
    """

    classification: Classification
    group: Group
    series_score: int
    movie_score: int
    decisive_rule: str | None = None


def normalize_name(name: str | None) -> str:
    """ASCII, punctuation-normalized, lower case, single spaces."""
    if name is None:
        return ""
    return " ".join(normalize_punctuation(ascii_transliterate(name)).lower().split())


def _after(text: str, needle: str) -> str | None:
    index = text.find(needle)
    if index < 0:
        return None
    return text[index + len(needle) :]


def _after_pattern(text: str, pattern: re.Pattern[str]) -> str | None:
    m = pattern.search(text)
    return text[m.end() :] if m else None


def _integers(text: str) -> list[int]:
    return [int(n) for n in re.findall(r"\d+", text)]


class RuleContext:
    """Evidence about one ambiguous file, shared by all rule predicates.

    Args:
        detector: Detector supplying parsers, movie detection and siblings
        file: The file being classified
        series: Series name candidates, best first
        movies: Movie candidates, best first
    """

    def __init__(
        self,
        detector: MediaDetector,
        file: MediaFile,
        series: Sequence[str],
        movies: Sequence[CatalogEntry],
    ) -> None:
        self.detector = detector
        self.file = file
        self.movie = movies[0]
        self.metric = NameSimilarity()

        movie_folder = detector.guess_movie_folder(file)
        self.dn = normalize_name(movie_folder.name if movie_folder is not None else None)
        self.fn = normalize_name(file.name)
        self.sn = normalize_name(series[0])
        self.mn = normalize_name(self.movie.name)
        self.my = str(self.movie.year) if self.movie.year else ""
        after_series = _after(self.fn, self.sn)
        self.asn = after_series if after_series is not None else self.fn

    @cached_property
    def strict_movie_matches(self) -> list[CatalogEntry]:
        return self.detector.detect_movie(self.file, True)

    def similarity(self, a: str, b: str) -> float:
        return self.metric.get_similarity(a, b)

    def has_episode_number(self, text: str) -> bool:
        return self.detector.parse_episode_number(text, False) is not None

    def equals_movie_name(self) -> bool:
        return self.mn == self.fn

    def contains_movie_year(self) -> bool:
        if not self.movie.year or self.movie.year < MIN_MOVIE_YEAR_EVIDENCE:
            return False
        return any(
            self.my in path.name and not self.has_episode_number(path.name)
            for path in list_path_tail(self.file.path, 3)
        )

    def contains_movie_name_year(self) -> bool:
        return self.mn == self.sn and any(
            not self.has_episode_number(_after_pattern(it, NamePatterns.YEAR) or "")
            for it in (self.dn, self.fn)
        )

    def contains_episode_numbers(self) -> bool:
        return (
            self.detector.parse_episode_number(self.fn, True) is not None
            or self.detector.parse_date(self.fn) is not None
        )

    def common_number_pattern(self) -> bool:
        number_sets = set()
        for sibling in self.detector.video_siblings(self.file):
            if self.sn in self.dn or self.sn in normalize_name(sibling.path.name):
                numbers = frozenset(int(n) for n in NamePatterns.EPISODE_NUMBERS.findall(sibling.path.name))
                if numbers:
                    number_sets.add(numbers)
        return len(number_sets) >= self.detector.grouping.common_number_min_sets

    def episode_without_numbers(self) -> bool:
        return NamePatterns.DASH.search(self.asn) is not None and not self.strict_movie_matches

    def episode_numbers(self) -> bool:
        n = normalize_release(self.asn, False)
        if self.has_episode_number(n) or NamePatterns.NUMBER_PAIR.search(n):
            return any(self.sn in it for it in (self.dn, self.fn)) and not self.strict_movie_matches
        return False

    def has_imdb_id(self) -> bool:
        return NamePatterns.IMDB_ID.search(self.fn) is not None

    def non_number_name(self) -> bool:
        return NamePatterns.NON_NUMBER_NAME.search(self.file.name) is not None

    def exact_movie_match(self) -> bool:
        return bool(self.strict_movie_matches) and any(
            NamePatterns.YEAR.search(it) for it in (self.dn, self.fn)
        )

    def contains_movie_name(self) -> bool:
        if self.mn not in self.fn:
            return False
        rest = _after(self.fn, self.mn)
        return not self.has_episode_number(rest if rest is not None else self.fn)

    def similar_name_year(self) -> bool:
        if self.similarity(self.mn, self.fn) >= SIMILAR_NAME_THRESHOLD:
            return True
        if not self.movie.year:
            return False
        year = self.movie.year
        return any(year - 1 <= y <= year + 1 for it in (self.dn, self.fn) for y in _integers(it))

    def similar_name_no_numbers(self) -> bool:
        for it in (self.dn, self.fn):
            rest = _after(it, self.mn)
            if rest is None:
                continue
            if NamePatterns.EPISODE_NUMBERS.search(rest):
                continue
            if self.similarity(it, self.mn) >= SIMILAR_NAME_MARGIN + self.similarity(it, self.sn):
                return True
        return False

    def alias_name_match(self) -> bool:
        return any(normalize_name(name) in self.fn for name in self.movie.effective_names_without_year)


def _guarded(predicate: Callable[[], bool]) -> Callable[[], RuleResult]:
    def evaluate() -> RuleResult:
        try:
            return Ok(bool(predicate()))
        except Exception as e:  # pylint: disable=broad-exception-caught
            return Err(e)

    return evaluate


def build_rules(context: RuleContext) -> list[Rule]:
    """The rule list in evaluation order, bound to one file's evidence."""
    table: list[tuple[str, int, int, Callable[[], bool]]] = [
        ("equalsMovieName", -1, 0, context.equals_movie_name),
        ("containsMovieYear", -1, 0, context.contains_movie_year),
        ("containsMovieNameYear", -1, 0, context.contains_movie_name_year),
        ("containsEpisodeNumbers", 5, -1, context.contains_episode_numbers),
        ("commonNumberPattern", 5, -1, context.common_number_pattern),
        ("episodeWithoutNumbers", 1, -1, context.episode_without_numbers),
        ("episodeNumbers", 1, -1, context.episode_numbers),
        ("hasImdbId", -1, 1, context.has_imdb_id),
        ("nonNumberName", -1, 1, context.non_number_name),
        ("exactMovieMatch", -1, 5, context.exact_movie_match),
        ("containsMovieName", -1, 1, context.contains_movie_name),
        ("similarNameYear", -1, 1, context.similar_name_year),
        ("similarNameNoNumbers", -1, 1, context.similar_name_no_numbers),
        ("aliasNameMatch", -1, 1, context.alias_name_match),
    ]
    return [Rule(name, s, m, _guarded(predicate)) for name, s, m, predicate in table]


RuleCallback = Callable[[Rule, bool, int, int], None]


class TypeClassifier:
    """Decides between movie and series for files that match both.

    Args:
        detector: Detector used by the rule predicates
        on_rule: Called after every evaluated rule with the rule, its
                 outcome and the running series and movie scores

    Attributes:
        rule_calls: Number of rule predicates evaluated so far
    """

    def __init__(self, detector: MediaDetector, on_rule: RuleCallback | None = None) -> None:
        self.detector = detector
        self.on_rule = on_rule
        self.rule_calls = 0
        self._lock = threading.Lock()

    def _count_call(self) -> None:
        with self._lock:
            self.rule_calls += 1

    def classify(
        self,
        file: MediaFile,
        series: Sequence[str],
        movies: Sequence[CatalogEntry],
        detector: MediaDetector | None = None,
    ) -> ClassificationResult:
        """Run the rules for a file with both series and movie candidates.

        Args:
            file: File to classify
            series: Non-empty series name candidates, best first
            movies: Non-empty movie candidates, best first
            detector: Detector bound to the current batch; defaults to the classifier's own

        Returns:
            The decision and the resulting Group

        Raises:
            ClassificationError: If a rule predicate fails
        """
        group = Group().with_series(series).with_movie(movies)
        context = RuleContext(detector if detector is not None else self.detector, file, series, movies)

        series_score = movie_score = 0
        for rule in build_rules(context):
            self._count_call()
            result = rule.evaluate()

            if isinstance(result, Err):
                raise create_classification_error(
                    f"Rule '{rule.name}' failed for {file.path}: {result.error}",
                    file_path=str(file.path),
                    rule=rule.name,
                    original_error=result.error,
                ) from result.error

            if result.value:
                series_score += rule.series_score
                movie_score += rule.movie_score

            if self.on_rule is not None:
                self.on_rule(rule, result.value, series_score, movie_score)

            if not result.value:
                continue

            if series_score >= 1 and movie_score <= -1:
                logger.debug("Rule %s decided series for %s (%d/%d)", rule.name, file.path, series_score, movie_score)
                return ClassificationResult(
                    Classification.SERIES, group.with_movie(None), series_score, movie_score, rule.name
                )
            if movie_score >= 1 and series_score <= -1:
                logger.debug("Rule %s decided movie for %s (%d/%d)", rule.name, file.path, series_score, movie_score)
                return ClassificationResult(
                    Classification.MOVIE, group.with_series(None), series_score, movie_score, rule.name
                )

        logger.debug("No decisive rule for %s (%d/%d)", file.path, series_score, movie_score)
        return ClassificationResult(Classification.AMBIGUOUS, group, series_score, movie_score)


__all__ = [
    "Classification",
    "ClassificationResult",
    "Err",
    "Ok",
    "Rule",
    "RuleContext",
    "RuleResult",
    "TypeClassifier",
    "build_rules",
    "normalize_name",
]
