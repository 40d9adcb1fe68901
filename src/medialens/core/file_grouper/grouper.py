"""Batch grouping of media files by content type.

Each file is assigned a Group: music files by folder, movies by their best
catalog match, series and anime by their normalized series name. Cheap
path heuristics decide first; the rule engine only runs for files that
match both a movie and a series.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Sequence
from concurrent.futures import Executor, Future
from pathlib import PurePath

from medialens.config.models.app_settings import MediaSettings
from medialens.core.classifier.rules import TypeClassifier
from medialens.core.detection import MediaDetector, is_volume_root
from medialens.core.models.catalog import CatalogEntry
from medialens.core.models.file import MediaFile
from medialens.core.models.grouping import Group, GroupedFile
from medialens.core.normalization import get_embedded_checksum
from medialens.shared.constants import FolderPatterns, NamePatterns
from medialens.shared.errors import MediaLensError, create_classification_error, create_validation_error
from medialens.shared.logging import log_operation_error, log_operation_start, log_operation_success

logger = logging.getLogger(__name__)


def any_match(folder: PurePath | None, pattern: re.Pattern[str]) -> bool:
    """Whether the folder or any ancestor below the volume root fully matches the pattern."""
    while folder is not None and not is_volume_root(folder):
        if pattern.fullmatch(folder.name):
            return True
        folder = folder.parent
    return False


def partition(results: Sequence[GroupedFile]) -> dict[Group, list[MediaFile]]:
    """Files per Group, groups in first-seen order."""
    groups: dict[Group, list[MediaFile]] = {}
    for result in results:
        groups.setdefault(result.group, []).append(result.file)
    return groups


class MediaGrouper:
    """Assigns every file of a batch to a content-type Group.

    Args:
        detector: Detector providing catalog matching and collaborators
        classifier: Rule engine for ambiguous files; one is created if omitted
        media: Recognized audio and video extensions

    Example:
        >>> grouper = MediaGrouper(MediaDetector(Catalog(provider)))
        >>> results = grouper.group([MediaFile("TV/Breaking.Bad.S01E01.mkv")])
        >>> results[0].group.series
        'breaking bad'
    """

    def __init__(
        self,
        detector: MediaDetector,
        classifier: TypeClassifier | None = None,
        media: MediaSettings | None = None,
    ) -> None:
        self.detector = detector
        self.classifier = classifier if classifier is not None else TypeClassifier(detector)
        self.settings = detector.grouping
        self.media = media or MediaSettings()

    def group(self, files: Sequence[MediaFile], executor: Executor | None = None) -> list[GroupedFile]:
        """Group a batch of files.

        Files are processed in order on the calling thread unless an
        executor is given, in which case every file is submitted to it and
        the results are joined per file. Either way the output keeps the
        input order. A file whose detection fails is logged and left out.

        Args:
            files: Files of the batch
            executor: Optional executor for parallel detection

        Returns:
            One GroupedFile per successfully processed file, in input order

        Raises:
            DataProcessingError: If the batch exceeds ``max_input_files``
        """
        files = list(files)
        if len(files) > self.settings.max_input_files:
            raise create_validation_error(
                f"Too many files to group: {len(files)} > {self.settings.max_input_files}",
                field="files",
                operation="group_files",
                value=len(files),
            )

        start_time = time.time()
        log_operation_start(logger, "group_files", {"file_count": len(files), "parallel": executor is not None})

        detector = self.detector.with_siblings(files)
        results: list[GroupedFile] = []
        failed = 0

        if executor is None:
            for file in files:
                try:
                    results.append(GroupedFile(file, self.detect_group(file, detector)))
                except Exception as e:  # pylint: disable=broad-exception-caught
                    self._log_failure(file, e)
                    failed += 1
        else:
            futures: list[Future[Group]] = [executor.submit(self.detect_group, file, detector) for file in files]
            for file, future in zip(files, futures):
                try:
                    results.append(GroupedFile(file, future.result()))
                except Exception as e:  # pylint: disable=broad-exception-caught
                    self._log_failure(file, e)
                    failed += 1

        log_operation_success(
            logger,
            "group_files",
            (time.time() - start_time) * 1000,
            {"file_count": len(files), "grouped": len(results), "failed": failed},
        )
        return results

    def partition(self, results: Sequence[GroupedFile]) -> dict[Group, list[MediaFile]]:
        return partition(results)

    def _log_failure(self, file: MediaFile, error: Exception) -> None:
        if isinstance(error, MediaLensError):
            failure = error
        else:
            failure = create_classification_error(
                f"Failed to detect group for {file.path}: {error}",
                file_path=str(file.path),
                original_error=error,
            )
        log_operation_error(logger, failure, operation="detect_group", context={"file_path": str(file.path)})

    # heuristics

    def is_video(self, file: MediaFile) -> bool:
        return file.extension in self.media.video_extensions

    def is_music(self, file: MediaFile) -> bool:
        return file.extension in self.media.audio_extensions and not self.is_video(file)

    def is_movie(self, file: MediaFile, detector: MediaDetector) -> bool:
        return any_match(file.parent, FolderPatterns.MOVIE) or detector.is_movie(file, True)

    def is_episode(self, file: MediaFile, detector: MediaDetector) -> bool:
        name = file.path.name
        if detector.is_episode_name(name, False) and (
            any_match(file.parent, FolderPatterns.SERIES) or NamePatterns.SERIES_EPISODE.search(name)
        ):
            return True

        if detector.is_episode_name(str(file.path), True):
            return True

        metadata = detector.get_metadata(file.path)
        return metadata is not None and metadata.is_episode and not metadata.is_anime

    def is_anime(self, file: MediaFile, detector: MediaDetector) -> bool:
        name = file.path.name
        if detector.parse_episode_number(name, False) is None:
            return False

        if (
            any_match(file.parent, FolderPatterns.ANIME)
            or NamePatterns.ANIME_EPISODE.search(name)
            or get_embedded_checksum(name) is not None
        ):
            return True

        if self.is_video(file) and file.size > self.settings.min_video_size_bytes and detector.probe is not None:
            # Japanese audio or typical fansub subtitles
            try:
                characteristics = detector.probe.probe(file.path)
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.warning("Failed to read media characteristics of %s: %s", file.path, e)
            else:
                duration = characteristics.duration_seconds
                if duration is not None and duration < self.settings.anime_max_duration_minutes * 60:
                    return True
                return bool(
                    NamePatterns.JAPANESE_AUDIO_LANGUAGE.search(characteristics.audio_language or "")
                    and NamePatterns.JAPANESE_SUBTITLE_CODEC.search(characteristics.subtitle_codec or "")
                )

        metadata = detector.get_metadata(file.path)
        return metadata is not None and metadata.is_episode and metadata.is_anime

    # matches

    def get_series_matches(self, file: MediaFile, anime: bool, detector: MediaDetector) -> list[str]:
        """Series names of a file, falling back to its video siblings in the batch."""
        names = detector.detect_series_names([file], anime)
        if not names:
            episodes = detector.video_siblings(file)
            if len(episodes) >= self.settings.sibling_fallback_min_files:
                names = detector.detect_series_names(episodes, anime)
        return names

    def get_movie_matches(self, file: MediaFile, detector: MediaDetector) -> list[CatalogEntry]:
        return detector.detect_movie(file, False)

    def detect_group(self, file: MediaFile, detector: MediaDetector | None = None) -> Group:
        """Group of a single file.

        Args:
            file: File to classify
            detector: Detector bound to the current batch; defaults to the grouper's own

        Raises:
            ClassificationError: If the rule engine fails for this file
        """
        detector = detector if detector is not None else self.detector
        group = Group()

        if self.is_music(file):
            return group.with_music(file)
        if self.is_movie(file, detector):
            return group.with_movie(self.get_movie_matches(file, detector))
        if self.is_episode(file, detector):
            return group.with_series(self.get_series_matches(file, False, detector))
        if self.is_anime(file, detector):
            return group.with_anime(self.get_series_matches(file, True, detector))

        # episode-like names never become movies
        if NamePatterns.EPISODE.search(file.path.name):
            return group.with_series(self.get_series_matches(file, False, detector))

        movies = self.get_movie_matches(file, detector)
        series = self.get_series_matches(file, False, detector)

        if not movies and not series:
            return group
        if series and not movies:
            return group.with_series(series)
        if movies and not series:
            return group.with_movie(movies)

        return self.classifier.classify(file, series, movies, detector).group


__all__ = ["MediaGrouper", "any_match", "partition"]
