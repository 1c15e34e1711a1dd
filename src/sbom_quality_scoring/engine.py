"""Scoring engine for the SBOM Quality Scoring System.

Drives one batch run: validates the input paths and the run options, then
parses, evaluates and aggregates each manifest in turn. Per-document
failures are recorded and skipped; the batch only fails when nothing could
be scored.
"""

import logging
import threading
import time
import uuid
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError

from .audit.audit_logger import AuditLogger, new_event
from .catalog import SPDX_ONLY_PROFILES, build_default_catalog
from .catalog.catalog import Catalog
from .config.config_manager import ConfigurationManager
from .config.models import ConfigurationError, ScoringConfig, SignatureBundle
from .formulas import (
    compute_category_score,
    compute_multi_profile_score,
    compute_overall_score,
    compute_profile_score,
    to_grade,
)
from .interfaces.audit import AuditEventType, IAuditLogger
from .models.document import SBOMDocument, Signature
from .models.enums import ScoringMode
from .models.results import (
    CategoryResult,
    FeatureResult,
    ProfileItemResult,
    ProfileResult,
    ScoreResult,
)
from .parsers.exceptions import ErrorHandler, ParseError
from .parsers.sbom_parser import SBOMParser, is_url
from . import resolver

logger = logging.getLogger(__name__)


class NoDocumentsScoredError(Exception):
    """Raised when every path of a batch failed."""

    def __init__(self, message: str, summary: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.summary = summary or {}


class ScoringCancelledError(Exception):
    """Raised when a run is cancelled or runs past its deadline."""


class _Cancellation:
    """Cancellation event and/or absolute ``time.monotonic()`` deadline."""

    def __init__(self, event: Optional[threading.Event] = None, deadline: Optional[float] = None):
        self.event = event
        self.deadline = deadline

    def check(self, stage: str) -> None:
        if self.event is not None and self.event.is_set():
            raise ScoringCancelledError(f"Scoring cancelled during {stage}")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise ScoringCancelledError(f"Scoring deadline passed during {stage}")

    def remaining(self) -> Optional[float]:
        if self.deadline is None:
            return None
        return max(self.deadline - time.monotonic(), 0.0)


def apply_signature_bundle(doc: SBOMDocument, bundle: SignatureBundle) -> None:
    """Attach detached signature material to a document that carries none."""
    if doc.signature is not None or bundle.is_empty():
        return
    doc.signature = Signature(
        algorithm="detached",
        value=bundle.sig_value.strip(),
        public_key=bundle.public_key.strip(),
        blob=bundle.blob.strip(),
    )


class ScoringEngine:
    """
    Orchestrates scoring runs.

    Holds the collaborators of a run: the base catalog, the manifest
    parser, the configuration manager and an optional audit logger. The
    catalog is only read, so one engine may serve several runs.
    """

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        parser: Optional[SBOMParser] = None,
        audit_logger: Optional[IAuditLogger] = None,
        config_manager: Optional[ConfigurationManager] = None,
    ):
        self._catalog = catalog if catalog is not None else build_default_catalog()
        self._parser = parser
        self._audit_logger = audit_logger
        self._config_manager = config_manager or ConfigurationManager()

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    # =========================================================================
    # Batch run
    # =========================================================================

    def score(
        self,
        config: ScoringConfig,
        paths: Sequence[str],
        cancel_event: Optional[threading.Event] = None,
        deadline: Optional[float] = None,
    ) -> List[ScoreResult]:
        """
        Score every manifest reachable from the given paths.

        Args:
            config: Run options; never modified.
            paths: Files, directories or http(s) URLs.
            cancel_event: Set to abort the run between documents or categories.
            deadline: Absolute ``time.monotonic()`` value after which the run aborts.

        Returns:
            One ScoreResult per successfully scored manifest, in path order.

        Raises:
            ConfigurationError: If the options or paths cannot produce a run.
            NoDocumentsScoredError: If no manifest could be scored.
            ScoringCancelledError: If the run was cancelled.
        """
        cancellation = _Cancellation(cancel_event, deadline)
        run_id = str(uuid.uuid4())
        audit, owns_audit = self._audit_for(config)
        try:
            return self._run(config, paths, cancellation, run_id, audit)
        except (ConfigurationError, NoDocumentsScoredError, ScoringCancelledError) as e:
            self._record(audit, AuditEventType.RUN_FAILED, run_id, details={
                "error_type": type(e).__name__,
                "message": str(e),
            })
            raise
        finally:
            if owns_audit:
                audit.close()

    def _run(
        self,
        config: ScoringConfig,
        paths: Sequence[str],
        cancellation: _Cancellation,
        run_id: str,
        audit: Optional[IAuditLogger],
    ) -> List[ScoreResult]:
        targets = self.validate_paths(paths, config.recursive, cancellation)

        catalog, loaded = self._config_manager.build_catalog(config, self._catalog)
        normalized, validation = self._config_manager.validate(catalog, config, loaded)
        for warning in validation.warnings:
            logger.warning(warning)

        logger.info(
            f"Scoring {len(targets)} document(s) in {normalized.mode.value} mode (run {run_id})"
        )
        self._record(audit, AuditEventType.RUN_STARTED, run_id, details={
            "mode": normalized.mode.value,
            "paths": targets,
            "categories": normalized.categories,
            "features": normalized.features,
            "profiles": normalized.profiles,
        })

        parser = self._parser or SBOMParser(timeout=normalized.fetch_timeout)
        errors = ErrorHandler(source=run_id)
        results: List[ScoreResult] = []

        for path in targets:
            cancellation.check(f"'{path}'")
            try:
                doc = self._parse(parser, path, normalized, cancellation)
            except ParseError as e:
                e.file_path = e.file_path or path
                logger.warning(f"Skipping {path}: {e}")
                errors.add_error(e)
                self._record(audit, AuditEventType.DOCUMENT_SKIPPED, run_id, path, e.to_dict())
                continue

            apply_signature_bundle(doc, normalized.signature_bundle)
            result = self.score_document(doc, path, normalized, catalog, cancellation)
            if result is None:
                message = "no selected profile applies to this document"
                logger.warning(f"Skipping {path}: {message}")
                errors.add_warning(message, location=path)
                self._record(audit, AuditEventType.DOCUMENT_SKIPPED, run_id, path, {"message": message})
                continue

            results.append(result)
            self._record(audit, AuditEventType.DOCUMENT_SCORED, run_id, path, {
                "score": result.interlynk_score,
                "grade": result.grade,
                "spec": result.spec,
                "spec_version": result.spec_version,
                "num_components": result.num_components,
            })

        if not results:
            summary = errors.get_summary()
            raise NoDocumentsScoredError(
                f"No document could be scored ({summary['error_count']} errors, "
                f"{summary['warning_count']} warnings)",
                summary=summary,
            )

        logger.info(f"Scored {len(results)} of {len(targets)} document(s)")
        self._record(audit, AuditEventType.RUN_COMPLETED, run_id, details={
            "scored": len(results),
            "skipped": len(targets) - len(results),
        })
        return results

    def _parse(
        self,
        parser: SBOMParser,
        path: str,
        config: ScoringConfig,
        cancellation: _Cancellation,
    ) -> SBOMDocument:
        if is_url(path) and self._parser is None:
            remaining = cancellation.remaining()
            parser.timeout = config.fetch_timeout if remaining is None else min(config.fetch_timeout, remaining)
        return parser.parse(path)

    # =========================================================================
    # Path validation
    # =========================================================================

    def validate_paths(
        self,
        paths: Iterable[str],
        recursive: bool = False,
        cancellation: Optional[_Cancellation] = None,
    ) -> List[str]:
        """
        Turn raw paths into the sorted list of manifests to score.

        Blank entries are skipped, URLs are kept as given, directories are
        expanded to their files (one level unless ``recursive``) and
        missing paths are skipped with a warning.

        Raises:
            ConfigurationError: If no usable path remains.
        """
        cancellation = cancellation or _Cancellation()
        found = set()
        for raw in paths or []:
            path = raw.strip() if raw else ""
            if not path:
                logger.warning("Skipping blank path")
                continue
            if is_url(path):
                found.add(path)
                continue

            target = Path(path)
            if target.is_dir():
                found.update(self._expand_directory(target, recursive, cancellation))
            elif target.is_file():
                found.add(path)
            else:
                logger.warning(f"Skipping {path}: no such file or directory")

        if not found:
            raise ConfigurationError("no valid paths provided")
        return sorted(found)

    @staticmethod
    def _expand_directory(directory: Path, recursive: bool, cancellation: _Cancellation) -> List[str]:
        entries = directory.rglob("*") if recursive else directory.iterdir()
        files = []
        for entry in entries:
            cancellation.check(f"traversal of '{directory}'")
            if entry.is_file():
                files.append(str(entry))
        logger.debug(f"Expanded {directory} to {len(files)} file(s)")
        return files

    # =========================================================================
    # Document scoring
    # =========================================================================

    def score_document(
        self,
        doc: SBOMDocument,
        filename: str,
        config: ScoringConfig,
        catalog: Optional[Catalog] = None,
        cancellation: Optional[_Cancellation] = None,
    ) -> Optional[ScoreResult]:
        """
        Score one parsed document with an already validated config.

        Returns:
            The ScoreResult, or None when none of the selected profiles
            applies to the document.
        """
        catalog = catalog or self._catalog
        cancellation = cancellation or _Cancellation()
        result = ScoreResult(
            filename=filename,
            num_components=len(doc.components),
            creation_time=doc.spec.creation_timestamp,
            spec=doc.spec.spec_name,
            spec_version=doc.spec.version,
            file_format=doc.spec.file_format,
        )

        if config.mode == ScoringMode.PROFILES:
            profiles = self.evaluate_profiles(doc, catalog, config.profiles, cancellation)
            if not profiles:
                return None
            result.profiles = profiles
            result.interlynk_score = compute_multi_profile_score(profiles)
        else:
            categories = self.evaluate_categories(
                doc, catalog, config.categories, config.features, cancellation
            )
            result.categories = categories
            result.interlynk_score = compute_overall_score(categories)

        result.grade = to_grade(result.interlynk_score)
        logger.debug(f"{filename}: {result.interlynk_score:.2f} ({result.grade})")
        return result

    def evaluate_categories(
        self,
        doc: SBOMDocument,
        catalog: Catalog,
        category_names: Sequence[str] = (),
        feature_names: Sequence[str] = (),
        cancellation: Optional[_Cancellation] = None,
    ) -> List[CategoryResult]:
        """Run every selected comprehensive feature and aggregate per category."""
        cancellation = cancellation or _Cancellation()
        results = []
        for category in resolver.select_categories(catalog, category_names, feature_names):
            cancellation.check(f"category '{category.key}'")
            features = []
            for key in category.feature_keys:
                spec = catalog.feature(key)
                outcome = spec.evaluator.evaluate(doc)
                logger.debug(f"{category.key}/{key}: {outcome.score:.2f} {outcome.desc}")
                features.append(FeatureResult(
                    key=key,
                    name=spec.name,
                    weight=spec.weight,
                    score=outcome.score,
                    desc=outcome.desc,
                    ignored=outcome.ignore,
                ))
            results.append(CategoryResult(
                key=category.key,
                name=category.name,
                weight=category.weight,
                score=compute_category_score(features),
                features=features,
            ))
        return results

    def evaluate_profiles(
        self,
        doc: SBOMDocument,
        catalog: Catalog,
        profile_names: Sequence[str] = (),
        cancellation: Optional[_Cancellation] = None,
    ) -> List[ProfileResult]:
        """Run every selected profile; SPDX-only profiles are skipped for CycloneDX."""
        cancellation = cancellation or _Cancellation()
        results = []
        for profile in resolver.select_profiles(catalog, profile_names):
            cancellation.check(f"profile '{profile.key}'")
            if profile.key in SPDX_ONLY_PROFILES and doc.is_cyclonedx():
                logger.warning(f"Profile '{profile.key}' only applies to SPDX documents, skipped")
                continue

            items = []
            for item, feature in catalog.profile_entries(profile.key):
                outcome = feature.evaluator.evaluate(doc)
                items.append(ProfileItemResult(
                    key=item.key,
                    name=item.name or feature.name,
                    required=item.required,
                    score=outcome.score,
                    passed=self._item_passed(item.required, outcome.score, outcome.ignore),
                    desc=outcome.desc,
                    ignored=outcome.ignore,
                ))

            score = compute_profile_score(items)
            results.append(ProfileResult(
                key=profile.key,
                name=profile.name,
                description=profile.description,
                score=score,
                grade=to_grade(score),
                items=items,
            ))
        return results

    @staticmethod
    def _item_passed(required: bool, score: float, ignored: bool) -> bool:
        if ignored:
            return not required
        if required:
            return score >= 10.0
        return score > 0

    # =========================================================================
    # Audit trail
    # =========================================================================

    def _audit_for(self, config: ScoringConfig) -> Tuple[Optional[IAuditLogger], bool]:
        if self._audit_logger is not None:
            return self._audit_logger, False
        if config.enable_audit_logging:
            return AuditLogger(database_url=config.database_url), True
        return None, False

    @staticmethod
    def _record(
        audit: Optional[IAuditLogger],
        event_type: AuditEventType,
        run_id: str,
        path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Record an audit event. Audit failures never change the run outcome."""
        if audit is None:
            return
        try:
            audit.log_event(new_event(event_type, run_id=run_id, path=path, details=details))
        except SQLAlchemyError as e:
            logger.warning(f"Could not record {event_type.value} audit event for run {run_id}: {e}")


def score_sbom(
    config: ScoringConfig,
    paths: Sequence[str],
    cancel_event: Optional[threading.Event] = None,
    deadline: Optional[float] = None,
    *,
    catalog: Optional[Catalog] = None,
    parser: Optional[SBOMParser] = None,
    audit_logger: Optional[IAuditLogger] = None,
) -> List[ScoreResult]:
    """
    Score manifests with a one-off engine.

    See ScoringEngine.score for arguments and errors.
    """
    engine = ScoringEngine(catalog=catalog, parser=parser, audit_logger=audit_logger)
    return engine.score(config, paths, cancel_event=cancel_event, deadline=deadline)
