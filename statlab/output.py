"""Persist finished results with provenance metadata.

This module is the storage boundary. The engine never calls it; callers pass
a computed result together with what was requested, and each analysis is
written as a JSON record plus a CSV table of its points or predictions under
``<output_dir>/<kind>/``.
"""

from __future__ import annotations

import json
import logging
import os
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import pandas as pd

from .errors import InvalidParameterError, UnsupportedOperationError
from .reporting import points_to_frame, points_to_records, predictions_to_frame, result_to_frame
from .schema import HypothesisTestResult, RegressionResult, SamplePoint
from .stats.distributions import distribution_metadata

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = "output"
ANALYSIS_KINDS = ("distribution", "hypothesis", "regression")
_ID_PATTERN = re.compile(r"[0-9a-f]{32}")

AnalysisResult = Union[Sequence[SamplePoint], HypothesisTestResult, RegressionResult]


def _check_kind(kind: str) -> str:
    if kind not in ANALYSIS_KINDS:
        raise UnsupportedOperationError(
            f"Unknown analysis kind {kind!r}; expected one of: {', '.join(ANALYSIS_KINDS)}."
        )
    return kind


def _serialize(kind: str, result: AnalysisResult) -> tuple[Any, Dict[str, Any], pd.DataFrame]:
    """Return (JSON payload, metadata, CSV table) for ``result``."""
    if kind == "distribution":
        points = list(result)  # type: ignore[arg-type]
        return points_to_records(points), distribution_metadata(points), points_to_frame(points)
    if kind == "hypothesis":
        if not isinstance(result, HypothesisTestResult):
            raise InvalidParameterError("A hypothesis analysis needs a HypothesisTestResult.")
        return result.to_dict(), {}, result_to_frame(result)
    if not isinstance(result, RegressionResult):
        raise InvalidParameterError("A regression analysis needs a RegressionResult.")
    return result.to_dict(), {}, predictions_to_frame(result)


def save_analysis(
    result: AnalysisResult,
    kind: str,
    output_dir: str = DEFAULT_OUTPUT_DIR,
    parameters: Optional[Mapping[str, Any]] = None,
    description: str = "",
    created_by: str = "anonymous",
    analysis_type: Optional[str] = None,
) -> str:
    """Write an analysis record and its table to disk.

    Args:
        result: Points from ``sample`` or the result of ``evaluate``/``fit``.
        kind (str): ``"distribution"``, ``"hypothesis"`` or ``"regression"``.
        output_dir (str): Root directory for stored analyses.
        parameters (Mapping[str, Any], optional): Request parameters. Stored
            as a plain mapping; readers must not rely on key order.
        description (str): Free-text note.
        created_by (str): Free-text author label.
        analysis_type (str, optional): Sub-type such as the distribution
            family or test kind.

    Returns:
        str: Path to the written JSON record.

    Note:
        The CSV table shares the record's id and directory, with a ``.csv``
        suffix.
    """
    _check_kind(kind)
    payload, metadata, table = _serialize(kind, result)

    analysis_id = uuid.uuid4().hex
    record = {
        "id": analysis_id,
        "kind": kind,
        "analysisType": analysis_type,
        "createdAt": datetime.now(timezone.utc).isoformat(),
        "description": description,
        "createdBy": created_by,
        "parameters": dict(parameters or {}),
        "metadata": metadata,
        "result": payload,
    }

    kind_dir = os.path.join(output_dir, kind)
    os.makedirs(kind_dir, exist_ok=True)
    record_path = os.path.join(kind_dir, f"{analysis_id}.json")
    table_path = os.path.join(kind_dir, f"{analysis_id}.csv")

    # The JSON record is what load_analyses lists, so it is written last.
    table.to_csv(table_path, index=False)
    try:
        with open(record_path, "w", encoding="utf-8") as fh:
            json.dump(record, fh, indent=2)
    except (OSError, TypeError, ValueError):
        logger.error("Failed to write %s record; removing %s", kind, table_path)
        for path in (record_path, table_path):
            if os.path.exists(path):
                os.remove(path)
        raise

    logger.info("Saved %s analysis to %s", kind, record_path)
    logger.info("Saved %s table to %s", kind, table_path)
    return record_path


def load_analyses(output_dir: str = DEFAULT_OUTPUT_DIR, kind: Optional[str] = None) -> List[Dict[str, Any]]:
    """Load saved analysis records, newest first.

    Args:
        output_dir (str): Root directory used by :func:`save_analysis`.
        kind (str, optional): Restrict to one analysis kind.

    Returns:
        list[dict]: Records as written, sorted by ``createdAt`` descending.
    """
    kinds = [_check_kind(kind)] if kind is not None else list(ANALYSIS_KINDS)
    records: List[Dict[str, Any]] = []
    for name in kinds:
        kind_dir = os.path.join(output_dir, name)
        if not os.path.isdir(kind_dir):
            continue
        for filename in os.listdir(kind_dir):
            if not filename.endswith(".json"):
                continue
            with open(os.path.join(kind_dir, filename), encoding="utf-8") as fh:
                records.append(json.load(fh))
    records.sort(key=lambda r: r.get("createdAt", ""), reverse=True)
    return records


def load_table(output_dir: str, kind: str, analysis_id: str) -> pd.DataFrame:
    """Read back the CSV table saved with an analysis."""
    _check_kind(kind)
    _check_id(analysis_id)
    return pd.read_csv(os.path.join(output_dir, kind, f"{analysis_id}.csv"))


def _check_id(analysis_id: str) -> None:
    if not _ID_PATTERN.fullmatch(str(analysis_id)):
        raise InvalidParameterError(f"Invalid analysis id {analysis_id!r}.")


def delete_analysis(output_dir: str, kind: str, analysis_id: str) -> bool:
    """Remove a stored analysis and its table.

    Returns:
        bool: ``True`` if the record existed and was removed.
    """
    _check_kind(kind)
    _check_id(analysis_id)
    record_path = os.path.join(output_dir, kind, f"{analysis_id}.json")
    if not os.path.exists(record_path):
        logger.warning("No %s analysis with id %s in %s", kind, analysis_id, output_dir)
        return False
    os.remove(record_path)
    table_path = os.path.join(output_dir, kind, f"{analysis_id}.csv")
    if os.path.exists(table_path):
        os.remove(table_path)
    logger.info("Deleted %s analysis %s", kind, analysis_id)
    return True
