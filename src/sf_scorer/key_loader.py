"""
Key Loader

Parses the assessment key, system response files, and optional slot lists.

Key and response files are tab-separated and read line by line; a line that
does not fit its format is logged and skipped rather than aborting the run.
Bytes that are not valid UTF-8 are replaced, so one stray Latin-1 filler
cannot stop a run.
"""

import logging
from pathlib import Path
from typing import Callable, Iterator, TypeVar

from sf_scorer.domain.constants import (
    KEY_FIELD_COUNT,
    NIL,
    RESPONSE_MAX_FIELDS,
    RESPONSE_MIN_FIELDS,
)
from sf_scorer.domain.entities import JudgedRecord, SubmittedResponse
from sf_scorer.domain.value_objects import InvalidJudgmentError, Judgment

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MalformedLineError(ValueError):
    """A key or response line that does not match its format"""
    pass


def parse_key_line(line: str) -> JudgedRecord | None:
    """
    Parse one line of the assessment key

    Columns: response id, query id (entity:slot), doc id, filler,
    filler offsets, entity offsets, predicate offsets, the three offset
    judgments, the filler judgment, and the equivalence class.

    Args:
        line: Raw line from the key file

    Returns:
        JudgedRecord, or None for NIL rows (these need not be recorded)

    Raises:
        MalformedLineError: Wrong field count, unparsable equivalence class,
            or unknown filler judgment code
    """
    fields = line.strip().split("\t", KEY_FIELD_COUNT - 1)
    if len(fields) != KEY_FIELD_COUNT:
        raise MalformedLineError(f"expected {KEY_FIELD_COUNT} fields, found {len(fields)}")

    doc_id = fields[2]
    if doc_id == NIL:
        return None

    try:
        equivalence_class = int(fields[11])
    except ValueError:
        raise MalformedLineError(f"invalid equivalence class: {fields[11]!r}") from None

    try:
        judgment = Judgment.from_code(fields[10])
    except InvalidJudgmentError as e:
        raise MalformedLineError(str(e)) from None

    return JudgedRecord(
        response_id=fields[0],
        query_id=fields[1].replace(",", "/"),
        doc_id=doc_id,
        filler=fields[3].strip(),
        filler_offsets=fields[4].strip(),
        entity_offsets=fields[5].strip(),
        predicate_offsets=fields[6].strip(),
        filler_offset_judgment=fields[7],
        entity_offset_judgment=fields[8],
        predicate_offset_judgment=fields[9],
        judgment=judgment,
        equivalence_class=equivalence_class,
    )


def parse_response_line(line: str) -> SubmittedResponse:
    """
    Parse one line of a system response file

    Columns: entity id, slot name, run id, doc id or NIL, and for non-NIL
    responses the filler, filler offsets, entity offsets, predicate
    offsets, an unused column, and the confidence.

    Raises:
        MalformedLineError: Field count outside [4, 10], a non-NIL response
            without its filler and offsets, or an unparsable confidence
    """
    fields = line.strip().split("\t", RESPONSE_MAX_FIELDS - 1)
    if not RESPONSE_MIN_FIELDS <= len(fields) <= RESPONSE_MAX_FIELDS:
        raise MalformedLineError(f"{len(fields)} fields")

    query_id = f"{fields[0]}:{fields[1]}"
    doc_id = fields[3]
    if doc_id == NIL:
        return SubmittedResponse(query_id=query_id, run_id=fields[2], doc_id=doc_id)

    if len(fields) < 8:
        raise MalformedLineError(f"non-NIL response with only {len(fields)} fields")

    confidence = None
    if len(fields) == RESPONSE_MAX_FIELDS and fields[9].strip():
        try:
            confidence = float(fields[9])
        except ValueError:
            raise MalformedLineError(f"invalid confidence: {fields[9]!r}") from None

    return SubmittedResponse(
        query_id=query_id,
        run_id=fields[2],
        doc_id=doc_id,
        filler=fields[4].strip(),
        filler_offsets=fields[5].strip(),
        entity_offsets=fields[6].strip(),
        predicate_offsets=fields[7].strip(),
        confidence=confidence,
    )


def _require_file(file_path: str | Path, label: str) -> Path:
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"Unable to open {label} file {file_path}")
    return path


def _iter_parsed(path: Path, parse: Callable[[str], T | None], label: str) -> Iterator[T]:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for line_no, line in enumerate(f, start=1):
            try:
                parsed = parse(line)
            except MalformedLineError as e:
                logger.warning("Invalid line %d in %s file (%s): %s", line_no, label, e, line.rstrip("\n"))
                continue
            if parsed is None:
                logger.debug("Skipping NIL line %d in %s file", line_no, label)
                continue
            yield parsed


def read_key_records(file_path: str | Path) -> Iterator[JudgedRecord]:
    """
    Stream the judged records of a key file

    Raises:
        FileNotFoundError: If the file does not exist (raised before iteration)
    """
    path = _require_file(file_path, "judgement")
    return _iter_parsed(path, parse_key_line, "judgement")


def read_responses(file_path: str | Path) -> Iterator[SubmittedResponse]:
    """
    Stream the responses of a system response file

    Raises:
        FileNotFoundError: If the file does not exist (raised before iteration)
    """
    path = _require_file(file_path, "responses")
    return _iter_parsed(path, parse_response_line, "responses")


def read_slot_list(file_path: str | Path) -> list[str]:
    """
    Read the query ids listed one per line in a slot file

    Blank lines are ignored.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = _require_file(file_path, "slot")
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        slots = [line.strip() for line in f if line.strip()]
    logger.info("Read %d lines from %s", len(slots), file_path)
    return slots
