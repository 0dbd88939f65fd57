# serialization.py
# Native vocab/merges documents and the GPT-2 style (encoder.json + vocab.bpe) importer.

import json
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Tuple

from pydantic import BaseModel, TypeAdapter, ValidationError

from .errors import InvalidDocumentError, SkippedMerge

logger = logging.getLogger(__name__)

Pair = Tuple[int, int]

NATIVE_VOCAB = TypeAdapter(Dict[int, str])     # {"<id>": "<token>"}
EXTERNAL_VOCAB = TypeAdapter(Dict[str, int])   # {"<token>": <id>}


class MergeEntry(BaseModel):
    pair: List[int]
    new_id: int


def read_text(path) -> str:
    return Path(path).read_text(encoding="utf-8")


def _load_json(path):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _dump_json(obj, path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)


def write_native(vocab: Dict[int, str], merges: Dict[Pair, int], vocab_path, merges_path) -> None:
    # serialize fully before opening either file so a bad entry cannot leave half a save
    vocab_doc = {str(i): tok for i, tok in vocab.items()}
    merges_doc = [MergeEntry(pair=list(pair), new_id=new_id).model_dump()
                  for pair, new_id in merges.items()]
    _dump_json(vocab_doc, vocab_path)
    _dump_json(merges_doc, merges_path)
    logger.info("Saved %d tokens to %s and %d merges to %s",
                len(vocab_doc), vocab_path, len(merges_doc), merges_path)


def read_native_vocab(path) -> Dict[int, str]:
    try:
        return NATIVE_VOCAB.validate_python(_load_json(path))
    except ValidationError as e:
        raise InvalidDocumentError(path, f"expected an id -> token object ({e.error_count()} errors)") from e


def read_native_merges(path) -> Tuple[Dict[Pair, int], List[SkippedMerge]]:
    doc = _load_json(path)
    if not isinstance(doc, list):
        raise InvalidDocumentError(path, "expected a list of merge entries")

    merges: Dict[Pair, int] = {}
    skipped: List[SkippedMerge] = []
    for n, raw in enumerate(doc, start=1):
        try:
            entry = MergeEntry.model_validate(raw)
        except ValidationError as e:
            raise InvalidDocumentError(path, f"merge {n} is malformed: {raw!r}") from e
        if len(entry.pair) != 2:
            skipped.append(SkippedMerge(n, json.dumps(raw), f"pair has {len(entry.pair)} elements"))
            continue
        merges.setdefault((entry.pair[0], entry.pair[1]), entry.new_id)
    for s in skipped:
        logger.warning("Skipping %s", s)
    return merges, skipped


def read_external_vocab(path) -> Dict[str, int]:
    try:
        return EXTERNAL_VOCAB.validate_python(_load_json(path))
    except ValidationError as e:
        raise InvalidDocumentError(path, f"expected a token -> id object ({e.error_count()} errors)") from e


def iter_merge_lines(path) -> Iterator[Tuple[int, str]]:
    """Yield (rank, line) for a vocab.bpe file, skipping a leading '#' header and blank lines."""
    # only "\n" and "\r\n" end a line; other Unicode separators can sit inside a token
    with open(path, "r", encoding="utf-8", newline="") as f:
        lines = [line[:-1] if line.endswith("\r") else line for line in f.read().split("\n")]
    if lines and lines[0].startswith("#"):
        lines = lines[1:]
    for rank, line in enumerate(lines, start=1):
        if line.strip():
            yield rank, line.strip()


def resolve_external_merges(path, inverse_vocab: Dict[str, int]) -> Tuple[List[Tuple[Pair, int]], List[SkippedMerge]]:
    """Map textual merge lines to id triples; lines that do not resolve are reported, not raised."""
    resolved: List[Tuple[Pair, int]] = []
    skipped: List[SkippedMerge] = []
    for rank, line in iter_merge_lines(path):
        parts = line.split()
        if len(parts) != 2:
            skipped.append(SkippedMerge(rank, line, f"expected 2 tokens, got {len(parts)}"))
            continue
        first, second = parts
        if first not in inverse_vocab or second not in inverse_vocab:
            skipped.append(SkippedMerge(rank, line, "one of the tokens is not in the vocabulary"))
            continue
        merged = first + second
        if merged not in inverse_vocab:
            skipped.append(SkippedMerge(rank, line, f"merged token {merged!r} not in the vocabulary"))
            continue
        resolved.append(((inverse_vocab[first], inverse_vocab[second]), inverse_vocab[merged]))
    for s in skipped:
        logger.warning("Skipping %s", s)
    return resolved, skipped
