# tokenizer.py
# Character-level BPE tokenizer with a GPT-2 style word-boundary marker (Ġ).
# Trains merges from raw text, encodes/decodes with the frozen merge table,
# and saves/loads its state as two JSON documents.

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from tqdm import tqdm

from .errors import InvalidVocabSizeError, MissingCharactersError, SkippedMerge, TokenNotFoundError
from .preprocess import BOUNDARY_MARKER, base_alphabet, mark_boundaries, split_words, strip_boundary
from .serialization import (read_external_vocab, read_native_merges, read_native_vocab,
                            resolve_external_merges, write_native)
from .trainer import apply_merges, find_freq_pair, replace_pair

logger = logging.getLogger(__name__)

UNK_TOKEN = "<UNK>"
DEFAULT_SPECIALS = ("<|endoftext|>",)

Pair = Tuple[int, int]


@dataclass
class EncodeResult:
    ids: List[int]
    # words that fell back to <UNK> or to their mappable characters
    issues: List[MissingCharactersError] = field(default_factory=list)


def _ordered(tokens: Iterable[str]) -> List[str]:
    # sets have no stable iteration order; give them one
    if isinstance(tokens, (set, frozenset)):
        return sorted(tokens)
    return list(tokens)


class BPETokenizer:
    """
    BPE over Unicode characters.
    - vocab: id -> token text, inverse_vocab: token text -> id (a bijection over 0..N-1).
    - merges: (left id, right id) -> merged id, in the order merges were learned.
    - A space before a word is carried as a Ġ prefix on the following token.
    """

    def __init__(self):
        self.vocab: Dict[int, str] = {}
        self.inverse_vocab: Dict[str, int] = {}
        self.merges: Dict[Pair, int] = {}

    @classmethod
    def from_files(cls, vocab_path, merges_path) -> "BPETokenizer":
        tok = cls()
        tok.load(vocab_path, merges_path)
        return tok

    def _add_token(self, token: str) -> int:
        new_id = len(self.vocab)
        self.vocab[new_id] = token
        self.inverse_vocab[token] = new_id
        return new_id

    # ------------- Training -------------

    def train(self,
              text: str,
              vocab_size: int,
              allowed_special: Iterable[str] = DEFAULT_SPECIALS,
              show_progress: bool = False) -> None:
        """
        Learn a vocabulary of at most vocab_size tokens from text, replacing any previous state.
        Stops early once no adjacent pair is left to merge.
        """
        if vocab_size <= 0:
            raise InvalidVocabSizeError(vocab_size)

        processed = mark_boundaries(text)

        # Base slots, then characters seen in the text, then the marker
        unique_chars = base_alphabet()
        known = set(unique_chars)
        for ch in sorted(set(processed)):
            if ch not in known:
                unique_chars.append(ch)
                known.add(ch)
        if BOUNDARY_MARKER not in known:
            unique_chars.append(BOUNDARY_MARKER)

        self.vocab = dict(enumerate(unique_chars))
        self.inverse_vocab = {ch: i for i, ch in self.vocab.items()}
        self.merges = {}

        for token in _ordered(allowed_special):
            if token not in self.inverse_vocab:
                self._add_token(token)

        token_ids: List[int] = []
        for ch in processed:
            tid = self.inverse_vocab.get(ch)
            if tid is None:
                logger.warning("Character %r not found in vocabulary during training", ch)
                tid = self._add_token(ch)
            token_ids.append(tid)

        logger.info("Training BPE on %d symbols: base vocab %d, target %d",
                    len(token_ids), len(self.vocab), vocab_size)

        def mergeable(pair: Pair) -> bool:
            if pair[0] in self.vocab and pair[1] in self.vocab:
                return True
            logger.warning("Cannot merge token ids %s: not in vocabulary", pair)
            return False

        pbar = tqdm(total=max(0, vocab_size - len(self.vocab)), desc="[tokenizer] merges",
                    disable=not show_progress)
        while len(self.vocab) < vocab_size:
            pair = find_freq_pair(token_ids, mode="most", accept=mergeable)
            if pair is None:
                break
            merged = self.vocab[pair[0]] + self.vocab[pair[1]]
            new_id = self.inverse_vocab.get(merged)
            if new_id is None:
                new_id = self._add_token(merged)
                pbar.update(1)
            self.merges.setdefault(pair, new_id)
            token_ids = replace_pair(token_ids, pair, self.merges[pair])
            logger.debug("merge %s -> %d (%r)", pair, new_id, merged)
        pbar.close()

        logger.info("Training complete: %d tokens, %d merges", len(self.vocab), len(self.merges))

    # ------------- Encoding -------------

    def tokenize_with_bpe(self, word: str) -> List[int]:
        """Split word into characters and apply learned merges until none applies."""
        ids: List[int] = []
        missing: List[str] = []
        for ch in word:
            tid = self.inverse_vocab.get(ch)
            if tid is None:
                missing.append(ch)
            else:
                ids.append(tid)
        if missing:
            raise MissingCharactersError(word, missing)
        return apply_merges(ids, self.merges)

    def encode_with_report(self, text: str) -> EncodeResult:
        result = EncodeResult(ids=[])
        for word in split_words(text):
            tid = self.inverse_vocab.get(word)
            if tid is not None:
                result.ids.append(tid)
                continue
            try:
                result.ids.extend(self.tokenize_with_bpe(word))
            except MissingCharactersError as e:
                logger.warning("Error tokenizing %r: %s", word, e)
                result.issues.append(e)
                unk_id = self.inverse_vocab.get(UNK_TOKEN)
                if unk_id is not None:
                    result.ids.append(unk_id)
                else:
                    result.ids.extend(self.inverse_vocab[ch] for ch in word if ch in self.inverse_vocab)
        return result

    def encode(self, text: str) -> List[int]:
        return self.encode_with_report(text).ids

    # ------------- Decoding -------------

    def decode(self, ids: Iterable[int]) -> str:
        parts = []
        for tid in ids:
            token = self.vocab.get(tid)
            if token is None:
                raise TokenNotFoundError(tid)
            parts.append(strip_boundary(token))
        return "".join(parts)

    def get_special_token_id(self, token: str) -> Optional[int]:
        return self.inverse_vocab.get(token)

    # ---------------- Save / Load ----------------

    def save(self, vocab_path, merges_path) -> None:
        write_native(self.vocab, self.merges, vocab_path, merges_path)

    def load(self, vocab_path, merges_path) -> List[SkippedMerge]:
        """Replace vocab and merges with the saved documents. Returns merge entries that were skipped."""
        vocab = read_native_vocab(vocab_path)
        self.vocab.clear()
        self.inverse_vocab.clear()
        for tid, token in vocab.items():
            self.vocab[tid] = token
            self.inverse_vocab[token] = tid

        merges, skipped = read_native_merges(merges_path)
        self.merges.clear()
        self.merges.update(merges)
        logger.info("Loaded %d tokens and %d merges", len(self.vocab), len(self.merges))
        return skipped

    def import_external(self, vocab_path, merges_path) -> List[SkippedMerge]:
        """
        Add an externally trained vocabulary (token -> id JSON) and its ranked merges
        (one "left right" pair per line). Existing entries are kept unless overwritten
        by the vocabulary document; merges that do not resolve are skipped and returned.
        """
        for token, tid in read_external_vocab(vocab_path).items():
            self.vocab[tid] = token
            self.inverse_vocab[token] = tid

        resolved, skipped = resolve_external_merges(merges_path, self.inverse_vocab)
        for pair, new_id in resolved:
            self.merges.setdefault(pair, new_id)
        logger.info("Imported %d merges (%d skipped); vocab now %d tokens",
                    len(resolved), len(skipped), len(self.vocab))
        return skipped
