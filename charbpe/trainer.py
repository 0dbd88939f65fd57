# trainer.py
# Pair statistics and pair replacement used by BPE training and encoding.

from collections import Counter
from typing import Callable, Dict, List, Optional, Tuple

Pair = Tuple[int, int]


def get_stats(ids: List[int]) -> Dict[Pair, int]:
    """Count adjacent pairs. Keys keep the order of their first occurrence."""
    return Counter(zip(ids, ids[1:]))


def find_freq_pair(ids: List[int],
                   mode: str = "most",
                   accept: Optional[Callable[[Pair], bool]] = None) -> Optional[Pair]:
    """
    Return the most (or least) frequent adjacent pair, or None when there is none.
    Ties go to the pair that first occurs earliest in ids: max/min keep the first
    extreme they see and the Counter iterates in first-occurrence order.
    Pairs rejected by accept are passed over in favour of the next candidate.
    """
    stats = get_stats(ids)
    if accept is not None:
        stats = {pair: count for pair, count in stats.items() if accept(pair)}
    if not stats:
        return None
    if mode == "most":
        return max(stats.items(), key=lambda kv: kv[1])[0]
    if mode == "least":
        return min(stats.items(), key=lambda kv: kv[1])[0]
    raise ValueError("Invalid mode. Choose 'most' or 'least'.")


def replace_pair(ids: List[int], pair: Pair, new_id: int) -> List[int]:
    """Replace all non-overlapping occurrences of pair, scanning left to right."""
    out: List[int] = []
    i = 0
    while i < len(ids):
        if i < len(ids) - 1 and (ids[i], ids[i + 1]) == pair:
            out.append(new_id)
            i += 2
        else:
            out.append(ids[i])
            i += 1
    return out


def apply_merges(ids: List[int], merges: Dict[Pair, int]) -> List[int]:
    # one pass merges every known pair it meets; repeat until a pass changes nothing
    can_merge = True
    while can_merge and len(ids) > 1:
        can_merge = False
        out: List[int] = []
        i = 0
        while i < len(ids) - 1:
            merged = merges.get((ids[i], ids[i + 1]))
            if merged is not None:
                out.append(merged)
                i += 2
                can_merge = True
            else:
                out.append(ids[i])
                i += 1
        if i < len(ids):
            out.append(ids[i])
        ids = out
    return ids
