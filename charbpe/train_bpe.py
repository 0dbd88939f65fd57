import argparse
import logging
from pathlib import Path
from .serialization import read_text
from .tokenizer import BPETokenizer, DEFAULT_SPECIALS

def main(argv=None):
    ap = argparse.ArgumentParser(description="Train a BPE tokenizer, save it, and round-trip a sample.")
    ap.add_argument("--text", required=True)
    ap.add_argument("--size", type=int, default=1000)
    ap.add_argument("--vocab-out", required=True)
    ap.add_argument("--merges-out", required=True)
    ap.add_argument("--special", action="append", default=None,
                    help=f"special token to reserve (repeatable, default {' '.join(DEFAULT_SPECIALS)})")
    ap.add_argument("--sample", default="Jack embraced beauty through art and life.")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO)

    text = read_text(args.text)
    tok = BPETokenizer()
    tok.train(text, args.size, allowed_special=args.special or DEFAULT_SPECIALS, show_progress=True)
    for out in (args.vocab_out, args.merges_out):
        Path(out).parent.mkdir(parents=True, exist_ok=True)
    tok.save(args.vocab_out, args.merges_out)
    print(f"[tokenizer] saved {args.vocab_out} and {args.merges_out} (vocab={len(tok.vocab)}, merges={len(tok.merges)})")

    ids = tok.encode(args.sample)
    print(ids)
    print(f"Decoded: {tok.decode(ids)}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
