import argparse
import logging
import sys
from .errors import TokenNotFoundError
from .tokenizer import BPETokenizer

def main(argv=None):
    ap = argparse.ArgumentParser(description="Encode text with a saved or imported BPE tokenizer.")
    ap.add_argument("--vocab", required=True)
    ap.add_argument("--merges", required=True)
    ap.add_argument("--openai", action="store_true",
                    help="files are GPT-2 style encoder.json / vocab.bpe instead of native documents")
    ap.add_argument("--verbose", action="store_true")
    ap.add_argument("text")
    args = ap.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO)

    tok = BPETokenizer()
    if args.openai:
        skipped = tok.import_external(args.vocab, args.merges)
    else:
        skipped = tok.load(args.vocab, args.merges)
    if skipped:
        print(f"[tokenizer] skipped {len(skipped)} merges", file=sys.stderr)

    result = tok.encode_with_report(args.text)
    for issue in result.issues:
        print(f"[tokenizer] {issue.word!r}: {issue}", file=sys.stderr)
    print(result.ids)
    try:
        print(f"Decoded: {tok.decode(result.ids)}")
    except TokenNotFoundError as e:
        print(f"Error decoding: {e}", file=sys.stderr)
        return 1
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
