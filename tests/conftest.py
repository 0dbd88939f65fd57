import json
import pytest
from charbpe.tokenizer import BPETokenizer

CORPUS = (
    "Jack embraced beauty through art and life. "
    "The verdict was that Jack had given up his painting, "
    "and that his wife had been the reason.\n"
    "He laughed and embraced the beauty of the moment. "
) * 5


@pytest.fixture
def corpus():
    return CORPUS


@pytest.fixture
def trained(corpus):
    tok = BPETokenizer()
    tok.train(corpus, vocab_size=320, allowed_special={"<|endoftext|>"})
    return tok


@pytest.fixture
def openai_files(tmp_path):
    vocab = {"a": 0, "b": "1", "ab": 2, "Ġ": 3, "Ġa": 4, "c": 5}
    vocab_path = tmp_path / "encoder.json"
    vocab_path.write_text(json.dumps(vocab, ensure_ascii=False), encoding="utf-8")
    merges_path = tmp_path / "vocab.bpe"
    merges_path.write_text("#version: 0.2\na b\nĠ a\nb c\nx y\na b c\n", encoding="utf-8")
    return vocab_path, merges_path
