import json
from charbpe import encode_text, train_bpe


def test_train_bpe_end_to_end(tmp_path, corpus, capsys):
    text_path = tmp_path / "the-verdict.txt"
    text_path.write_text(corpus, encoding="utf-8")
    vocab_out, merges_out = tmp_path / "out" / "vocab.json", tmp_path / "out" / "merges.json"

    rc = train_bpe.main([
        "--text", str(text_path), "--size", "300",
        "--vocab-out", str(vocab_out), "--merges-out", str(merges_out),
        "--sample", "Jack embraced beauty.",
    ])

    assert rc == 0
    out = capsys.readouterr().out
    assert "Decoded: Jack embraced beauty." in out
    assert len(json.loads(vocab_out.read_text(encoding="utf-8"))) <= 300
    assert "<|endoftext|>" in json.loads(vocab_out.read_text(encoding="utf-8")).values()


def test_train_bpe_custom_specials(tmp_path, capsys):
    text_path = tmp_path / "corpus.txt"
    text_path.write_text("low lower lowest", encoding="utf-8")
    vocab_out, merges_out = tmp_path / "vocab.json", tmp_path / "merges.json"
    train_bpe.main([
        "--text", str(text_path), "--size", "265",
        "--vocab-out", str(vocab_out), "--merges-out", str(merges_out),
        "--special", "<bos>", "--special", "<eos>",
    ])
    tokens = json.loads(vocab_out.read_text(encoding="utf-8"))
    assert tokens["257"] == "<bos>"
    assert tokens["258"] == "<eos>"


def test_encode_text_with_openai_files(openai_files, capsys):
    rc = encode_text.main(["--vocab", str(openai_files[0]), "--merges", str(openai_files[1]), "--openai", "ab a"])
    captured = capsys.readouterr()
    assert rc == 0
    assert "[2, 4]" in captured.out
    assert "Decoded: ab a" in captured.out
    assert "skipped 3 merges" in captured.err
