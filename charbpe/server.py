import os
from contextlib import asynccontextmanager
from typing import List
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from .errors import TokenNotFoundError
from .tokenizer import BPETokenizer

class EncodeIn(BaseModel):
    text: str

class DecodeIn(BaseModel):
    ids: List[int]

tok = None

@asynccontextmanager
async def lifespan(app: FastAPI):
    global tok
    vocab_path = os.environ.get("CHARBPE_VOCAB")
    merges_path = os.environ.get("CHARBPE_MERGES")
    if vocab_path and merges_path:
        tok = BPETokenizer.from_files(vocab_path, merges_path)
    yield

app = FastAPI(title="BPE Tokenizer Server", lifespan=lifespan)

def _tokenizer() -> BPETokenizer:
    if tok is None:
        raise HTTPException(status_code=503, detail="Tokenizer not loaded. Set CHARBPE_VOCAB and CHARBPE_MERGES.")
    return tok

@app.post("/encode")
def encode(body: EncodeIn):
    result = _tokenizer().encode_with_report(body.text)
    return {"ids": result.ids, "issues": [{"word": e.word, "missing": e.missing} for e in result.issues]}

@app.post("/decode")
def decode(body: DecodeIn):
    try:
        return {"text": _tokenizer().decode(body.ids)}
    except TokenNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

@app.get("/token/{token}")
def token_id(token: str):
    tid = _tokenizer().get_special_token_id(token)
    if tid is None:
        raise HTTPException(status_code=404, detail=f"Token {token!r} not in vocab.")
    return {"token": token, "id": tid}
