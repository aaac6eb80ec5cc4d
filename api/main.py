import logging
import os
import threading
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from cedict import cedict_lookup_en, cedict_lookup_pinyin, load_cedict_simplified
from hanzi_data import HanziStore
from pinyin_convert import num_to_tone, rewrite_annotations

# ----------------------------
# App + config
# ----------------------------

load_dotenv()  # no-op if .env missing

HANZI_DATA_DIR = os.getenv("HANZI_DATA_DIR", "data")
CEDICT_PATH = os.getenv("CEDICT_PATH", "data/cedict_ts.u8")

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Hanzi Pinyin API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[os.getenv("CORS_ORIGIN", "*")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_STORE: Optional[HanziStore] = None
_LEXICON: Optional[Dict[str, dict]] = None
_INIT_LOCK = threading.Lock()


def get_store() -> HanziStore:
    global _STORE
    if _STORE is None:
        with _INIT_LOCK:
            if _STORE is None:
                try:
                    _STORE = HanziStore(HANZI_DATA_DIR)
                except FileNotFoundError as e:
                    logger.error(str(e))
                    raise HTTPException(status_code=503, detail="Character data not available")
    return _STORE


def get_lexicon() -> Dict[str, dict]:
    global _LEXICON
    if _LEXICON is None:
        with _INIT_LOCK:
            if _LEXICON is None:
                if not os.path.exists(CEDICT_PATH):
                    logger.warning(f"CEDICT file not found: {CEDICT_PATH}")
                    raise HTTPException(status_code=503, detail="Dictionary not available")
                _LEXICON = load_cedict_simplified(CEDICT_PATH)
                logger.info(f"Loaded {len(_LEXICON)} entries from CEDICT.")
    return _LEXICON


# ----------------------------
# Endpoints
# ----------------------------

@app.get("/health")
def health():
    return {"ok": True}


@app.get("/pinyin/convert")
def convert_syllable(syllable: str = Query(..., description="numbered syllable, e.g. ma3")) -> Dict[str, str]:
    return {"input": syllable, "output": num_to_tone(syllable)}


@app.get("/pinyin/rewrite")
def rewrite_text(text: str = Query(...)) -> Dict[str, str]:
    return {"input": text, "output": rewrite_annotations(text)}


@app.get("/characters")
def list_characters(
    store: HanziStore = Depends(get_store),
    level: Optional[int] = Query(default=None),
    order_by: str = Query(default="frequency"),
    ascending: bool = Query(default=True),
) -> List[Dict[str, Any]]:
    try:
        if level is None:
            characters = store.all(order_by=order_by, ascending=ascending)
        else:
            characters = store.by_level(level, order_by=order_by, ascending=ascending)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [c.to_dict() for c in characters]


@app.get("/characters/{hanzi}")
def get_character(hanzi: str, store: HanziStore = Depends(get_store)) -> Dict[str, Any]:
    character = store.get(hanzi)
    if not character:
        raise HTTPException(status_code=404, detail="Not found")
    return character.to_dict()


@app.get("/lookup")
def lookup(q: str = Query(...), store: HanziStore = Depends(get_store)) -> Dict[str, Any]:
    """
    Look up every Chinese character found in `q`.
    Characters without a record are reported in "missing".
    """
    if not q.strip():
        raise HTTPException(status_code=400, detail="Empty query")
    found, missing = store.lookup_text(q)
    return {"found": [c.to_dict() for c in found], "missing": missing}


@app.get("/dict/{word}")
def dict_entry(word: str, lexicon: Dict[str, dict] = Depends(get_lexicon)) -> Dict[str, Any]:
    en = cedict_lookup_en(word, lexicon)
    if en is None:
        raise HTTPException(status_code=404, detail="Not found")
    return {
        "word": word,
        "pinyin": cedict_lookup_pinyin(word, lexicon, tone_marks=True),
        "en": en,
    }
