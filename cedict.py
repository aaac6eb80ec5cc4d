import re
from typing import Dict

from pinyin_convert import pinyin_num_to_tone, rewrite_annotations

# trad simp [pinyin] /sense1/sense2/.../
CEDICT_RE = re.compile(r"^(\S+)\s+(\S+)\s+\[(.+?)\]\s+/(.+)/$")


def load_cedict_simplified(path: str) -> Dict[str, dict]:
    """
    Return:
    {
      simp_word: {"pinyin": "fa1 zhan3", "senses": ["development", "growth"]}
    }
    """
    lexicon: Dict[str, dict] = {}

    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            m = CEDICT_RE.match(line)
            if not m:
                continue

            trad, simp, pinyin, senses_raw = m.groups()
            senses = [s for s in senses_raw.split("/") if s]

            # for now, only simplified lexicon
            if simp not in lexicon:
                lexicon[simp] = {"pinyin": pinyin, "senses": senses}

    return lexicon


def cedict_lookup_en(word: str, lexicon: Dict[str, dict], tone_marks: bool = True) -> str | None:
    """
    Return the English meanings string (semicolon separated), or None if not found.
    Cross references like "variant of 馬|马[ma3]" get tone marks unless tone_marks=False.
    """
    entry = lexicon.get(word)
    if not entry:
        return None
    senses = entry["senses"]
    if tone_marks:
        senses = [rewrite_annotations(s) for s in senses]
    return "; ".join(senses)


def cedict_lookup_pinyin(word: str, lexicon: Dict[str, dict], tone_marks: bool = False) -> str | None:
    """
    Return the pinyin string, or None if not found.
    """
    entry = lexicon.get(word)
    if not entry:
        return None
    if tone_marks:
        return pinyin_num_to_tone(entry["pinyin"])
    return entry["pinyin"]


if __name__ == "__main__":
    cedict_path = "data/cedict_ts.u8"
    lexicon = load_cedict_simplified(cedict_path)
    print(f"Loaded {len(lexicon)} entries from CEDICT.")
    example_word = "发展"
    print(cedict_lookup_pinyin(example_word, lexicon, tone_marks=True))  # fā zhǎn
    print(cedict_lookup_en(example_word, lexicon))
