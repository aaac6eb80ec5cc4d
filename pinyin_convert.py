import re
import string
from typing import Iterable, List, Optional


# -----------------------------
# Tone mark table
# -----------------------------
# vowel -> marks for tones 1..4; "v" is the keyboard alias of "ü"
TONE_MARKS = {
    "a": ("ā", "á", "ǎ", "à"),
    "e": ("ē", "é", "ě", "è"),
    "i": ("ī", "í", "ǐ", "ì"),
    "o": ("ō", "ó", "ǒ", "ò"),
    "u": ("ū", "ú", "ǔ", "ù"),
    "ü": ("ǖ", "ǘ", "ǚ", "ǜ"),
    "v": ("ǖ", "ǘ", "ǚ", "ǜ"),
}

NEUTRAL_TONES = (0, 5)

# Priority order, NOT left-to-right order of the syllable.
_VOWEL_PRIORITY = ("a", "e", "o", "i", "u")

_UMLAUT_RE = re.compile(r"[üv]")

# [ba1], [yao1], [lv4] ... exactly one digit right before "]"
ANNOTATION_RE = re.compile(r"\[([a-zA-ZüÜvV]+[0-9])\]")

_WHITESPACE_RE = re.compile(r"(\s+)")


def _mark_position(syllable: str) -> Optional[tuple]:
    """
    Decide which vowel gets the tone mark.
    Input syllable is lower-cased and has NO tone number.
    Returns (index, row of TONE_MARKS) or None when there is no vowel.
    """
    m = _UMLAUT_RE.search(syllable)
    if m:
        return m.start(), TONE_MARKS["ü"]

    for v in _VOWEL_PRIORITY:
        pos = syllable.find(v)
        if pos == -1:
            continue
        # iu marks the u (jiu3 -> jiǔ); ui falls through to i (gui4 -> guì)
        if v == "i":
            iu_pos = syllable.find("iu")
            if iu_pos != -1:
                return iu_pos + 1, TONE_MARKS["u"]
        return pos, TONE_MARKS[v]

    return None


def num_to_tone(syllable: str) -> str:
    """
    Convert one numbered pinyin syllable to tone marks.

    Examples:
      "ma3"  -> "mǎ"
      "hao3" -> "hǎo"
      "lv3"  -> "lǚ"
      "ma5"  -> "ma"   (neutral, 0 works too)
      "MA"   -> "ma"   (no tone number, only lower-cased)

    Malformed input never raises: unknown tone numbers or syllables without
    a vowel come back digit-stripped and lower-cased.
    """
    if not isinstance(syllable, str) or not syllable:
        return syllable

    if syllable[-1] not in string.digits:
        return syllable.lower()

    tone = int(syllable[-1])
    plain = syllable[:-1].lower()

    if tone in NEUTRAL_TONES or tone > 4:
        return plain

    found = _mark_position(plain)
    if found is None:
        return plain

    idx, marks = found
    return plain[:idx] + marks[tone - 1] + plain[idx + 1:]


def rewrite_annotations(text: str) -> str:
    """
    Rewrite every bracketed numbered syllable inside free text.

      "horse [ma3]"     -> "horse [mǎ]"
      "[ba1] and [ma3]" -> "[bā] and [mǎ]"
      "[ba12]"          -> "[ba12]"  (not an annotation)
    """
    if not isinstance(text, str) or "[" not in text:
        return text
    return ANNOTATION_RE.sub(lambda m: f"[{num_to_tone(m.group(1))}]", text)


def pinyin_num_to_tone(pinyin_num: str) -> str:
    """
    Convert a space separated run of numbered syllables.
    CEDICT style "u:" is accepted as ü.

      "fa1 zhan3" -> "fā zhǎn"
      "lu:4 se4"  -> "lǜ sè"
      "Ma3"       -> "mǎ"     (output is always lower-cased, proper nouns included)
    """
    if not isinstance(pinyin_num, str):
        return pinyin_num
    parts = _WHITESPACE_RE.split(pinyin_num.replace("u:", "ü").replace("U:", "Ü"))
    return "".join(p if not p or p.isspace() else num_to_tone(p) for p in parts)


def format_pinyin_list(values: Optional[Iterable[str]]) -> List[str]:
    if not values:
        return []
    return [pinyin_num_to_tone(v) for v in values if isinstance(v, str)]


if __name__ == "__main__":
    print(num_to_tone("ma3"))  # mǎ
    print(num_to_tone("jiu3"))  # jiǔ
    print(pinyin_num_to_tone("Zhong1 guo2 ren2"))  # zhōng guó rén
    print(rewrite_annotations("variant of 馬|马[ma3], horse"))
