import json
import logging
import re
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
from pypinyin import Style, lazy_pinyin

from pinyin_convert import format_pinyin_list, rewrite_annotations

logger = logging.getLogger(__name__)

INDEX_FILE = "hanzi_index.json"
INDEX_COLUMNS = ["hanzi", "id", "hsk_level", "frequency", "stroke_count", "detail_file"]

# CJK Unified Ideographs
CJK_CHAR_RE = re.compile(r"[\u4e00-\u9fff]")


@dataclass
class HanziCharacter:
    id: str
    hanzi: str
    pinyin: str                     # first pronunciation, tone marks
    pinyin_all: List[str] = field(default_factory=list)
    meanings: List[str] = field(default_factory=list)
    hsk_level: Optional[int] = None
    stroke_order: str = ""          # svg path
    stroke_order_gif: Optional[str] = None
    stroke_count: int = 0
    radical: Optional[str] = None
    frequency: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


SORTABLE_COLUMNS = {f.name for f in fields(HanziCharacter)}


def guess_pinyin(hanzi: str) -> List[str]:
    # numbered style so it goes through the same converter as the records
    return lazy_pinyin(hanzi, style=Style.TONE3, neutral_tone_with_five=True, errors="ignore")


def svg_to_gif_path(svg_path: str) -> Optional[str]:
    if not svg_path:
        return None
    return svg_path.replace("/svg/", "/gif/").replace(".svg", ".gif")


def build_character(raw: Dict[str, Any], hanzi: str) -> HanziCharacter:
    """
    Turn a raw detail record (hanzi/<char>.json) into a display record:
    numbered pinyin -> tone marks, [ma3] annotations in meanings rewritten.
    """
    hanzi = raw.get("hanzi") or hanzi
    numbered = raw.get("pinyin") or guess_pinyin(hanzi)
    pinyin_all = format_pinyin_list(numbered)

    strokes = raw.get("strokes") or {}
    structure = raw.get("structure") or {}
    svg_path = strokes.get("svg") or ""

    return HanziCharacter(
        id=f"hanzi-{hanzi}",
        hanzi=hanzi,
        pinyin=pinyin_all[0] if pinyin_all else "",
        pinyin_all=pinyin_all,
        meanings=[rewrite_annotations(m) for m in raw.get("meanings") or []],
        hsk_level=raw.get("hsk_level"),
        stroke_order=svg_path,
        stroke_order_gif=strokes.get("gif") or svg_to_gif_path(svg_path),
        stroke_count=strokes.get("count") or 0,
        radical=structure.get("radical") or None,
        frequency=raw.get("frequency"),
    )


def extract_hanzi(text: str) -> List[str]:
    """CJK characters of `text` in order of first appearance."""
    return list(dict.fromkeys(CJK_CHAR_RE.findall(text or "")))


class HanziStore:
    """
    Read-only view over the generated character data:

      <data_dir>/hanzi_index.json
      <data_dir>/hanzi/<char>.json

    The index is loaded once into a DataFrame; detail files are read on
    first access and cached.
    """

    def __init__(self, data_dir: str = "data"):
        self.data_dir = Path(data_dir)
        index_path = self.data_dir / INDEX_FILE
        if not index_path.exists():
            raise FileNotFoundError(f"Character index not found: {index_path}")

        with open(index_path, "r", encoding="utf-8") as f:
            raw_index = json.load(f)

        self.meta: Dict[str, Any] = raw_index.get("meta", {})
        self.df_index = pd.DataFrame(raw_index.get("characters", []), columns=INDEX_COLUMNS)
        self._cache: Dict[str, HanziCharacter] = {}

        logger.info(f"Loaded {len(self.df_index)} characters from {index_path}")

    def __len__(self) -> int:
        return len(self.df_index)

    def _load_detail(self, hanzi: str, detail_file: str) -> Optional[HanziCharacter]:
        if hanzi in self._cache:
            return self._cache[hanzi]

        path = self.data_dir / detail_file
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            logger.warning(f"Character file not found: {detail_file}")
            return None
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load character from {detail_file}: {e}")
            return None

        character = build_character(raw, hanzi)
        self._cache[hanzi] = character
        return character

    def _load_rows(self, df: pd.DataFrame) -> List[HanziCharacter]:
        out = []
        for row in df.itertuples():
            character = self._load_detail(row.hanzi, row.detail_file)
            if character:
                out.append(character)
        return out

    @staticmethod
    def _sorted(characters: List[HanziCharacter], order_by: str, ascending: bool) -> List[HanziCharacter]:
        if order_by not in SORTABLE_COLUMNS:
            raise ValueError(f"Unknown order_by column: {order_by}")
        # missing values always go last
        present = [c for c in characters if getattr(c, order_by) is not None]
        absent = [c for c in characters if getattr(c, order_by) is None]
        present.sort(key=lambda c: getattr(c, order_by), reverse=not ascending)
        return present + absent

    def get(self, hanzi: str) -> Optional[HanziCharacter]:
        hanzi = (hanzi or "").strip()
        rows = self.df_index[self.df_index["hanzi"] == hanzi]
        if rows.empty:
            return None
        return self._load_detail(hanzi, rows.iloc[0]["detail_file"])

    def by_level(self, level: int, order_by: str = "frequency", ascending: bool = True) -> List[HanziCharacter]:
        rows = self.df_index[self.df_index["hsk_level"] == level]
        return self._sorted(self._load_rows(rows), order_by, ascending)

    def all(self, order_by: str = "hsk_level", ascending: bool = True) -> List[HanziCharacter]:
        return self._sorted(self._load_rows(self.df_index), order_by, ascending)

    def levels(self) -> List[int]:
        return sorted(int(x) for x in self.df_index["hsk_level"].dropna().unique())

    def lookup_text(self, text: str) -> Tuple[List[HanziCharacter], List[str]]:
        """
        Return (found, missing) for every CJK character in free text.
        """
        found, missing = [], []
        for hanzi in extract_hanzi(text):
            character = self.get(hanzi)
            if character:
                found.append(character)
            else:
                missing.append(hanzi)
        return found, missing


if __name__ == "__main__":
    store = HanziStore("data")
    print(store.meta)
    found, missing = store.lookup_text("我爱学习")
    for c in found:
        print(c.hanzi, c.pinyin, c.meanings)
    print("Missing:", missing)
