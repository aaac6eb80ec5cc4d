import unittest

from pinyin_convert import (
    TONE_MARKS,
    format_pinyin_list,
    num_to_tone,
    pinyin_num_to_tone,
    rewrite_annotations,
)


class TestNumToTone(unittest.TestCase):

    def test_four_tones(self):
        cases = {"ma1": "mā", "ma2": "má", "ma3": "mǎ", "ma4": "mà"}
        for syllable, expected in cases.items():
            with self.subTest(syllable):
                self.assertEqual(num_to_tone(syllable), expected)

    def test_neutral_tone(self):
        for syllable in ("ma5", "ma0", "ma"):
            with self.subTest(syllable):
                self.assertEqual(num_to_tone(syllable), "ma")

    def test_umlaut_alias(self):
        self.assertEqual(num_to_tone("lv3"), "lǚ")
        self.assertEqual(num_to_tone("lü3"), "lǚ")
        self.assertEqual(num_to_tone("nv3"), num_to_tone("nü3"))

    def test_umlaut_beats_other_vowels(self):
        # ü/v is checked before a/e/o/i/u
        self.assertEqual(num_to_tone("lve4"), "lǜe")

    def test_vowel_priority(self):
        cases = {
            "hao3": "hǎo",
            "jiu3": "jiǔ",
            "liu2": "liú",
            "gui4": "guì",
            "xiong2": "xióng",
            "dou1": "dōu",
            "xie4": "xiè",
            "huo3": "huǒ",
            "zhi1": "zhī",
            "shu1": "shū",
        }
        for syllable, expected in cases.items():
            with self.subTest(syllable):
                self.assertEqual(num_to_tone(syllable), expected)

    def test_only_first_occurrence_is_marked(self):
        self.assertEqual(num_to_tone("aa1"), "āa")
        self.assertEqual(num_to_tone("vv2"), "ǘv")

    def test_case_normalization(self):
        self.assertEqual(num_to_tone("MA3"), "mǎ")
        self.assertEqual(num_to_tone("Zhong1"), "zhōng")
        self.assertEqual(num_to_tone("LV4"), "lǜ")
        self.assertEqual(num_to_tone("HAO"), "hao")

    def test_fallbacks(self):
        self.assertEqual(num_to_tone("m2"), "m")       # no vowel
        self.assertEqual(num_to_tone("ma7"), "ma")     # out of range tone
        self.assertEqual(num_to_tone(""), "")
        self.assertIsNone(num_to_tone(None))
        self.assertEqual(num_to_tone("ma²"), "ma²")

    def test_already_marked_input(self):
        once = num_to_tone("ma3")
        self.assertEqual(num_to_tone(once), once)

    def test_deterministic(self):
        results = {num_to_tone("jiu3") for _ in range(10)}
        self.assertEqual(results, {"jiǔ"})

    def test_tone_table_shape(self):
        self.assertEqual(set(TONE_MARKS), set("aeiouüv"))
        for vowel, marks in TONE_MARKS.items():
            with self.subTest(vowel):
                self.assertIsInstance(marks, tuple)
                self.assertEqual(len(marks), 4)
        self.assertEqual(TONE_MARKS["v"], TONE_MARKS["ü"])


class TestRewriteAnnotations(unittest.TestCase):

    def test_single_annotation(self):
        self.assertEqual(rewrite_annotations("horse [ma3]"), "horse [mǎ]")

    def test_no_annotation(self):
        self.assertEqual(rewrite_annotations("no brackets here"), "no brackets here")

    def test_multiple_annotations(self):
        self.assertEqual(rewrite_annotations("[ba1] and [ma3]"), "[bā] and [mǎ]")

    def test_malformed_brackets_are_left_alone(self):
        cases = ["[ba12]", "[ma3 ]", "[ma]", "[3]", "[ma3x]", "[ma 3]",
                 # letters that only case-fold into a-z
                 "[\u0130u3]", "[\u0131u3]", "[\u017fa3]", "[\u212aao3]"]
        for text in cases:
            with self.subTest(text):
                self.assertEqual(rewrite_annotations(text), text)

    def test_case_insensitive_and_umlaut(self):
        self.assertEqual(rewrite_annotations("green [LV4]"), "green [lǜ]")
        self.assertEqual(rewrite_annotations("green [lü4]"), "green [lǜ]")

    def test_cedict_style_cross_reference(self):
        self.assertEqual(
            rewrite_annotations("variant of 馬|马[ma3]; see 好[hao3]"),
            "variant of 馬|马[mǎ]; see 好[hǎo]",
        )

    def test_neutral_annotation(self):
        self.assertEqual(rewrite_annotations("particle [de5]"), "particle [de]")

    def test_non_string(self):
        self.assertIsNone(rewrite_annotations(None))


class TestPinyinNumToTone(unittest.TestCase):

    def test_sentence(self):
        self.assertEqual(pinyin_num_to_tone("fa1 zhan3"), "fā zhǎn")
        self.assertEqual(pinyin_num_to_tone("Zhong1 guo2 ren2"), "zhōng guó rén")

    def test_proper_noun_lower_cased(self):
        self.assertEqual(pinyin_num_to_tone("Ma3"), "mǎ")
        self.assertEqual(pinyin_num_to_tone("Bei3 jing1"), "běi jīng")

    def test_cedict_umlaut(self):
        self.assertEqual(pinyin_num_to_tone("lu:4 se4"), "lǜ sè")

    def test_whitespace_kept(self):
        self.assertEqual(pinyin_num_to_tone(" ni3  hao3 "), " nǐ  hǎo ")

    def test_format_pinyin_list(self):
        self.assertEqual(format_pinyin_list(["hao3", "hao4"]), ["hǎo", "hào"])
        self.assertEqual(format_pinyin_list([]), [])
        self.assertEqual(format_pinyin_list(None), [])


if __name__ == '__main__':
    unittest.main()
