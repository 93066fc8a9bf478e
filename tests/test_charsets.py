import unittest

from le_ascii.charsets import get_ramp, glyph_array, list_charsets


class TestCharsets(unittest.TestCase):

    def test_exact_ramps(self):
        self.assertEqual(get_ramp("halftone"), " .·:+*?%S#@")
        self.assertEqual(
            get_ramp("detail"),
            " `.-':_,^=;><+!rc*/z?sLTv)J7(|Fi{C}fI31tlu[neoZ5Yxjya]2ESwqkP6h9d4VpOGbUAKXHm8RD#$Bg0MNWQ%&@",
        )
        self.assertEqual(
            get_ramp("ascii"),
            " .`^\",:;Il!i~+_-?][}{1)(|\\/tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$",
        )
        self.assertEqual(get_ramp("binary"), " 01")
        self.assertEqual(get_ramp("blocks"), " ░▒▓█")

    def test_lengths(self):
        lengths = {name: len(get_ramp(name)) for name in list_charsets()}
        self.assertEqual(lengths, {
            "detail": 92,
            "halftone": 11,
            "ascii": 67,
            "binary": 3,
            "blocks": 5,
        })

    def test_every_ramp_starts_with_background(self):
        for name in list_charsets():
            self.assertEqual(get_ramp(name)[0], " ", name)

    def test_default_is_detail(self):
        self.assertEqual(get_ramp(), get_ramp("detail"))

    def test_unknown_name(self):
        with self.assertRaises(ValueError):
            get_ramp("braille")

    def test_glyph_array(self):
        glyphs = glyph_array(get_ramp("blocks"))
        self.assertEqual(glyphs.tolist(), [" ", "░", "▒", "▓", "█"])
        with self.assertRaises(ValueError):
            glyphs[0] = "x"

    def test_glyph_array_is_cached(self):
        self.assertIs(glyph_array(" 01"), glyph_array(" 01"))


if __name__ == "__main__":
    unittest.main()
