import io
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "stream"))

from lolcat_stream.decoder import REPLACEMENT, Utf8StreamDecoder, decode_utf8

SAMPLE = "héllo wörld ☃ \U0001f600 end"


def decode_chunks(chunks, chunk_size=8192):
    decoder = Utf8StreamDecoder(chunk_size)
    parts = []
    for chunk in chunks:
        parts.extend(decoder.feed(chunk))
    parts.extend(decoder.finish())
    return "".join(parts)


class DecodeUtf8Tests(unittest.TestCase):
    def test_valid_input_consumed(self):
        segments, consumed = decode_utf8(SAMPLE.encode("utf-8"))
        self.assertEqual("".join(segments), SAMPLE)
        self.assertEqual(consumed, len(SAMPLE.encode("utf-8")))

    def test_truncated_tail_is_left_over(self):
        segments, consumed = decode_utf8(b"ab\xf0\x9f")
        self.assertEqual(segments, ["ab"])
        self.assertEqual(consumed, 2)

    def test_truncated_tail_final(self):
        segments, consumed = decode_utf8(b"ab\xf0\x9f", final=True)
        self.assertEqual(segments, ["ab", REPLACEMENT])
        self.assertEqual(consumed, 4)

    def test_invalid_byte_replaced_once(self):
        segments, _ = decode_utf8(b"a\xffb")
        self.assertEqual(segments, ["a", REPLACEMENT, "b"])


class StreamDecoderTests(unittest.TestCase):
    def test_every_split_point_gives_same_text(self):
        raw = SAMPLE.encode("utf-8")
        for cut in range(len(raw) + 1):
            self.assertEqual(decode_chunks([raw[:cut], raw[cut:]]), SAMPLE, cut)

    def test_byte_at_a_time(self):
        raw = SAMPLE.encode("utf-8")
        self.assertEqual(decode_chunks([raw[i : i + 1] for i in range(len(raw))]), SAMPLE)

    def test_small_chunk_size_splits_large_feed(self):
        raw = SAMPLE.encode("utf-8")
        self.assertEqual(decode_chunks([raw], chunk_size=3), SAMPLE)

    def test_invalid_continuation(self):
        text = decode_chunks([b"\xe2\x82", b"A"])
        self.assertEqual(text.count(REPLACEMENT), 1)
        self.assertTrue(text.endswith("A"))

    def test_truncated_at_eof(self):
        decoder = Utf8StreamDecoder()
        self.assertEqual(decoder.feed(b"a\xe2\x82"), ["a"])
        self.assertTrue(decoder.pending)
        self.assertEqual(decoder.carry, b"\xe2\x82")
        self.assertEqual(decoder.finish(), [REPLACEMENT])
        self.assertFalse(decoder.pending)

    def test_read_from_reader(self):
        raw = SAMPLE.encode("utf-8") * 3
        source = io.BufferedReader(io.BytesIO(raw), buffer_size=5)
        decoder = Utf8StreamDecoder(chunk_size=5)
        parts = []
        while True:
            segments = decoder.read_from(source)
            if segments is None:
                break
            parts.extend(segments)
        parts.extend(decoder.finish())
        self.assertEqual("".join(parts), SAMPLE * 3)


if __name__ == "__main__":
    unittest.main()
