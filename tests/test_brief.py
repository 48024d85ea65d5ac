"""Tests for the brief accumulator."""

from qqcodec.core.brief import Brief, pairs


class TestBrief:
    def test_text_and_markers_in_order(self):
        brief = Brief()
        brief.text("a")
        brief.marker("$at", ["user=1"])
        brief.text("")
        brief.marker("face", ["id=2", "x=y"], sep=":")
        brief.marker("at", sep=":")
        brief.marker("$image")
        assert str(brief) == "a<$at,user=1><face:id=2,x=y><at:><$image,>"
        assert len(brief) == len(str(brief))

    def test_pairs(self):
        assert pairs([("a", 1), ("b", "x")]) == ["a=1", "b=x"]
