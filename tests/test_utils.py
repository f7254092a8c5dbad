"""
Tests for small helpers
"""

from nifty.utils import format_elapsed, render_template


def test_render_template():
    assert render_template("Token #{id}", 5) == "Token #5"
    assert render_template("{id}/{id}", 0) == "0/0"
    assert render_template("no placeholder", 3) == "no placeholder"


def test_format_elapsed():
    assert format_elapsed(0) == "00:00:00.000"
    assert format_elapsed(3723.4567) == "01:02:03.457"
