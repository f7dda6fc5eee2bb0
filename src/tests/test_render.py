from src.render.markdown_math import render
from src.schemas import RenderBlock


ANSWER = """**Phân tích & Định hướng**:
Đây là bài toán rút gọn biểu thức với $x \\ne 0$.

**Lời giải chi tiết**:
- Bước 1: Áp dụng hằng đẳng thức.
$$x^2 + 2x + 1 = (x+1)^2$$

**💡 Bình luận & Nhận xét của Giáo viên**:
1. Chú ý điều kiện xác định.
"""


def test_markdown_and_display_math_are_split() -> None:
    blocks = render(ANSWER)

    assert [b.kind for b in blocks] == ["markdown", "latex", "markdown"]
    assert blocks[1].content == "x^2 + 2x + 1 = (x+1)^2"
    assert "$x \\ne 0$" in blocks[0].content
    assert blocks[2].content.startswith("**💡 Bình luận")


def test_multiline_display_math() -> None:
    blocks = render("Ta có:\n$$\na + b = c\n\\\\ d = e\n$$\nVậy xong.")

    assert blocks == [
        RenderBlock(kind="markdown", content="Ta có:"),
        RenderBlock(kind="latex", content="a + b = c\n\\\\ d = e"),
        RenderBlock(kind="markdown", content="Vậy xong."),
    ]


def test_bracket_display_math() -> None:
    blocks = render("\\[ S = \\pi r^2 \\]")
    assert blocks == [RenderBlock(kind="latex", content="S = \\pi r^2")]


def test_rendering_is_idempotent() -> None:
    assert render(ANSWER) == render(ANSWER)


def test_unmatched_dollar_is_escaped() -> None:
    blocks = render("Giá là 5$ mỗi cái, còn $y = 2$ thì đúng.")

    assert len(blocks) == 1
    text = blocks[0].content
    assert "5\\$ mỗi cái" in text
    assert "$y = 2$" in text


def test_unclosed_display_math_degrades_to_text() -> None:
    blocks = render("Mở đầu\n$$ x + 1\nphần còn lại vẫn hiển thị")

    assert all(b.kind == "markdown" for b in blocks)
    joined = "\n".join(b.content for b in blocks)
    assert "\\$\\$ x + 1" in joined
    assert "phần còn lại vẫn hiển thị" in joined


def test_inline_display_pair_stays_in_markdown() -> None:
    blocks = render("$$x$$ là nghiệm")
    assert blocks == [RenderBlock(kind="markdown", content="$$x$$ là nghiệm")]


def test_code_fences_are_untouched() -> None:
    text = "```\nprice = $5\n$$\n```"
    blocks = render(text)
    assert blocks == [RenderBlock(kind="markdown", content=text)]


def test_existing_escapes_are_kept() -> None:
    blocks = render("Giá \\$5")
    assert blocks[0].content == "Giá \\$5"


def test_empty_input() -> None:
    assert render("") == []
    assert render(None) == []
    assert render("\n\n  \n") == []


def test_windows_newlines() -> None:
    blocks = render("a\r\n$$x$$\r\nb")
    assert [b.kind for b in blocks] == ["markdown", "latex", "markdown"]


def test_two_display_spans_on_one_line_stay_inline() -> None:
    line = "$$a^2$$ = $$b^2$$"
    assert render(line) == [RenderBlock(kind="markdown", content=line)]

    bracket = "\\[ a \\] = \\[ b \\]"
    assert render(bracket) == [RenderBlock(kind="markdown", content=bracket)]
