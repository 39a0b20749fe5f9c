"""Tests for the rule-based HTML to Markdown converter."""

from bs4 import BeautifulSoup

from wp2md.conversion import ConversionRule, HtmlToMarkdown, build_converter
from wp2md.models.config import ConverterConfig


class TestBuildConverter:
    """Tests for the converter factory."""

    def test_returns_configured_converter(self):
        """Test the factory registers every built-in rule."""
        converter = build_converter()

        assert isinstance(converter, HtmlToMarkdown)
        assert [rule.name for rule in converter.rules][:2] == ["paragraph_break", "tables"]
        assert len(converter.rules) == 7

    def test_default_styles(self):
        """Test ATX headings and '*' bullets by default."""
        converter = build_converter()

        result = converter.convert("<h2>Title</h2><ul><li>One</li><li>Two</li></ul>")

        assert "## Title" in result
        assert "* One" in result
        assert "* Two" in result

    def test_custom_styles(self):
        """Test style options from ConverterConfig are applied."""
        converter = build_converter(ConverterConfig(bullet_marker="-", heading_style="atx_closed"))

        result = converter.convert("<h1>Title</h1><ul><li>One</li></ul>")

        assert "# Title #" in result
        assert "- One" in result

    def test_fenced_code_blocks(self):
        """Test <pre> renders as a fenced block by default."""
        converter = build_converter()

        result = converter.convert("<pre><code>x = 1</code></pre>")

        assert result == "```\nx = 1\n```"

    def test_indented_code_blocks(self):
        """Test <pre> renders indented when configured."""
        converter = build_converter(ConverterConfig(code_block_style="indented"))

        result = converter.convert("<pre>a = 1\nb = 2</pre>")

        assert result == "    a = 1\n    b = 2"

    def test_escaping_can_be_disabled(self):
        """Test underscore escaping follows the config."""
        assert build_converter().convert("<p>snake_case</p>") == "snake\\_case"
        assert build_converter(ConverterConfig(escape_underscores=False)).convert("<p>snake_case</p>") == "snake_case"


class TestRuleDispatch:
    """Tests for first-match rule dispatch."""

    def test_match_rule_first_wins(self):
        """Test the first matching rule is returned."""
        first = ConversionRule("first", lambda node: node.name == "span", lambda content, node: "1")
        second = ConversionRule("second", lambda node: node.name == "span", lambda content, node: "2")
        converter = HtmlToMarkdown(rules=[first, second])
        node = BeautifulSoup("<span>x</span>", "html.parser").find("span")

        assert converter.match_rule(node) is first
        assert converter.convert("<p><span>x</span></p>") == "1"

    def test_match_rule_none(self):
        """Test unmatched nodes have no rule."""
        converter = build_converter()
        node = BeautifulSoup("<em>x</em>", "html.parser").find("em")

        assert converter.match_rule(node) is None

    def test_add_rule_receives_converted_children(self):
        """Test custom rules get the Markdown of the node's children."""
        converter = build_converter().add_rule(
            ConversionRule("mark", lambda node: node.name == "mark", lambda content, node: f"=={content}==")
        )

        result = converter.convert("<p><mark>very <strong>important</strong></mark></p>")

        assert result == "==very **important**=="

    def test_unknown_tags_fall_back_to_text(self):
        """Test tags without a rule or handler keep their text."""
        result = build_converter().convert("<p><custom-tag>kept</custom-tag></p>")

        assert result == "kept"


class TestBuiltinRules:
    """Tests for the built-in rules through the converter."""

    def test_table_renders_as_pipe_table(self):
        """Test tables render in GFM pipe form."""
        html = "<table><tr><th>Name</th><th>Value</th></tr><tr><td>a</td><td>1</td></tr></table>"

        result = build_converter().convert(html)

        assert "| Name | Value |" in result
        assert "| --- | --- |" in result
        assert "| a | 1 |" in result

    def test_table_without_header_uses_first_row(self):
        """Test the first row becomes the header row."""
        html = "<table><tr><td>a</td><td>1</td></tr><tr><td>b</td><td>2</td></tr></table>"

        result = build_converter().convert(html)

        assert result.splitlines()[:2] == ["| a | 1 |", "| --- | --- |"]

    def test_tweet_with_script_stays_snug(self):
        """Test a tweet and its script are separated by a single newline."""
        tweet = '<blockquote class="twitter-tweet"><p lang="en" dir="ltr">Hello</p></blockquote>'
        script = '<script async src="https://platform.twitter.com/widgets.js" charset="utf-8"></script>'

        result = build_converter().convert(tweet + "\n" + script)

        assert result == tweet + "\n" + script

    def test_codepen_is_preserved(self):
        """Test codepen embeds pass through unconverted."""
        pen = '<p class="codepen" data-height="265" data-slug-hash="abc123" data-user="me"><span>See the Pen</span></p>'

        result = build_converter().convert("<p>Intro</p>" + pen)

        assert result == "Intro\n\n" + pen

    def test_codepen_with_unexpected_content_is_preserved(self):
        """Test inner structure does not affect the codepen rule."""
        pen = '<div class="codepen" data-slug-hash="abc"><table><tr><td>odd</td></tr></table></div>'

        result = build_converter().convert(pen)

        assert result == pen

    def test_gallery_list(self):
        """Test an image list renders as a Gallery block with no list syntax."""
        html = '<ul><li><figure><a href="x.jpg"><img src="x.jpg" alt="A"></a></figure></li></ul>'

        result = build_converter().convert(html)

        assert result == '<Gallery>\n\t<img src="x.jpg" alt="A">\n</Gallery>'
        assert "* " not in result

    def test_non_gallery_list_falls_through(self):
        """Test mixed lists render as regular Markdown lists."""
        html = '<ul><li><figure><a href="x.jpg"><img src="x.jpg" alt="A"></a></figure></li><li>Plain item</li></ul>'

        result = build_converter().convert(html)

        assert "<Gallery>" not in result
        assert "* Plain item" in result

    def test_whitespace_between_raw_blocks_is_dropped(self):
        """Test whitespace between iframes does not add extra blank lines."""
        html = '<iframe src="a">.</iframe>\n<iframe src="b">.</iframe>'

        result = build_converter().convert(html)

        assert result == '<iframe src="a">.</iframe>\n\n<iframe src="b">.</iframe>'

    def test_indented_code_keeps_inner_indentation(self):
        """Test the indented code style keeps indentation after a blank line."""
        converter = build_converter(ConverterConfig(code_block_style="indented"))

        result = converter.convert("<pre><code>def f():\n\n    return 1</code></pre>")

        assert result == "    def f():\n\n        return 1"
