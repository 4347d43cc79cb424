import random
import re
import unittest

from list_assembler import assemble_list, assemble_list_fragments, list_tags
from models import NumberingEntry, NumberingFormat

D = NumberingFormat.DECIMAL
B = NumberingFormat.BULLET

TAG_RE = re.compile(r"</?(ol|ul)\b[^>]*>")


def entry(level, fmt, text="x"):
    return NumberingEntry(level=level, format=fmt, content_html=text)


def check_well_formed(html):
    """Returns (opens, closes) and fails on any mispaired tag."""
    stack = []
    opens = closes = 0
    for m in TAG_RE.finditer(html):
        tag = m.group(0)
        name = m.group(1)
        if tag.startswith("</"):
            closes += 1
            if not stack or stack.pop() != name:
                raise AssertionError(f"mispaired {tag} in {html}")
        else:
            opens += 1
            stack.append(name)
    if stack:
        raise AssertionError(f"unclosed {stack} in {html}")
    return opens, closes


class TestListAssembler(unittest.TestCase):

    def test_nested_ordered_then_bullet(self):
        html = assemble_list([entry(0, D, "a"), entry(1, D, "b"), entry(0, B, "c")])
        self.assertEqual(
            html,
            '<ol class="decimal"><li>a</li><ol class="decimal"><li>b</li></ol></ol><ul><li>c</li></ul>',
        )
        self.assertEqual(check_well_formed(html), (3, 3))

    def test_single_flat_list(self):
        html = assemble_list([entry(0, D, "one"), entry(0, D, "two")])
        self.assertEqual(html, '<ol class="decimal"><li>one</li><li>two</li></ol>')

    def test_format_change_below_top_level_keeps_nesting(self):
        html = assemble_list([entry(0, D, "a"), entry(1, NumberingFormat.LOWER_LETTER, "b"), entry(1, B, "c")])
        self.assertEqual(
            html,
            '<ol class="decimal"><li>a</li><ol class="lower-letter"><li>b</li><li>c</li></ol></ol>',
        )

    def test_ordered_after_bullet_at_top_level_starts_new_list(self):
        html = assemble_list([entry(0, B, "a"), entry(0, D, "b")])
        self.assertEqual(html, '<ul><li>a</li></ul><ol class="decimal"><li>b</li></ol>')

    def test_top_level_format_change_between_ordered_lists(self):
        html = assemble_list([entry(0, D, "a"), entry(0, NumberingFormat.UPPER_ROMAN, "b")])
        self.assertEqual(html, '<ol class="decimal"><li>a</li></ol><ol class="upper-roman"><li>b</li></ol>')

    def test_ordered_format_change_after_sub_level_keeps_list(self):
        # only a bullet breaks out when the previous entry was nested
        html = assemble_list([entry(0, D, "a"), entry(1, D, "b"), entry(0, NumberingFormat.UPPER_ROMAN, "c")])
        self.assertEqual(html, '<ol class="decimal"><li>a</li><ol class="decimal"><li>b</li></ol><li>c</li></ol>')

    def test_retract_several_levels(self):
        html = assemble_list([entry(0, D), entry(1, D), entry(2, D), entry(0, D)])
        self.assertEqual(check_well_formed(html), (3, 3))
        self.assertTrue(html.endswith("<li>x</li></ol>"))
        self.assertIn("</ol></ol><li>x</li>", html)

    def test_run_starting_nested_opens_one_tag_per_level(self):
        html = assemble_list([entry(2, D, "deep"), entry(0, D, "top")])
        self.assertEqual(
            html,
            '<ol class="decimal"><ol class="decimal"><ol class="decimal"><li>deep</li></ol></ol>'
            '<li>top</li></ol>',
        )
        self.assertEqual(check_well_formed(html), (3, 3))

    def test_run_starting_nested_stays_inside_a_list(self):
        fragments = assemble_list_fragments([entry(1, B, "deep"), entry(0, D, "top"), entry(0, B, "b")])
        html = "".join(fragments)
        check_well_formed(html)
        # every <li> sits inside at least one open list
        depth = 0
        for frag in fragments:
            if frag.startswith("<ol") or frag.startswith("<ul"):
                depth += 1
            elif frag in ("</ol>", "</ul>"):
                depth -= 1
            elif frag.startswith("<li>"):
                self.assertGreater(depth, 0)

    def test_empty_run(self):
        self.assertEqual(assemble_list([]), "")

    def test_tag_mapping(self):
        self.assertEqual(list_tags(B), ("<ul>", "</ul>"))
        self.assertEqual(list_tags(NumberingFormat.UPPER_ROMAN), ('<ol class="upper-roman">', "</ol>"))
        self.assertEqual(list_tags(NumberingFormat.LOWER_ROMAN), ('<ol class="lower-roman">', "</ol>"))
        self.assertEqual(list_tags(NumberingFormat.UPPER_LETTER), ('<ol class="upper-letter">', "</ol>"))

    def test_random_sequences_are_well_formed(self):
        rng = random.Random(1234)
        formats = list(NumberingFormat)
        for _ in range(300):
            entries = [entry(rng.randint(0, 4), rng.choice(formats)) for _ in range(rng.randint(1, 25))]
            with self.subTest(entries=[(e.level, e.format.name) for e in entries]):
                html = assemble_list(entries)
                opens, closes = check_well_formed(html)
                self.assertEqual(opens, closes)
                self.assertEqual(html.count("<li>"), len(entries))


if __name__ == '__main__':
    unittest.main()
