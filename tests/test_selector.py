import unittest

from pagebridge.models import ElementInfo
from pagebridge.selector import css_escape, synthesize


class SelectorTests(unittest.TestCase):
    def test_test_id_wins_over_id_and_class(self) -> None:
        element = ElementInfo(tag="button", test_id="buy-btn", element_id="buy", class_name="btn primary")
        self.assertEqual(synthesize(element), '[data-testid="buy-btn"]')

    def test_id_selector(self) -> None:
        element = ElementInfo(tag="button", element_id="send", class_name="btn")
        self.assertEqual(synthesize(element), "#send")

    def test_up_to_three_classes(self) -> None:
        element = ElementInfo(tag="div", class_name="  btn  btn-lg primary  rounded ")
        self.assertEqual(synthesize(element), ".btn.btn-lg.primary")

    def test_nth_child_fallback(self) -> None:
        element = ElementInfo(tag="a", has_parent=True, index=4)
        self.assertEqual(synthesize(element), "a:nth-child(4)")

    def test_bare_tag_without_parent(self) -> None:
        self.assertEqual(synthesize(ElementInfo(tag="html")), "html")

    def test_never_empty(self) -> None:
        self.assertEqual(synthesize(ElementInfo(tag="", class_name="   ")), "*")

    def test_quotes_in_test_id_are_escaped(self) -> None:
        element = ElementInfo(tag="div", test_id='say "hi"')
        self.assertEqual(synthesize(element), '[data-testid="say \\"hi\\""]')

    def test_id_with_colons_is_escaped(self) -> None:
        self.assertEqual(synthesize(ElementInfo(tag="div", element_id=":r1:")), "#\\:r1\\:")

    def test_id_starting_with_digit_is_escaped(self) -> None:
        self.assertEqual(synthesize(ElementInfo(tag="div", element_id="1abc")), "#\\31 abc")

    def test_utility_classes_are_escaped(self) -> None:
        element = ElementInfo(tag="div", class_name="hover:bg-blue md:w-1/2")
        self.assertEqual(synthesize(element), ".hover\\:bg-blue.md\\:w-1\\/2")

    def test_css_escape_plain_identifiers_unchanged(self) -> None:
        self.assertEqual(css_escape("btn-lg_2"), "btn-lg_2")
        self.assertEqual(css_escape("-"), "\\-")
        self.assertEqual(css_escape("-1x"), "-\\31 x")

    def test_deterministic(self) -> None:
        element = ElementInfo(tag="span", class_name="a b", has_parent=True, index=2)
        self.assertEqual(synthesize(element), synthesize(element))


if __name__ == "__main__":
    unittest.main()
