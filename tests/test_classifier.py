import unittest

from pagebridge.classifier import RULES, UNKNOWN, RoleRule, classify
from pagebridge.models import ElementInfo, RoleResult


def el(tag="div", text="", classes="", test_id="", role="", input_type=""):
    return ElementInfo(
        tag=tag,
        text=text,
        class_name=classes,
        test_id=test_id,
        aria_role=role,
        input_type=input_type,
    )


class ClassifierRuleTests(unittest.TestCase):
    def assertRole(self, element, name, confidence) -> None:
        result = classify(element)
        self.assertEqual(result.name, name)
        self.assertAlmostEqual(result.confidence, confidence)

    def test_currency_text_is_balance(self) -> None:
        self.assertRole(el(text="$12.50"), "display.balance", 0.90)
        self.assertRole(el(text="0.25 ETH"), "display.balance", 0.90)

    def test_balance_class_or_testid(self) -> None:
        self.assertRole(el(classes="wallet-balance"), "display.balance", 0.90)
        self.assertRole(el(test_id="eth-balance"), "display.balance", 0.90)

    def test_balance_word_in_text(self) -> None:
        self.assertRole(el(tag="span", text="Total balance"), "display.balance", 0.90)

    def test_hex_address(self) -> None:
        address = "0x" + "aB" * 20
        self.assertRole(el(text=address), "display.address", 0.95)
        self.assertRole(el(classes="selected-address"), "display.address", 0.95)

    def test_short_hex_is_not_an_address(self) -> None:
        self.assertRole(el(text="0xabc"), "unknown", 0.30)

    def test_send(self) -> None:
        self.assertRole(el(tag="button", text="Send"), "button.send", 0.85)
        self.assertRole(el(test_id="send-btn"), "button.send", 0.85)

    def test_receive_and_deposit(self) -> None:
        self.assertRole(el(text="Receive"), "button.receive", 0.85)
        self.assertRole(el(text="Deposit funds"), "button.receive", 0.85)
        self.assertRole(el(classes="receive-action"), "button.receive", 0.85)

    def test_receive_testid_only_falls_through(self) -> None:
        self.assertRole(el(tag="button", test_id="receive"), "button.generic", 0.60)

    def test_buy_and_swap(self) -> None:
        self.assertRole(el(text="Buy"), "button.buy", 0.85)
        self.assertRole(el(classes="swap-icon"), "button.swap", 0.85)

    def test_account(self) -> None:
        self.assertRole(el(classes="account-menu"), "button.account", 0.80)
        self.assertRole(el(tag="button", text="Account 1"), "button.account", 0.80)

    def test_account_text_needs_button_tag(self) -> None:
        self.assertRole(el(tag="span", text="Account 1"), "unknown", 0.30)

    def test_generic_button(self) -> None:
        self.assertRole(el(tag="button", text="Continue"), "button.generic", 0.60)
        self.assertRole(el(tag="div", role="button", text="Next"), "button.generic", 0.60)

    def test_input_uses_type(self) -> None:
        self.assertRole(el(tag="input", input_type="password"), "input.password", 0.75)
        self.assertRole(el(tag="input"), "input.text", 0.75)

    def test_fallback_unknown(self) -> None:
        self.assertEqual(classify(el(tag="a", text="Docs")), UNKNOWN)


class ClassifierPriorityTests(unittest.TestCase):
    def test_balance_wins_over_send(self) -> None:
        self.assertEqual(classify(el(text="send balance")).name, "display.balance")
        self.assertEqual(classify(el(tag="button", text="Send $5.00")).name, "display.balance")

    def test_address_wins_over_send(self) -> None:
        element = el(tag="button", text="send", classes="address-chip")
        self.assertEqual(classify(element).name, "display.address")

    def test_send_wins_over_generic_button(self) -> None:
        self.assertEqual(classify(el(tag="button", text="Send")).name, "button.send")

    def test_text_is_normalized(self) -> None:
        self.assertEqual(classify(el(text="  SWAP\n tokens ")).name, "button.swap")

    def test_classify_is_pure(self) -> None:
        element = el(tag="button", text="Buy", classes="primary")
        self.assertEqual(classify(element), classify(element))
        self.assertEqual(classify(element), RoleResult("button.buy", 0.85))

    def test_rule_table_order(self) -> None:
        names = [rule.label for rule in RULES if isinstance(rule.label, str)]
        self.assertEqual(names, [
            "display.balance",
            "display.address",
            "button.send",
            "button.receive",
            "button.buy",
            "button.swap",
            "button.account",
            "button.generic",
        ])
        self.assertEqual(len(RULES), 9)

    def test_custom_rules(self) -> None:
        rules = [RoleRule("link.docs", 0.5, lambda s: s.tag == "a")]
        self.assertEqual(classify(el(tag="a"), rules), RoleResult("link.docs", 0.5))
        self.assertEqual(classify(el(tag="button"), rules), UNKNOWN)


if __name__ == "__main__":
    unittest.main()
