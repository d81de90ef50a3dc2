"""Tests for {{placeholder}} rendering"""

from hrms.engine.template_renderer import TemplateRenderer, find_placeholders, render


class TestRender:

    def test_substitutes_payload_value(self):
        assert render("Hello {{name}}", {"name": "Sam"}) == "Hello Sam"

    def test_missing_key_renders_empty(self):
        assert render("Hello {{name}}!", {}) == "Hello !"

    def test_none_value_renders_empty(self):
        assert render("Amount: {{amount}}", {"amount": None}) == "Amount: "

    def test_repeated_placeholder_replaced_everywhere(self):
        assert render("{{x}} and {{x}}", {"x": "a"}) == "a and a"

    def test_non_string_values_are_stringified(self):
        assert render("{{month}} {{year}}: {{net}}", {"month": "June", "year": 2024, "net": 61250}) == (
            "June 2024: 61250"
        )

    def test_empty_template(self):
        assert render("", {"a": 1}) == ""
        assert render(None, {"a": 1}) == ""

    def test_non_identifier_tokens_left_alone(self):
        assert render("{{ name }} {{a-b}}", {"name": "Sam"}) == "{{ name }} {{a-b}}"

    def test_renderer_class_delegates(self):
        assert TemplateRenderer().render("Hi {{who}}", {"who": "Ana"}) == "Hi Ana"


class TestFindPlaceholders:

    def test_order_and_duplicates_kept(self):
        assert find_placeholders("{{a}} {{b}} {{a}}") == ["a", "b", "a"]

    def test_no_placeholders(self):
        assert find_placeholders("plain text") == []
