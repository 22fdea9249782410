"""
Тесты движка трансляции: частичное вычисление директив.

Используется стратегия ISPConfig; её теги легко читаются в ожиданиях.
"""

from pathlib import Path

import pytest

from liquidish.errors import (
    ComponentNotFoundError,
    InvalidOperatorError,
    NotAnArrayError,
    ParseError,
    RenderCancelled,
    StructuralError,
)
from tests.infrastructure.transform_utils import make_transformer, transform


class TestIdentityAndVariables:

    @pytest.mark.parametrize("text", [
        "",
        "plain <b>text</b> 100% done",
        "braces { } and % signs %} without tags",
        "multi\n  line\n\ttext\n",
    ])
    def test_text_without_directives_is_unchanged(self, text):
        assert transform(text) == text

    def test_idempotent_on_resolved_output(self):
        first = transform("{% if x %}<b>{{ name }}</b>{% endif %}", scope={"x": True, "name": "N"})

        assert first == "<b>N</b>"
        assert transform(first) == first

    def test_unbound_variable_is_deferred(self):
        assert transform("{{ X }}") == '{tmpl_var name="X"}'

    def test_bound_variable_is_substituted(self):
        assert transform("{{ X }}", scope={"X": "v"}) == "v"

    def test_known_values_are_stringified(self):
        scope = {"n": 1.0, "flag": True, "items": [1, 2], "nothing": None}

        assert transform("{{ n }} {{ flag }} {{ items }} {{ nothing }}", scope=scope) == "1 true [1, 2] null"

    def test_indexed_names_from_scope(self):
        assert transform("{{ item[0] }}", scope={"item[0]": "first"}) == "first"

    def test_nested_interpolation_single_pass(self):
        scope = {"slot": "{{ a }} and {{ b }}", "a": "A"}

        assert transform("{{ slot }}", scope=scope) == 'A and {tmpl_var name="b"}'

    def test_self_reference_stays_runtime_variable(self):
        assert transform("{{ value }}", scope={"value": "{{ value }}"}) == '{tmpl_var name="value"}'


class TestIfChain:

    def test_unbound_if(self):
        assert transform("{% if X %}A{% endif %}") == '{tmpl_if name="X"}A{/tmpl_if}'

    def test_bound_truthy_if(self):
        assert transform("{% if X %}A{% endif %}", scope={"X": "yes"}) == "A"

    @pytest.mark.parametrize("value", ["", 0, False, None, []])
    def test_bound_falsy_if(self, value):
        assert transform("{% if X %}A{% endif %}", scope={"X": value}) == ""

    def test_deferred_chain_ends_at_known_true_branch(self):
        """Известная истинная ветка закрывает отложенную цепочку; else не выводится."""
        result = transform(
            "{% if X %}A{% elseif Y %}B{% else %}C{% endif %}",
            scope={"Y": True},
        )

        assert result == '{tmpl_if name="X"}A{tmpl_elseif name="Y"}B{/tmpl_if}'

    def test_deferred_chain_prunes_known_false_branch(self):
        result = transform(
            "{% if X %}A{% elseif Y %}B{% else %}C{% endif %}",
            scope={"Y": False},
        )

        assert result == '{tmpl_if name="X"}A{tmpl_else}C{/tmpl_if}'

    def test_first_deferred_branch_uses_if_tag(self):
        result = transform(
            "{% if X %}A{% elseif Y %}B{% else %}C{% endif %}",
            scope={"X": False},
        )

        assert result == '{tmpl_if name="Y"}B{tmpl_else}C{/tmpl_if}'

    def test_fully_deferred_chain(self):
        result = transform("{% if X %}A{% elsif Y == 'v' %}B{% else %}C{% endif %}")

        assert result == (
            '{tmpl_if name="X"}A'
            '{tmpl_elseif name="Y" op="==" value="v"}B'
            '{tmpl_else}C'
            '{/tmpl_if}'
        )

    @pytest.mark.parametrize("scope, expected", [
        ({"X": True, "Y": True}, "A"),
        ({"X": False, "Y": True}, "B"),
        ({"X": False, "Y": False}, "C"),
    ])
    def test_fully_known_chain(self, scope, expected):
        assert transform("{% if X %}A{% elseif Y %}B{% else %}C{% endif %}", scope=scope) == expected

    def test_all_false_without_else(self):
        assert transform("{% if X %}A{% elseif Y %}B{% endif %}", scope={"X": 0, "Y": ""}) == ""

    def test_comparisons(self):
        template = "{% if n > '5' %}big{% else %}small{% endif %}"

        assert transform(template, scope={"n": "10"}) == "big"
        assert transform(template, scope={"n": 3}) == "small"

    @pytest.mark.parametrize("template, value, expected", [
        ("{% if v == 'nan' %}yes{% endif %}", "nan", "yes"),
        ("{% if v != 'inf' %}diff{% endif %}", "infinity", "diff"),
        ("{% if v == '1_000' %}eq{% endif %}", "1000", ""),
        ("{% if v == 'true' %}eq{% endif %}", True, ""),
    ])
    def test_comparisons_of_non_decimal_text(self, template, value, expected):
        assert transform(template, scope={"v": value}) == expected

    def test_boolean_literals(self):
        assert transform("{% if true %}yes{% endif %}") == "yes"
        assert transform("{% if false %}yes{% else %}no{% endif %}") == "no"

    def test_nested_if_inside_branch(self):
        result = transform(
            "{% if a %}{% if b %}AB{% else %}A{% endif %}{% endif %}",
            scope={"a": True},
        )

        assert result == '{tmpl_if name="b"}AB{tmpl_else}A{/tmpl_if}'

    def test_invalid_operator_on_known_value(self):
        with pytest.raises(InvalidOperatorError):
            transform("{% if x ~ '1' %}a{% endif %}", scope={"x": 1})

    def test_unparsable_condition(self):
        with pytest.raises(ParseError):
            transform("{% if %}a{% endif %}")

    def test_whitespace_control(self):
        assert transform("\n{%- if true -%}\nX{% endif %}") == "X"


class TestUnless:

    def test_unbound(self):
        assert transform("{% unless X %}A{% endunless %}") == '{tmpl_unless name="X"}A{/tmpl_unless}'

    def test_known(self):
        assert transform("{% unless X %}A{% endunless %}", scope={"X": False}) == "A"
        assert transform("{% unless X %}A{% endunless %}", scope={"X": True}) == ""

    def test_with_else(self):
        template = "{% unless X %}A{% else %}B{% endunless %}"

        assert transform(template) == '{tmpl_unless name="X"}A{tmpl_else}B{/tmpl_unless}'
        assert transform(template, scope={"X": True}) == "B"
        assert transform(template, scope={"X": ""}) == "A"

    def test_operator_is_rejected(self):
        with pytest.raises(ParseError, match="Unless accepts a variable name only"):
            transform("{% unless X == 'a' %}A{% endunless %}")


class TestFor:

    def test_unroll(self):
        result = transform("{% for item in items %}{{ item.n }}{% endfor %}", scope={"items": [{"n": 1}, {"n": 2}]})

        assert result == "12"

    def test_nested_loops(self):
        result = transform(
            "{% for row in matrix %}{% for cell in row %}{{ cell }}{% endfor %};{% endfor %}",
            scope={"matrix": [[1, 2], [3]]},
        )

        assert result == "12;3;"

    def test_indexed_item_names(self):
        result = transform(
            '{% for attr in attributes %} {{ attr[0] }}="{{ attr[1] }}"{% endfor %}',
            scope={"attributes": [["id", "x"], ["class", "y"]]},
        )

        assert result == ' id="x" class="y"'

    def test_loop_frames_are_popped(self):
        transformer = make_transformer(scope={"items": [1, 2]})

        assert transformer.transform("{% for item in items %}{{ item }}{% endfor %}") == "12"
        assert "item" not in transformer.get_scope()
        assert len(transformer.scope) == 1

    def test_unbound_collection(self):
        with pytest.raises(NotAnArrayError, match="The collection items is not an array. It's a undefined"):
            transform("{% for item in items %}x{% endfor %}")

    def test_non_array_collection(self):
        with pytest.raises(NotAnArrayError, match="It's a str"):
            transform("{% for item in items %}x{% endfor %}", scope={"items": "abc"})

    def test_invalid_syntax(self):
        with pytest.raises(ParseError, match="Invalid for statement"):
            transform("{% for item %}x{% endfor %}", scope={"item": [1]})

    def test_else_inside_for_is_structural_error(self):
        with pytest.raises(StructuralError, match="Unknown node type: else"):
            transform("{% for i in items %}a{% else %}b{% endfor %}", scope={"items": [1]})


class TestRender:

    def page(self, root: Path) -> str:
        return str(root / "page.liquid")

    def test_basic(self, components: Path):
        assert transform("{% render 'basic' %}", path=self.page(components)) == "<p>basic</p>"
        assert transform('{% render "./basic.liquid" %}', path=self.page(components)) == "<p>basic</p>"

    def test_variables(self, components: Path):
        page = self.page(components)

        assert transform("{% render 'greeting', name: 'World' %}", path=page) == "Hello World!"
        assert transform('{% render "greeting", {"name": "JSON"} %}', path=page) == "Hello JSON!"
        assert transform("{% render 'greeting' %}", path=page) == 'Hello {tmpl_var name="name"}!'

    def test_relative_to_component_directory(self, components: Path):
        assert transform("{% render 'subdir/nested' %}", path=self.page(components)) == "[leaf]"

    def test_reindent_at_call_site(self, components: Path):
        result = transform("<div>\n    {% render 'multiline' %}\n</div>", path=self.page(components))

        assert result == "<div>\n    <ul>\n    <li>one</li>\n\n    <li>two</li>\n    </ul>\n</div>"

    def test_missing_component(self, components: Path):
        with pytest.raises(ComponentNotFoundError):
            transform("{% render 'missing' %}", path=self.page(components))

    def test_frames_are_popped(self, components: Path):
        transformer = make_transformer()

        transformer.transform("{% render 'greeting', name: 'X' %}", self.page(components))

        assert len(transformer.scope) == 0
        assert transformer.get_scope() == {}

    def test_frames_are_popped_on_error(self, components: Path):
        (components / "broken.liquid").write_text("{% for x in nothing %}{% endfor %}", encoding="utf-8")
        transformer = make_transformer(scope={"outer": 1})

        with pytest.raises(NotAnArrayError, match="broken.liquid"):
            transformer.transform("{% render 'broken' %}", self.page(components))

        assert transformer.get_scope() == {"outer": 1}

    def test_reserved_variable(self, components: Path):
        with pytest.raises(ParseError, match="reserved"):
            transform("{% render 'basic', ___: 'show-it' %}", path=self.page(components))


class TestMeta:

    def test_child_only_at_root_is_cancelled(self, components: Path):
        path = components / "child-only.liquid"

        assert transform(path.read_text(encoding="utf-8"), path=str(path)) is None

    def test_child_only_without_path_is_cancelled(self):
        assert transform('{% meta {"isChildOnly": true} %}text') is None

    def test_child_only_via_render(self, components: Path):
        result = transform("{% render 'child-only', label: 'X' %}", path=str(components / "page.liquid"))

        assert result == "Child X"

    def test_cancel_inside_comment(self):
        assert transform('{% comment %}{% meta {"isChildOnly": true} %}{% endcomment %}x') is None

    def test_defaults(self, components: Path):
        page = str(components / "page.liquid")

        assert transform("{% render 'defaults' %}", path=page) == "red/10"
        assert transform("{% render 'defaults', color: 'blue' %}", path=page) == "blue/10"
        assert transform("{% render 'defaults' %}", path=page, scope={"size": 3}) == "red/3"

    def test_defaults_do_not_leak(self, components: Path):
        transformer = make_transformer()

        transformer.transform("{% render 'defaults' %}{{ color }}", str(components / "page.liquid"))

        assert transformer.get_scope() == {}

    def test_defaults_after_render_are_runtime_variables(self, components: Path):
        result = transform("{% render 'defaults' %} {{ color }}", path=str(components / "page.liquid"))

        assert result == 'red/10 {tmpl_var name="color"}'

    def test_defaults_expand_nested_names(self):
        result = transform('{% meta {"defaults": {"link": {"href": "/x"}}} %}{{ link.href }}')

        assert result == "/x"

    def test_defaults_land_in_callers_frame(self):
        transformer = make_transformer()
        transformer.push_to_scope({"path": "some/path"})

        result = transformer.transform(
            '{% meta {"defaults": {"isChildOnly": true, "parameter": "value"}} %}',
            "some/path",
        )

        assert result == ""
        scope = transformer.get_scope()
        assert scope["isChildOnly"] is True
        assert scope["parameter"] == "value"

    @pytest.mark.parametrize("payload", ["{oops}", '{"isChildOnly": "maybe"}', '{"defaults": [1]}', ""])
    def test_invalid_meta(self, payload):
        with pytest.raises(ParseError):
            transform("{% meta " + payload + " %}")

    def test_unknown_keys_and_null_defaults_are_accepted(self):
        assert transform('{% meta {"version": 2, "defaults": null} %}ok') == "ok"

    def test_reserved_default(self):
        with pytest.raises(ParseError, match="reserved"):
            transform('{% meta {"defaults": {"___": "dont-show-it"}} %}')


class TestComment:

    def test_hidden_by_default(self):
        assert transform("{% comment %} This is a comment {% endcomment %}") == ""

    def test_shown_as_html_comment(self):
        assert transform("{% comment %} c {{ x }} {% endcomment %}", show_comments=True) == (
            '<!-- c {tmpl_var name="x"} -->'
        )


class TestTransformerApi:

    def test_scope_api(self):
        transformer = make_transformer()

        assert transformer.pop_scope() == {}
        assert transformer.peek_scope() is None

        frame = transformer.push_to_scope({"a": 1})
        transformer.push_to_scope({"a": 2, "b": 3})

        assert transformer.peek_scope() == {"a": 2, "b": 3}
        assert transformer.get_scope() == {"a": 2, "b": 3}
        assert transformer.pop_scope() == {"a": 2, "b": 3}
        assert transformer.peek_scope() is frame

    def test_path_and_root(self):
        transformer = make_transformer()
        transformer.transform("x", "/base/page.liquid")

        assert transformer.get_path() == "/base/page.liquid"
        assert transformer.is_root()

        transformer.push_to_scope({"path": "/base/component.liquid"})
        assert transformer.get_path() == "/base/component.liquid"
        assert not transformer.is_root()

    def test_transform_contents_propagates_cancellation(self):
        transformer = make_transformer()

        with pytest.raises(RenderCancelled):
            transformer.transform_contents('{% meta {"isChildOnly": true} %}')

    def test_temporary_root_frame_is_removed(self):
        transformer = make_transformer()

        assert transformer.transform('{% meta {"defaults": {"a": "1"}} %}{{ a }}') == "1"
        assert len(transformer.scope) == 0

    def test_independent_transformers(self):
        first = make_transformer(scope={"x": "1"})
        second = make_transformer()

        assert first.transform("{{ x }}") == "1"
        assert second.transform("{{ x }}") == '{tmpl_var name="x"}'
