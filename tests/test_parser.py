"""Tests for the filters document parser."""

import textwrap

import pytest

from pathfilter.filters.models import PredicateQuantifier
from pathfilter.filters.parser import (
    FilterError,
    PatternCompileError,
    load_filters,
    parse_filters,
)
from pathfilter.git.models import ChangeStatus


def clauses(config, name):
    return [
        (item.pattern, None if item.statuses is None else set(item.statuses))
        for item in config.rules[name]
    ]


class TestRuleShapes:
    def test_single_pattern_string(self):
        config = load_filters("src: 'src/**'")
        assert clauses(config, "src") == [("src/**", None)]

    def test_array_of_patterns(self):
        config = load_filters("src:\n  - 'src/**'\n  - 'lib/**'\n")
        assert clauses(config, "src") == [("src/**", None), ("lib/**", None)]

    def test_status_map_in_array(self):
        config = load_filters(textwrap.dedent("""\
            src:
              - added|modified: "src/**"
              - "docs/**"
        """))
        assert clauses(config, "src") == [
            ("src/**", {ChangeStatus.ADDED, ChangeStatus.MODIFIED}),
            ("docs/**", None),
        ]

    def test_status_keys_are_trimmed_and_case_insensitive(self):
        config = load_filters("src:\n  - ' Added | MODIFIED ': 'src/**'\n")
        assert clauses(config, "src")[0][1] == {ChangeStatus.ADDED, ChangeStatus.MODIFIED}

    def test_list_under_status_shares_status_set(self):
        config = load_filters(textwrap.dedent("""\
            src:
              - deleted: ["a/**", "b/**"]
        """))
        items = config.rules["src"]
        assert [i.pattern for i in items] == ["a/**", "b/**"]
        assert items[0].statuses == items[1].statuses == frozenset({ChangeStatus.DELETED})

    def test_top_level_status_map(self):
        config = load_filters("src:\n  added: 'src/**'\n")
        assert clauses(config, "src") == [("src/**", {ChangeStatus.ADDED})]

    def test_multi_key_status_map(self):
        config = load_filters(textwrap.dedent("""\
            src:
              - added: "new/**"
                deleted: "old/**"
        """))
        assert clauses(config, "src") == [
            ("new/**", {ChangeStatus.ADDED}),
            ("old/**", {ChangeStatus.DELETED}),
        ]

    def test_nested_arrays_are_flattened(self):
        config = parse_filters({"src": ["a", ["b", ["c"]], "d"]})
        assert [i.pattern for i in config.rules["src"]] == ["a", "b", "c", "d"]

    def test_rule_order_is_kept(self):
        config = load_filters("zeta: z\nalpha: a\nmid: m\n")
        assert config.rule_names == ["zeta", "alpha", "mid"]

    def test_empty_document_has_no_rules(self):
        assert len(parse_filters({})) == 0

    def test_quantifier_is_stored(self):
        config = load_filters("src: 'src/**'", quantifier=PredicateQuantifier.EVERY)
        assert config.quantifier is PredicateQuantifier.EVERY


class TestAnchors:
    def test_alias_equals_inline_definition(self):
        aliased = load_filters(textwrap.dedent("""\
            shared: &shared
              - common/**/*
              - config/**/*
            src:
              - *shared
              - src/**/*
        """))
        inline = load_filters(textwrap.dedent("""\
            shared:
              - common/**/*
              - config/**/*
            src:
              - - common/**/*
                - config/**/*
              - src/**/*
        """))
        assert clauses(aliased, "src") == clauses(inline, "src")
        assert [i.pattern for i in aliased.rules["src"]] == [
            "common/**/*",
            "config/**/*",
            "src/**/*",
        ]

    def test_alias_as_status_map_value(self):
        config = load_filters(textwrap.dedent("""\
            shared: &shared
              - common/**/*
              - config/**/*
            src:
              - modified: *shared
        """))
        assert clauses(config, "src") == [
            ("common/**/*", {ChangeStatus.MODIFIED}),
            ("config/**/*", {ChangeStatus.MODIFIED}),
        ]

    def test_fixture_document_parses(self, sample_filters_yaml):
        config = load_filters(sample_filters_yaml)
        assert config.rule_names == ["shared", "src", "backend", "new_docs"]
        assert len(config.rules["src"]) == 3


class TestImmutability:
    def test_rules_mapping_is_read_only(self):
        config = load_filters("src: 'src/**'")
        with pytest.raises(TypeError):
            config.rules["other"] = ()

    def test_rule_items_are_tuples(self):
        config = parse_filters({"src": ["a", "b"]})
        assert isinstance(config.rules["src"], tuple)


class TestInvalidDocuments:
    @pytest.mark.parametrize(
        "text",
        [
            "not a dictionary",
            "- a\n- b\n",
            "dict:\n  some: value\n",
            "src:\n  - sometimes: 'src/**'\n",
            "src:\n  - 42\n",
            "src:\n  - added:\n      nested: 'x'\n",
            "src:\n",
            "src: []\n",
            "src:\n  - {}\n",
            "src: [unclosed\n",
            "src: 'a/**'\ndocs: 'd/**'\nsrc: 'b/**'\n",
            "src:\n  - added: 'a/**'\n    added: 'b/**'\n",
        ],
    )
    def test_rejected_with_prefix(self, text):
        with pytest.raises(FilterError, match=r"^Invalid filter"):
            load_filters(text)

    def test_unknown_status_lists_allowed_values(self):
        with pytest.raises(FilterError) as exc_info:
            load_filters("src:\n  - added|changed: 'src/**'\n")
        message = str(exc_info.value)
        assert "'changed'" in message
        assert "modified" in message
        assert exc_info.value.rule == "src"

    def test_filter_error_is_value_error(self):
        with pytest.raises(ValueError):
            load_filters("just a string")

    def test_self_referencing_document(self):
        node = []
        node.append(node)
        with pytest.raises(FilterError, match="cycle"):
            parse_filters({"loop": node})

    def test_invalid_glob_reports_rule_and_pattern(self):
        with pytest.raises(PatternCompileError) as exc_info:
            load_filters("src:\n  - ok/**\n  - '[z-a]'\n")
        assert exc_info.value.rule == "src"
        assert exc_info.value.pattern == "[z-a]"
        assert str(exc_info.value).startswith("Invalid filter")

    def test_unbalanced_bracket_is_accepted(self):
        config = load_filters("src: 'src/[abc'\n")
        assert config.rules["src"][0].matcher.matches("src/[abc")

    def test_duplicate_rule_name_is_named(self):
        with pytest.raises(FilterError, match="duplicate filter rule name 'src'"):
            load_filters("src: 'a/**'\ndocs: 'd/**'\nsrc: 'b/**'\n")

    def test_duplicate_status_key(self):
        with pytest.raises(FilterError, match="duplicate key 'added' on line 3"):
            load_filters("src:\n  - added: 'a/**'\n    added: 'b/**'\n")

    def test_non_string_rule_name_from_python(self):
        with pytest.raises(FilterError, match="must be a string"):
            parse_filters({1: "src/**"})


class TestRuleNames:
    def test_yaml_1_1_scalars_stay_strings(self):
        config = load_filters("on: 'a/**'\nyes: 'b/**'\n1: 'c/**'\nnull: 'd/**'\n")
        assert config.rule_names == ["on", "yes", "1", "null"]

    def test_merge_key_in_status_map(self):
        config = load_filters(textwrap.dedent("""\
            base: &base
              added: "new/**"
            src:
              - <<: *base
                deleted: "old/**"
        """))
        assert clauses(config, "src") == [
            ("new/**", {ChangeStatus.ADDED}),
            ("old/**", {ChangeStatus.DELETED}),
        ]
