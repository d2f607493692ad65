"""Filters document parser — YAML text to an immutable FilterConfig.

A rule value is recursively one of three shapes:

* a pattern string                      ``src: "src/**"``
* a sequence of nested values           ``src: ["src/**", *shared]``
* a status map                          ``src: [{added|modified: "src/**"}]``

Parsing happens in two passes. ``_classify`` validates the untyped document
and turns it into a small tree of typed nodes; ``_flatten`` walks that tree
and compiles every pattern into a FilterRuleItem. Nothing is returned until
every rule has been flattened, so an invalid document never yields a partial
rule set.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any, FrozenSet, List, Optional, Set, Tuple, Union

import yaml

from pathfilter.filters.models import FilterConfig, FilterRuleItem, PredicateQuantifier
from pathfilter.filters.patterns import DEFAULT_OPTIONS, MatchOptions, compile_glob
from pathfilter.git.models import ChangeStatus

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Invalid filter YAML format"


class FilterError(ValueError):
    """Raised when a filters document does not have a valid shape."""

    def __init__(self, message: str, rule: Optional[str] = None) -> None:
        self.rule = rule
        where = f"rule '{rule}': " if rule is not None else ""
        super().__init__(f"{ERROR_PREFIX}: {where}{message}")


class PatternCompileError(FilterError):
    """Raised when a glob in a valid document cannot be compiled."""

    def __init__(self, rule: str, pattern: str, reason: str) -> None:
        self.pattern = pattern
        super().__init__(f"cannot compile pattern {pattern!r}: {reason}", rule)


# --- typed document nodes ---


@dataclass(frozen=True)
class _PatternNode:
    pattern: str


@dataclass(frozen=True)
class _SequenceNode:
    items: Tuple["_Node", ...]


@dataclass(frozen=True)
class _StatusMapNode:
    entries: Tuple[Tuple[FrozenSet[ChangeStatus], Tuple[str, ...]], ...]


_Node = Union[_PatternNode, _SequenceNode, _StatusMapNode]

_STATUS_NAMES = [s.value for s in ChangeStatus]


def _describe(value: Any) -> str:
    return f"{value!r} ({type(value).__name__})"


def _parse_statuses(key: Any, rule: str) -> FrozenSet[ChangeStatus]:
    if not isinstance(key, str):
        raise FilterError(
            f"change status key must be a string, got {_describe(key)}", rule
        )
    tokens = [t.strip() for t in key.split("|") if t.strip()]
    if not tokens:
        raise FilterError(f"change status key {key!r} names no status", rule)
    statuses = set()
    for token in tokens:
        try:
            statuses.add(ChangeStatus.parse(token))
        except ValueError:
            raise FilterError(
                f"change status must be one of {_STATUS_NAMES}, instead {token!r} found",
                rule,
            ) from None
    return frozenset(statuses)


def _pattern_list(value: Any, rule: str) -> Tuple[str, ...]:
    """Value of a status map entry: a string or a flat array of strings."""
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise FilterError(
        f"expected a pattern string or an array of strings, got {_describe(value)}",
        rule,
    )


def _classify(node: Any, rule: str, active: Set[int]) -> _Node:
    """Validate *node* and convert it to a typed node.

    *active* holds the ids of the sequences on the current path; meeting one
    again means the document refers to itself.
    """
    if isinstance(node, str):
        return _PatternNode(node)

    if isinstance(node, list):
        if id(node) in active:
            raise FilterError("reference cycle detected (a sequence contains itself)", rule)
        active.add(id(node))
        try:
            return _SequenceNode(tuple(_classify(item, rule, active) for item in node))
        finally:
            active.discard(id(node))

    if isinstance(node, dict):
        if not node:
            raise FilterError("expected an array of strings, got an empty mapping", rule)
        return _StatusMapNode(
            tuple(
                (_parse_statuses(key, rule), _pattern_list(value, rule))
                for key, value in node.items()
            )
        )

    raise FilterError(f"expected an array of strings, got {_describe(node)}", rule)


def _compile(pattern: str, rule: str, options: MatchOptions):
    try:
        return compile_glob(pattern, options)
    except re.error as exc:
        raise PatternCompileError(rule, pattern, str(exc)) from exc


def _flatten(node: _Node, rule: str, options: MatchOptions) -> List[FilterRuleItem]:
    if isinstance(node, _PatternNode):
        return [FilterRuleItem(matcher=_compile(node.pattern, rule, options))]
    if isinstance(node, _SequenceNode):
        items: List[FilterRuleItem] = []
        for child in node.items:
            items.extend(_flatten(child, rule, options))
        return items
    if isinstance(node, _StatusMapNode):
        # One clause per pattern; clauses of one key share the status set
        return [
            FilterRuleItem(matcher=_compile(p, rule, options), statuses=statuses)
            for statuses, patterns in node.entries
            for p in patterns
        ]
    raise TypeError(f"unknown node type {type(node).__name__}")


def parse_filters(
    document: Any,
    *,
    quantifier: PredicateQuantifier = PredicateQuantifier.SOME,
    options: MatchOptions = DEFAULT_OPTIONS,
) -> FilterConfig:
    """Build a FilterConfig from an already-deserialised document."""
    if not isinstance(document, dict):
        raise FilterError(f"root element is not an object, got {_describe(document)}")

    rules = {}
    for name, value in document.items():
        if not isinstance(name, str):
            raise FilterError(f"filter rule name {name!r} must be a string")
        items = _flatten(_classify(value, name, set()), name, options)
        if not items:
            raise FilterError("contains no patterns", name)
        rules[name] = tuple(items)
        logger.debug("Parsed filter rule %s (%d clauses)", name, len(items))

    return FilterConfig(rules=rules, quantifier=quantifier)


_MERGE_TAG = "tag:yaml.org,2002:merge"
_STR_TAG = "tag:yaml.org,2002:str"


class _FiltersLoader(yaml.SafeLoader):
    """SafeLoader that rejects repeated mapping keys.

    Top-level keys are rule names and always load as the text written in the
    document, so ``on:``, ``yes:`` or ``1:`` name a rule instead of becoming a
    bool or an int.
    """

    _root: Optional[yaml.Node] = None

    def construct_document(self, node):
        self._root = node
        return super().construct_document(node)

    def construct_mapping(self, node, deep=False):
        is_root = node is self._root
        seen = set()
        for key_node, _ in node.value:
            if key_node.tag == _MERGE_TAG:
                continue
            if is_root and isinstance(key_node, yaml.ScalarNode):
                key_node.tag = _STR_TAG
            key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, Hashable):
                continue
            if key in seen:
                if is_root:
                    raise FilterError(f"duplicate filter rule name {key!r}")
                line = key_node.start_mark.line + 1
                raise FilterError(f"duplicate key {key!r} on line {line}")
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def load_filters(
    text: str,
    *,
    quantifier: PredicateQuantifier = PredicateQuantifier.SOME,
    options: MatchOptions = DEFAULT_OPTIONS,
) -> FilterConfig:
    """Parse YAML *text* into rules.

    Anchors and aliases are resolved by PyYAML. A key repeated within one
    mapping is a FilterError, never a silent override.
    """
    try:
        document = yaml.load(text, Loader=_FiltersLoader)
    except yaml.YAMLError as exc:
        raise FilterError(f"cannot parse YAML: {exc}") from exc
    return parse_filters(document, quantifier=quantifier, options=options)
