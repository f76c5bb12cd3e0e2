#!/usr/bin/env python3

"""
User substitution rules applied to raw identifiers before decomposition.

A rule is written ``pattern/replacement`` (``\\/`` for a literal slash) and a
rule list joins rules with ``,`` (``\\,`` for a literal comma). Each rule
replaces the first match only; rules run in list order, so later rules see
the output of earlier ones.
"""

import re
import logging
from dataclasses import dataclass
from typing import Iterable, List, Pattern

from .exceptions import RuleError

RULE_LIST_SEPARATOR = ','
RULE_FIELD_SEPARATOR = '/'

_UNESCAPED_LIST_SEPARATOR = re.compile(r'(?<!\\),')
_UNESCAPED_FIELD_SEPARATOR = re.compile(r'(?<!\\)/')


@dataclass(frozen=True)
class RenameRule:
    """A compiled single-substitution rule."""
    pattern: Pattern
    replacement: str
    source: str = ""

    def apply(self, identifier: str) -> str:
        return self.pattern.sub(self.replacement, identifier, count=1)


def split_rule_list(text: str) -> List[str]:
    """Split a rule list string on unescaped separators."""
    if not text:
        return []
    parts = _UNESCAPED_LIST_SEPARATOR.split(text)
    return [part.replace('\\' + RULE_LIST_SEPARATOR, RULE_LIST_SEPARATOR)
            for part in parts if part]


def parse_rule(text: str) -> RenameRule:
    """Parse one ``pattern/replacement`` rule."""
    fields = _UNESCAPED_FIELD_SEPARATOR.split(text)
    if len(fields) != 2:
        raise RuleError("expected exactly one unescaped '/' between pattern and replacement", text)

    pattern, replacement = (f.replace('\\' + RULE_FIELD_SEPARATOR, RULE_FIELD_SEPARATOR)
                            for f in fields)
    if not pattern:
        raise RuleError("empty pattern", text)

    try:
        compiled = re.compile(pattern)
        # Parses the replacement template so bad group references fail here
        compiled.sub(replacement, "")
    except re.error as e:
        raise RuleError(f"pattern does not compile: {e}", text) from e

    return RenameRule(pattern=compiled, replacement=replacement, source=text)


def compile_rules(rule_strings: Iterable[str]) -> List[RenameRule]:
    """Compile rules in order, skipping malformed ones with a warning."""
    rules = []
    for text in rule_strings:
        try:
            rules.append(parse_rule(text))
        except RuleError as e:
            logging.warning(f"Skipping rule: {e}")
    if rules:
        logging.info(f"Compiled {len(rules)} rename rule(s)")
    return rules


def apply_rules(identifier: str, rules: Iterable[RenameRule]) -> str:
    for rule in rules:
        identifier = rule.apply(identifier)
    return identifier
