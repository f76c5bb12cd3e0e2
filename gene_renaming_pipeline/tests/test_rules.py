#!/usr/bin/env python3

"""
Unit tests for rename rule parsing and application.
"""

import unittest
import sys
import os

# Add the parent directory to the path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from gene_renaming_pipeline.core.rules import (
    RenameRule, apply_rules, compile_rules, parse_rule, split_rule_list
)
from gene_renaming_pipeline.core.exceptions import RuleError


class TestParseRule(unittest.TestCase):
    """Test parsing single pattern/replacement rules."""

    def test_backreference_rule(self):
        """Test a rule with a capture group in the replacement."""
        rule = parse_rule(r"Niben044(\w)tg/Nb\1")
        self.assertIsInstance(rule, RenameRule)
        self.assertEqual(
            rule.apply("augustus_masked-Niben044Ctg23129049-abinit-gene-0.0"),
            "augustus_masked-NbC23129049-abinit-gene-0.0"
        )

    def test_first_occurrence_only(self):
        """Each rule substitutes only the first match."""
        rule = parse_rule("a/b")
        self.assertEqual(rule.apply("aaa"), "baa")

    def test_no_match_leaves_identifier(self):
        rule = parse_rule("xyz/abc")
        self.assertEqual(rule.apply("gene-1"), "gene-1")

    def test_escaped_separator(self):
        """A backslash-escaped slash belongs to the pattern."""
        rule = parse_rule(r"x\/y/z")
        self.assertEqual(rule.apply("ax/yb"), "azb")

    def test_empty_replacement_deletes(self):
        rule = parse_rule("_masked/")
        self.assertEqual(rule.apply("augustus_masked-Ctg1"), "augustus-Ctg1")

    def test_malformed_rules(self):
        """Rules without exactly one separator, or with bad patterns, are rejected."""
        for bad in ["noslash", "a/b/c", "/b", "(/x", r"a/\1"]:
            with self.subTest(rule=bad):
                with self.assertRaises(RuleError):
                    parse_rule(bad)

    def test_rule_error_message_names_rule(self):
        with self.assertRaises(RuleError) as ctx:
            parse_rule("noslash")
        self.assertIn("noslash", str(ctx.exception))


class TestRuleLists(unittest.TestCase):
    """Test rule list splitting, compilation and ordered application."""

    def test_split_rule_list(self):
        self.assertEqual(split_rule_list(r"a/b,c\,d/e"), ["a/b", "c,d/e"])
        self.assertEqual(split_rule_list(""), [])

    def test_compile_rules_skips_malformed(self):
        """Malformed rules are warned about and skipped, not fatal."""
        with self.assertLogs(level='WARNING') as logs:
            rules = compile_rules(["a/b", "bad", "c/d"])

        self.assertEqual(len(rules), 2)
        self.assertEqual([r.source for r in rules], ["a/b", "c/d"])
        self.assertTrue(any("bad" in message for message in logs.output))

    def test_rules_accumulate_in_order(self):
        """Later rules see the output of earlier ones."""
        rules = compile_rules(["A/B", "B/C"])
        self.assertEqual(apply_rules("A1", rules), "C1")

    def test_sequential_application_matches_combined_list(self):
        """Applying [A->B] then [B->C] equals applying [A->B, B->C] once."""
        first = compile_rules(["A/B"])
        second = compile_rules(["B/C"])
        combined = compile_rules(["A/B", "B/C"])

        for identifier in ["A-gene-1.0", "BA-x", "no-match"]:
            with self.subTest(identifier=identifier):
                self.assertEqual(
                    apply_rules(apply_rules(identifier, first), second),
                    apply_rules(identifier, combined)
                )

    def test_no_rules(self):
        self.assertEqual(apply_rules("maker-Ctg1-snap-gene-0.1", []), "maker-Ctg1-snap-gene-0.1")


if __name__ == '__main__':
    unittest.main()
