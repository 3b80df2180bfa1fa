"""
Tests for Dataverse field extraction.

Covers:
- classification of raw fields into primitive / multiple / compound / controlled vocabulary
- first-match-wins lookups through FieldIndex
- shape mismatches degrading to None / [] instead of raising
- the raw-list helpers with call-site defaults
"""

import sys
import unittest

from dcatap_exporter import fields as f


def _primitive(name, value, multiple=False):
    return {"typeName": name, "typeClass": "primitive", "multiple": multiple, "value": value}


def _compound(name, entries):
    return {"typeName": name, "typeClass": "compound", "multiple": True, "value": entries}


def _cvoc(name, value, multiple=True):
    return {"typeName": name, "typeClass": "controlledVocabulary", "multiple": multiple, "value": value}


CITATION_FIELDS = [
    _primitive("title", "Cars"),
    _primitive("alternativeTitle", ["Autos", "Voitures"], multiple=True),
    _compound("author", [
        {"authorName": {"value": "Doe, Jane"}, "authorAffiliation": {"value": "KU Leuven"}},
        {"authorName": {"value": "Roe, Richard"}},
    ]),
    _cvoc("language", ["English", "Dutch"]),
    _cvoc("journalArticleType", "dataset", multiple=False),
]


class TestParseField(unittest.TestCase):
    """Test classification of raw fields"""

    def test_single_primitive(self):
        parsed = f.parse_field(_primitive("title", "Cars"))
        self.assertEqual(parsed, f.PrimitiveField("title", "Cars"))

    def test_multiple_primitive(self):
        parsed = f.parse_field(_primitive("alternativeTitle", ["A", "B"], multiple=True))
        self.assertIsInstance(parsed, f.MultiplePrimitiveField)
        self.assertEqual(parsed.values, ["A", "B"])

    def test_compound_keeps_only_objects(self):
        parsed = f.parse_field(_compound("keyword", [{"keywordValue": {"value": "x"}}, "junk", None]))
        self.assertIsInstance(parsed, f.CompoundField)
        self.assertEqual(parsed.entries, [{"keywordValue": {"value": "x"}}])

    def test_controlled_vocabulary(self):
        multi = f.parse_field(_cvoc("subject", ["Engineering", "Other"]))
        single = f.parse_field(_cvoc("journalArticleType", "dataset", multiple=False))
        self.assertEqual(multi.values, ["Engineering", "Other"])
        self.assertTrue(multi.multiple)
        self.assertEqual(single.values, ["dataset"])
        self.assertFalse(single.multiple)

    def test_non_string_values_become_empty(self):
        parsed = f.parse_field(_primitive("alternativeTitle", ["A", 3, None], multiple=True))
        self.assertEqual(parsed.values, ["A", "", ""])

    def test_missing_value_kept_apart_from_empty(self):
        missing = f.parse_field({"typeName": "subtitle", "typeClass": "primitive", "multiple": False})
        self.assertEqual(missing, f.PrimitiveField("subtitle", None))
        self.assertEqual(f.parse_field(_primitive("subtitle", 7)), f.PrimitiveField("subtitle", ""))

    def test_unusable_fields(self):
        self.assertIsNone(f.parse_field("title"))
        self.assertIsNone(f.parse_field({"typeClass": "primitive", "value": "x"}))
        self.assertIsNone(f.parse_field({"typeName": "x", "typeClass": "mystery", "value": "x"}))


class TestFieldIndex(unittest.TestCase):
    """Test typed lookups over the indexed citation fields"""

    def setUp(self):
        self.index = f.FieldIndex.from_fields(CITATION_FIELDS)

    def test_primitive_value(self):
        self.assertEqual(self.index.primitive_value("title"), "Cars")

    def test_primitive_value_rejects_multiple(self):
        self.assertIsNone(self.index.primitive_value("alternativeTitle"))

    def test_primitive_value_absent(self):
        self.assertIsNone(self.index.primitive_value("subtitle"))

    def test_primitive_value_list(self):
        self.assertEqual(self.index.primitive_value_list("title"), ["Cars"])
        self.assertEqual(self.index.primitive_value_list("alternativeTitle"), ["Autos", "Voitures"])
        self.assertEqual(self.index.primitive_value_list("author"), [])
        self.assertEqual(self.index.primitive_value_list("subtitle"), [])

    def test_multiple_value_list(self):
        self.assertEqual(self.index.multiple_value_list("language"), ["English", "Dutch"])
        self.assertEqual(self.index.multiple_value_list("alternativeTitle"), ["Autos", "Voitures"])
        # single-valued fields are not returned by this lookup
        self.assertEqual(self.index.multiple_value_list("title"), [])
        self.assertEqual(self.index.multiple_value_list("journalArticleType"), [])

    def test_compound_values(self):
        authors = self.index.compound_values("author")
        self.assertEqual(len(authors), 2)
        self.assertEqual(f.sub_value(authors[0], "authorName"), "Doe, Jane")
        self.assertEqual(self.index.compound_values("title"), [])
        self.assertEqual(self.index.compound_values("keyword"), [])

    def test_first_match_wins(self):
        index = f.FieldIndex.from_fields([
            _primitive("title", "First"),
            _primitive("title", "Second"),
        ])
        self.assertEqual(index.primitive_value("title"), "First")
        self.assertEqual(len(index), 1)

    def test_malformed_input(self):
        self.assertEqual(len(f.FieldIndex.from_fields(None)), 0)
        self.assertEqual(len(f.FieldIndex.from_fields({"title": "Cars"})), 0)
        index = f.FieldIndex.from_fields([None, 42, _primitive("title", "Cars")])
        self.assertIn("title", index)


class TestSubValue(unittest.TestCase):
    """Test nested compound entry lookups"""

    def test_present(self):
        self.assertEqual(f.sub_value({"keywordValue": {"value": "cars"}}, "keywordValue"), "cars")

    def test_missing_value_key(self):
        self.assertEqual(f.sub_value({"keywordValue": {}}, "keywordValue"), "")

    def test_absent(self):
        self.assertIsNone(f.sub_value({"keywordVocabulary": {"value": "LCSH"}}, "keywordValue"))
        self.assertIsNone(f.sub_value("not a dict", "keywordValue"))


class TestRawListHelpers(unittest.TestCase):
    """Test helpers working directly on a raw fields list"""

    def test_primitive_value_default(self):
        self.assertEqual(f.primitive_value(CITATION_FIELDS, "title", "no-title"), "Cars")
        self.assertEqual(f.primitive_value(CITATION_FIELDS, "subtitle", "no-subtitle"), "no-subtitle")
        self.assertEqual(f.primitive_value([], "title", "no-title"), "no-title")

    def test_primitive_value_default_when_value_missing(self):
        fields = [{"typeName": "title", "typeClass": "primitive", "multiple": False}]
        self.assertEqual(f.primitive_value(fields, "title", "no-title"), "no-title")
        self.assertEqual(f.primitive_value_list(fields, "title"), [])
        self.assertEqual(f.primitive_value([_primitive("title", "")], "title", "no-title"), "")

    def test_list_helpers(self):
        self.assertEqual(f.primitive_value_list(CITATION_FIELDS, "title"), ["Cars"])
        self.assertEqual(f.multiple_value_list(CITATION_FIELDS, "language"), ["English", "Dutch"])
        self.assertEqual(len(f.compound_values(CITATION_FIELDS, "author")), 2)

    def test_citation_fields(self):
        metadata = {"datasetVersion": {"metadataBlocks": {"citation": {"fields": CITATION_FIELDS}}}}
        self.assertIs(f.citation_fields(metadata), CITATION_FIELDS)
        self.assertEqual(f.citation_fields({}), [])
        self.assertEqual(f.citation_fields({"datasetVersion": {"metadataBlocks": {}}}), [])
        self.assertEqual(f.citation_fields({"datasetVersion": "draft"}), [])


def run_tests():
    """Run all tests"""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()
    suite.addTests(loader.loadTestsFromTestCase(TestParseField))
    suite.addTests(loader.loadTestsFromTestCase(TestFieldIndex))
    suite.addTests(loader.loadTestsFromTestCase(TestSubValue))
    suite.addTests(loader.loadTestsFromTestCase(TestRawListHelpers))
    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)
    return 0 if result.wasSuccessful() else 1


if __name__ == "__main__":
    sys.exit(run_tests())
