"""
Tests for the static topic data.
"""

import pytest

from app.core.agents.analysis.taxonomy import (
    GENERIC_TEMPLATE,
    default_topic,
    load_taxonomy,
    subject_family,
)


@pytest.mark.parametrize("subject,family", [
    ("Mathematics", "mathematics"),
    ("Math", "mathematics"),
    ("Physics", "physics"),
    ("Chemistry", "chemistry"),
    ("Biology", None),
    ("", None),
])
def test_subject_family(subject, family):
    assert subject_family(subject) == family


def test_default_topic():
    assert default_topic("Math") == "General Mathematics"
    assert default_topic("Physics") == "General Physics"
    assert default_topic("Biology") == "General Biology"


class TestTaxonomy:

    def test_catalog_lists_rule_labels_then_syllabus(self):
        catalog = load_taxonomy().catalog_for("Physics")

        assert catalog[0] == "Mechanics"
        assert "General Physics" in catalog
        assert "Projectile Motion" in catalog
        assert catalog.index("General Physics") < catalog.index("Projectile Motion")
        assert len(catalog) == len(set(catalog))

    def test_catalog_for_unknown_subject(self):
        assert load_taxonomy().catalog_for("Biology") == ["General Biology"]

    def test_template_lookup(self):
        taxonomy = load_taxonomy()
        assert taxonomy.has_template("Calculus")
        assert not taxonomy.has_template("Optics")
        assert taxonomy.template_for("Optics") is GENERIC_TEMPLATE

    def test_unit_for_topic(self):
        taxonomy = load_taxonomy()
        assert taxonomy.unit_for_topic("Hund's Rule", "Chemistry") == "ATOMIC STRUCTURE"
        assert taxonomy.unit_for_topic("Hund's Rule", "Physics") is None
        assert taxonomy.unit_for_topic("Organic Chemistry", "Chemistry") is None

    def test_shared_instance(self):
        assert load_taxonomy() is load_taxonomy()
