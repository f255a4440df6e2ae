from types import SimpleNamespace

import pytest

from uiapi.lang import header_lang_override, is_lang_allowed, label_for, normalize_langs, resolve_label, supports_lang
from uiapi.relations import TOMANY, TOONE, candidate_names, relation_table, resolve_relation
from uiapi.util import camel_case, headline

from conftest import Country, Entry, EntryType, Person, db


class Sibling(db.Model):
    """relation names chosen so the exact match competes with the derived candidates"""

    __tablename__ = "siblings"
    id = db.Column(db.Integer, primary_key=True)
    parent_id = db.Column(db.Integer, db.ForeignKey("siblings.id"))
    other_id = db.Column(db.Integer, db.ForeignKey("siblings.id"))
    parent_id_rel = db.relationship("Sibling", foreign_keys=[parent_id], remote_side=[id])
    parentId = db.relationship("Sibling", foreign_keys=[other_id], remote_side=[id])


def test_relation_table() -> None:
    relations = relation_table(Person)
    assert list(relations) == ["country"]
    assert relations["country"].related is Country
    assert relations["country"].cardinality == TOONE
    assert relation_table(Country)["people"].cardinality == TOMANY
    assert relation_table(object) == {}
    assert Country._s_type == "Country"
    assert Person._s_pk_names == ["id"]


def test_candidate_names() -> None:
    assert candidate_names("country_id") == ["country_id", "countryId", "country"]
    assert candidate_names("entry_type_id") == ["entry_type_id", "entryTypeId", "entryType", "entry_type"]
    assert candidate_names("entryType") == ["entryType"]
    assert candidate_names("_id") == ["_id", "id"]


def test_resolve_relation() -> None:
    assert resolve_relation(Person, "country").name == "country"
    assert resolve_relation(Person, "country_id").name == "country"
    assert resolve_relation(Entry, "entry_type").name == "entryType"
    assert resolve_relation(Entry, "entry_type_id").related is EntryType
    assert resolve_relation(Person, "first_name_eng") is None
    assert resolve_relation(Person, "") is None


def test_resolve_relation_exact_match_wins() -> None:
    # "parent_id" would camelCase to "parentId", which is a relation as well
    assert resolve_relation(Sibling, "parent_id_rel").name == "parent_id_rel"
    assert resolve_relation(Sibling, "parentId").name == "parentId"
    assert resolve_relation(Sibling, "parent_id").name == "parentId"


def test_camel_case_and_headline() -> None:
    assert camel_case("entry_type") == "entryType"
    assert camel_case("entry-type id") == "entryTypeId"
    assert camel_case("country") == "country"
    assert headline("date_of_birth") == "Date Of Birth"


def test_normalize_langs() -> None:
    assert normalize_langs(None) is None
    assert normalize_langs("en") is None
    assert normalize_langs([" EN", "dv", "en", ""]) == ("en", "dv")
    assert normalize_langs([]) == ()


def test_supports_lang() -> None:
    assert supports_lang(None, "fr")
    assert supports_lang(("en", "dv"), " DV ")
    assert not supports_lang(("en",), "dv")
    assert not supports_lang((), "en")


def test_is_lang_allowed_requires_allow_list() -> None:
    assert is_lang_allowed(("en", "dv"), "en")
    assert not is_lang_allowed(("en", "dv"), "fr")
    assert not is_lang_allowed(None, "en")
    assert not is_lang_allowed((), "en")


@pytest.mark.parametrize(
    "label, lang, kwargs, expected",
    [
        ({"en": "Name", "dv": "ނަން"}, "dv", {}, "ނަން"),
        ({"en": "Name", "dv": "ނަން"}, "fr", {}, "Name"),
        ({"dv": "ނަން"}, "fr", {"default": "Fallback"}, "Fallback"),
        ({"dv": "ނަން"}, "fr", {"default": "Fallback", "first_entry": True}, "ނަން"),
        ("Plain", "dv", {}, "Plain"),
        ("", "dv", {"default": "Derived"}, "Derived"),
        (None, "en", {}, None),
    ],
)
def test_resolve_label(label, lang, kwargs, expected) -> None:
    assert resolve_label(label, lang, **kwargs) == expected


def test_label_for_derives_headline() -> None:
    schema = Person._s_schema
    assert label_for(schema.get("first_name_eng"), "first_name_eng", "dv") == "ފުރަތަމަ ނަން"
    assert label_for(schema.get("date_of_birth"), "date_of_birth", "en") == "Date Of Birth"
    assert label_for(None, "status", "en") == "Status"


@pytest.mark.parametrize(
    "langs, lang, expected",
    [
        (None, "en", None),
        (("en",), "en", None),
        (("en", "dv"), "en", "dv"),
        (("dv", "en"), "dv", "en"),
        (("en", "ar", "dv"), "ar", "en"),
        (("dv", "ar"), "ar", "dv"),
        (("ar", "fr"), "ar", "fr"),
        (("en", "dv"), "fr", "en"),
        (("dv",), "en", "dv"),
        (("ar", "fr"), "de", "ar"),
    ],
)
def test_header_lang_override(langs, lang, expected) -> None:
    assert header_lang_override(SimpleNamespace(lang=langs), lang) == expected
