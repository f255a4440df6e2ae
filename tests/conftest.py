import datetime
import json

import pytest
from flask import Flask
from flask_sqlalchemy import SQLAlchemy

from uiapi import UiApiBase, UiApiAPI

db = SQLAlchemy()


class Country(UiApiBase, db.Model):
    """
    description: Country
    """

    __tablename__ = "countries"
    id = db.Column(db.Integer, primary_key=True)
    name_eng = db.Column(db.String(255), default="")
    name_div = db.Column(db.String(255), default="")
    code = db.Column(db.String(3), default="")
    people = db.relationship("Person", back_populates="country")

    @classmethod
    def api_schema(cls):
        return {
            "columns": {
                "id": {"hidden": True, "type": "number", "sortable": True},
                "name_eng": {
                    "label": {"en": "Name", "dv": "ނަން"},
                    "relationLabel": {"en": "Country", "dv": "ގައުމު"},
                    "type": "string",
                    "lang": ["en"],
                    "sortable": True,
                },
                "name_div": {"label": {"en": "Name", "dv": "ނަން"}, "type": "string", "lang": ["dv"]},
                "code": {"hidden": True, "type": "string"},
            },
            "searchable": ["name_eng"],
        }


class Person(UiApiBase, db.Model):
    """
    description: Person
    """

    __tablename__ = "people"
    id = db.Column(db.Integer, primary_key=True)
    first_name_eng = db.Column(db.String(255), default="")
    first_name_div = db.Column(db.String(255), default="")
    gender = db.Column(db.String(1))
    status = db.Column(db.String(32))
    date_of_birth = db.Column(db.Date)
    country_id = db.Column(db.Integer, db.ForeignKey("countries.id"))
    country = db.relationship("Country", back_populates="people")

    @classmethod
    def api_schema(cls):
        return {
            "columns": {
                "id": {"hidden": True, "type": "number", "lang": ["en", "dv"], "sortable": True},
                "first_name_eng": {
                    "label": {"en": "First Name", "dv": "ފުރަތަމަ ނަން"},
                    "type": "string",
                    "lang": ["en"],
                    "sortable": True,
                    "validationRule": "required|string|max:20",
                },
                "first_name_div": {
                    "label": {"en": "First Name", "dv": "ފުރަތަމަ ނަން"},
                    "type": "string",
                    "lang": ["dv"],
                    "validationRule": "nullable|string",
                },
                "gender": {
                    "label": {"en": "Gender", "dv": "ޖިންސު"},
                    "type": "string",
                    "validationRule": "nullable|in:M,F",
                    "filterable": {
                        "type": "select",
                        "mode": "self",
                        "items": [{"title": "Male", "value": "M", "order": 1}, {"title": "Female", "value": "F"}],
                        "itemTitle": "title",
                        "itemValue": "value",
                    },
                },
                "status": {"type": "string", "filterable": {"type": "search", "label": {"en": "Status"}}},
                "date_of_birth": {"type": "date", "sortable": True, "validationRule": "nullable|date"},
                "country_id": {
                    "label": {"en": "Country", "dv": "ގައުމު"},
                    "type": "number",
                    "validationRule": "nullable|integer",
                    "filterable": {"type": "select", "mode": "relation", "relationship": "country", "itemTitle": "name_eng"},
                },
            },
            "searchable": ["first_name_eng", "first_name_div"],
        }


class EntryType(UiApiBase, db.Model):
    __tablename__ = "entry_types"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), default="")
    entries = db.relationship("Entry", back_populates="entryType")

    @classmethod
    def api_schema(cls):
        return {"columns": {"id": {"hidden": True, "type": "number"}, "name": {"type": "string"}}, "searchable": ["name"]}


class Entry(UiApiBase, db.Model):
    __tablename__ = "entries"
    id = db.Column(db.Integer, primary_key=True)
    ref_num = db.Column(db.String(64), default="")
    entry_type_id = db.Column(db.Integer, db.ForeignKey("entry_types.id"))
    entryType = db.relationship("EntryType", back_populates="entries")

    @classmethod
    def api_schema(cls):
        return {
            "columns": {
                "id": {"hidden": True, "type": "number"},
                "ref_num": {"type": "string", "sortable": True},
                "entry_type_id": {"type": "number"},
            },
            "searchable": ["ref_num"],
        }


class Tag(UiApiBase, db.Model):
    """exposed without a schema"""

    __tablename__ = "tags"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(32))


STATUSES = ("active", "inactive", "pending")
COUNTRIES = (("Maldives", "ދިވެހިރާއްޖެ", "MDV"), ("India", "އިންޑިއާ", "IND"), ("Sri Lanka", "ސްރީލަންކާ", "LKA"))

VIEW_CONFIGS = {
    "person": {
        "listView": {
            "columns": ["id", "first_name_eng", "first_name_div", "gender", "country_id.name_eng"],
            "lang": ["en", "dv"],
            "filters": ["gender", "country_id"],
            "columnCustomizations": {"country_id.name_eng": {"title": {"en": "Nation"}, "sortable": True, "align": "left"}},
        },
        "detailView": {"columns": ["id", "first_name_eng", "status"], "lang": ["en"]},
        "paged": {"columns": "id,first_name_eng", "lang": ["en"], "per_page": 5},
        "noLang": {"columns": ["id"]},
        "noColumns": {"lang": ["en"]},
    },
    "country": {"listView": {"columns": ["id", "name_eng", "name_div"], "lang": ["en", "dv"]}},
    "entry": {"listView": {"columns": ["id", "ref_num", "entry_type_id.name"], "lang": ["en"]}},
}

LAYOUT_CONFIGS = {
    "table": {
        "table": {
            "headers": "on",
            "filters": "on",
            "pagination": "on",
            "datalink": "off",
            "toolbar": {"search": "on", "export": ["csv"]},
        },
        "footer": {"pagination": "on", "note": "total"},
        "ignored": "value",
    },
    "links": {"links": {"datalink": "on"}},
}


def write_documents(directory, documents):
    directory.mkdir()
    for key, document in documents.items():
        (directory / f"{key}.json").write_text(json.dumps(document), encoding="utf-8")
    return directory


def populate():
    countries = [Country(name_eng=eng, name_div=div, code=code) for eng, div, code in COUNTRIES]
    db.session.add_all(countries)
    for i in range(25):
        db.session.add(
            Person(
                first_name_eng=f"person{i:02}",
                first_name_div=f"dv{i:02}",
                gender="MF"[i % 2],
                status=STATUSES[i % 3],
                date_of_birth=datetime.date(1990, 1, 1) + datetime.timedelta(days=i),
                country=countries[i % 3],
            )
        )
    complaint = EntryType(name="Complaint")
    db.session.add(complaint)
    for i in range(3):
        db.session.add(Entry(ref_num=f"REF-{i}", entryType=complaint))
    db.session.add(Entry(ref_num="REF-X"))
    db.session.commit()


@pytest.fixture
def config_dirs(tmp_path):
    view_dir = write_documents(tmp_path / "viewConfigs", VIEW_CONFIGS)
    layout_dir = write_documents(tmp_path / "componentConfigs", LAYOUT_CONFIGS)
    return view_dir, layout_dir


@pytest.fixture
def app_config():
    """app.config entries of the test app, override to change the response shape"""
    return {}


@pytest.fixture
def app(config_dirs, app_config):
    view_dir, layout_dir = config_dirs
    app = Flask("uiapi_test")
    app.config.update(SQLALCHEMY_DATABASE_URI="sqlite://", TESTING=True)
    app.config.update(app_config)
    db.init_app(app)

    with app.app_context():
        db.create_all()
        api = UiApiAPI(
            app,
            host="localhost",
            port=None,
            prefix="/api",
            VIEW_CONFIG_DIR=str(view_dir),
            COMPONENT_CONFIG_DIR=str(layout_dir),
        )
        api.expose(Country, Person, EntryType, Entry, Tag)
        app.extensions["uiapi_test_api"] = api
        populate()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture
def api(app):
    return app.extensions["uiapi_test_api"]


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    with app.test_request_context("/api/person"):
        yield app
