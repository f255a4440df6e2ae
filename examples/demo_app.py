#!/usr/bin/env python3
"""
  This demo application serves a few schema driven models through the generic uiapi endpoints
  When uiapi is installed, you can run this app:
  $ python3 demo_app.py [Listener-IP]

  This will run the example on http://Listener-Ip:5000

  - An sqlite database is created and populated
  - The view configs are read from ./viewConfigs, the component configs from ./componentConfigs
  - Swagger documentation is generated on /api/docs

  Try:
  /api/person?component=listView&lang=en
  /api/person?component=listView&columns=id,first_name_eng,country.name_eng&sort=-country.name_eng&lang=en
  /api/person/1?component=detailView&lang=en
  /api/Country/options/id?itemTitle=name_eng&itemValue=id
"""
import sys
import datetime
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from uiapi import UiApiBase, UiApiAPI

db = SQLAlchemy()

LABEL_ID = {"dv": "އައިޑީ", "en": "Id"}


class Country(UiApiBase, db.Model):
    """
    description: Countries, used as a relation backed filter by Person
    """

    __tablename__ = "countries"
    id = db.Column(db.Integer, primary_key=True)
    name_eng = db.Column(db.String(255), default="")
    name_div = db.Column(db.String(255), default="")
    nationality_eng = db.Column(db.String(255), default="")
    country_code_alpha3 = db.Column(db.String(3), default="")
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow)
    people = db.relationship("Person", back_populates="country")

    @classmethod
    def api_schema(cls):
        return {
            "columns": {
                "id": {"hidden": True, "label": LABEL_ID, "type": "number", "sortable": True},
                "name_eng": {
                    "label": {"dv": "ނަން", "en": "Name"},
                    "relationLabel": {"dv": "ގައުމު", "en": "Country"},
                    "type": "string",
                    "displayType": "text",
                    "sortable": True,
                    "lang": ["en", "dv"],
                    "validationRule": "required|string|max:255",
                },
                "name_div": {"label": {"dv": "ނަން", "en": "Name"}, "type": "string", "sortable": True, "lang": ["dv"]},
                "nationality_eng": {"label": {"dv": "ޤައުމިއްޔަތު", "en": "Nationality"}, "type": "string", "sortable": True},
                "country_code_alpha3": {
                    "label": {"dv": "ކޯޑު", "en": "Alpha-3 Code"},
                    "type": "string",
                    "sortable": True,
                    "validationRule": "nullable|string|max:3",
                },
                "created_at": {"hidden": True, "type": "datetime"},
            },
            "searchable": ["name_eng", "name_div", "nationality_eng", "country_code_alpha3"],
        }


class Person(UiApiBase, db.Model):
    """
    description: People, with language specific name columns
    """

    __tablename__ = "people"
    id = db.Column(db.Integer, primary_key=True)
    first_name_eng = db.Column(db.String(255), default="")
    last_name_eng = db.Column(db.String(255), default="")
    first_name_div = db.Column(db.String(255), default="")
    last_name_div = db.Column(db.String(255), default="")
    gender = db.Column(db.String(1))
    date_of_birth = db.Column(db.Date)
    is_in_custody = db.Column(db.Boolean, default=False)
    country_id = db.Column(db.Integer, db.ForeignKey("countries.id"))
    country = db.relationship("Country", back_populates="people")

    @classmethod
    def api_schema(cls):
        return {
            "columns": {
                "id": {"hidden": True, "label": LABEL_ID, "type": "number", "lang": ["en", "dv"], "sortable": True},
                "first_name_eng": {
                    "label": {"dv": "ފުރަތަމަ ނަން", "en": "First Name"},
                    "type": "string",
                    "lang": ["en"],
                    "sortable": True,
                    "validationRule": "required|string|max:255",
                },
                "last_name_eng": {
                    "label": {"dv": "ފަހު ނަން", "en": "Last Name"},
                    "type": "string",
                    "lang": ["en"],
                    "sortable": True,
                    "validationRule": "required|string|max:255",
                },
                "first_name_div": {
                    "label": {"dv": "ފުރަތަމަ ނަން", "en": "First Name"},
                    "type": "string",
                    "lang": ["dv"],
                    "sortable": True,
                    "validationRule": "nullable|string|max:255",
                },
                "last_name_div": {
                    "label": {"dv": "ފަހު ނަން", "en": "Last Name"},
                    "type": "string",
                    "lang": ["dv"],
                    "sortable": True,
                    "validationRule": "nullable|string|max:255",
                },
                "gender": {
                    "label": {"dv": "ޖިންސު", "en": "Gender"},
                    "type": "string",
                    "lang": ["en", "dv"],
                    "validationRule": "nullable|in:M,F",
                    "filterable": {
                        "type": "select",
                        "label": {"dv": "ޖިންސު", "en": "Gender"},
                        "mode": "self",
                        "value": "gender",
                        "items": [{"title": "Male", "value": "M"}, {"title": "Female", "value": "F"}],
                        "itemTitle": "title",
                        "itemValue": "value",
                    },
                },
                "date_of_birth": {
                    "label": {"dv": "އުފަން ދުވަސް", "en": "Date of Birth"},
                    "type": "date",
                    "lang": ["en", "dv"],
                    "sortable": True,
                    "validationRule": "nullable|date",
                },
                "is_in_custody": {
                    "label": {"dv": "ހުރީ ހައްޔަރުގަ", "en": "Is in custody"},
                    "type": "boolean",
                    "lang": ["en", "dv"],
                    "validationRule": "nullable|boolean",
                },
                "country_id": {
                    "label": {"dv": "ޤައުމު", "en": "Country"},
                    "type": "number",
                    "lang": ["en", "dv"],
                    "validationRule": "nullable|integer",
                    "filterable": {
                        "type": "select",
                        "label": {"dv": "ޤައުމު", "en": "Country"},
                        "mode": "relation",
                        "relationship": "country",
                        "itemTitle": "name_eng",
                        "itemValue": "id",
                    },
                },
            },
            "searchable": ["first_name_eng", "last_name_eng", "first_name_div", "last_name_div"],
        }


class EntryType(UiApiBase, db.Model):
    """
    description: Entry types
    """

    __tablename__ = "entry_types"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), default="")
    category = db.Column(db.String(255), default="")
    entries = db.relationship("Entry", back_populates="entry_type")

    @classmethod
    def api_schema(cls):
        return {
            "columns": {
                "id": {"hidden": True, "type": "number"},
                "name": {"type": "string", "sortable": True, "validationRule": "required|string|max:255"},
                "category": {"type": "string"},
            },
            "searchable": ["name", "category"],
        }


class Entry(UiApiBase, db.Model):
    """
    description: Entries, the entryType relation is camelCased
    """

    __tablename__ = "entries"
    id = db.Column(db.Integer, primary_key=True)
    entry_type_id = db.Column(db.Integer, db.ForeignKey("entry_types.id"))
    ref_num = db.Column(db.String(64), default="")
    summary = db.Column(db.Text, default="")
    date_entry = db.Column(db.Date)
    entry_type = db.relationship("EntryType", back_populates="entries")

    @classmethod
    def api_schema(cls):
        return {
            "columns": {
                "id": {"hidden": True, "label": LABEL_ID, "type": "number", "sortable": True},
                "entry_type_id": {"label": {"dv": "އެންޓްރީ ޓައިޕް", "en": "Entry Type"}, "type": "number"},
                "ref_num": {"label": {"dv": "ރެފަރެންސް ނަމްބަރ", "en": "Reference Number"}, "type": "string", "sortable": True},
                "summary": {"label": {"dv": "ސަމަރީ", "en": "Summary"}, "type": "string"},
                "date_entry": {"label": {"dv": "އެންޓްރީކުރި ދުވަސް", "en": "Date of Entry"}, "type": "date", "sortable": True},
            },
            "searchable": ["ref_num", "summary"],
        }


# Create the api endpoints
def create_api(app, host="localhost", port=5000, api_prefix="/api"):
    api = UiApiAPI(app, host=host, port=port, prefix=api_prefix)
    api.expose(Country, Person, EntryType, Entry)
    print(f"Created API: http://{host}:{port}{api_prefix}")
    return api


def populate():
    countries = [
        Country(name_eng="Maldives", name_div="ދިވެހިރާއްޖެ", nationality_eng="Maldivian", country_code_alpha3="MDV"),
        Country(name_eng="India", name_div="އިންޑިއާ", nationality_eng="Indian", country_code_alpha3="IND"),
        Country(name_eng="Sri Lanka", name_div="ސްރީލަންކާ", nationality_eng="Sri Lankan", country_code_alpha3="LKA"),
    ]
    db.session.add_all(countries)
    for i in range(60):
        person = Person(
            first_name_eng=f"first{i}",
            last_name_eng=f"last{i}",
            first_name_div=f"ފުރަތަމަ{i}",
            last_name_div=f"ފަހު{i}",
            gender="MF"[i % 2],
            date_of_birth=datetime.date(1980, 1, 1) + datetime.timedelta(days=97 * i),
            country=countries[i % len(countries)],
        )
        db.session.add(person)
    entry_type = EntryType(name="Complaint", category="general")
    db.session.add(entry_type)
    for i in range(10):
        db.session.add(Entry(ref_num=f"REF-{i:04}", summary=f"entry {i}", date_entry=datetime.date.today(), entry_type=entry_type))
    db.session.commit()


def create_app(host="localhost"):
    app = Flask(__name__)
    app.config.update(SQLALCHEMY_DATABASE_URI="sqlite://", DEBUG=False)
    db.init_app(app)

    with app.app_context():
        db.create_all()
        create_api(app, host)
        populate()

    return app


# Address where the api will be hosted, change this if you're not running the app on localhost!
host = sys.argv[1] if sys.argv[1:] else "127.0.0.1"
app = create_app(host=host)

if __name__ == "__main__":
    app.run(host=host)
