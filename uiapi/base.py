"""
UiApiBase: SQLAlchemy model mixin for models exposed through the generic endpoints

    class Person(UiApiBase, db.Model):
        __tablename__ = "people"
        id = db.Column(db.Integer, primary_key=True)
        name = db.Column(db.String(255))
        country_id = db.Column(db.Integer, db.ForeignKey("countries.id"))
        country = db.relationship("Country", back_populates="people")

        @classmethod
        def api_schema(cls):
            return {"columns": {"id": {...}, "name": {...}}, "searchable": ["name"]}

Most of the methods & properties have the distinguishing `_s_` prefix because
they shouldn't clash with column and relationship names
"""
from __future__ import annotations
import sqlalchemy
from flask_sqlalchemy.model import Model
from sqlalchemy import inspect as sqla_inspect
import uiapi
from .errors import GenericError, NotFoundError
from .relations import resolve_relation
from .schema import get_schema
from .util import classproperty


class UiApiBase(Model):
    """This SQLAlchemy mixin implements record serialization and persistence for the generic api
    The column schema is declared by the `api_schema` classmethod
    """

    allow_client_generated_ids = False  # Indicates whether the client is allowed to set the primary key

    @classproperty
    def _s_type(cls):
        """
        :return: the name used in urls, eg. /api/Country/options/id
        """
        return cls.__name__

    @classproperty
    def _s_schema(cls):
        """
        :return: EntitySchema built from `api_schema`
        """
        return get_schema(cls)

    @classproperty
    def _s_column_attrs(cls) -> dict:
        """
        :return: mapped column attribute name => sqla Column
        """
        mapper = sqla_inspect(cls, raiseerr=False)
        if mapper is None:
            return {}
        return {prop.key: prop.columns[0] for prop in mapper.column_attrs}

    @classproperty
    def _s_pk_names(cls) -> list:
        mapper = sqla_inspect(cls)
        return [mapper.get_property_by_column(column).key for column in mapper.primary_key]

    @classproperty
    def _s_query(cls):
        """
        :return: sqla query object
        """
        return uiapi.DB.session.query(cls)

    @classmethod
    def get_instance(cls, item_id, query=None):
        """
        :param item_id: primary key value as found in the url
        :param query: query to search in, eg. with eager loading options
        :return: instance, NotFoundError is raised if it doesn't exist
        """
        pk_names = cls._s_pk_names
        if len(pk_names) != 1:  # pragma: no cover
            raise GenericError(f"{cls.__name__} doesn't have a single primary key")
        pk_name = pk_names[0]
        pk_column = cls._s_column_attrs[pk_name]
        try:
            python_type = pk_column.type.python_type
            value = python_type(item_id) if python_type in (int, str) else item_id
        except NotImplementedError:  # pragma: no cover
            value = item_id
        except (TypeError, ValueError):
            raise NotFoundError(f'Invalid "{cls.__name__}" ID "{item_id}"')

        if query is None:
            query = cls._s_query
        instance = query.filter(getattr(cls, pk_name) == value).first()
        if instance is None:
            raise NotFoundError(f'Invalid "{cls.__name__}" ID "{item_id}"')
        return instance

    @classmethod
    def _s_post(cls, **attributes) -> UiApiBase:
        """
        Create a new instance with the (validated) attributes
        :return: new `cls` instance
        """
        if not cls.allow_client_generated_ids:
            for attr_name in list(attributes):
                if attr_name in cls._s_pk_names:
                    uiapi.log.warning(f"Client generated IDs are not allowed ('allow_client_generated_ids' not set for {cls})")
                    del attributes[attr_name]

        # pylint: disable=not-callable
        instance = cls(**attributes)
        uiapi.DB.session.add(instance)
        try:
            uiapi.DB.session.commit()
        except sqlalchemy.exc.SQLAlchemyError as exc:
            # Exception may arise when a db constraint has been violated
            uiapi.log.warning(str(exc))
            uiapi.DB.session.rollback()
            raise GenericError(str(exc))
        return instance

    def _s_patch(self, **attributes) -> UiApiBase:
        """
        Update the object attributes
        """
        for attr_name, attr_val in attributes.items():
            if attr_name in self._s_pk_names and not self.allow_client_generated_ids:
                continue
            setattr(self, attr_name, attr_val)
        try:
            uiapi.DB.session.commit()
        except sqlalchemy.exc.SQLAlchemyError as exc:
            uiapi.log.warning(str(exc))
            uiapi.DB.session.rollback()
            raise GenericError(str(exc))
        return self

    def _s_delete(self) -> None:
        """
        Delete the instance from the database
        """
        uiapi.DB.session.delete(self)

    def _s_related_value(self, alias: str, field: str):
        """
        :return: the related field value, a list for to-many relations
        """
        relation = resolve_relation(type(self), alias)
        if relation is None:
            return None
        related = getattr(self, relation.name, None)
        if relation.is_to_one:
            return getattr(related, field, None) if related is not None else None
        return [getattr(item, field, None) for item in related or []]

    def to_api_record(self, tokens=None) -> dict:
        """
        :param tokens: column tokens, all declared columns if None
        :return: flat record, related fields use their "alias.field" token as key
        """
        schema = self._s_schema
        declared = schema.column_names if schema is not None else list(self._s_column_attrs)
        tokens = declared if tokens is None else tokens
        record = {}
        for token in tokens:
            if "." in token:
                alias, field = token.split(".", 1)
                record[token] = self._s_related_value(alias, field)
            elif token in declared:
                record[token] = getattr(self, token, None)
        return record

    def __repr__(self):  # pragma: no cover
        return f"<{self._s_type} {[getattr(self, name, None) for name in self._s_pk_names]}>"
