"""
Response assembly for the read endpoints

A list request goes through these steps:

    resolve the model => resolve the view config component => parse the query arguments
    => language gate => build and paginate the query => shape the records
    => build the metadata => emit

Client input errors raise a ValidationError subclass (422),
an unsupported language returns a 200 response without data.
"""
from dataclasses import dataclass
from typing import List, Optional
import uiapi
from .config import ResponseOptions, get_config, get_config_dir, get_int_config
from .errors import ValidationError
from .metadata import build_headers, build_filters, build_datalink, build_component_settings, pagination_meta
from .query import create_query, apply_filters, apply_search, apply_sorts, paginate
from .records import format_record
from .tokens import parse_columns, parse_filters, parse_sorts, parse_with, filter_tokens_by_lang
from .util import unique
from .view_config import ComponentBlock, JsonDocumentStore, resolve_component


@dataclass(frozen=True)
class ShapeContext:
    """
    Everything needed to turn model instances into records
    """

    model_cls: type
    schema: object
    tokens: List[str]
    relations: List[str]
    lang: str
    block: Optional[ComponentBlock] = None

    @property
    def effective_tokens(self) -> List[str]:
        """the tokens visible in the requested language"""
        return filter_tokens_by_lang(self.model_cls, self.schema, self.tokens, self.lang)


class ResponseAssembler:
    """
    :param registry: EntityRegistry of the exposed models
    :param response_options: ResponseOptions, read from the app config if not given
    :param view_store: store of the view configs
    :param layout_store: store of the component (layout) configs
    """

    def __init__(self, registry, response_options: ResponseOptions = None, view_store=None, layout_store=None) -> None:
        self.registry = registry
        self.response_options = response_options if response_options is not None else ResponseOptions.from_config()
        self.view_store = view_store if view_store is not None else JsonDocumentStore(get_config_dir("VIEW_CONFIG_DIR"))
        self.layout_store = layout_store if layout_store is not None else JsonDocumentStore(get_config_dir("COMPONENT_CONFIG_DIR"))

    @staticmethod
    def request_lang(params) -> str:
        return str(params.lang or get_config("DEFAULT_LANG")).strip().lower()

    @staticmethod
    def unsupported_lang(lang: str) -> dict:
        uiapi.log.info(f"Language '{lang}' not supported by view config")
        return {"message": f"Language '{lang}' not supported by view config", "data": []}

    def resolve_entity(self, model_name):
        model_cls = self.registry.resolve(model_name)
        return model_cls, model_cls._s_schema

    def shape_context(self, model_cls, schema, params, block: Optional[ComponentBlock], columns_param) -> ShapeContext:
        """
        Parse the column tokens and the relations to eager load
        """
        tokens, column_relations = parse_columns(model_cls, schema, columns_param)
        relations = unique(parse_with(model_cls, params.with_relations) + column_relations)
        return ShapeContext(model_cls, schema, tokens or schema.column_names, relations, self.request_lang(params), block)

    def shape(self, instance, context: ShapeContext, tokens: List[str] = None) -> dict:
        tokens = tokens if tokens is not None else context.effective_tokens
        record = instance.to_api_record(tokens)
        return format_record(record, tokens, nested=self.response_options.nest_relations_in_records)

    def single_record(self, instance, context: ShapeContext, include_meta=True) -> dict:
        """
        :return: {"data": record, "meta": {"columns": schema declaration}}
        """
        meta = {}
        if include_meta:
            meta["columns"] = context.schema.raw_columns
        return {"data": self.shape(instance, context), "meta": meta}

    def index(self, model_name: str, params) -> dict:
        """
        GET /api/<model>
        """
        model_cls, schema = self.resolve_entity(model_name)
        block, columns_param = resolve_component(self.view_store, model_name, params.component, params.columns)
        context = self.shape_context(model_cls, schema, params, block, columns_param)
        filters = parse_filters(params.filter, schema)
        sorts = parse_sorts(params.sort, schema, context.tokens)

        if not block.allows_lang(context.lang):
            return self.unsupported_lang(context.lang)

        query = create_query(model_cls, context.relations)
        query = apply_filters(query, model_cls, filters)
        query = apply_search(query, model_cls, params.search, schema.searchable)
        query = apply_sorts(query, model_cls, sorts)

        per_page = params.per_page
        if per_page is None:
            per_page = block.per_page or get_int_config("DEFAULT_PER_PAGE", 25)
        page = paginate(query, params.page, per_page)

        tokens = context.effective_tokens
        data = [self.shape(instance, context, tokens) for instance in page.items]

        lang = context.lang
        builders = {
            "headers": lambda: build_headers(
                model_cls,
                schema,
                context.tokens,
                lang,
                block.column_customizations,
                self.response_options.include_hidden_columns_in_headers,
            ),
            "filters": lambda: build_filters(self.registry, model_cls, schema, lang, block.filters),
            "pagination": lambda: pagination_meta(page),
            "datalink": lambda: build_datalink(model_name, block.key, tokens, lang, page.per_page),
        }

        result = {"data": data}
        if self.response_options.include_top_level_headers:
            result["headers"] = builders["headers"]()
        if self.response_options.include_top_level_filters:
            result["filters"] = build_filters(self.registry, model_cls, schema, lang, block.filters, context.tokens)
        if self.response_options.include_top_level_pagination:
            result["pagination"] = builders["pagination"]()
        result["component"] = block.key
        settings_key = params.component_settings or get_config("DEFAULT_COMPONENT_SETTINGS")
        result["componentSettings"] = build_component_settings(self.layout_store, settings_key, builders)
        return result

    def show(self, model_name: str, item_id, params) -> dict:
        """
        GET /api/<model>/<id>
        """
        model_cls, schema = self.resolve_entity(model_name)
        block, columns_param = resolve_component(self.view_store, model_name, params.component, params.columns)
        context = self.shape_context(model_cls, schema, params, block, columns_param)
        if not block.allows_lang(context.lang):
            return self.unsupported_lang(context.lang)

        instance = model_cls.get_instance(item_id, create_query(model_cls, context.relations))
        return self.single_record(instance, context, params.include_meta)

    def options(self, model_name: str, field: str, params) -> dict:
        """
        GET /api/<model>/options/<field>

        :return: {"data": [{itemTitle: title, itemValue: value}, ..]}, distinct values ordered by title
        """
        model_cls, schema = self.resolve_entity(model_name)
        if field not in schema:
            raise ValidationError(f"Field '{field}' is not defined in schema")
        item_title = params.args.get("itemTitle") or field
        item_value = params.args.get("itemValue") or field
        columns = model_cls._s_column_attrs
        for name in (item_title, item_value):
            if name not in schema or name not in columns:
                raise ValidationError(f"Field '{name}' is not defined in schema")

        limit = params.limit
        if limit is None:
            limit = get_int_config("DEFAULT_OPTIONS_LIMIT", 50)
        limit = min(max(limit, 1), get_int_config("MAX_PAGE_LIMIT", 1000))
        descending = str(params.args.get("sort") or "").lower() == "desc"

        value_attr = getattr(model_cls, item_value)
        title_attr = getattr(model_cls, item_title)
        order = title_attr.desc() if descending else title_attr.asc()
        session = uiapi.DB.session
        if item_title == item_value:
            rows = session.query(value_attr).distinct().order_by(order).limit(limit).all()
            data = [{item_value: row[0]} for row in rows]
        else:
            rows = session.query(value_attr, title_attr).distinct().order_by(order).limit(limit).all()
            data = [{item_title: row[1], item_value: row[0]} for row in rows]
        return {"data": data}
