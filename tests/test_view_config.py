import pytest

from uiapi.errors import GenericError, MissingParameter, ViewConfigError
from uiapi.view_config import ComponentBlock, JsonDocumentStore, resolve_component


@pytest.fixture
def store(config_dirs) -> JsonDocumentStore:
    view_dir, _ = config_dirs
    return JsonDocumentStore(str(view_dir))


def test_store_load(store: JsonDocumentStore) -> None:
    assert list(store.load("person")) == ["listView", "detailView", "paged", "noLang", "noColumns"]
    assert store.load("nothing") == {}
    assert store.load("../person") == {}
    assert store.load(None) == {}


def test_store_invalid_documents(tmp_path) -> None:
    (tmp_path / "broken.json").write_text("{", encoding="utf-8")
    (tmp_path / "listing.json").write_text("[1, 2]", encoding="utf-8")
    store = JsonDocumentStore(str(tmp_path))
    with pytest.raises(GenericError) as exc_info:
        store.load("broken")
    assert exc_info.value.status_code == 500
    assert store.load("listing") == {}


def test_component_block() -> None:
    block = ComponentBlock.from_dict(
        "listView",
        {
            "columns": "id, name",
            "lang": ["EN", "dv"],
            "filters": ["gender"],
            "columnCustomizations": {"name": {"title": "Name"}},
            "per_page": 10,
        },
    )
    assert block.columns == ("id", "name")
    assert block.columns_param == "id,name"
    assert block.lang == ("en", "dv")
    assert block.filters == ("gender",)
    assert block.per_page == 10
    assert block.allows_lang("EN")
    assert not block.allows_lang("fr")


def test_component_block_defaults() -> None:
    block = ComponentBlock.from_dict("empty", None)
    assert block.columns == ()
    assert block.filters is None
    assert block.column_customizations == {}
    assert not block.allows_lang("en")
    assert ComponentBlock.from_dict("x", {"per_page": 0}).per_page is None
    assert ComponentBlock.from_dict("x", {"per_page": True}).per_page is None


def test_resolve_component(store: JsonDocumentStore) -> None:
    block, columns = resolve_component(store, "Person", "listView")
    assert block.key == "listView"
    assert columns == "id,first_name_eng,first_name_div,gender,country_id.name_eng"

    block, columns = resolve_component(store, "person", " paged ", "id")
    assert block.key == "paged"
    assert block.per_page == 5
    assert columns == "id"


@pytest.mark.parametrize(
    "model, component, columns, error, message",
    [
        ("person", None, None, MissingParameter, "component parameter is required"),
        ("person", "  ", None, MissingParameter, "component parameter is required"),
        ("tag", "listView", None, ViewConfigError, "view config file missing for model"),
        ("person", "gridView", None, ViewConfigError, "component key not found in view config"),
        ("person", "noColumns", None, ViewConfigError, "columns not defined in view config for component"),
    ],
)
def test_resolve_component_errors(store: JsonDocumentStore, model, component, columns, error, message: str) -> None:
    with pytest.raises(error) as exc_info:
        resolve_component(store, model, component, columns)
    assert exc_info.value.message == message
    assert exc_info.value.status_code == 422


def test_component_without_columns_accepts_requested_columns(store: JsonDocumentStore) -> None:
    block, columns = resolve_component(store, "person", "noColumns", "id,gender")
    assert columns == "id,gender"
    assert block.allows_lang("en")
