"""
Lookup of the exposed models by the name used in the url
"""
from typing import Dict, Optional
import uiapi
from .errors import UnknownEntity


class EntityRegistry:
    """
    Maps lowercase model names to exposed model classes, lookups are case insensitive
    """

    def __init__(self) -> None:
        self._models: Dict[str, type] = {}

    def register(self, model_cls, name: Optional[str] = None) -> str:
        """
        :param model_cls: model class, it should provide `api_schema`
        :param name: url name, defaults to the class name
        :return: the registered (lowercase) name
        """
        key = (name or model_cls.__name__).lower()
        if key in self._models and self._models[key] is not model_cls:
            uiapi.log.warning(f"Replacing exposed model '{key}': {self._models[key]} => {model_cls}")
        self._models[key] = model_cls
        return key

    def lookup(self, name) -> Optional[type]:
        if not name:
            return None
        return self._models.get(str(name).lower())

    def name_for(self, model_cls) -> Optional[str]:
        """
        :return: the name model_cls is exposed under, None if it isn't exposed
        """
        for name, exposed in self._models.items():
            if exposed is model_cls:
                return name
        return None

    def resolve(self, name) -> type:
        """
        :return: the model class, UnknownEntity is raised if it isn't exposed or doesn't declare a schema
        """
        model_cls = self.lookup(name)
        if model_cls is None or not callable(getattr(model_cls, "api_schema", None)):
            raise UnknownEntity(f"Model '{name}' not found or missing schema")
        return model_cls

    @property
    def names(self) -> list:
        return sorted(self._models)

    def __contains__(self, name) -> bool:
        return self.lookup(name) is not None

    def __len__(self) -> int:
        return len(self._models)
