from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Union

import msgspec

from ._inflection import pluralize

__all__ = [
    'Scalar',
    'HasOne',
    'HasMany',
    'AttributeSpec',
    'RelationshipSpec',
    'AttributeFilter',
    'ModelSchema',
    'SchemaRegistry',
]

# either a partial attribute pattern or a predicate over the attributes dict
AttributeFilter = Union[Mapping[str, Any], Callable[[Mapping[str, Any]], bool]]


class Scalar(msgspec.Struct, frozen=True):
    """
    Plain attribute, copied from the resource 'attributes' unchanged.
    """


class HasOne(msgspec.Struct, frozen=True):
    """
    Single-valued relationship. Resolves to a model or None.
    """
    type: Optional[str] = None
    filter: Optional[AttributeFilter] = None


class HasMany(msgspec.Struct, frozen=True):
    """
    Collection-valued relationship. Resolves to a (possibly empty) list of models.
    """
    type: Optional[str] = None
    filter: Optional[AttributeFilter] = None


RelationshipSpec = Union[HasOne, HasMany]
AttributeSpec = Union[Scalar, HasOne, HasMany]


def _as_spec(value: Any) -> AttributeSpec:
    # anything that is not an explicit spec is a plain attribute marker ('', None, str, ...)
    if isinstance(value, (Scalar, HasOne, HasMany)):
        return value
    return Scalar()


class ModelSchema(msgspec.Struct):
    name: str
    attributes: dict[str, AttributeSpec] = msgspec.field(default_factory=dict)
    # custom deserializer replaces generic processing entirely: deserializer(item) -> model
    deserializer: Optional[Callable[[Any], Any]] = None
    collection_path: Optional[str] = None

    def get(self, field_name: str) -> Optional[AttributeSpec]:
        return self.attributes.get(field_name)

    @property
    def path(self) -> str:
        """
        URL path segment for this model's collection endpoint.
        """
        if self.collection_path is not None:
            return self.collection_path
        return pluralize(self.name)


class SchemaRegistry:
    """
    Registry of model schemas keyed by singular model name.
    """
    def __init__(self):
        self._models: dict[str, ModelSchema] = {}

    def __repr__(self):
        return f'SchemaRegistry(models={sorted(self._models)})'

    def __contains__(self, name: str) -> bool:
        return name in self._models

    def define(
            self,
            name: str,
            attributes: Optional[Mapping[str, Any]] = None,
            *,
            deserializer: Optional[Callable[[Any], Any]] = None,
            collection_path: Optional[str] = None,
    ) -> ModelSchema:
        """
        Register a model, replacing any previous definition with the same name.

        :param name: Singular model name, e.g. "person"
        :param attributes: Mapping of field name to Scalar/HasOne/HasMany (other values mean Scalar)
        :param deserializer: Optional callable taking the raw resource object and returning the model
        :param collection_path: Optional URL path segment, default is the plural of name
        :return: Registered schema
        """
        attributes = attributes or {}
        schema = ModelSchema(
            name=name,
            attributes={k: _as_spec(v) for k, v in attributes.items()},
            deserializer=deserializer,
            collection_path=collection_path,
        )
        self._models[name] = schema
        return schema

    def lookup(self, name: str) -> Optional[ModelSchema]:
        return self._models.get(name)

    def names(self) -> list[str]:
        return list(self._models)
