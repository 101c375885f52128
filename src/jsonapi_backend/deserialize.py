from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Optional, Union

import msgspec

from ._exceptions import SchemaNotFoundError
from ._inflection import singularize as _singularize
from ._json_schemas.base import ResourceData, ResourceIdentifier
from .cache import DeserializationCache
from .schema import AttributeFilter, HasMany, HasOne, ModelSchema, RelationshipSpec, SchemaRegistry

__all__ = [
    'Deserializer',
    'attributes_match',
    'related_items_for',
    'to_resource',
    'to_resources',
]

logger = logging.getLogger(__name__)

ResourceLike = Union[ResourceData, Mapping[str, Any]]
Linkage = Union[ResourceIdentifier, list[ResourceIdentifier], None]


def to_resource(item: ResourceLike) -> ResourceData:
    if isinstance(item, ResourceData):
        return item
    return msgspec.convert(item, type=ResourceData)


def to_resources(items: Iterable[ResourceLike]) -> list[ResourceData]:
    return [to_resource(i) for i in items]


def _is_match(value: Any, pattern: Any) -> bool:
    # partial structural comparison: every part of pattern must be found in value
    if isinstance(pattern, Mapping):
        if not isinstance(value, Mapping):
            return False
        return all(k in value and _is_match(value[k], v) for k, v in pattern.items())
    if isinstance(pattern, (list, tuple)):
        if not isinstance(value, (list, tuple)):
            return False
        return all(any(_is_match(v, p) for v in value) for p in pattern)
    return value == pattern


def attributes_match(attributes: Mapping[str, Any], attr_filter: AttributeFilter) -> bool:
    """
    Check related item attributes against a relationship filter.

    :param attributes: Attributes of the candidate included resource
    :param attr_filter: Partial attribute pattern, or predicate called with the attributes
    :return: True if the item passes the filter
    """
    if callable(attr_filter):
        return bool(attr_filter(attributes))
    return _is_match(attributes, attr_filter)


def _linkage(item: ResourceData, key: str) -> Linkage:
    if not item.relationships:
        return None
    relationship = item.relationships.get(key)
    if relationship is None:
        return None
    return relationship.data


def _is_related_item(spec: RelationshipSpec, related: ResourceData, identifier: ResourceIdentifier) -> bool:
    if related.id != identifier.id or related.type != identifier.type:
        return False
    if spec.filter is not None:
        return attributes_match(related.attributes, spec.filter)
    return True


def related_items_for(
        spec: RelationshipSpec,
        item: ResourceData,
        included: Iterable[ResourceData],
        key: str,
) -> list[ResourceData]:
    """
    Find the raw included resources referenced by relationship `key` of `item`.

    Identifier order is preserved; for a to-many linkage the matches of each
    identifier are concatenated in turn.

    :return: Matching included resources, empty if the relationship has no data
    """
    linkage = _linkage(item, key)
    if linkage is None:
        return []
    if isinstance(linkage, ResourceIdentifier):
        linkage = [linkage]
    included = list(included)
    return [
        related
        for identifier in linkage
        for related in included
        if _is_related_item(spec, related, identifier)
    ]


class Deserializer:
    """
    Convert JSON:API resource objects into plain model dicts using a schema registry.

    Every top-level call gets its own DeserializationCache unless one is passed in explicitly,
    so a single Deserializer can be shared between unrelated calls.
    """
    def __init__(
            self,
            registry: SchemaRegistry,
            *,
            singularize: Optional[Callable[[str], str]] = None,
            logger_: Optional[logging.Logger] = None,
    ):
        self.registry = registry
        self._singularize = singularize if singularize is not None else _singularize
        self._logger = logger_ if logger_ is not None else logger

    def __repr__(self):
        return f'Deserializer(registry={self.registry!r})'

    def schema_for(self, type_name: str) -> ModelSchema:
        name = self._singularize(type_name)
        schema = self.registry.lookup(name)
        if schema is None:
            raise SchemaNotFoundError(name)
        return schema

    def resource(
            self,
            item: ResourceLike,
            included: Iterable[ResourceLike] = (),
            *,
            use_cache: bool = False,
            clear_cache: bool = True,
            cache: Optional[DeserializationCache] = None,
    ) -> Any:
        """
        Deserialize a single resource object.

        :param item: Resource object (ResourceData or plain mapping)
        :param included: Sideloaded resources used to resolve relationships
        :param use_cache: Return an already deserialized model for (type, id) if present
        :param clear_cache: Clear the cache before returning
        :param cache: Cache to use, default is a new cache for this call
        :return: Model dict (or whatever a custom deserializer returns)
        """
        if cache is None:
            cache = DeserializationCache()
        return self._resource(to_resource(item), to_resources(included), use_cache, clear_cache, cache)

    def collection(
            self,
            items: Iterable[ResourceLike],
            included: Iterable[ResourceLike] = (),
            *,
            use_cache: bool = False,
            clear_cache: bool = True,
            cache: Optional[DeserializationCache] = None,
    ) -> list[Any]:
        """
        Deserialize a sequence of resource objects, preserving order.

        Arguments are as for `resource`; the flags are forwarded to each item unchanged.
        """
        if cache is None:
            cache = DeserializationCache()
        return self._collection(to_resources(items), to_resources(included), use_cache, clear_cache, cache)

    def _collection(
            self,
            items: list[ResourceData],
            included: list[ResourceData],
            use_cache: bool,
            clear_cache: bool,
            cache: DeserializationCache,
    ) -> list[Any]:
        return [self._resource(item, included, use_cache, clear_cache, cache) for item in items]

    def _resource(
            self,
            item: ResourceData,
            included: list[ResourceData],
            use_cache: bool,
            clear_cache: bool,
            cache: DeserializationCache,
    ) -> Any:
        if use_cache:
            cached_model = cache.get(item.type, item.id)
            if cached_model is not None:
                return cached_model

        schema = self.schema_for(item.type)
        if schema.deserializer is not None:
            return schema.deserializer(item)

        model = {'id': item.id, 'type': item.type}

        for attr, value in item.attributes.items():
            if schema.get(attr) is None and attr != 'id':
                self._logger.warning(
                    'Resource response contains attribute "%s", but it is not present on model "%s" '
                    'and therefore not deserialized.', attr, schema.name
                )
                continue
            model[attr] = value

        # must be cached before relationships are resolved, otherwise cycles never terminate
        cache.set(item.type, item.id, model)

        for rel in (item.relationships or {}):
            spec = schema.get(rel)
            if spec is None:
                self._logger.warning(
                    'Resource response contains relationship "%s", but it is not present on model "%s" '
                    'and therefore not deserialized.', rel, schema.name
                )
            elif not isinstance(spec, (HasOne, HasMany)):
                self._logger.warning(
                    'Resource response contains relationship "%s", but it is present on model "%s" '
                    'as a plain attribute.', rel, schema.name
                )
            else:
                self._check_linkage_type(spec, item, rel, schema)
                model[rel] = self._attach_relations(spec, item, included, rel, cache)

        for param in ('meta', 'links'):
            value = getattr(item, param)
            if value:
                model[param] = value

        if clear_cache:
            cache.clear()
        return model

    def _check_linkage_type(
            self,
            spec: RelationshipSpec,
            item: ResourceData,
            key: str,
            schema: ModelSchema,
    ) -> None:
        # the declared type is advisory, linked resources of another type are still resolved
        if spec.type is None:
            return
        linkage = _linkage(item, key)
        if linkage is None:
            return
        if isinstance(linkage, ResourceIdentifier):
            linkage = [linkage]
        expected = self._singularize(spec.type)
        for identifier in linkage:
            if self._singularize(identifier.type) != expected:
                self._logger.warning(
                    'Relationship "%s" on model "%s" links to type "%s", but is declared with type "%s".',
                    key, schema.name, identifier.type, spec.type
                )

    def _attach_relations(
            self,
            spec: RelationshipSpec,
            item: ResourceData,
            included: list[ResourceData],
            key: str,
            cache: DeserializationCache,
    ) -> Any:
        if isinstance(spec, HasOne):
            return self._attach_has_one(spec, item, included, key, cache)
        return self._attach_has_many(spec, item, included, key, cache)

    def _attach_has_one(
            self,
            spec: HasOne,
            item: ResourceData,
            included: list[ResourceData],
            key: str,
            cache: DeserializationCache,
    ) -> Optional[Any]:
        if not item.relationships:
            return None

        linkage = _linkage(item, key)
        if isinstance(linkage, ResourceIdentifier):
            cached_model = cache.get(linkage.type, linkage.id)
            if cached_model is not None:
                return cached_model

        related = related_items_for(spec, item, included, key)
        if not related:
            return None
        # nested calls share the cache and must not clear it
        return self._resource(related[0], included, True, False, cache)

    def _attach_has_many(
            self,
            spec: HasMany,
            item: ResourceData,
            included: list[ResourceData],
            key: str,
            cache: DeserializationCache,
    ) -> list[Any]:
        if not item.relationships:
            return []

        related = related_items_for(spec, item, included, key)
        if not related:
            return []
        return self._collection(related, included, True, False, cache)
