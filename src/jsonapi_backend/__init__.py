from ._exceptions import RequestError, SchemaNotFoundError
from ._inflection import pluralize, singularize
from .backend import JsonApiBackend
from .cache import DeserializationCache
from .deserialize import Deserializer
from .schema import HasMany, HasOne, ModelSchema, Scalar, SchemaRegistry

__all__ = [
    'DeserializationCache',
    'Deserializer',
    'HasMany',
    'HasOne',
    'JsonApiBackend',
    'ModelSchema',
    'RequestError',
    'Scalar',
    'SchemaNotFoundError',
    'SchemaRegistry',
    'pluralize',
    'singularize',
]
