from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Mapping, Union

import msgspec

from ._json_schemas.base import ApiBase

if TYPE_CHECKING:
    # avoid circular import
    from .backend import JsonApiBackend


def decode_document(doc: Union[str, bytes, Mapping[str, Any], ApiBase]) -> ApiBase:
    """
    Validate a JSON:API document given as JSON text, an already parsed mapping or ApiBase.
    """
    if isinstance(doc, ApiBase):
        return doc
    if isinstance(doc, (str, bytes)):
        return msgspec.json.decode(doc, type=ApiBase)
    return msgspec.convert(doc, type=ApiBase)


class ApiProvider:
    """
    Base class for all JSON:API queries.
    Child classes should implement their own methods using the query_api method to drive the query.
    """
    def __init__(self, _backend: JsonApiBackend):
        self._backend = _backend

    def deserialize_document(self, doc: Union[str, bytes, Mapping[str, Any], ApiBase]) -> Any:
        """
        Deserialize the primary data of a document, resolving relationships against its 'included'.

        :param doc: Document as JSON text, parsed mapping or ApiBase
        :return: Model dict, list of model dicts, or None for null primary data
        """
        section = decode_document(doc)
        deserializer = self._backend.deserializer
        if section.data is None:
            return None
        if isinstance(section.data, list):
            return deserializer.collection(section.data, section.included)
        return deserializer.resource(section.data, section.included)

    def query_api(
            self,
            url: str,
            params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """
        Handle a query to a JSON:API endpoint and deserialize the result.

        :param url: API URL to query
        :param params: HTTP GET parameters for query (include, filter[...], etc)
        :return: Query result data
        """
        txt = self._backend.get_json(url, params)
        return self.deserialize_document(txt)


class ResourceApiProvider(ApiProvider):
    """
    Provide access to the endpoints of one registered model.
    """
    def __init__(self, _backend: JsonApiBackend, model_name: str):
        super().__init__(_backend=_backend)
        self.model_name = model_name

    def __repr__(self):
        return f'ResourceApiProvider(model_name={self.model_name})'

    def get(self, id_: Union[int, str], params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.query_api(self._backend.resource_url(self.model_name, id_), params=params)

    def query(self, params: Optional[Mapping[str, Any]] = None) -> list:
        result = self.query_api(self._backend.collection_url(self.model_name), params=params)
        if result is None:
            return []
        if not isinstance(result, list):
            raise ValueError(f'Expected a collection document for model "{self.model_name}"')
        return result
