from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Union
from urllib.parse import urljoin

from requests import Session

from ._exceptions import RequestError
from .api_provider import ApiProvider, ResourceApiProvider
from .deserialize import Deserializer
from .schema import ModelSchema, SchemaRegistry


__all__ = ['JsonApiBackend', 'JSONAPI_MEDIA_TYPE']

logger = logging.getLogger(__name__)

JSONAPI_MEDIA_TYPE = 'application/vnd.api+json'


class JsonApiBackend:
    def __init__(
            self,
            base_url: str,
            registry: Optional[SchemaRegistry] = None,
            *,
            session: Optional[Session] = None,
            headers: Optional[Mapping[str, str]] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.registry = registry if registry is not None else SchemaRegistry()
        self.deserializer = Deserializer(self.registry)
        self._session: Session = session if session is not None else Session()
        self._headers = {'accept': JSONAPI_MEDIA_TYPE}
        if headers is not None:
            self._headers.update(headers)
        self._api = ApiProvider(self)

    def __repr__(self):
        return f'JsonApiBackend(base_url={self.base_url}, models={self.registry.names()})'

    def define(
            self,
            name: str,
            attributes: Optional[Mapping[str, Any]] = None,
            *,
            deserializer: Optional[Callable[[Any], Any]] = None,
            collection_path: Optional[str] = None,
    ) -> ModelSchema:
        """
        Register a model on this backend's schema registry, see `SchemaRegistry.define`.
        """
        return self.registry.define(
            name, attributes, deserializer=deserializer, collection_path=collection_path
        )

    def _schema(self, model_name: str) -> ModelSchema:
        schema = self.registry.lookup(model_name)
        if schema is None:
            raise ValueError(f'Model "{model_name}" is not defined')
        return schema

    def collection_url(self, model_name: str) -> str:
        # forward slash is necessary so last part of path is not replaced but appended
        return urljoin(self.base_url + '/', self._schema(model_name).path)

    def resource_url(self, model_name: str, id_: Union[int, str]) -> str:
        return urljoin(self.collection_url(model_name) + '/', f'{id_}')

    def resource(self, model_name: str) -> ResourceApiProvider:
        """
        Get an accessor for the endpoints of a defined model.
        """
        self._schema(model_name)
        return ResourceApiProvider(self, model_name)

    def get_json(self, url: str, params: Optional[Mapping[str, Any]] = None) -> str:
        logger.debug('GET %s params=%s', url, params)
        r = self._session.get(url, headers=self._headers, params=params)
        if not r.ok:
            raise RequestError(f'Could not get JSON content at {url}, Response {r.status_code}', response=r)
        return r.text

    def find(self, model_name: str, id_: Union[int, str], params: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Fetch and deserialize a single resource.

        :param model_name: Singular model name
        :param id_: Resource id
        :param params: HTTP GET parameters, e.g. {'include': 'author'}
        :return: Model dict, or None if the server returned null data
        """
        return self.resource(model_name).get(id_, params=params)

    def find_all(self, model_name: str, params: Optional[Mapping[str, Any]] = None) -> list:
        """
        Fetch and deserialize a collection of resources (first page only).

        :param model_name: Singular model name
        :param params: HTTP GET parameters
        :return: List of model dicts
        """
        return self.resource(model_name).query(params=params)

    def deserialize_document(self, doc: Any) -> Any:
        return self._api.deserialize_document(doc)
