from typing import Any, Optional

import msgspec
import pytest

from jsonapi_backend import Deserializer, HasMany, HasOne, JsonApiBackend, SchemaRegistry


def _define_models(registry: SchemaRegistry) -> SchemaRegistry:
    registry.define('article', {
        'title': '',
        'body': '',
        'author': HasOne(type='people'),
        'comments': HasMany(type='comments'),
        'published-comments': HasMany(type='comments', filter={'status': 'published'}),
        'tags': HasMany(type='tags'),
    })
    registry.define('person', {
        'name': '',
        'friend': HasOne(type='people'),
        'favorite-article': HasOne(type='articles'),
        'articles': HasMany(type='articles'),
    })
    registry.define('comment', {
        'text': '',
        'status': '',
        'commenter': HasOne(type='people'),
    })
    registry.define('tag', {'label': '', 'category': ''})
    return registry


@pytest.fixture()
def registry() -> SchemaRegistry:
    return _define_models(SchemaRegistry())


@pytest.fixture()
def deserializer(registry: SchemaRegistry) -> Deserializer:
    return Deserializer(registry)


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200):
        self.text = text
        self.status_code = status_code

    @property
    def ok(self) -> bool:
        return self.status_code < 400


class FakeSession:
    """
    Stand-in for requests.Session that replays queued documents and records requests.
    """
    def __init__(self):
        self.requests: list[dict[str, Any]] = []
        self._responses: list[FakeResponse] = []

    def queue(self, doc: Any, status_code: int = 200):
        self._responses.append(FakeResponse(msgspec.json.encode(doc).decode(), status_code))

    def get(self, url: str, headers: Optional[dict] = None, params: Optional[dict] = None) -> FakeResponse:
        self.requests.append(dict(url=url, headers=headers, params=params))
        return self._responses.pop(0)


@pytest.fixture()
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def backend(session: FakeSession) -> JsonApiBackend:
    b = JsonApiBackend('https://api.example.com/v1/', session=session)
    _define_models(b.registry)
    return b
