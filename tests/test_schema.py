import pytest

from jsonapi_backend import HasMany, HasOne, Scalar, SchemaRegistry


class TestSchemaRegistry:
    def test_define_normalizes_plain_markers(self):
        registry = SchemaRegistry()
        schema = registry.define('article', {'title': '', 'body': None, 'slug': Scalar(), 'author': HasOne()})
        assert schema.attributes['title'] == Scalar()
        assert schema.attributes['body'] == Scalar()
        assert schema.attributes['slug'] == Scalar()
        assert isinstance(schema.attributes['author'], HasOne)

    def test_lookup(self):
        registry = SchemaRegistry()
        schema = registry.define('person', {'name': ''})
        assert registry.lookup('person') is schema
        assert registry.lookup('people') is None
        assert 'person' in registry
        assert registry.names() == ['person']

    def test_redefine_replaces(self):
        registry = SchemaRegistry()
        registry.define('person', {'name': ''})
        registry.define('person', {'first_name': ''})
        assert list(registry.lookup('person').attributes) == ['first_name']

    def test_define_without_attributes(self):
        schema = SchemaRegistry().define('ping')
        assert schema.attributes == {}
        assert schema.get('anything') is None


class TestModelSchema:
    @pytest.mark.parametrize('name, path', [
        ('person', 'people'),
        ('article', 'articles'),
        ('blog-post', 'blog-posts'),
        ('category', 'categories'),
    ])
    def test_default_path(self, name, path):
        assert SchemaRegistry().define(name).path == path

    def test_collection_path_override(self):
        schema = SchemaRegistry().define('person', collection_path='members')
        assert schema.path == 'members'

    def test_relationship_specs(self):
        spec = HasMany(type='comments', filter={'status': 'published'})
        assert spec.type == 'comments'
        assert spec.filter == {'status': 'published'}
        assert HasOne().filter is None
