"""
English inflection helpers used to map JSON:API type names to model names and back.

JSON:API servers usually emit plural, dasherized type names ("blog-posts", "people")
while models are registered under singular names ("blog-post", "person").
"""
from __future__ import annotations

import re

import inflection
from cachetools import cached, LRUCache

__all__ = ['singularize', 'pluralize']

# words the Rails-derived inflection tables get wrong in one direction or the other
_IRREGULAR_PLURALS = {
    'cookie': 'cookies',
    'movie': 'movies',
    'pie': 'pies',
    'tie': 'ties',
    'zombie': 'zombies',
    'calorie': 'calories',
    'cache': 'caches',
    'niche': 'niches',
    'hero': 'heroes',
    'echo': 'echoes',
    'potato': 'potatoes',
    'veto': 'vetoes',
    'campus': 'campuses',
}
_IRREGULAR_SINGULARS = {v: k for k, v in _IRREGULAR_PLURALS.items()}

# split "blog-posts" / "blog_posts" / "BlogPosts" into a prefix and the last word
_last_word_re = re.compile(r'^(.*?[-_]|.*[a-z0-9](?=[A-Z]))?([^-_]+)$')

# Cache inflections, type names repeat for every resource of a document
INFLECTION_CACHE_SIZE = 1024


def _match_case(source: str, word: str) -> str:
    if source.isupper() and len(source) > 1:
        return word.upper()
    if source[:1].isupper():
        return word[:1].upper() + word[1:]
    return word


def _split(word: str) -> tuple[str, str]:
    m = _last_word_re.match(word)
    if m is None:
        return '', word
    return m.group(1) or '', m.group(2)


@cached(cache=LRUCache(maxsize=INFLECTION_CACHE_SIZE))
def singularize(word: str) -> str:
    """
    Convert a plural type name to its singular model name.

    Only the last word of dasherized, underscored or CamelCase names is inflected,
    e.g. "blog-posts" -> "blog-post", "people" -> "person".

    :param word: Plural (or already singular) name
    :return: Singular name
    """
    if not word:
        return word
    prefix, last = _split(word)
    lower_last = last.lower()
    if lower_last in _IRREGULAR_SINGULARS:
        return prefix + _match_case(last, _IRREGULAR_SINGULARS[lower_last])
    if lower_last in _IRREGULAR_PLURALS:
        # already singular
        return word
    return inflection.singularize(word)


@cached(cache=LRUCache(maxsize=INFLECTION_CACHE_SIZE))
def pluralize(word: str) -> str:
    """
    Convert a singular model name to its plural form, the inverse of `singularize`.

    :param word: Singular name
    :return: Plural name
    """
    if not word:
        return word
    prefix, last = _split(word)
    lower_last = last.lower()
    if lower_last in _IRREGULAR_PLURALS:
        return prefix + _match_case(last, _IRREGULAR_PLURALS[lower_last])
    if lower_last in _IRREGULAR_SINGULARS:
        # already plural
        return word
    return inflection.pluralize(word)
