"""Python setup.py for jsonapi_backend package"""
from setuptools import find_packages, setup

_long_description = ""

try:
    with open('README.md', 'rt') as f:
        _long_description = f.read()
except FileNotFoundError:
    pass

setup(
    name="jsonapi_backend",
    version='0.1.0',
    description="Deserialize JSON:API documents into plain model objects, with a small requests client",
    long_description=_long_description,
    long_description_content_type="text/markdown",
    author="Benjamin Davis",
    packages=find_packages('src', exclude=["tests", ".github"]),
    package_dir={"": 'src'},
    python_requires='>=3.9',
    install_requires=[
        'requests',
        'msgspec',
        'cachetools',
        'inflection',
    ],
    extras_require={"test": ['pytest']},
)
