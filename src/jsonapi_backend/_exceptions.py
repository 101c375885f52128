import requests


class RequestError(Exception):
    """
    Exception thrown if a HTTP request operation returned a non-ok code.

    Attributes:
        response -- request response
    """
    def __init__(self, message: str, response: requests.Response):
        self.response = response
        super().__init__(message)


class SchemaNotFoundError(Exception):
    """
    Exception thrown if a resource type returned by the API has no registered model schema.

    Attributes:
        type_name -- singular model name that failed lookup
    """
    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(
            f'Could not find definition for model "{type_name}" which was returned by the JSON API.'
        )
