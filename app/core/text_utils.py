from typing import Any, Mapping

from pydantic.alias_generators import to_camel


def to_camel_case(row: Mapping[str, Any]) -> dict[str, Any]:
    """
    Map the keys of a database row from snake_case to camelCase
    """
    return {to_camel(str(key)): value for key, value in row.items()}
