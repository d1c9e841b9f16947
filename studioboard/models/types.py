"""
Custom column types.

JSONList is the single codec boundary for list-valued columns
(tags, dependencies, stepsToReproduce, attachments, allowedPages):
lists are encoded to JSON text on write and decoded back on read.
"""

import json

from sqlalchemy.types import Text, TypeDecorator


class JSONList(TypeDecorator):
    """A list of strings stored as a JSON array in a TEXT column.

    Args:
        unique: Drop repeated items (first occurrence wins). Used for
                set-valued columns such as tags.

    NULL and empty text decode to ``[]``, so readers always get a list.
    """

    impl = Text
    cache_ok = True

    def __init__(self, unique: bool = False, *args, **kwargs):
        self.unique = unique
        super().__init__(*args, **kwargs)

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple, set, frozenset)):
            raise TypeError(f"JSONList expects a list of strings, got {type(value).__name__}")
        items = [str(v) for v in value]
        if self.unique:
            items = list(dict.fromkeys(items))
        return json.dumps(items, ensure_ascii=False)

    def process_result_value(self, value, dialect):
        if not value:
            return []
        decoded = json.loads(value)
        return decoded if isinstance(decoded, list) else []
