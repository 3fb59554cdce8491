from typing import Dict, List

import ujson


def _attribute_key_dump(obj: object) -> str:
    return str(obj)


def _attribute_value_dump(obj: object) -> str:
    if isinstance(obj, Dict) or isinstance(obj, List):
        return ujson.dumps(obj, escape_forward_slashes=False, sort_keys=True)
    else:
        return str(obj)
