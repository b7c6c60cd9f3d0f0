import json

import pytest

from localstore_lib.storage.serializer import RecordSerializer


def test_objects_become_json():
    s = RecordSerializer()
    value = {"stringProp": "stringValue", "numberProp": 1, "booleanProp": True}
    assert s.serialize(value) == json.dumps(value)
    assert s.serialize([1, "a"]) == '[1, "a"]'


def test_scalars_pass_through():
    s = RecordSerializer()
    assert s.serialize("raw") == "raw"
    assert s.serialize(7) == 7


def test_empty_input_deserializes_to_none():
    s = RecordSerializer()
    assert s.deserialize(None) is None
    assert s.deserialize("") is None


def test_deserialize_parses_json_and_rejects_garbage():
    s = RecordSerializer()
    assert s.deserialize('{"a": [1, 2]}') == {"a": [1, 2]}
    with pytest.raises(ValueError):
        s.deserialize("{broken")
