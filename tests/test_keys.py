import pytest

from kv_registry.errors import InvalidArgumentError
from kv_registry.keys import RegistryKey


class TestRegistryKey:
    def test_equality_and_hash_ignore_case(self):
        assert RegistryKey("Foo") == RegistryKey("fOO")
        assert hash(RegistryKey("Foo")) == hash(RegistryKey("foo"))
        assert RegistryKey("Foo") != RegistryKey("Bar")

    def test_folding_is_one_to_one_lowercase(self):
        assert RegistryKey("\u00df") != RegistryKey("SS")
        assert RegistryKey("Stra\u00dfe") == RegistryKey("STRA\u00dfE")
        assert RegistryKey("Stra\u00dfe") != RegistryKey("STRASSE")

    def test_str_preserves_original_text(self):
        key = RegistryKey("MixedCase")

        assert str(key) == "MixedCase"
        assert key.text == "MixedCase"

    def test_dict_lookup_is_case_insensitive(self):
        mapping = {RegistryKey("Colour"): "blue"}

        assert mapping[RegistryKey("COLOUR")] == "blue"

    def test_not_equal_to_plain_string(self):
        assert RegistryKey("foo") != "foo"

    def test_none_rejected(self):
        with pytest.raises(InvalidArgumentError):
            RegistryKey(None)

    def test_empty_text_accepted(self):
        assert str(RegistryKey("")) == ""

    def test_immutable(self):
        key = RegistryKey("foo")

        with pytest.raises(AttributeError):
            key._text = "bar"
        assert str(key) == "foo"

    def test_of_returns_same_instance_for_keys(self):
        key = RegistryKey("foo")

        assert RegistryKey.of(key) is key
        assert RegistryKey.of("FOO") == key
