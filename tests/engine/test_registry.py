"""Tests for the type registry."""

import threading

import pytest

pytestmark = pytest.mark.unit

from datafilter.contracts import ContractError
from datafilter.engine.context import ValidationResult
from datafilter.engine.registry import BUILTIN_VALIDATORS, AliasTemplate, Registry
from datafilter.validators import HashValidator, IntValidator, Validator


class ShoutValidator(Validator):
    """Upper-cases strings."""

    def __init__(self, suffix=""):
        self.suffix = suffix

    def validate(self, data, contract, ctx):
        if not isinstance(data, str):
            return self.fallback(contract, ctx, "Not a string.")
        value = data.upper() + self.suffix
        return ValidationResult(value, value)


class TestLookup:
    """Built-in tokens and unknown tokens."""

    def test_every_builtin_type_resolves_to_its_validator(self):
        """Each built-in token maps to a Validator subclass."""
        registry = Registry()
        for token, validator_class in BUILTIN_VALIDATORS.items():
            assert registry.lookup(token) is validator_class
            assert issubclass(validator_class, Validator)

    def test_builtin_templates(self):
        """Convenience aliases are parametrized templates."""
        registry = Registry()
        md5 = registry.lookup("md5")
        assert isinstance(md5, AliasTemplate)
        assert dict(md5.contract) == {"type": "hash", "algo": "md5"}
        assert dict(registry.lookup("ipv6").contract) == {"type": "ip", "version": 6}
        port = registry.lookup("port").contract
        assert (port["type"], port["min"], port["max"]) == ("int", 1, 65535)
        assert registry.lookup("array").contract["type"] == "list"

    def test_unknown_token_is_contract_error(self):
        """Unknown types are schema bugs."""
        with pytest.raises(ContractError, match="Unknown type 'nope'"):
            Registry().lookup("nope")

    def test_contains_and_tokens(self):
        """Registered tokens are listed."""
        registry = Registry()
        assert "int" in registry
        assert "sha256" in registry.tokens
        assert "nope" not in registry


class TestValidatorCache:
    """Lazy, cached validator instances."""

    def test_instance_is_cached(self):
        """The same instance is shared by every call."""
        registry = Registry()
        first = registry.get_validator("int")
        assert isinstance(first, IntValidator)
        assert registry.get_validator("int") is first

    def test_template_has_no_validator(self):
        """Templates are expanded by the orchestrator, not instantiated."""
        with pytest.raises(ContractError, match="is an alias"):
            Registry().get_validator("md5")

    def test_factory_builds_instances(self):
        """The factory hook injects constructor arguments."""
        built = []

        def factory(cls):
            built.append(cls)
            return cls(suffix="!") if cls is ShoutValidator else cls()

        registry = Registry(factory=factory)
        registry.register("shout", ShoutValidator)
        validator = registry.get_validator("shout")
        assert validator.suffix == "!"
        registry.get_validator("shout")
        assert built == [ShoutValidator]

    def test_factory_must_return_validator(self):
        """A factory returning another object is a contract error."""
        registry = Registry(factory=lambda cls: object())
        with pytest.raises(ContractError, match="not a Validator"):
            registry.get_validator("int")

    def test_concurrent_instantiation_yields_one_instance(self):
        """Concurrent readers share a single instance."""
        registry = Registry()
        results = []

        def worker():
            results.append(registry.get_validator("hash"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len({id(result) for result in results}) == 1
        assert isinstance(results[0], HashValidator)


class TestRegister:
    """Runtime registration."""

    def test_register_validator_class(self):
        """A Validator subclass becomes a new type."""
        registry = Registry()
        registry.register("shout", ShoutValidator)
        assert registry.lookup("shout") is ShoutValidator

    def test_register_non_validator_class_fails(self):
        """Only Validator subclasses are accepted."""
        with pytest.raises(ContractError):
            Registry().register("bad", dict)

    def test_register_contract_string(self):
        """Contract strings are parsed at registration."""
        registry = Registry()
        registry.register("percent", "int; min: 0; max: 100")
        template = registry.lookup("percent")
        assert template.inline is True
        assert dict(template.contract) == {"type": "int", "min": "0", "max": "100"}

    def test_register_record_template(self):
        """A mapping without type is a record template."""
        registry = Registry()
        registry.register("point", {"x": "float", "y": "float"})
        assert dict(registry.lookup("point").contract) == {
            "type": "assoc",
            "keys": {"x": "float", "y": "float"},
        }

    def test_register_many(self):
        """A mapping registers several aliases at once."""
        registry = Registry()
        registry.register({"small": {"type": "int", "max": 10}, "tag": "slug"})
        assert registry.lookup("small").contract["max"] == 10
        assert registry.lookup("tag").contract["type"] == "slug"

    def test_aliases_given_at_construction(self):
        """Constructor aliases are registered on top of built-ins."""
        registry = Registry(aliases={"tag": "slug"})
        assert "tag" in registry

    def test_bad_tokens_are_refused(self):
        """Tokens can't contain type syntax characters."""
        registry = Registry()
        for token in ("", " ", "a|b", "?a", "a;b"):
            with pytest.raises(ContractError):
                registry.register(token, "int")

    def test_registration_does_not_touch_other_registries(self):
        """Registries are independent values."""
        first, second = Registry(), Registry()
        first.register("tag", "slug")
        assert "tag" not in second

    def test_templates_are_immutable(self):
        """Registered templates can't be modified through lookup."""
        registry = Registry()
        with pytest.raises(TypeError):
            registry.lookup("md5").contract["algo"] = "sha1"
