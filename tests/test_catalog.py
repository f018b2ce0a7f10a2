"""
Type catalog and discovery (kestrel.di.catalog, kestrel.utils.scanner)
"""

from typing import Annotated

import pytest

from kestrel.di import (
    AmbiguousConstructorError,
    ComponentScope,
    DIError,
    DiscoveryError,
    Inject,
    TypeCatalog,
    Value,
    component,
    constructor,
    define_component,
    is_component,
    post_construct,
)
from kestrel.di.decorators import extract_key
from kestrel.utils.scanner import PackageScanner


class Engine:
    pass


class Wheel:
    pass


@component(scope="prototype", qualifier="sports")
class Car:
    engine: Annotated[Engine, Inject()]
    spare: Annotated[Wheel, Inject(qualifier="spare")]
    model: Annotated[str, Value("${car.model}")]
    doors: int = 4

    @post_construct
    def warm_up(self):
        pass


@component
class Garage:
    @constructor
    def __init__(self, car: Car, label: "Annotated[str, Inject()]" = "main", *args, **kwargs):
        self.car = car


# ============================================================================
# Decorators
# ============================================================================

class TestDecorators:

    def test_component_bare(self):
        @component
        class Plain:
            pass

        assert is_component(Plain)
        assert Plain.__di_scope__ is ComponentScope.SINGLETON
        assert Plain.__di_qualifier__ is None

    def test_component_with_arguments(self):
        assert Car.__di_scope__ is ComponentScope.PROTOTYPE
        assert Car.__di_qualifier__ == "sports"

    def test_component_unknown_scope(self):
        with pytest.raises(ValueError):
            component(scope="session")

    def test_subclass_is_not_a_component(self):
        class SportsCar(Car):
            pass

        assert is_component(Car) is True
        assert is_component(SportsCar) is False

    @pytest.mark.parametrize(
        "expression,key",
        [
            ("${app.name}", "app.name"),
            ("${ app.name }", "app.name"),
            ("app.name", "app.name"),
        ],
    )
    def test_extract_key(self, expression, key):
        assert extract_key(expression) == key
        assert Value(expression).key == key


# ============================================================================
# Definitions
# ============================================================================

class TestDefineComponent:

    def test_members_values_and_hooks(self):
        definition = define_component(Car)

        assert definition.scope is ComponentScope.PROTOTYPE
        assert definition.qualifier == "sports"
        assert [(p.name, p.declared_type, p.qualifier) for p in definition.members] == [
            ("engine", Engine, None),
            ("spare", Wheel, "spare"),
        ]
        assert [(p.name, p.declared_type, p.key) for p in definition.values] == [
            ("model", str, "car.model"),
        ]
        assert definition.hooks == ("warm_up",)
        assert definition.constructor is None

    def test_explicit_arguments_override_decorator(self):
        definition = define_component(Car, scope="singleton", qualifier="family")
        assert definition.scope is ComponentScope.SINGLETON
        assert definition.qualifier == "family"

    def test_undecorated_class_defaults(self):
        definition = define_component(Engine)
        assert definition.scope is ComponentScope.SINGLETON
        assert definition.qualifier is None

    def test_constructor_parameters(self):
        plan = define_component(Garage).constructor

        assert plan.name == "__init__"
        assert plan.is_factory is False
        # *args/**kwargs are skipped; a marked defaulted parameter is injected
        assert [(p.name, p.declared_type) for p in plan.parameters] == [
            ("car", Car),
            ("label", str),
        ]

    def test_staticmethod_constructor(self):
        class Built:
            @constructor
            @staticmethod
            def build(engine: Engine):
                return engine

        plan = define_component(Built).constructor
        assert plan.is_factory is True
        assert [p.name for p in plan.parameters] == ["engine"]

    def test_ambiguous_constructor(self):
        class TwoWays:
            @constructor
            def __init__(self, engine: Engine):
                self.engine = engine

            @constructor
            @classmethod
            def create(cls, engine: Engine):
                return cls(engine)

        with pytest.raises(AmbiguousConstructorError) as exc_info:
            define_component(TwoWays)
        assert exc_info.value.constructors == ["__init__", "create"]

    def test_unannotated_constructor_parameter(self):
        class Vague:
            @constructor
            def __init__(self, engine):
                self.engine = engine

        with pytest.raises(DIError, match="engine"):
            define_component(Vague)

    def test_rejects_non_class(self):
        with pytest.raises(DIError):
            define_component(lambda: None)

    def test_overridden_hook_reported_once(self):
        class Base:
            @post_construct
            def ready(self):
                pass

        class Child(Base):
            @post_construct
            def ready(self):
                pass

        assert define_component(Child).hooks == ("ready",)


# ============================================================================
# Catalog
# ============================================================================

class TestTypeCatalog:

    def test_from_classes_keeps_order(self):
        catalog = TypeCatalog.from_classes(Garage, Car, Engine)
        assert [d.identity for d in catalog] == [Garage, Car, Engine]
        assert len(catalog) == 3
        assert Car in catalog

    def test_add_is_idempotent(self):
        catalog = TypeCatalog()
        first = catalog.add(Engine)
        second = catalog.add(Engine, qualifier="ignored")
        assert first is second
        assert len(catalog) == 1

    def test_get(self):
        catalog = TypeCatalog.from_classes(Engine)
        assert catalog.get(Engine).identity is Engine
        assert catalog.get(Wheel) is None

    def test_scan_sample_app(self):
        catalog = TypeCatalog()
        found = catalog.scan("sample_app")
        names = [cls.__name__ for cls in found]

        assert names == [
            "EnglishGreeter",
            "SpanishGreeter",
            "GreetingClient",
            "ReportService",
            "AppConfig",
        ]
        # The undecorated base class is not a component
        assert "Greeter" not in names
        assert len(catalog) == 5

    def test_scan_single_module(self):
        catalog = TypeCatalog()
        found = catalog.scan("sample_app.settings")
        assert [cls.__name__ for cls in found] == ["AppConfig"]

    def test_scan_missing_package(self):
        with pytest.raises(DiscoveryError) as exc_info:
            TypeCatalog().scan("no_such_package_anywhere")
        assert exc_info.value.package == "no_such_package_anywhere"


# ============================================================================
# Scanner
# ============================================================================

class TestPackageScanner:

    def test_scan_with_base_class(self):
        from sample_app.greetings import Greeter

        scanner = PackageScanner()
        found = scanner.scan_package("sample_app", base_class=Greeter)
        assert [cls.__name__ for cls in found] == [
            "Greeter", "EnglishGreeter", "SpanishGreeter",
        ]

    def test_imports_are_not_rediscovered(self):
        scanner = PackageScanner()
        found = scanner.scan_package("sample_app.services")
        assert [cls.__name__ for cls in found] == ["ReportService"]

    def test_non_recursive(self):
        scanner = PackageScanner()
        assert scanner.scan_package("sample_app", recursive=False) == []

    def test_stats(self):
        scanner = PackageScanner()
        scanner.scan_package("sample_app")
        stats = scanner.get_stats()
        assert stats["modules_scanned"] == 4
        assert stats["classes_found"] > 0
