"""
Greeting components: two implementations of one base, selected by qualifier.
"""

from typing import Annotated

from kestrel import Inject, component, post_construct


class Greeter:
    """Base for greeting implementations (not itself a component)."""

    def greet(self, name: str) -> str:
        raise NotImplementedError


@component(qualifier="english")
class EnglishGreeter(Greeter):
    def greet(self, name: str) -> str:
        return f"Hello, {name}!"


@component(scope="prototype")
class SpanishGreeter(Greeter):
    def greet(self, name: str) -> str:
        return f"Hola, {name}!"


@component
class GreetingClient:
    greeter: Annotated[Greeter, Inject(qualifier="english")]

    def __init__(self):
        self.initialized = False

    @post_construct
    def init(self):
        self.initialized = True

    def greet(self, name: str) -> str:
        return self.greeter.greet(name)

    def __repr__(self) -> str:
        return f"GreetingClient(greeter={type(self.greeter).__name__})"
