"""
End-to-end bootstrap of the sample component package.
"""

from kestrel import ConfigSource, TypeCatalog, new_container
from kestrel.di import ComponentScope


def _container(config):
    catalog = TypeCatalog()
    catalog.scan("sample_app")
    return new_container(catalog, config)


class TestSampleApp:

    def test_full_wiring(self, sample_config):
        from sample_app.greetings import EnglishGreeter, GreetingClient, SpanishGreeter
        from sample_app.services import ReportService
        from sample_app.settings import AppConfig

        container = _container(sample_config)

        client = container.resolve(GreetingClient)
        assert client.initialized is True
        assert isinstance(client.greeter, EnglishGreeter)
        assert client.greeter is container.resolve_by_qualifier("english")

        settings = container.resolve(AppConfig)
        assert settings.app_name == "Greeting Demo"
        assert settings.debug is True
        assert settings.max_connections == 100

        report = container.resolve(ReportService)
        assert report.settings is settings
        assert report.banner("World") == "Greeting Demo v1.0.0: Hello, World!"

        assert container.resolve(SpanishGreeter) is not container.resolve(SpanishGreeter)

    def test_descriptors(self, sample_config):
        container = _container(sample_config)
        scopes = {d.name: d.scope for d in container.descriptors()}
        assert scopes["SpanishGreeter"] is ComponentScope.PROTOTYPE
        assert scopes["AppConfig"] is ComponentScope.SINGLETON

    def test_overridden_setting(self, sample_config):
        from sample_app.settings import AppConfig

        values = dict(sample_config.as_dict())
        values["app.debug"] = "off"
        container = _container(ConfigSource.from_mapping(values))
        assert container.resolve(AppConfig).debug is False
