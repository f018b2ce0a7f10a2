from typing import Annotated

from kestrel import Value, component


@component
class AppConfig:
    app_name: Annotated[str, Value("${app.name}")]
    app_version: Annotated[str, Value("${app.version}")]
    debug: Annotated[bool, Value("${app.debug}")]
    max_connections: Annotated[int, Value("${app.maxConnections}")]
