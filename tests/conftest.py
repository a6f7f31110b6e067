pytest_plugins = ("pytester", "provider_double.integrations.pytest_plugin")
