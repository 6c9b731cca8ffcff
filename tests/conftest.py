pytest_plugins = ["chms_cache.testing.fixtures"]
