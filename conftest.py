pytest_plugins = [
    "tests.fixtures.drive_fixtures",
    "tests.fixtures.app_fixtures",
]
