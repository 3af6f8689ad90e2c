"""Tests for ConfigFactory and Config."""


def test_get_editable_new(config_factory):
    config = config_factory.get_editable("system.site")

    assert config.is_new
    assert config.get() == {}


def test_get_editable_existing(config_factory, repository):
    repository.write("system.site", {"name": "Example"})

    config = config_factory.get_editable("system.site")

    assert not config.is_new
    assert config.get("name") == "Example"


def test_set_data_replaces_and_save_persists(config_factory, repository):
    repository.write("system.site", {"a": 1, "b": 2})

    config = config_factory.get_editable("system.site").set_data({"a": 9}).save()

    assert not config.is_new
    assert repository.rows["system.site"] == {"a": 9}


def test_nested_get(config_factory):
    config = config_factory.get_editable("system.site").set_data({"page": {"front": "/node"}})

    assert config.get("page.front") == "/node"
    assert config.get("page.missing", "x") == "x"


def test_set_and_delete(config_factory, repository):
    config = config_factory.get_editable("system.site").set("name", "Example").save()
    assert repository.rows["system.site"] == {"name": "Example"}

    config.delete()

    assert "system.site" not in repository.rows
    assert config.is_new
