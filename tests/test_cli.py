from __future__ import annotations

import json
from datetime import timedelta

import pytest

from activity_watcher import cli, config as cfg, items
from activity_watcher.models import WatchedItem, utc_now
from activity_watcher.thresholds import Thresholds


@pytest.fixture
def isolated_config(monkeypatch, tmp_path):
    path = tmp_path / "config.yaml"
    db = tmp_path / "watch.db"
    path.write_text(f"warning: 60\ndisqualification: 120\nstore:\n  path: {db}\n")
    monkeypatch.setattr(cfg, "CONFIG_PATHS", [path])
    monkeypatch.setattr(cfg, "_config_cache", None)
    return path


def test_describe_items_adds_derived_state(store):
    now = utc_now()
    store.upsert(WatchedItem(url="https://github.com/acme/w/issues/1", deadline=now - timedelta(minutes=90), last_check=now))
    store.upsert(WatchedItem(url="https://github.com/acme/w/issues/2", deadline=now, last_check=now))

    described = items.describe_items(store, Thresholds(60, 120), now=now)

    states = {d["url"].rsplit("/", 1)[-1]: d["state"] for d in described}
    assert states == {"1": "reminder_due", "2": "active"}
    assert described[0]["reminder_at"] is not None


def test_list_and_forget_commands(isolated_config, capsys):
    settings = cfg.load_settings(cfg.load_config(reload=True))
    from activity_watcher.storage import open_store

    now = utc_now()
    url = "https://github.com/acme/w/issues/1"
    open_store(settings.store_path).upsert(WatchedItem(url=url, deadline=now, last_check=now))

    assert cli.main(["list", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert [i["url"] for i in payload["items"]] == [url]
    assert payload["items"][0]["state"] == "active"

    assert cli.main(["forget", url]) == 0
    assert cli.main(["forget", url]) == 1
    capsys.readouterr()

    assert cli.main(["list"]) == 0
    assert "No watched items." in capsys.readouterr().out


def test_configuration_error_exit_code(isolated_config, capsys):
    isolated_config.write_text("warning: later\n")

    assert cli.main(["list"]) == 2
    assert "Configuration error" in capsys.readouterr().out


def test_config_path(isolated_config, capsys):
    assert cli.main(["config", "--path"]) == 0
    assert str(isolated_config) in capsys.readouterr().out
