import json

import pytest

from wine_browser.config.loader import dataset_loader_for, load_global_config, resolve_dataset_source
from wine_browser.core.exceptions import ConfigurationError
from wine_browser.core.records import RecordColumns


def _write_config(root, **overrides):
    raw = {
        "ui_title": "Test Wines",
        "data_root": "data",
        "dataset": {"file": "wines.csv", "on_parse_error": "skip"},
        "varieties": ["Malbec", "Syrah"],
    }
    raw.update(overrides)
    root.mkdir(parents=True, exist_ok=True)
    (root / "global.json").write_text(json.dumps(raw))
    return root


def test_load_global_config_reads_values(tmp_path, monkeypatch):
    monkeypatch.delenv("WINE_BROWSER_DATA_ROOT", raising=False)
    root = _write_config(tmp_path / "config")

    cfg = load_global_config(root)

    assert cfg.ui_title == "Test Wines"
    assert cfg.varieties == ("Malbec", "Syrah")
    assert cfg.dataset.on_parse_error == "skip"
    assert cfg.dataset.columns == RecordColumns()
    assert cfg.data_root == (root / "data").resolve()
    assert resolve_dataset_source(cfg) == (root / "data").resolve() / "wines.csv"


def test_env_data_root_wins(tmp_path, monkeypatch):
    root = _write_config(tmp_path / "config")
    monkeypatch.setenv("WINE_BROWSER_DATA_ROOT", str(tmp_path / "elsewhere"))

    cfg = load_global_config(root)

    assert cfg.data_root == tmp_path / "elsewhere"


def test_url_sources_pass_through(tmp_path):
    root = _write_config(tmp_path, dataset={"file": "https://example.org/winedata.csv"})

    cfg = load_global_config(root)

    assert resolve_dataset_source(cfg) == "https://example.org/winedata.csv"


def test_custom_columns_and_loader(tmp_path, monkeypatch):
    monkeypatch.delenv("WINE_BROWSER_DATA_ROOT", raising=False)
    root = _write_config(
        tmp_path,
        data_root=None,
        dataset={"file": "wines.csv", "columns": {"points": "score"}},
    )
    (tmp_path / "wines.csv").write_text("country,variety,score,price\nUS,Malbec,91,22\n")

    cfg = load_global_config(root)
    store = dataset_loader_for(cfg).load_sync()

    assert cfg.dataset.columns.points == "score"
    assert store[0].points == 91


def test_missing_global_json_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_global_config(tmp_path)


@pytest.mark.parametrize(
    "overrides",
    [
        {"dataset": {}},
        {"dataset": {"file": "w.csv", "on_parse_error": "ignore"}},
        {"dataset": {"file": "w.csv", "columns": {"vintage": "year"}}},
        {"varieties": "Malbec"},
    ],
)
def test_invalid_config_raises_configuration_error(tmp_path, overrides):
    root = _write_config(tmp_path, **overrides)

    with pytest.raises(ConfigurationError):
        load_global_config(root)
