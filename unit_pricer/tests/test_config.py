import pytest

from unit_pricer.config import DEFAULT_REPORT_PATH, Config, report_path


def test_load_from_env_defaults():
    cfg = Config.load_from_env({"TARGET_API_KEY": " abc "})
    assert cfg.target_api_key == "abc"
    assert cfg.target_store_id == "3991"


def test_load_from_env_store_override():
    cfg = Config.load_from_env({"TARGET_API_KEY": "abc", "TARGET_STORE_ID": "42"})
    assert cfg.target_store_id == "42"


def test_missing_key():
    with pytest.raises(RuntimeError, match="TARGET_API_KEY"):
        Config.load_from_env({})


@pytest.mark.parametrize("val", ["", "  ", "PLACEHOLDER"])
def test_placeholder_key(val):
    with pytest.raises(RuntimeError, match="placeholder"):
        Config.load_from_env({"TARGET_API_KEY": val})


def test_report_path():
    assert report_path({}) == DEFAULT_REPORT_PATH
    assert report_path({"UNIT_PRICER_REPORT_PATH": "out/x.json"}) == "out/x.json"
