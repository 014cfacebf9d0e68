import logging

from common.logger import get_logger


def test_level_from_env(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    get_logger("k8s_kv.test")
    assert logging.getLogger().level == logging.DEBUG


def test_unknown_level_falls_back_to_info(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    get_logger()
    assert logging.getLogger().level == logging.INFO


def test_default_name():
    assert get_logger().name == "k8s_kv"
    assert get_logger("x").name == "x"
