"""Tests for settings validation."""
import pytest
from pydantic import ValidationError

from faceproof.core.config import Settings


def make_settings(**overrides) -> Settings:
    values = {"SIMILARITY_THRESHOLD": 0.6}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_threshold_is_required(monkeypatch):
    monkeypatch.delenv("SIMILARITY_THRESHOLD", raising=False)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


@pytest.mark.parametrize("threshold", [0.0, 1.0, -0.1, 2.0])
def test_threshold_must_be_inside_unit_interval(threshold):
    with pytest.raises(ValidationError):
        make_settings(SIMILARITY_THRESHOLD=threshold)


def test_threshold_from_environment(monkeypatch):
    monkeypatch.setenv("SIMILARITY_THRESHOLD", "0.72")

    assert Settings(_env_file=None).SIMILARITY_THRESHOLD == pytest.approx(0.72)


def test_default_gateways_are_ordered():
    gateways = make_settings().gateways

    assert len(gateways) >= 2
    assert gateways[0] == "https://gateway.pinata.cloud/ipfs/"


def test_single_gateway_is_rejected():
    with pytest.raises(ValidationError):
        make_settings(IPFS_GATEWAYS="https://ipfs.io/ipfs/")


def test_gateways_are_parsed_from_comma_list():
    settings = make_settings(IPFS_GATEWAYS="https://a.test/ipfs/, https://b.test/ipfs/,")

    assert settings.gateways == ["https://a.test/ipfs/", "https://b.test/ipfs/"]


@pytest.mark.parametrize(
    "field,value",
    [("UNIQUENESS_CONCURRENCY", 0), ("EMBEDDING_DIMENSION", 0), ("MIN_COVERAGE", 1.5)],
)
def test_invalid_tuning_values_are_rejected(field, value):
    with pytest.raises(ValidationError):
        make_settings(**{field: value})


def test_cors_origins():
    settings = make_settings(ALLOWED_ORIGINS="http://a.test, http://b.test")

    assert settings.cors_origins == ["http://a.test", "http://b.test"]
