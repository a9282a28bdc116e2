import pytest

from vrf_raffle.config import RaffleConfig, Settings, to_raw
from vrf_raffle.project_constants import DEFAULT_ENTRANCE_FEE, DEFAULT_INTERVAL, NUM_WORDS

ENV_VARS = [
    "RAFFLE_ENTRANCE_FEE",
    "RAFFLE_INTERVAL",
    "VRF_KEY_HASH",
    "VRF_SUBSCRIPTION_ID",
    "VRF_CONFIRMATIONS",
    "VRF_CALLBACK_GAS_LIMIT",
    "VRF_COORDINATOR",
    "RPC_URL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # Keep a stray .env in the working directory out of the picture.
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        # setenv first so teardown also drops values load_dotenv() added
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_to_raw():
    assert to_raw("0.01") == 10**16
    assert to_raw("1") == 10**18
    with pytest.raises(ValueError):
        to_raw("abc")
    with pytest.raises(ValueError):
        to_raw("0.0000000000000000001")


@pytest.mark.parametrize("amount", ["Infinity", "-Infinity", "NaN", "sNaN"])
def test_to_raw_rejects_non_finite(amount):
    with pytest.raises(ValueError, match="finite"):
        to_raw(amount)


def test_defaults():
    settings = Settings.from_env()
    assert settings.raffle.entrance_fee == DEFAULT_ENTRANCE_FEE
    assert settings.raffle.interval == DEFAULT_INTERVAL
    assert settings.raffle.num_words == NUM_WORDS == 1
    assert settings.rpc_url is None


def test_env_values(monkeypatch):
    monkeypatch.setenv("RAFFLE_ENTRANCE_FEE", "0.5")
    monkeypatch.setenv("RAFFLE_INTERVAL", "60")
    monkeypatch.setenv("VRF_SUBSCRIPTION_ID", "77")
    monkeypatch.setenv("VRF_COORDINATOR", "coord")
    monkeypatch.setenv("RPC_URL", "http://node")
    settings = Settings.from_env()
    assert settings.raffle.entrance_fee == 5 * 10**17
    assert settings.raffle.interval == 60
    assert settings.raffle.subscription_id == 77
    assert settings.raffle.coordinator == "coord"
    assert settings.rpc_url == "http://node"


def test_overrides_beat_env(monkeypatch):
    monkeypatch.setenv("RAFFLE_INTERVAL", "60")
    monkeypatch.setenv("RPC_URL", "http://node")
    settings = Settings.from_env(
        rpc_url_override="http://other", entrance_fee_override="2", interval_override=5
    )
    assert settings.raffle.interval == 5
    assert settings.raffle.entrance_fee == 2 * 10**18
    assert settings.rpc_url == "http://other"


def test_dotenv_file_is_read(tmp_path):
    (tmp_path / ".env").write_text("RAFFLE_INTERVAL=90\n", encoding="utf-8")
    assert Settings.from_env().raffle.interval == 90


def test_bad_integer_env(monkeypatch):
    monkeypatch.setenv("VRF_CONFIRMATIONS", "three")
    with pytest.raises(RuntimeError):
        Settings.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"entrance_fee": 0},
        {"interval": 0},
        {"confirmations": -1},
        {"callback_gas_limit": 0},
        {"coordinator": ""},
    ],
)
def test_invalid_config(kwargs):
    with pytest.raises(ValueError):
        RaffleConfig(**kwargs)


def test_config_is_immutable():
    config = RaffleConfig()
    with pytest.raises(AttributeError):
        config.entrance_fee = 1
