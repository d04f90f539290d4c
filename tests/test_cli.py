import json

import pytest
from eth_account import Account

from pancake_sdk.cli import main
from pancake_sdk.vault import SecretVault

PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.delenv("PANCAKE_SDK_CONFIG", raising=False)
    monkeypatch.delenv("PRIVATE_KEY", raising=False)
    monkeypatch.chdir(tmp_path)


def _answers(monkeypatch, *answers):
    replies = iter(answers)
    monkeypatch.setattr("getpass.getpass", lambda prompt="": next(replies))


def test_size_add(capsys):
    rc = main(["size-add", "--token-balance", "1000000", "--percent", "10",
               "--bnb-amount", "1"])
    out = json.loads(capsys.readouterr().out)

    assert rc == 0
    assert out["token_amount"] == "100000"
    assert out["token_min"] == "95000"
    assert out["base_min"] == str(95 * 10 ** 16)


def test_size_add_zero_slippage(capsys):
    rc = main(["size-add", "--token-balance", "1000", "--percent", "50",
               "--bnb-amount", "1", "--slippage-bps", "0"])
    out = json.loads(capsys.readouterr().out)
    assert rc == 0
    assert out["token_min"] == "500"


def test_size_add_zero_amount_fails():
    assert main(["size-add", "--token-balance", "10", "--percent", "1",
                 "--bnb-amount", "1"]) == 1


def test_size_add_insufficient_bnb_fails():
    assert main(["size-add", "--token-balance", "1000", "--percent", "10",
                 "--bnb-amount", "2", "--bnb-balance", "1"]) == 1


def test_size_remove(capsys):
    rc = main(["size-remove", "--shares", "500", "--reserve-token", "10000",
               "--reserve-base", "20", "--total-supply", "1000"])
    out = json.loads(capsys.readouterr().out)

    assert rc == 0
    assert out["expected_token"] == "5000"
    assert out["expected_base"] == "10"
    assert (out["token_min"], out["base_min"]) == ("4750", "9")


def test_size_remove_nothing_to_burn():
    assert main(["size-remove", "--shares", "0", "--reserve-token", "10000",
                 "--reserve-base", "20", "--total-supply", "1000"]) == 1


def test_protect_outputs_decodable_secret(monkeypatch, capsys):
    _answers(monkeypatch, PRIVATE_KEY, "hunter2", "hunter2")

    assert main(["protect", "--env-line"]) == 0
    line = capsys.readouterr().out.strip()

    assert line.startswith("PRIVATE_KEY=")
    encoded = line.split("=", 1)[1]
    assert SecretVault().reveal(encoded, "hunter2") == PRIVATE_KEY


def test_protect_password_mismatch(monkeypatch, capsys):
    _answers(monkeypatch, PRIVATE_KEY, "hunter2", "hunter3")
    assert main(["protect"]) == 1
    assert capsys.readouterr().out == ""


def test_unlock_prints_address(monkeypatch, capsys, tmp_path):
    encoded = SecretVault().protect(PRIVATE_KEY, "hunter2").encode()
    monkeypatch.setenv("PRIVATE_KEY", encoded)
    _answers(monkeypatch, "hunter2")

    rc = main(["--env-file", str(tmp_path / "missing.env"), "unlock"])

    assert rc == 0
    assert capsys.readouterr().out.strip() == Account.from_key(PRIVATE_KEY).address


def test_unlock_wrong_password(monkeypatch, capsys, tmp_path):
    encoded = SecretVault().protect(PRIVATE_KEY, "hunter2").encode()
    monkeypatch.setenv("PRIVATE_KEY", encoded)
    _answers(monkeypatch, "wrong")

    assert main(["--env-file", str(tmp_path / "missing.env"), "unlock"]) == 1
    assert PRIVATE_KEY not in capsys.readouterr().out


def test_unlock_without_key(tmp_path):
    assert main(["--env-file", str(tmp_path / "missing.env"), "unlock"]) == 1


def test_networks(capsys):
    assert main(["networks"]) == 0
    out = capsys.readouterr().out
    assert "bscTestnet" in out
    assert "chain=56" in out


def test_networks_with_rpc_override(tmp_path, capsys):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"rpc_urls": {"bscTestnet": "http://localhost:8545"}}))
    assert main(["--config", str(path), "networks"]) == 0
    assert "http://localhost:8545" in capsys.readouterr().out


def test_bad_config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{broken")
    assert main(["--config", str(path), "networks"]) == 1


def test_size_add_absurd_percent_fails(capsys):
    assert main(["size-add", "--token-balance", "1000", "--percent", "1e20000000",
                 "--bnb-amount", "1"]) == 1
    assert capsys.readouterr().out == ""


def test_size_add_long_percent_floors(capsys):
    rc = main(["size-add", "--token-balance", "10000", "--percent", "0." + "9" * 120,
               "--bnb-amount", "1"])
    assert rc == 0
    assert json.loads(capsys.readouterr().out)["token_amount"] == "99"


def test_config_slippage_of_wrong_type_fails(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"slippage_bps": "5%"}))
    assert main(["--config", str(path), "size-add", "--token-balance", "1000",
                 "--percent", "10", "--bnb-amount", "1"]) == 1
