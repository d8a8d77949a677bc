from __future__ import annotations

import json

from tablegames.main import main


CONFIG = """
modes = ["blackjack"]
log_level = "WARNING"

[[principals]]
token = "cli-token"
user_id = "cli-user"
"""


def write_config(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(CONFIG, encoding="utf-8")
    return str(path)


def test_list_modes(tmp_path, capsys):
    assert main(["--config", write_config(tmp_path), "list-modes"]) == 0
    assert json.loads(capsys.readouterr().out) == ["blackjack"]


def test_dispatch_with_token(tmp_path, capsys):
    request = json.dumps({"modeId": "blackjack", "payload": {"action": "stand"}})

    code = main(["--config", write_config(tmp_path), "dispatch", "--request", request, "--token", "cli-token"])

    output = json.loads(capsys.readouterr().out)
    assert code == 0
    assert output["status"] == 200
    assert output["body"]["result"]["player_id"] == "cli-user"


def test_dispatch_without_token_fails(tmp_path, capsys):
    request = json.dumps({"modeId": "blackjack", "payload": {"action": "stand"}})

    code = main(["--config", write_config(tmp_path), "dispatch", "--request", request])

    output = json.loads(capsys.readouterr().out)
    assert code == 1
    assert output["status"] == 401
    assert output["body"]["error"]["kind"] == "AUTHENTICATION_ERROR"
