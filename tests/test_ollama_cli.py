from __future__ import annotations

from conftest import OLLAMA_EXEC
from adapters.ollama_cli import parse_model_list

LIST_OUTPUT = """NAME                       ID              SIZE      MODIFIED
llama3.1:70b               c0df3564cfe8    39 GB     2 days ago
nomic-embed-text:latest    0a109f422b47    274 MB    3 weeks ago
"""


def test_parse_model_list_skips_header():
    models = parse_model_list(LIST_OUTPUT)

    assert [m.name for m in models] == ["llama3.1:70b", "nomic-embed-text:latest"]
    assert models[0].id == "c0df3564cfe8"
    assert models[0].size == "39 GB"
    assert models[1].modified == "3 weeks ago"


def test_parse_model_list_handles_empty_output():
    assert parse_model_list("") == []
    assert parse_model_list("NAME    ID    SIZE    MODIFIED\n") == []


def test_has_model_is_a_substring_match(runner, clients):
    _, _, ollama = clients
    runner.on(*OLLAMA_EXEC, "list", stdout=LIST_OUTPUT)

    assert ollama.has_model("nomic-embed-text")
    assert ollama.has_model("llama3.1")
    assert not ollama.has_model("mistral")


def test_has_model_is_false_when_list_fails(runner, clients):
    _, _, ollama = clients
    runner.on(*OLLAMA_EXEC, "list", returncode=1, stdout="")

    assert ollama.has_model("llama3.1:70b") is False


def test_ping_reflects_exit_code(runner, clients):
    _, _, ollama = clients
    runner.on_sequence(*OLLAMA_EXEC, "list", returncodes=[1, 0])

    assert ollama.ping() is False
    assert ollama.ping() is True


def test_manual_pull_command_uses_container_name(clients):
    _, _, ollama = clients

    assert ollama.manual_pull_command("llama3.1:8b") == "docker exec ollama ollama pull llama3.1:8b"
