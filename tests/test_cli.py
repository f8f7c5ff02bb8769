import pandas as pd

from overpass_client import __main__ as cli
from overpass_client.config import MAIN_ENDPOINT


def test_parse_args_defaults():
    args = cli.parse_args(["queries.csv"])

    assert args.input == "queries.csv"
    assert args.out == "data/elements.csv"
    assert args.endpoint == MAIN_ENDPOINT
    assert args.retries == 1
    assert args.retry_pause == 2000
    assert args.concurrency == 10
    assert not args.verbose


def test_main_writes_elements(tmp_path, monkeypatch):
    queries = tmp_path / "queries.csv"
    queries.write_text('Query\n"node(1);out;"\n')
    out = tmp_path / "out" / "elements.csv"
    seen = {}

    async def fake_build_dataframe(qs, options, http):
        seen.update(queries=qs, options=options, http=http)
        return pd.DataFrame([{"query_index": 0, "type": "node", "id": 1}])

    monkeypatch.setattr(cli, "build_dataframe", fake_build_dataframe)

    cli.main([str(queries), "--out", str(out), "--retries", "3", "--concurrency", "2"])

    assert seen["queries"] == ["node(1);out;"]
    assert seen["options"].num_retries == 3
    assert seen["http"].concurrency == 2
    assert pd.read_csv(out).to_dict("records") == [
        {"query_index": 0, "type": "node", "id": 1}
    ]


def test_json_logs_flag_reaches_logging_setup(tmp_path, monkeypatch):
    queries = tmp_path / "queries.csv"
    queries.write_text('Query\n"node(1);out;"\n')
    calls = []

    async def fake_build_dataframe(qs, options, http):
        return pd.DataFrame([{"query_index": 0, "type": "node", "id": 1}])

    monkeypatch.setattr(cli, "build_dataframe", fake_build_dataframe)
    monkeypatch.setattr(
        cli, "configure_logging", lambda **kwargs: calls.append(kwargs)
    )

    cli.main([str(queries), "--out", str(tmp_path / "e.csv"), "--json-logs"])

    assert calls == [{"verbose": False, "json": True}]
    assert not cli.parse_args(["q.csv"]).json_logs
