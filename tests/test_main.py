import json

import pytest

from conftest import FakeBackend, build_gif

from virtualclipboard.config import MonitorConfig
from virtualclipboard.main import VirtualClipboardApp, describe, parse_args, probe_paths
from virtualclipboard.models import GifItem, TextItem
from virtualclipboard.probe.content_probe import probe_text


def test_describe_text_with_language():
    line = describe(TextItem("print('hi')"), "Python")

    assert line.startswith("TEXT | 11 B")
    assert "code: Python" in line


def test_describe_url_and_gif():
    assert "https://example.com" in describe(probe_text("https://example.com/x"))
    gif_line = describe(GifItem(b"x" * 10, 4, 2, frame_count=2, duration_ms=80))
    assert "4x2 (2:1)" in gif_line
    assert "2 frames, 80 ms" in gif_line


def test_parse_args():
    args = parse_args(["-i", "0.2", "--json", "--no-code"])

    assert args.poll_interval == 0.2
    assert args.json
    assert args.no_code
    assert args.probe is None


def test_probe_paths(tmp_path, capsys):
    gif_path = tmp_path / "a.gif"
    gif_path.write_bytes(build_gif([3]))

    status = probe_paths([str(gif_path), str(tmp_path / "missing.txt")], detect_code=True)

    out, err = capsys.readouterr()
    assert status == 1
    assert "GIF" in out
    assert "missing.txt: unreadable" in err


def test_app_prints_new_items_as_json(capsys):
    backend = FakeBackend()
    app = VirtualClipboardApp(MonitorConfig(), backend=backend, as_json=True)
    backend.put_text("public class A { public static void main(String[] a) {} }")
    app.monitor.poll_once()

    record = json.loads(capsys.readouterr().out)
    assert record["kind"] == "text"
    assert record["metadata"]["language"] == "Java"
    assert len(app.history) == 1


def test_app_copy_text_is_not_reported(capsys):
    backend = FakeBackend()
    app = VirtualClipboardApp(MonitorConfig(), backend=backend)

    assert app.copy_text("from the app")
    app.monitor.poll_once()

    assert backend.written == ["from the app"]
    assert capsys.readouterr().out == ""


def test_app_delete_lets_content_be_copied_again(capsys):
    backend = FakeBackend()
    app = VirtualClipboardApp(MonitorConfig(detect_code=False), backend=backend)
    backend.put_text("again")
    app.monitor.poll_once()

    app.delete(app.history.latest)
    app.monitor.poll_once()

    assert len(app.history) == 1
    assert capsys.readouterr().out.count("again") == 2


def test_repeated_content_at_capacity_is_reported_once(capsys):
    backend = FakeBackend()
    app = VirtualClipboardApp(MonitorConfig(max_history=2, detect_code=False), backend=backend)
    for text in ("a-text", "b-text", "a-text"):
        backend.put_text(text)
        app.monitor.poll_once()
    app.monitor.poll_once()
    app.monitor.poll_once()

    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 3
    assert [item.content for item in app.history] == ["a-text", "b-text"]


@pytest.mark.parametrize("argv", [["-i", "0"], ["-i", "-1"], ["-i", "nan"], ["-m", "0"], ["-m", "-1"]])
def test_parse_args_rejects_non_positive_values(argv):
    with pytest.raises(SystemExit):
        parse_args(argv)
