from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from conftest import make_person
from finder.output import OutputWriter, detect_format, open_output


class KeepOpen(io.StringIO):
    def close(self):
        self.closed_called = True


@pytest.mark.parametrize(
    "output, explicit, expected",
    [
        ("stdout", None, "text"),
        ("people.csv", None, "csv"),
        ("people.JSON", None, "json"),
        ("people.txt", None, "text"),
        ("people.csv", "json", "json"),
        ("stdout", "CSV", "csv"),
    ],
)
def test_detect_format(output: str, explicit, expected: str) -> None:
    assert detect_format(output, explicit) == expected


def test_text_format() -> None:
    stream = KeepOpen()
    writer = OutputWriter(stream, "text")
    writer.write(make_person())
    writer.write(None)

    assert stream.getvalue() == (
        "Jan Novák (xnovak00)\nxnovak00@stud.fit.vutbr.cz\nB02 218\n\n"
    )
    assert stream.closed_called


def test_csv_format_quotes_commas() -> None:
    stream = KeepOpen()
    writer = OutputWriter(stream, "csv")
    writer.write(make_person(fullname="Novák, Jan"))
    writer.write(None)

    assert stream.getvalue() == '"Novák, Jan",xnovak00,xnovak00@stud.fit.vutbr.cz,B02,218\n'


def test_json_is_buffered_until_end_of_stream() -> None:
    stream = KeepOpen()
    writer = OutputWriter(stream, "json")
    writer.write(make_person(room="201"))
    writer.write(make_person(room="202"))
    assert stream.getvalue() == ""

    writer.write(None)
    data = json.loads(stream.getvalue())
    assert [p["room"] for p in data] == ["201", "202"]
    assert writer.count == 2


def test_end_of_stream_is_idempotent_and_final() -> None:
    writer = OutputWriter(KeepOpen(), "json")
    writer.write(None)
    writer.write(None)
    with pytest.raises(ValueError):
        writer.write(make_person())


def test_unknown_format() -> None:
    with pytest.raises(ValueError, match="Unsupported format"):
        OutputWriter(io.StringIO(), "xml")


def test_open_output_to_file(tmp_path: Path) -> None:
    path = tmp_path / "out" / "people.json"
    writer = open_output(str(path), "json")
    writer.write(make_person())
    writer.write(None)

    assert writer.stream.closed
    assert json.loads(path.read_text(encoding="utf-8"))[0]["login"] == "xnovak00"


def test_open_output_stdout_is_not_closed(capsys) -> None:
    writer = open_output("stdout", "text")
    writer.write(make_person())
    writer.write(None)

    assert "Jan Novák (xnovak00)" in capsys.readouterr().out
