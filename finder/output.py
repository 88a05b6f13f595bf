"""
Output sinks: text, CSV and JSON writers fed one person at a time
"""
from __future__ import annotations
import csv
import json
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from finder.core import Person

FORMATS = ("text", "csv", "json")
STDOUT = "stdout"


def detect_format(output: str, explicit: Optional[str] = None) -> str:
    """Explicit format wins, otherwise guess from the output file extension"""
    if explicit:
        return explicit.lower()
    suffix = Path(output).suffix.lower() if output != STDOUT else ""
    if suffix == ".csv":
        return "csv"
    if suffix == ".json":
        return "json"
    return "text"


class OutputWriter:
    """
    Streams people to `stream`; `write(None)` marks end of stream.

    JSON is buffered and written as one array at end of stream. The stream
    is closed at end of stream unless it is stdout.
    """

    def __init__(self, stream: TextIO, fmt: str = "text"):
        if fmt not in FORMATS:
            raise ValueError(f'Unsupported format "{fmt}"')
        self.stream = stream
        self.fmt = fmt
        self.count = 0
        self._json: List[dict] = []
        self._csv = csv.writer(stream, lineterminator="\n") if fmt == "csv" else None
        self._closed = False

    def write(self, person: Optional[Person]):
        if person is None:
            self._finish()
            return
        if self._closed:
            raise ValueError("Output already finished")

        self.count += 1
        if self.fmt == "text":
            self.stream.write(
                f"{person.fullname} ({person.login})\n{person.email}\n{person.block} {person.room}\n\n"
            )
        elif self.fmt == "csv":
            self._csv.writerow([person.fullname, person.login, person.email, person.block, person.room])
        else:
            self._json.append(person.to_dict())

    def _finish(self):
        if self._closed:
            return
        self._closed = True
        if self.fmt == "json":
            self.stream.write(json.dumps(self._json, ensure_ascii=False))
        self.stream.flush()
        if self.stream not in (sys.stdout, sys.__stdout__):
            self.stream.close()


def open_output(output: str = STDOUT, fmt: str = "text") -> OutputWriter:
    """Writer for stdout or a file path (parent directories are created)"""
    if output == STDOUT:
        return OutputWriter(sys.stdout, fmt)
    path = Path(output).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    return OutputWriter(path.open("w", encoding="utf-8", newline=""), fmt)
