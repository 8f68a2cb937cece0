"""Interactive shell that writes and reads pick-up points through worker threads."""

from __future__ import annotations

import queue
import re
import sys
import threading
from collections.abc import Iterable
from typing import Any, Protocol, TextIO

from pickup_hub.model import PickPoint

QUEUE_SIZE = 10
READER_COUNT = 10

SHELL_HELP = """
	interactive mode for command pickpoints usage guide:

	Command desciption:
		help: список доступных команд с кратким описанием
		write: добавить информацию о ПВЗ
		read: считать информацию о ПВЗ
		exit: завершение работы

	Needed arguments for each command:
		help
		write 		 id(int)	name(string)	address(string)	   contact(string)
		read	  	 id(int)
		exit

	Examples:
		write 10 Chertanovo Chertanovskaya-Street-10 contact-desk
		read 10
	"""

_INTEGER = re.compile(r"[+-]?[0-9]+")
_STOP = object()


class PointService(Protocol):
    def read(self, point_id: int) -> PickPoint: ...
    def create(self, point: PickPoint) -> PickPoint: ...


class _ScanError(ValueError):
    """A shell line does not have the expected arguments."""


def shell_help() -> None:
    """Print the usage guide of the interactive shell."""
    print(SHELL_HELP)


def _describe(point: PickPoint) -> str:
    return f"{{{point.id} {point.name} {point.address} {point.contact}}}"


def _scan_int(tokens: list[str], index: int) -> int:
    if len(tokens) <= index:
        raise _ScanError("unexpected EOF")
    if not _INTEGER.fullmatch(tokens[index]):
        raise _ScanError("expected integer")
    return int(tokens[index])


class PickPointShell:
    """Reads commands line by line; one writer and a pool of readers do the work.

    Every worker reports through a single logger thread that prints to the
    output. :meth:`close` lets queued work finish, then stops all threads.
    """

    def __init__(self, service: PointService, output: TextIO | None = None, readers: int = READER_COUNT) -> None:
        self._service = service
        self._output = output if output is not None else sys.stdout
        self._output_lock = threading.Lock()
        self._writes: queue.Queue[Any] = queue.Queue(QUEUE_SIZE)
        self._reads: queue.Queue[Any] = queue.Queue(QUEUE_SIZE)
        self._logs: queue.Queue[Any] = queue.Queue(QUEUE_SIZE)
        self._last_command = ""
        self._closed = False
        self._writer = threading.Thread(target=self._write_points, name="pickpoint-writer", daemon=True)
        self._readers = [
            threading.Thread(target=self._read_points, args=(serial,), name=f"pickpoint-reader-{serial}", daemon=True)
            for serial in range(1, readers + 1)
        ]
        self._logger = threading.Thread(target=self._log_points, name="pickpoint-logger", daemon=True)
        for thread in (self._writer, *self._readers, self._logger):
            thread.start()

    def __enter__(self) -> PickPointShell:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _emit(self, text: str) -> None:
        with self._output_lock:
            self._output.write(text + "\n")
            self._output.flush()

    def handle_line(self, line: str) -> bool:
        """Process one command line; returns False once the shell should exit.

        A blank line repeats the previous command word.
        """
        if self._closed:
            raise RuntimeError("shell is closed")
        tokens = line.rstrip("\r\n").split()
        if tokens:
            self._last_command = tokens[0]
        command = self._last_command
        if command == "help":
            self._emit(SHELL_HELP)
        elif command == "exit":
            return False
        elif command == "write":
            try:
                point_id = _scan_int(tokens, 1)
                if len(tokens) < 5:
                    raise _ScanError("unexpected EOF")
            except _ScanError as exc:
                self._emit(str(exc))
                return True
            self._writes.put(PickPoint(id=point_id, name=tokens[2], address=tokens[3], contact=tokens[4]))
        elif command == "read":
            try:
                point_id = _scan_int(tokens, 1)
            except _ScanError as exc:
                self._emit(str(exc))
                return True
            self._reads.put(point_id)
        else:
            self._emit("Unknown command")
        return True

    def run(self, lines: Iterable[str]) -> None:
        """Handle lines until 'exit', end of input or an interrupt, then close."""
        try:
            for line in lines:
                if not self.handle_line(line):
                    break
        except KeyboardInterrupt:
            self._emit("\nsignal caught: interrupt")
        finally:
            self.close()

    def close(self) -> None:
        """Finish queued work and stop the worker and logger threads."""
        if self._closed:
            return
        self._closed = True
        self._writes.put(_STOP)
        for _ in self._readers:
            self._reads.put(_STOP)
        self._writer.join()
        for reader in self._readers:
            reader.join()
        self._logs.put(_STOP)
        self._logger.join()

    def _write_points(self) -> None:
        while (point := self._writes.get()) is not _STOP:
            self._logs.put(f"writer: trying to write new pick-up point {_describe(point)}")
            try:
                self._service.create(point)
            except Exception as exc:
                status = f"writer: error while adding point {point.id}: {exc}"
            else:
                status = f"writer: point {point.id} added successfully"
            self._logs.put(status)
        self._logs.put("writer: context is canceled")

    def _read_points(self, serial: int) -> None:
        while (point_id := self._reads.get()) is not _STOP:
            self._logs.put(f"reader {serial}: trying to find info about pick-up point with id {point_id}")
            try:
                point = self._service.read(point_id)
            except Exception as exc:
                status = f"reader {serial}: error while getting point {point_id}: {exc}"
            else:
                status = (
                    f"reader {serial}: found pick-up point:\n\tid: {point.id}\tname: {point.name}"
                    f"\taddress: {point.address}\tcontacts: {point.contact}"
                )
            self._logs.put(status)
        self._logs.put(f"reader {serial}: context is canceled")

    def _log_points(self) -> None:
        while (message := self._logs.get()) is not _STOP:
            self._emit(message)
        self._emit("logger: context is canceled")