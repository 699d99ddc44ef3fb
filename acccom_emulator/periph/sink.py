"""
AccCom Emulator - Output Sinks (PRT / PRC / PRS)

The print opcodes never touch a console directly. They hand their
payload to an IOSink:
  PRT  emit_number(int)     signed decimal value
  PRC  emit_char(byte)      one character code
  PRS  emit_string(bytes)   null-terminated string, terminator excluded

Bytes are rendered as Latin-1 so every code 0-255 maps to one character.

Sinks provided:
  ConsoleSink  writes text to a stream (stdout by default)
  BufferSink   collects bytes in tx_buffer for tests and embedding
  SerialSink   forwards bytes to a pyserial port, e.g. a terminal on
               /dev/ttyUSB0 or a loop:// URL
"""

import sys
import logging
from abc import ABC, abstractmethod
from typing import Optional, TextIO

import serial

log = logging.getLogger(__name__)

ENCODING = 'latin-1'


class IOSink(ABC):
    """Consumer of the print opcodes' output."""

    @abstractmethod
    def emit_number(self, value: int):
        ...

    @abstractmethod
    def emit_char(self, ch: int):
        ...

    @abstractmethod
    def emit_string(self, data: bytes):
        ...

    def flush(self):
        pass


class ConsoleSink(IOSink):
    """Text output to a stream."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    @property
    def _out(self) -> TextIO:
        # Resolved late so redirected/captured stdout is honoured
        return self.stream if self.stream is not None else sys.stdout

    def emit_number(self, value: int):
        self._out.write(str(value))

    def emit_char(self, ch: int):
        self._out.write(bytes([ch & 0xFF]).decode(ENCODING))

    def emit_string(self, data: bytes):
        self._out.write(bytes(data).decode(ENCODING))

    def flush(self):
        self._out.flush()


class BufferSink(IOSink):
    """Collects all output bytes in memory."""

    def __init__(self):
        self.tx_buffer: bytearray = bytearray()

    def emit_number(self, value: int):
        self.tx_buffer.extend(str(value).encode('ascii'))

    def emit_char(self, ch: int):
        self.tx_buffer.append(ch & 0xFF)

    def emit_string(self, data: bytes):
        self.tx_buffer.extend(data)

    @property
    def output(self) -> bytes:
        return bytes(self.tx_buffer)

    @property
    def text(self) -> str:
        return self.tx_buffer.decode(ENCODING)

    def reset(self):
        self.tx_buffer.clear()


class SerialSink(IOSink):
    """Forwards output bytes to a serial port.

    Accepts an already-open pyserial object so callers can share a port,
    or use SerialSink.open() to open one from a device name or URL.
    """

    DEFAULT_BAUD = 9600

    def __init__(self, port):
        self.ser = port

    @classmethod
    def open(cls, url: str, baudrate: int = DEFAULT_BAUD) -> 'SerialSink':
        """Open a port (8N1). Raises serial.SerialException on failure."""
        ser = serial.serial_for_url(
            url,
            baudrate=baudrate,
            bytesize=serial.EIGHTBITS,
            parity=serial.PARITY_NONE,
            stopbits=serial.STOPBITS_ONE,
            timeout=0.1,
            write_timeout=1.0,
        )
        log.info("Opened %s @ %d baud (8N1)", url, baudrate)
        return cls(ser)

    def _write(self, data: bytes):
        self.ser.write(data)

    def emit_number(self, value: int):
        self._write(str(value).encode('ascii'))

    def emit_char(self, ch: int):
        self._write(bytes([ch & 0xFF]))

    def emit_string(self, data: bytes):
        self._write(bytes(data))

    def flush(self):
        self.ser.flush()

    def close(self):
        if self.ser is not None and self.ser.is_open:
            self.ser.close()
            log.info("Closed %s", self.ser.port)
