"""Oracle job definitions and their protobuf wire encoding.

Only the two tasks the price feeds use are modelled: an HTTP fetch and a
JSON path extraction. Messages are encoded by hand following the
Switchboard ``OracleJob`` schema:

- ``OracleJob.tasks`` = field 1 (repeated ``Task``)
- ``Task.http_task`` = field 1, ``Task.json_parse_task`` = field 2
- ``HttpTask.url`` = field 1, ``HttpTask.method`` = field 2
- ``JsonParseTask.path`` = field 1, ``JsonParseTask.aggregation_method`` = field 2
"""

import base64
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Union

_WIRE_VARINT = 0
_WIRE_LENGTH_DELIMITED = 2


def encode_varint(value: int) -> bytes:
    """Encode a non-negative integer as a base-128 varint."""
    if value < 0:
        raise ValueError(f"varint value must be non-negative: {value}")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _key(field_number: int, wire_type: int) -> bytes:
    return encode_varint((field_number << 3) | wire_type)


def _bytes_field(field_number: int, value: bytes) -> bytes:
    return _key(field_number, _WIRE_LENGTH_DELIMITED) + encode_varint(len(value)) + value


def _varint_field(field_number: int, value: int) -> bytes:
    return _key(field_number, _WIRE_VARINT) + encode_varint(value)


class HttpMethod(IntEnum):
    METHOD_GET = 1
    METHOD_POST = 2


class AggregationMethod(IntEnum):
    NONE = 0
    MIN = 1
    MAX = 2
    SUM = 3
    MEAN = 4
    MEDIAN = 5


@dataclass
class HttpTask:
    """Fetch a URL and pass the body to the next task."""

    url: str
    method: HttpMethod = HttpMethod.METHOD_GET

    def encode(self) -> bytes:
        return _bytes_field(1, self.url.encode("utf-8")) + _varint_field(2, self.method)

    def to_dict(self) -> dict:
        return {"httpTask": {"url": self.url, "method": self.method.name}}


@dataclass
class JsonParseTask:
    """Extract a value from the previous task's JSON output."""

    path: str
    aggregation_method: AggregationMethod = AggregationMethod.NONE

    def encode(self) -> bytes:
        # proto2 optional: an explicitly set default is still written
        return _bytes_field(1, self.path.encode("utf-8")) + _varint_field(
            2, self.aggregation_method
        )

    def to_dict(self) -> dict:
        return {
            "jsonParseTask": {
                "path": self.path,
                "aggregationMethod": self.aggregation_method.name,
            }
        }


Task = Union[HttpTask, JsonParseTask]

_TASK_FIELDS = {HttpTask: 1, JsonParseTask: 2}


@dataclass
class OracleJob:
    """An ordered list of tasks an oracle runs to produce a value."""

    tasks: List[Task] = field(default_factory=list)

    def encode(self) -> bytes:
        """Protobuf encoding of the job."""
        out = bytearray()
        for task in self.tasks:
            task_message = _bytes_field(_TASK_FIELDS[type(task)], task.encode())
            out.extend(_bytes_field(1, task_message))
        return bytes(out)

    def encode_delimited(self) -> bytes:
        """Protobuf encoding prefixed with its varint length."""
        encoded = self.encode()
        return encode_varint(len(encoded)) + encoded

    def to_base64(self) -> str:
        """Base64 of the length-delimited encoding, as the simulator expects."""
        return base64.b64encode(self.encode_delimited()).decode("ascii")

    def to_dict(self) -> dict:
        """JSON form of the job."""
        return {"tasks": [task.to_dict() for task in self.tasks]}


def price_job(price_task_url: str, ticker: str, json_path: str = "price") -> OracleJob:
    """Job that GETs ``{price_task_url}/{ticker}`` and reads ``json_path``."""
    return OracleJob(
        tasks=[
            HttpTask(url=f"{price_task_url}/{ticker}", method=HttpMethod.METHOD_GET),
            JsonParseTask(path=json_path, aggregation_method=AggregationMethod.NONE),
        ]
    )
