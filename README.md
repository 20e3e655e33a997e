# relaykit

relaykit is a library of the pieces a proxy server is built from: streams
that can be replayed after sniffing, a registry that fills every module's
settings from one JSON or YAML document, a levelled logger, a recorder of
connection events, a connection redirector and a reader for geoip/geosite
data files.

## Installation

```
pip install relaykit
```

Python 3.10 or later is required. The only dependency is PyYAML.

## Modules

- `relaykit.rewind`
  - `RewindReader` wraps any object with a `read(size)` method. After
    `set_buffer_size(n)` it keeps a copy of everything it reads.
  - `rewind()` serves the kept bytes again before new input.
  - `stop_buffering()` stops recording, and `set_buffer_size(0)` drops the
    copy.
  - `read_byte()` raises `EOFError` at end of input, and `discard(n)` skips
    bytes.
  - `RewindConn` does the same for a socket and adds `write` and `close`. It
    is also a context manager.
  - `StickyWriter(raw_writer, max_buffered)` holds back the first
    `max_buffered` writes and sends them to the raw writer as one.
- `relaykit.config`
  - `register_config_creator(name, creator)` registers a function that
    returns the default settings of a section. This is usually a dataclass
    instance.
  - `with_json_config(ctx, data)` and `with_yaml_config(ctx, data)` parse one
    document into every registered section. They return a new context dict.
  - `from_context(ctx, name)` returns a section, or `None`.
  - `with_config(ctx, name, cfg)` stores a section directly.
  - A dataclass field is read from the key named in its `"json"` or `"yaml"`
    metadata entry, or from its own name.
  - Numbers given for `str` fields become strings.
  - Parse errors raise `ProxyError`.
- `relaykit.option`
  - Subclass the abstract `Handler` and implement `name()`, `handle()` and
    `priority()`.
  - `register_handler` collects handlers.
  - `pop_option_handler()` removes and returns the one with the highest
    priority. It raises `ProxyError("no option left")` when none remain.
- `relaykit.log`
  - Module-level `error`, `warn`, `info`, `debug`, `trace` and `fatal`
    functions forward to the active backend. Each also has a printf-style
    `...f` variant.
  - `set_log_level` and `set_output` also forward to the backend.
  - Levels are in `LogLevel`: `ALL`, `INFO`, `WARN`, `ERROR`, `FATAL`, `OFF`.
  - The default backend, `EmptyLogger`, discards messages. Its `fatal` still
    exits with status 1.
  - Install another backend with `register_logger`, and read the active one
    with `get_logger`.
- `relaykit.golog`
  - `Logger(out)` writes one line per message. Each line holds a level tag, a
    timestamp and, for fatal, error and debug messages, the caller's
    function, file and line.
  - Colour is on when the output is a terminal. Change it with
    `with_color()` and `without_color()`.
  - `without_timestamp()` turns the timestamp off, and `quiet()` silences the
    logger.
- `relaykit.simplelog`
  - `SimpleLogger` writes timestamped lines to standard error.
  - `set_output` only records the writer it is given.
- `relaykit.buffer` and `relaykit.colorful`
  - `Buffer` assembles byte strings. `append_int(value, width)` zero-pads the
    number to `width`.
  - `ColorBuffer` adds ANSI colour switches.
  - `red`, `green`, `orange`, `blue`, `purple`, `cyan` and `gray` wrap bytes
    in a colour. The colour sequences are empty on platforms other than
    Linux.
- `relaykit.recorder`
  - `subscribe(uid, transport, target_port, include_payload)` returns a
    `queue.Queue` of `Record` entries.
  - An empty filter matches everything.
  - Each queue holds `CAPACITY` (10) records. Further records are dropped
    until the subscriber reads.
  - `add(...)` builds a record from client and target addresses and delivers
    it to every matching subscriber. Addresses may be `(host, port)` tuples
    or `"host:port"` strings.
  - `unsubscribe(uid)` removes a subscriber.
- `relaykit.redirector`
  - `Redirector` relays each queued `Redirection(redirect_to, inbound_conn,
    dial)` in a background thread. The default dial is
    `socket.create_connection`.
  - `redirect` returns `False` once the redirector is closed.
  - `close()`, or leaving a `with` block, stops the redirector and its relays.
- `relaykit.geodata`
  - `decode(filename, code)` and `emit_bytes(stream, code)` return the raw
    protobuf message of one entry in a `geoip.dat` or `geosite.dat` file.
    Matching ignores case.
  - A missing code raises `CodeNotFoundError`. A malformed file raises
    `GeodataError`.
- `relaykit.api`
  - `register_handler(name, handler)` registers a named service.
  - `run_service(ctx, name, auth)` calls the service. It returns `None` if
    the name is unknown.
- `relaykit.common` and `relaykit.errors`
  - `sha224_string` and `human_friendly_traffic` cover hashing and traffic
    figures.
  - `pick_port(network, host)` returns a free port for `"tcp"` or `"udp"`, or
    0.
  - `write_all_bytes`, `write_file` and `fetch_http_content` handle writing
    and fetching. `fetch_http_content` takes http(s) only, accepts only a 200
    response and has a 30 s timeout.
  - `get_asset_location` resolves a relative file name. It uses the
    directory in the `RELAYKIT_LOCATION_ASSET` environment variable, or the
    program's directory when the variable is not set.
  - `Notifier` coalesces signals into one pending wake-up.
  - `ProxyError` is the package's exception. Its `base` appends the cause as
    `" | cause"`.

## Examples

```python
from relaykit.common import human_friendly_traffic

human_friendly_traffic(512)        # "512 B"
human_friendly_traffic(2048)       # "2.00 KiB"
```

```python
from relaykit.buffer import Buffer

buf = Buffer()
buf.append(b"port ")
buf.append_int(12345, 6)
buf.bytes()                        # b"port 012345"
```

```python
from dataclasses import dataclass, field
from relaykit import config

@dataclass
class ProxySettings:
    run_type: str = field(default="", metadata={"json": "run_type", "yaml": "run-type"})
    log_level: int = field(default=1, metadata={"json": "log_level", "yaml": "log-level"})

config.register_config_creator("PROXY", ProxySettings)
ctx = config.with_json_config(None, b'{"run_type": "client"}')
config.from_context(ctx, "PROXY")  # ProxySettings(run_type='client', log_level=1)
```

```python
from relaykit.geodata import CodeNotFoundError, decode

try:
    entry = decode("geoip.dat", "private")
except CodeNotFoundError:
    entry = None
```

```python
from relaykit.errors import ProxyError

try:
    raise ProxyError("failed to dial connection").base(ConnectionRefusedError("refused"))
except ProxyError as exc:
    print(exc)                     # failed to dial connection | refused
```

## What it does not do

relaykit is a library, not a proxy. It has no command, listens on no port of
its own and implements no tunnel protocol, TLS layer or user database. The
registries in `relaykit.config`, `relaykit.option` and `relaykit.api` start
empty; the application registers its own sections, handlers and services.
`relaykit.geodata` returns raw entry bytes and does not interpret the CIDR or
domain lists inside them.

## Running the tests

```
pip install "relaykit[test]"
pytest
```