# payproc

A small TCP server that accepts newline-terminated payment requests and
answers each with a single response line.

## Protocol

Requests take the form `PAYMENT|<amount>`, one per line (a trailing `\r` is
ignored). The amount must be a positive integer, optionally signed with `+`.
The server replies with one line per request:

| Request          | Response                                  |
|------------------|-------------------------------------------|
| `PAYMENT|10`     | `RESPONSE|ACCEPTED|Transaction processed` |
| `PAYMENT|0`      | `RESPONSE|REJECTED|Invalid amount`        |
| `PAYMENT|abc`    | `RESPONSE|REJECTED|Invalid amount`        |
| `INVALID`        | `RESPONSE|REJECTED|Invalid request`       |

Amounts above 100 are treated as slow transactions: processing takes as many
milliseconds as the amount, capped at 10 000 ms. If shutdown begins while such
a request is in progress, or before it starts, it is cut short and the client
receives `RESPONSE|REJECTED|Request cancelled`.

Several requests may be sent on one connection. A connection that sends no
request line for 4 seconds is closed, as is one that sends a line longer than
64 KiB.

On shutdown the listener closes at once, so new connections are refused.
Connections already accepted keep being answered, and the server waits up to
3 seconds for them to finish.

## Running

```
pip install .
payproc
```

By default the server listens on `localhost:8080`. Use `--host` and `--port`
to listen elsewhere:

```
payproc --host 0.0.0.0 --port 9000
```

It stops on SIGINT (Ctrl+C) or SIGTERM. If the port cannot be opened, the
command logs the error and exits with status 1.

Try it with any line-oriented TCP client:

```
$ printf 'PAYMENT|10\n' | nc localhost 8080
RESPONSE|ACCEPTED|Transaction processed
```

## Using it as a library

```python
import threading

from payproc.handler import RequestHandler
from payproc.server import TcpServer
from payproc.validator import AmountValidator

shutdown = threading.Event()
handler = RequestHandler(shutdown, AmountValidator())
server = TcpServer(handler, shutdown, "localhost", 8080)
server.start()
# ...
server.stop()
```

- `AmountValidator.validate(request)` returns the amount of a well-formed
  request and raises `ValidationError` (a `ValueError`) otherwise.
- `RequestHandler.handle_request(request)` turns a single request line into
  its response line. Any object with a `validate` method that raises
  `ValueError` on bad input can stand in for the validator.
- `TcpServer` opens its listening socket on construction, so a busy port
  raises `OSError` straight away. Setting the `shutdown` event has the same
  effect as calling `stop()`. `active_connections()` returns the number of
  connections being served.
- `payproc.protocol` holds the limits and message texts, along with
  `format_response(marker, detail)` and `payment_request(amount)` for
  building lines.

## What it does not do

Payments are not actually processed or stored anywhere: the server only
validates the request and simulates a processing delay. There is no
encryption or authentication on the connection.

## Tests

```
pip install .[test]
pytest
```