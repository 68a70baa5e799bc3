# packcalc

A small HTTP API that works out how to fulfil an order from a set of pack
sizes. Packs are never split. The answer is chosen by these rules, in order:

1. ship as few surplus items as possible;
2. among answers with equal surplus, ship as few packs as possible.

For pack sizes 250, 500 and 1000 and an order of 263 items, the answer is one
pack of 500. For sizes 23, 31 and 53 and an order of 500 000, the answer is
2 × 23, 7 × 31 and 9429 × 53.

## Installing

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Running the server

```
packcalc
```

The command takes no options besides `--help`. It listens on all interfaces,
on port 8080 unless configured otherwise, and stops cleanly on SIGINT or
SIGTERM, waiting up to 30 seconds for requests in flight. It exits with
status 1 if the configuration cannot be parsed or the port cannot be bound.

The web UI and its assets are served from a `web/` directory in the current
working directory; if it is missing, `/` and `/ui` answer 404.

### Configuration

Settings come from environment variables with the `PC_` prefix. Empty
variables count as unset.

| Variable                   | Default           |
|----------------------------|-------------------|
| `PC_SERVER_PORT`           | `8080`            |
| `PC_SERVER_HOST`           | `0.0.0.0`         |
| `PC_SERVER_READ_TIMEOUT`   | `15s`             |
| `PC_SERVER_WRITE_TIMEOUT`  | `15s`             |
| `PC_SERVER_IDLE_TIMEOUT`   | `60s`             |
| `PC_LOGGING_LEVEL`         | `info`            |
| `PC_LOGGING_FORMAT`        | `json` (or `text`)|
| `PC_APP_NAME`              | `pack-calculator` |
| `PC_APP_VERSION`           | `1.0.0`           |
| `PC_APP_ENVIRONMENT`       | `development`     |

Timeouts use duration syntax such as `15s`, `1m30s` or `500ms`. The larger of
the read and write timeouts bounds each socket read and write of a
connection. The host and idle timeout are read and validated but the server
does not use them. Logging levels are `debug`, `info`, `warn` and `error`;
unknown levels mean `info`, unknown formats mean `json`.

## HTTP API

| Method      | Path                | Purpose                              |
|-------------|---------------------|--------------------------------------|
| `POST`      | `/api/v1/calculate` | calculate a pack distribution        |
| `GET, HEAD` | `/health`           | liveness check                       |
| `GET, HEAD` | `/ready`            | readiness check                      |
| `GET`       | `/`, `/ui`          | the web UI (`web/index.html`)        |
| `GET`       | `/static/...`       | files under the `web/` directory     |

A known path with the wrong method gets 405, an unknown path 404. Paths with
repeated slashes or `.`/`..` segments are redirected (301) to their clean
form. Every response carries a fresh `X-Request-ID` header, and every request
is logged to standard output.

### Calculating

Request:

```json
{"pack_sizes": [250, 500, 1000], "order_quantity": 263}
```

Response:

```json
{
  "success": true,
  "data": {
    "id": "1718000000000000000",
    "packs_used": {"500": 1},
    "total_items": 500,
    "total_packs": 1,
    "items_overage": 237,
    "calculation_time": "41.2µs",
    "success": true
  }
}
```

Errors give status 400. A body that is not JSON, or has values of the wrong
type, gives:

```json
{"success": false, "error": "Invalid JSON format"}
```

A missing or empty `pack_sizes`, a pack size that is not positive, or an
`order_quantity` that is missing or not positive gives an error starting with
`"Validation failed: "` and naming each failed field.

### Health

`/health` answers `{"status": "healthy", "version": "1.0.0", "time": ...}`;
`/ready` answers `{"status": "ready", "time": ...}`, with the time in UTC.

## Using it as a library

```python
from packcalc.calculator import PackCalculator

distribution = PackCalculator().calculate([250, 500, 1000, 2000, 5000], 12001)
print(sorted(distribution.items()))  # [(250, 1), (2000, 1), (5000, 2)]
print(distribution.total_items())    # 12250
print(distribution.total_packs())    # 4
```

`calculate` raises `EmptyPackSizesError`, `InvalidOrderQuantityError` or
`InvalidPackSizeError` (all in `packcalc.errors`, subclasses of `DomainError`
and `ValueError`) for bad input.

`packcalc.service.PackService.calculate_optimal` wraps the result in a
`packcalc.model.Calculation` with an id, totals, surplus and timing.
`packcalc.app.create_app(config, web_dir)` builds the WSGI application, so it
can be served by any WSGI server; `packcalc.server.Server` is the threaded
server the command uses.

## What it does not do

There is no storage of pack configurations: pack sizes are sent with every
calculation request, and there are no endpoints for creating, listing,
updating or removing packs. The `Pack` model and the pack request and
response shapes in `packcalc.dto` exist, but nothing serves them.
Calculations are not saved either.