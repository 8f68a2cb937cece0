# pickup_hub

Tools for running a parcel pick-up point. You can accept orders from couriers, give them to recipients, take returns, and keep a register of pick-up points.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Console usage

The `pickup-hub` command keeps its data in two files in the current directory:

- orders in `storage_orders.json`
- pick-up points in `storage_points.json`

It creates each file when the file is missing.

```
pickup-hub -command=help
pickup-hub -command=accept -id=1 -recipient=7 -weight=500 -price=1000 -cover=box -expire=02.01.2030
pickup-hub -command=give 1 2 3
pickup-hub -command=list -recipient=7 -t 5
pickup-hub -command=return -id=1 -recipient=7
pickup-hub -command=list-return 2 5
pickup-hub -command=remove -id=1
pickup-hub -command=pickpoints
```

Flags take any of these forms: `-name`, `--name`, `-name=value` or `-name value`. Flag parsing stops at the first argument that is not a flag.

- `accept`: takes an order from a courier.
  - The expiry date is given as day.month.year.
  - The cover is `box`, `bag` or `film`. A bag must be under 10 kg and a box under 30 kg.
  - The packaging price is added to the order price: 5, 20 or 1 rubles for bag, box and film.
  - An order that is already expired is refused.
- `give`: hands orders to their recipient.
  - All the orders must exist and belong to one recipient.
  - None of them may be already given, returned or expired.
- `list`: shows a recipient's orders.
  - `-t` limits the list to orders not yet given.
  - An optional argument N shows only the last N orders.
- `return`: takes a given order back from its recipient. This must happen within two days of giving it.
- `list-return`: shows returned orders.
  - The arguments are the page number and the number of orders per page. The defaults are page 0, meaning all orders, and 10 per page.
  - Pages are numbered from 1.
- `remove`: hands an order back to the courier. The order must be expired and not given.
- `pickpoints`: starts an interactive shell that reads commands from standard input.
  - One writer thread and ten reader threads do the work, and their reports are printed as the work goes.
  - `exit`, the end of input or Ctrl-C stops the shell.
  - A blank line repeats the previous command.

```
write 10 Chertanovo Chertanovskaya-Street-10 contact-info
read 10
exit
```

In the shell, `write` takes an id, a name, an address and a contact. Each of them is a single word.

## Library usage

The modules can be used on their own:

- `pickup_hub.model`: the domain types `Order`, `OrderInput`, `PickPoint` and `LogMessage`, and the `ServiceError` family of exceptions.
- `pickup_hub.cover`: `validate_order` and `packaging_price`.
- `pickup_hub.file_storage`: `OrderStorage` and `PointStorage`. These are JSON-file stores.
- `pickup_hub.memory_cache`: `MemoryCache`.
  - A thread-safe cache with a TTL. The defaults are a 60 s TTL and a sweep every 5 s.
  - Reading an entry refreshes it.
  - A missing key raises `CacheMissedError`.
  - Call `close()` when you are done, or use the cache as a context manager.
- `pickup_hub.order_service`: `OrderService`, which holds the order rules above. It takes an optional gauge and counter from `pickup_hub.metrics`.
- `pickup_hub.pickpoint_service`: `PickPointService`.
  - CRUD on pick-up points, with read-through caching.
  - Request metrics are recorded through `Counter` and `Histogram` from `pickup_hub.metrics`.
  - `DummyTransactor` is for stores that have no transactions.
- `pickup_hub.kafka_sender`: `KafkaSender`. It turns a `RequestMessage` into a `ProducerMessage` and passes it to any object that has a `send_sync_message` method.
- `pickup_hub.log_handler`: `LogHandler`. It decodes a received `LogMessage` record and logs it.
- `pickup_hub.handlers` and `pickup_hub.http_api`: the HTTP side.

```python
from werkzeug.serving import run_simple

from pickup_hub.file_storage import PointStorage
from pickup_hub.handlers import PickPointHandler
from pickup_hub.http_api import AuthMiddleware, LogMiddleware, make_app
from pickup_hub.memory_cache import MemoryCache
from pickup_hub.pickpoint_service import DummyTransactor, PickPointService


class PrintSender:
    def send_message(self, message):
        print(message)


storage = PointStorage("storage_points.json")
with MemoryCache() as cache:
    service = PickPointService(storage, cache, DummyTransactor())
    users = [("admin", "password")]
    app = make_app(PickPointHandler(service), AuthMiddleware(users), LogMiddleware(PrintSender()))
    run_simple("localhost", 8080, app)
```

`make_app` returns a WSGI application with these routes:

- `POST /pickpoint`: creates a point and returns it as JSON.
- `PUT /pickpoint`: updates a point.
- `GET /pickpoint/<id>`: returns a point as JSON.
- `DELETE /pickpoint/<id>`: deletes a point.

Requests on these routes are first described to the sender and then checked for HTTP basic credentials of a listed user. A request without valid credentials gets 401.

The handlers answer with these status codes:

- 400 for a body that cannot be decoded or for an invalid id.
- 404 for an unknown point.
- 500 for any other failure.

Unknown paths get `404 page not found`.

## What this package does not do

- It stores data only in JSON files. It has no database-backed repository and no Redis cache.
- It contains no message-broker client. `KafkaSender` needs a producer object that you supply, and `LogHandler` only handles records that you pass to it.
- It offers no gRPC service and no metrics HTTP endpoint. The metrics in `pickup_hub.metrics` are kept in memory only.
- It has no command that starts the HTTP API. Serve the application from `make_app` with any WSGI server, as in the example above.