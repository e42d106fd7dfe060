# aircontrib

A small library of pieces for edge data pipelines. It has no runtime
dependencies beyond the standard library.

- **`aircontrib.sql`**
  - `dbhelper`: `DbType`, `BindType`, `to_db_type`, `get_db_helper` and the
    dialect helpers (`MySqlHelper`, `OracleHelper`, `PostgresHelper`,
    `SqliteHelper`, `SqlServerHelper`), whose `to_sql_value` renders Python
    values as SQL literals.
  - `statement`: `SQLStatement.from_sql` parses a statement with `:name`
    parameters (ending at a space) or `$name` parameters (ending at a comma or
    `)`). Quoted text is left alone. It gives the original text (`str()`), the
    prepared SQL with dialect placeholders (`prepared_sql`), a flattened
    statement with literals (`to_statement_sql`) and argument lists
    (`prepared_statement_args`, `statement_args`).
  - `activity`: `Settings` (built from camel-case keys with
    `Settings.from_mapping`) and `SqlInsertActivity`, which runs an INSERT
    statement for each call to `eval`.
- **`aircontrib.rules.notify`**: `evaluate` compares two three-axis readings
  against per-source thresholds. `triplet` and `norm` are its helpers.
- **`aircontrib.notification.broker`**: `NotificationBrokerFactory` (the shared
  one comes from `get_factory()`) creates named `NotificationBroker`s. These
  pass events to a listener's `process_event(notifier, event)`.
- **`aircontrib.graph`**
  - `datatype`: `DataType`, `to_type_enum`, `get_data_type`, `is_simple_type`.
  - `helper`: key hashing (`hash_key`) and value conversion (`cast_string`,
    `convert_to_integer`, `convert_to_long`, `format_value`, ...).
  - `metadata`: graph definitions parsed from JSON with `parse_graph_model`.
  - `model`: `Attribute`, `Node`, `Edge`, their ids, and the in-memory
    `GraphImpl`.
  - `inmemory`: `TraversalGraph`, whose nodes know their incident edges.
  - `builder`: `GraphBuilder` fills graphs from attribute maps and exports them.
    `reconstruct_graph` reads an export back.
  - `manager`: `GraphManager` (via `get_graph_manager()`) keeps graphs by id.
- **`aircontrib.dbservice`**
  - `base`: `DBType`, the abstract `UpsertService` and `ImportService`, and
    `BaseDBServiceFactory`, a registry of service instances.
  - `cache`: `Cache`, a fixed-size ring cache. It raises `CacheOverflowError`
    if its index outgrows its slots.
  - `rdf`: `DNode` and `DEdge` render graph entities as Dgraph N-Quads. The
    module also has naming helpers (`readable_external_id`,
    `canonical_attribute_name`, `dgraph_type`, `trim_white_space`).

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Render a parameterised statement:

```python
from aircontrib.sql.dbhelper import get_db_helper
from aircontrib.sql.statement import SQLStatement

helper = get_db_helper("postgres")
stmt = SQLStatement.from_sql(helper, "select * from t where a = :foo and b = :bar")
print(stmt.to_statement_sql({"foo": True, "bar": "x"}))
# select * from t where a = TRUE and b = 'x'
```

Run inserts. Without a `connect` callable, only the `sqlite`/`sqlite3`
drivers are opened, through `sqlite3`. For any other driver, pass a callable
that takes the settings and returns a DB-API connection:

```python
import sqlite3
from aircontrib.sql.activity import Settings, SqlInsertActivity

conn = sqlite3.connect(":memory:")
conn.execute("create table readings (device text, value real)")

settings = Settings.from_mapping({
    "dbType": "sqlite",
    "driverName": "sqlite3",
    "dataSourceName": ":memory:",
    "statement": "insert into readings (device, value) values ($device, $value)",
})
with SqlInsertActivity(settings, connect=lambda s: conn) as activity:
    print(activity.eval({"device": "d1", "value": 1.5}))
# {'rows_affected': 1, 'last_insert_id': 1}
```

Check a reading against its threshold:

```python
from aircontrib.rules.notify import evaluate

old = {"reading": {"name": "accel", "value": "0,0,0"}}
new = {"reading": {"name": "accel", "value": "3,4,0"}}
thresholds = [{"name": "accel", "notification": "moved",
               "notificationLevel": "WARN", "value": [1.0, 1.0, 1.0]}]
print(evaluate(old, new, thresholds))
# ('accel', 'moved', 'WARN', True)
```

Build a graph from a model:

```python
from aircontrib.graph.metadata import parse_graph_model
from aircontrib.graph.builder import GraphBuilder

definition = parse_graph_model("m1", '{"nodes": [{"name": "device", "key": ["id"],'
                                     ' "attributes": [{"name": "id"}]}], "edges": []}')
builder = GraphBuilder()
graph = builder.create_graph("g1", definition)
builder.build_graph(graph, definition, {"device": {"id": "d1"}}, {}, False)
print(builder.export(graph, definition)["nodes"])
```

Use the cache:

```python
from aircontrib.dbservice.cache import Cache

cache = Cache(3)
cache.add("A", 1)
assert cache.get("A") == 1
```

## What it does not do

- It does not talk to a graph database. `UpsertService` and `ImportService`
  are interfaces only, and no Dgraph client or service that implements them
  is included. `DNode.to_rdf` and `DEdge.to_rdf` produce the N-Quad text, and
  sending it anywhere is up to you.
- `SqlInsertActivity` opens only SQLite connections by itself. Other
  databases need a `connect` callable and their own DB-API driver.
- There is no command-line program and no server. Everything here is a
  library to import.