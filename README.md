# prismaclient

Building blocks for a client of the Prisma query engine. The package does not
talk to a database itself. You pass it an engine object, and it turns your
calls into the engine's query language and reads the results back.

## Installation

```
pip install .
pip install ".[test]"   # adds pytest for running the test suite
```

The package has no runtime dependencies outside the standard library.

## Generator support (`prismaclient.generator`)

- `prismaclient.generator.names` contains the casing helpers.
  - `to_camel`, `to_lower_camel` and `apply_initialisms` do the conversions.
    `apply_initialisms` turns `Id` into `ID`, `Url` into `URL`, and so on.
  - `PrismaString` is a `str` subclass. Its methods are `go_case()`,
    `go_lower_case()`, `camel_case()`, `tag()`, `prisma_go_case()` (for
    example `relevance` becomes `Relevance_`) and `prisma_internal_case()`
    (for example `relevance` becomes `_relevance`).
  - `PrismaType` is also a `str` subclass. `value()` maps a built-in scalar to
    its native type name, for example `Int` becomes `int` and `Json` becomes
    `JSON`. Any other name comes back in exported casing.
- `prismaclient.generator.dmmf` holds the data model meta format (DMMF).
  - `parse_document(data)` accepts JSON text or an already decoded dict and
    returns a `Document`. The document holds the models, fields, enums, the
    input and output schema types, and the operation mappings.
  - Malformed input raises `ValueError`.
- `prismaclient.generator.transform` builds the AST that code templates use.
  - `build_ast(document)` collects:
    - the scalars;
    - the model enums;
    - the models, with their unique indexes and compound primary keys;
    - the read and write filters.
  - The deprecated read filters are kept, for example `LT` and `HasPrefix`.
  - When a model has a matching `OrderByRelevanceInput` type, the model also
    gets a pseudo `relevance` field.
  - Look a filter up with `AST.read_filter(scalar, is_list)` or
    `AST.write_filter(scalar, is_list)`.
  - `AST.to_dict()` gives a JSON-ready view of the AST.
- `prismaclient.generator.config` holds the input the Prisma CLI sends to a
  generator.
  - `parse_root(data)` decodes that input into a `Root`.
  - `add_defaults(root)` sets the package name to `db` when none is given.
  - `write_gitignore(root)` writes a `.gitignore` into the output directory,
    unless `disableGitignore` or `disableGoBinaries` is `"true"`.
  - `binary_targets(root)` lists the engine platforms needed, ending with
    `native` and `linux`. It returns an empty list when binaries are disabled
    or the engine type is `dataproxy`.
  - `transform(root, environ)` builds the AST and stores it on the root. When
    `DEBUG` is set, it also prints the AST.
  - `Root.engine_type(environ)` chooses the engine type. It reads
    `PRISMA_CLIENT_ENGINE_TYPE` first, then the schema config, and defaults to
    `binary`.

## Runtime (`prismaclient.runtime`)

- `prismaclient.runtime.builder` builds and sends queries.
  - `Engine` is a protocol with four methods: `connect()`, `disconnect()`,
    `do(payload)` and `batch(payload)`.
  - A `Query` is made of `Input`, `Field` and `Output` items.
  - `Query.build()` renders the query document.
  - `Query.exec()` sends `{"query": ..., "variables": {}}` through the engine
    and returns the engine's response.
  - Without an engine, `Query.exec()` raises `PrismaError`.
  - Input fields that share a name have their subselections merged.
  - `encode_value` writes compact JSON with sorted keys and HTML-safe strings.
  - `transform_equals(fields)` replaces a nested `equals` filter with its
    value.
- `prismaclient.runtime.lifecycle.Lifecycle` wraps an engine.
  - It provides `connect()` and `disconnect()`.
  - It can be used as a context manager: it connects on entry and disconnects
    on exit.
- `prismaclient.runtime.transaction` runs several queries in one transaction.
  - `TX.transaction(*queries)` prepares a `TransactionExec`.
  - `TransactionExec.exec()` sends the queries to `engine.batch` as one
    transactional batch, then hands each query its result.
  - Engine errors are raised as `TransactionError`.
  - A `Result` reads one query's result and caches it after the first read.
  - Reading a result that was never delivered raises `TransactionError`.
- `prismaclient.runtime.raw.Raw` runs raw SQL.
  - `query_raw(query, *args)` and `execute_raw(query, *args)` prepare raw
    calls. `datetime` parameters are sent as tagged date values.
  - Call `.exec()` on the prepared object to run it on its own.
  - Call `.tx()` to add it to a transaction, then read `.result()` once the
    transaction has run.
  - `execute_raw` results come back as `BatchResult(count=...)`.
- `prismaclient.runtime.values` covers the engine's value formats.
  - It defines `PrismaError`, `NotFoundError` and `BatchResult`.
  - `format_datetime` writes RFC 3339 with millisecond precision.
  - `parse_bigint` reads 64-bit integers that the engine sends as strings.
  - `encode_json` and `decode_json` convert JSON values to and from quoted
    strings.

## Protocol and logging

- `prismaclient.jsonrpc` handles the CLI's JSON-RPC messages.
  - `parse_request(data)` reads a `Request`.
  - `new_response(id, result)` builds a version `2.0` `Response`.
  - `Manifest` and `ManifestResponse` describe the generator to the CLI.
  - `to_dict()` serialises each of them.
- `prismaclient.logger` sets up the loggers.
  - `debug_logger(environ)` writes to standard output only when
    `PRISMA_CLIENT_GO_LOG` is set.
  - `info_logger()` always writes to standard output.

## Example

```python
from prismaclient.runtime.builder import Input, Output, new_query

query = new_query()
query.operation = "query"
query.name = "findUser"
query.method = "findUnique"
query.model = "User"
query.inputs = [Input(name="where", value={"id": "123"})]
query.outputs = [Output(name="id"), Output(name="email")]
print(query.build())
# query findUser{result: findUniqueUser(where:{"id":"123"},) {id email }}
```

## What the package does not do

- It contains no query engine. Every operation that reaches a database goes
  through the `Engine` object you supply.
- It does not render client code from templates.
- It does not download engine binaries.
- It provides no command-line program.
- On the generator side, it reads the CLI's input and prepares it: defaults,
  the AST, the `.gitignore` and the list of binary targets.

## Running the tests

```
pytest
```