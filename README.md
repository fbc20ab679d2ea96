# mortar

Building blocks for services: a monitoring wrapper that adds default tags,
per-call tags and context-extracted tags to any metrics backend, call-metric
interceptors for gRPC and REST clients and gRPC servers, build information,
and a few small helpers. The package has no dependencies outside the
standard library.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Monitoring

A metrics backend is supplied as a builder object whose `build()` method
returns a reporter offering `metrics()`, `connect(ctx)` and `close(ctx)`.
The object returned by `metrics()` must offer:

- `counter(name, desc, *tag_keys)`
- `gauge(name, desc, *tag_keys)`
- `histogram(name, desc, buckets, *tag_keys)`
- `timer(name, desc, *tag_keys)`

Each of these returns a metric whose `with_tags(tags)` gives the object that
is actually updated (`inc`, `add`, `set`, `dec` or `record`). Any of these
calls may raise to signal a failure.

`mortar.monitoring.builder.builder()` returns a `WrapperBuilder` that wraps
such a backend in a `MortarReporter`:

```python
from datetime import timedelta

from mortar.monitoring.builder import builder

reporter = (
    builder()
    .set_tags({"service": "awesome", "version": "v1.0.1"})
    .add_extractors(lambda ctx: {"canary": ctx.get("canary", "false")})
    .do_on_error(lambda err: print("metric problem:", err))
    .build(backend_builder)  # your backend's builder object
)

requests = reporter.counter("requests", "number of requests")
requests.with_tags({"version": "v1.0.2"}).with_context({"canary": "true"}).inc()
reporter.timer("handle", "handling time").record(timedelta(milliseconds=12))

custom = reporter.with_tags({"region": "eu"})
custom.gauge("queue", "queue length").set(3)
```

- Default tags set with `set_tags` are attached to every metric; tags given
  to `reporter.with_tags(...)` are added on top of them, and their keys
  become the metric's tag keys when it is registered.
- `with_tags` and `with_context` on a counter, gauge, histogram or timer
  change tag values for that metric object only; extractors added with
  `add_extractors` are run by `with_context(ctx)`.
- Each metric is registered with the backend once, cached under its name and
  the sorted set of its tag keys (`mortar.monitoring.registry.calc_id`).
- If no handler is given with `do_on_error`, errors are logged as warnings
  through the `logging` module.
- If the backend fails to register a metric, the error handler is called and
  a no-op metric (`mortar.monitoring.noop.NoopMetric` / `NoopTimer`) is used
  instead; it reports the original failure to the handler every time it is
  updated. If the backend fails when a metric is updated, the handler is
  called and the update is skipped.

`reporter.connect(ctx)` and `reporter.close(ctx)` are passed straight to the
backend's reporter.

## Call metrics

`mortar.middleware.monitor` provides interceptors that time calls and report
them through a metrics object such as a `MortarReporter`. Passing `None` as
the metrics object turns reporting off.

- `monitor_grpc_client_calls(metrics)` returns an interceptor called as
  `(ctx, method, req, reply, cc, invoker, *opts)`.
- `monitor_rest_client_calls(metrics)` returns an interceptor called as
  `(request, handler)`; the request needs a `url`, and its `host` and
  `context` attributes are used when present. A call counts as successful
  when the response has a `status_code` (or `status`) below 400.

Both record the `client_calls_duration` timer with the `target`, `path`,
`success` and `ctype` (`grpc` or `rest`) tags, built by `prepare_tags`.
Exceptions from the invoker or handler are recorded as unsuccessful calls and
raised again.

- `monitor_grpc_server_calls(metrics)` returns an interceptor called as
  `(ctx, req, info, handler)`, where `info` has a `full_method` attribute or
  is the method name itself. It records a `grpc_<method>` timer tagged with
  the numeric gRPC status `code` of the call: `"0"` on success, the code of a
  raised `StatusError` (or of an exception whose `code()` gives one), and
  `"2"` otherwise. See `grpc_code_tag_value`.

## Build information

```python
from mortar.buildinfo import get_build_information, set_build_values

set_build_values("1234", "v0.0.1", "2020-08-12T17:11:51Z", "abc")
info = get_build_information(True)
print(info.to_json())
```

`get_build_information` returns a `BuildInformation` with the git commit,
version, build tag, build time (parsed from the RFC 3339 timestamp, `None`
if missing or invalid), the time the module was loaded, the up-time and the
host name. With `include_explanations` set, missing commit, version and tag
read "wasn't provided during build". `to_dict()` and `to_json()` leave out
empty values and format the up-time with `format_duration`, for example
`1h2m3.5s` or `1.5ms`.

## Helpers

- `mortar.strings.split_method_and_package("/package.Service/Method")` gives
  `("/package.Service", "Method")`; a missing half becomes `"unknown"`, and a
  name without `/` gives `("", "")`.
- `mortar.strings.obfuscate("1234567890", 3)` gives `"123***890"`; shorter
  text is replaced by the asterisks alone.
- `mortar.carrier.MDTraceCarrier`, a dict of lower-case keys to value lists
  with `set(key, value)` and `foreach_key(handler)`, for trace propagation.
- `mortar.marshal.marshal_message_body(body)` returns bytes unchanged and
  serialises dataclasses and other JSON-encodable values to compact JSON bytes.

## What this package does not do

It ships no metrics backend of its own, no HTTP or gRPC server or client, no
logging or tracing interceptors and no dependency-injection wiring. The
interceptors here are plain callables to be plugged into whatever client or
server code you use.