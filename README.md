# atlassian-dc

A small library for working with Jira Data Center from Python. It has three parts:

- **Configuration** for Jira, Confluence and Bitbucket connections. It is read
  from a YAML file, can be overridden by environment variables, and is then
  validated.
- A **logging middleware** that reports handler calls that fail or run slowly.
- A **Jira REST client**. It covers:
  - issues, sub-tasks and transitions;
  - comments and worklogs;
  - boards and sprints;
  - projects and search;
  - users, issue types and priorities.

## Installation

```
pip install .
```

To install the test dependencies and run the test suite:

```
pip install ".[test]"
pytest
```

## Configuration (`atlassian_dc.config`)

`load_config(config_path)` reads a YAML file.

- When a path is given, that file must exist. If it does not, `ConfigError`
  is raised.
- When the path is `None` or empty, the function looks for `config.yaml` or
  `config.yml`. It searches these places in order and uses the first file it
  finds:
  1. the current directory;
  2. the directory of the running program, then up to three of its parents;
  3. the working directory, then up to three of its parents.

  If no file is found, the defaults are used.

```yaml
port: 8090
transport: stdio        # stdio, sse or http
client_timeout: 60
logging:
  level: info
  development: false
jira:
  url: https://jira.example.com
  token: token
  permissions:
    jira_create_issue: true
```

### Environment variables

Environment variables can override any setting that already exists in the
defaults or in the file. The variable name is `MCP_` followed by the key path
in upper case, with the parts joined by underscores. For example,
`MCP_JIRA_TOKEN` sets `jira.token`. Variables that are set to an empty
string are ignored.

### Validation

`Config.validate()` checks the configuration. It raises `ConfigError` in
these cases:

- the port is outside 1–65535;
- the transport is not `stdio`, `sse` or `http`;
- a service has a URL but no token.

It also fills in two defaults:

- an empty transport becomes `stdio`;
- a client timeout of zero or less becomes 60.

`Config.from_mapping(data)` builds a `Config` from a plain mapping. It fills
in the nested `ServiceConfig` and `LoggingConfig` sections and converts
values such as `"8090"` or `"true"` to the right types.

```python
from atlassian_dc.config import load_config, ConfigError

try:
    config = load_config("config.yaml")
except ConfigError as exc:
    raise SystemExit(f"bad configuration: {exc}")
```

### Watching for changes

`watch_config_on_change(config_path, callback)` starts a watchdog observer
on the config file and returns it. Stop the observer to end watching.

- Each time the file changes, it is reloaded.
- If the new contents load and validate, `callback()` is called.
- If they do not, an error message is printed and `callback` is not called.
- If no file can be found to watch, `ConfigError` is raised.

## Jira client (`atlassian_dc.jira_client`)

`JiraClient` takes a `ServiceConfig` and, optionally, a `requests.Session`.

```python
from atlassian_dc.config import ServiceConfig
from atlassian_dc.jira_client import JiraClient

jira = JiraClient(ServiceConfig(url="https://jira.example.com", token="token"))

issue = jira.get_issue("PROJ-1", ["summary", "status"])
results = jira.search_issues("", "PROJ", "created DESC", ["Open"], 50, 0, None)
boards = jira.get_boards(0, 50, "", "PROJ", "scrum")
jira.add_comment("PROJ-1", "Looks good")
worklog = jira.get_worklogs("PROJ-1", "10001")
```

### Requests and responses

- Requests carry a `Bearer` token header.
- Request bodies are sent as JSON.
- A query parameter is left out of the request if it is `None` or holds its
  unset value. The unset value is `0` for numbers, `""` for text and `False`
  for flags.
- Responses are decoded from JSON. An empty response body gives `None`.

### Errors

Any failure raises `JiraRequestError`, from `atlassian_dc.jira_base`. This
covers three cases:

- the connection fails;
- the server returns a status code that is not a success;
- the response body is not valid JSON.

Where a response was received, the error carries its `status_code` and
`body`.

### Building JQL

`build_search_jql` returns the JQL that `search_issues` sends. If JQL is
given, it is returned unchanged. Otherwise the query is built from the
project, the statuses and the ordering:

```python
from atlassian_dc.jira_client import build_search_jql

build_search_jql("", "PROJ", "created", ["Open", "Done"])
# "project = 'PROJ' AND status in ('Open', 'Done') ORDER BY created"
```

### Using parts of the client

The client is put together from mixins, and each can be used on its own with
`JiraClientBase`:

- `BoardsMixin`, in `jira_boards`;
- `CommentsMixin`, in `jira_comments`;
- `IssuesMixin`, in `jira_issues`.

## Logging middleware (`atlassian_dc.middleware`)

`logging_middleware(handler)` wraps a handler that is called as
`handler(method, request)`. Plain functions and `async` functions both work.
Results and exceptions pass through the wrapper unchanged.

The wrapper logs through the `atlassian_dc.mcp` logger:

- if the handler raises, the failure is logged at error level and the
  exception is raised again;
- if the call takes 100 ms or more, it is logged at info level.

```python
from atlassian_dc.middleware import logging_middleware

@logging_middleware
def handle(method, request):
    ...
```

## What this package does not do

This package has no server and no command-line program. It does not define
or register any tools.

The configuration has sections for Confluence and Bitbucket, but the package
only reads and validates them. The only REST client it provides is the Jira
client.