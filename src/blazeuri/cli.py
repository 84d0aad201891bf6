"""blazeuri command-line interface powered by Typer."""

import logging
from enum import Enum
from typing import Annotated

import typer

from blazeuri import _encoding as enc
from blazeuri._logging import setup_logging
from blazeuri.builder import QueryParamMode, UriBuilder, relativize
from blazeuri.errors import UriBuilderError

app = typer.Typer(name="blazeuri", add_completion=False, no_args_is_help=True)


class Component(str, Enum):
    PATH = "path"
    PATH_SEGMENT = "path-segment"
    MATRIX = "matrix"
    QUERY_PARAM = "query-param"
    QUERY_STRING = "query-string"
    FRAGMENT = "fragment"


_ENCODERS = {
    Component.PATH: enc.encode_path,
    Component.PATH_SEGMENT: enc.encode_path_segment,
    Component.MATRIX: enc.encode_matrix_param,
    Component.QUERY_PARAM: enc.encode_query_param,
    Component.QUERY_STRING: enc.encode_query_string,
    Component.FRAGMENT: enc.encode_fragment,
}


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _pairs(items: list[str] | None) -> list[tuple[str, str]]:
    """Split ``NAME=VALUE`` arguments."""
    pairs: list[tuple[str, str]] = []
    for item in items or []:
        name, sep, value = item.partition("=")
        if not sep or not name:
            msg = f"expected NAME=VALUE, got {item!r}"
            raise typer.BadParameter(msg)
        pairs.append((name, value))
    return pairs


def _grouped(pairs: list[tuple[str, str]]) -> dict[str, list[str]]:
    grouped: dict[str, list[str]] = {}
    for name, value in pairs:
        grouped.setdefault(name, []).append(value)
    return grouped


def _fail(exc: UriBuilderError) -> typer.Exit:
    typer.echo(f"Error: {exc}", err=True)
    return typer.Exit(1)


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output to stderr.")] = False,
) -> None:
    """Build, inspect and encode URI templates."""
    if verbose:
        setup_logging(logging.DEBUG)


@app.command()
def build(
    template: Annotated[str, typer.Argument(help="URI template, e.g. http://host/users/{id}.")],
    values: Annotated[list[str] | None, typer.Argument(help="Template values as NAME=VALUE.")] = None,
    query: Annotated[list[str] | None, typer.Option("--query", "-q", help="Query parameter NAME=VALUE.")] = None,
    matrix: Annotated[list[str] | None, typer.Option("--matrix", "-m", help="Matrix parameter NAME=VALUE.")] = None,
    mode: Annotated[QueryParamMode, typer.Option(help="How repeated query values are written.")] = (
        QueryParamMode.MULTI_PAIRS
    ),
    encoded: Annotated[bool, typer.Option("--encoded", help="Values are already percent-encoded.")] = False,
    keep_slashes: Annotated[bool, typer.Option("--keep-slashes", help="Do not encode '/' in path values.")] = False,
) -> None:
    """Fill a URI template and print the result."""
    try:
        builder = UriBuilder.from_template(template).query_param_mode(mode)
        for name, group in _grouped(_pairs(matrix)).items():
            builder.matrix_param(name, *group)
        for name, group in _grouped(_pairs(query)).items():
            builder.query_param(name, *group)
        mapping = dict(_pairs(values))
        if encoded:
            uri = builder.build_from_encoded_map(mapping)
        else:
            uri = builder.build_from_map(mapping, encode_slash_in_path=not keep_slashes)
    except UriBuilderError as exc:
        raise _fail(exc) from exc
    typer.echo(uri)


@app.command("vars")
def list_vars(
    template: Annotated[str, typer.Argument(help="URI template.")],
) -> None:
    """Print the template's variable names in positional order."""
    try:
        names = UriBuilder.from_template(template).path_param_names()
    except UriBuilderError as exc:
        raise _fail(exc) from exc
    for name in names:
        typer.echo(name)


@app.command()
def encode(
    value: Annotated[str, typer.Argument(help="Text to encode.")],
    component: Annotated[Component, typer.Option("--component", "-c", help="URI position to encode for.")] = (
        Component.PATH_SEGMENT
    ),
) -> None:
    """Percent-encode VALUE for one URI component, keeping {templates}."""
    typer.echo(_ENCODERS[component](value))


@app.command()
def decode(
    value: Annotated[str, typer.Argument(help="Percent-encoded text.")],
    plus: Annotated[bool, typer.Option("--plus/--no-plus", help="Decode '+' as a space.")] = True,
) -> None:
    """Decode %XX escapes as UTF-8."""
    try:
        decoded = enc.decode_uri_component(value, plus=plus)
    except UriBuilderError as exc:
        raise _fail(exc) from exc
    typer.echo(decoded)


@app.command("relativize")
def relativize_cmd(
    source: Annotated[str, typer.Argument(metavar="FROM", help="URI to relativize against.")],
    target: Annotated[str, typer.Argument(metavar="TO", help="URI to express relatively.")],
) -> None:
    """Print TO relative to FROM."""
    try:
        result = relativize(source, target)
    except UriBuilderError as exc:
        raise _fail(exc) from exc
    typer.echo(result)
