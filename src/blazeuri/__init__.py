"""RFC 3986 URI builder with {name} templates, per-component encoding and links."""

__version__ = "0.1.0"

from blazeuri._encoding import (
    decode_uri_component,
    encode_fragment,
    encode_matrix_param,
    encode_non_codes,
    encode_path,
    encode_path_as_is,
    encode_path_save_encodings,
    encode_path_segment,
    encode_path_segment_as_is,
    encode_path_segment_save_encodings,
    encode_query_param,
    encode_query_param_as_is,
    encode_query_param_save_encodings,
    encode_query_string,
)
from blazeuri._uri import Uri, parse_uri
from blazeuri.builder import QueryParamMode, UriBuilder, UriComponents, relativize
from blazeuri.errors import (
    BuildFailureError,
    IllegalArgumentError,
    MalformedUriError,
    MissingTemplateVariableError,
    UriBuilderError,
)
from blazeuri.link import Link, LinkBuilder
from blazeuri.resource import uri_path
from blazeuri.target import WebTarget
from blazeuri.uri_info import PathSegment, UriInfo

__all__ = [
    "BuildFailureError",
    "IllegalArgumentError",
    "Link",
    "LinkBuilder",
    "MalformedUriError",
    "MissingTemplateVariableError",
    "PathSegment",
    "QueryParamMode",
    "Uri",
    "UriBuilder",
    "UriBuilderError",
    "UriComponents",
    "UriInfo",
    "WebTarget",
    "decode_uri_component",
    "encode_fragment",
    "encode_matrix_param",
    "encode_non_codes",
    "encode_path",
    "encode_path_as_is",
    "encode_path_save_encodings",
    "encode_path_segment",
    "encode_path_segment_as_is",
    "encode_path_segment_save_encodings",
    "encode_query_param",
    "encode_query_param_as_is",
    "encode_query_param_save_encodings",
    "encode_query_string",
    "parse_uri",
    "relativize",
    "uri_path",
]
