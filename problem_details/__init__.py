"""RFC 9457 / RFC 7807 problem details with flattened extension members."""

from problem_details.api.negotiation import ProblemFormat
from problem_details.api.negotiation import parse_accept
from problem_details.api.negotiation import select_format
from problem_details.api.openapi import problem_openapi_responses
from problem_details.api.responses import RenderedProblem
from problem_details.api.responses import problem_response
from problem_details.api.responses import render_problem
from problem_details.codecs.errors import DecodeError
from problem_details.codecs.errors import EncodeError
from problem_details.codecs.errors import ExtensionDecodeError
from problem_details.codecs.errors import ProblemCodecError
from problem_details.codecs.errors import SchemaError
from problem_details.codecs.fields import flatten
from problem_details.codecs.fields import split
from problem_details.codecs.json_codec import decode_json
from problem_details.codecs.json_codec import encode_json
from problem_details.codecs.xml_codec import decode_xml
from problem_details.codecs.xml_codec import encode_xml
from problem_details.core.errors import ProblemDetailsError
from problem_details.core.errors import register_problem_handlers
from problem_details.schemas.extensions import DynamicExtensions
from problem_details.schemas.extensions import ExtensionFields
from problem_details.schemas.extensions import NoExtensions
from problem_details.schemas.problem import ABOUT_BLANK
from problem_details.schemas.problem import ExtensionCollisionError
from problem_details.schemas.problem import InvalidUriError
from problem_details.schemas.problem import ProblemDetails
from problem_details.schemas.problem import ProblemDetailsSchema
from problem_details.schemas.problem import ProblemType

__all__ = [
    "ABOUT_BLANK",
    "DecodeError",
    "DynamicExtensions",
    "EncodeError",
    "ExtensionCollisionError",
    "ExtensionDecodeError",
    "ExtensionFields",
    "InvalidUriError",
    "NoExtensions",
    "ProblemCodecError",
    "ProblemDetails",
    "ProblemDetailsError",
    "ProblemDetailsSchema",
    "ProblemFormat",
    "ProblemType",
    "RenderedProblem",
    "SchemaError",
    "decode_json",
    "decode_xml",
    "encode_json",
    "encode_xml",
    "flatten",
    "parse_accept",
    "problem_openapi_responses",
    "problem_response",
    "register_problem_handlers",
    "render_problem",
    "select_format",
]
