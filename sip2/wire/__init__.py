"""Wire format package for the SIP2 client.

- builder: OutboundMessage / MessageBuilder with explicit FieldOutcome
- layouts: Static table of response fixed-field layouts
- parser: parse_fixed / parse_variable and the ParsedResponse type
"""

from sip2.wire.builder import FieldOutcome, MessageBuilder, OutboundMessage, Phase
from sip2.wire.layouts import LAYOUTS, FieldSpec, ResponseLayout
from sip2.wire.parser import ParsedResponse, VariableFields, parse_fixed, parse_variable

__all__ = [
    "FieldOutcome",
    "FieldSpec",
    "LAYOUTS",
    "MessageBuilder",
    "OutboundMessage",
    "ParsedResponse",
    "Phase",
    "ResponseLayout",
    "VariableFields",
    "parse_fixed",
    "parse_variable",
]
