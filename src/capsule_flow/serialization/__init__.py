from .flow_document import (
    InvalidFlowDocumentError,
    dump_flow,
    flow_from_dict,
    flow_to_dict,
    load_flow,
)

__all__ = [
    "InvalidFlowDocumentError",
    "dump_flow",
    "flow_from_dict",
    "flow_to_dict",
    "load_flow",
]
