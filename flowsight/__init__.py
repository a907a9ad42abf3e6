"""FlowSight: design-node classification and user-flow detection."""

__version__ = "0.1.0"
