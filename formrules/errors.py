"""Exception types.

Validation failures are never raised: a rule that fires is ordinary data
(a Violation). These exceptions are reserved for configuration bugs that
must surface when definitions are loaded, not while a request is served.
"""


class FormrulesError(Exception):
    """Base class for formrules configuration errors."""


class ClusterDefinitionError(FormrulesError, ValueError):
    """A cluster definition is malformed or references unknown names."""


class PriorityTableError(FormrulesError, RuntimeError):
    """The priority table is not total over ErrorKind, or is ambiguous."""


class UnknownClusterError(FormrulesError, KeyError):
    """No cluster definition is registered under the requested id."""
