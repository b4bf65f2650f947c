"""Exception types for mks937b-core.

This module defines the root of the exception hierarchy used by every mks937b
package. Catch :class:`Mks937bError` to handle any library-specific failure.

Exception hierarchy:
    Mks937bError (base)
    +-- TransportError: Physical link failures (open, write, read timeout)
    +-- ConfigError: Malformed or incomplete configuration
    +-- (protocol and validation errors, see mks937b_protocol.errors)
"""


class Mks937bError(Exception):
    """Base exception for all mks937b errors.

    This is the root of the mks937b exception hierarchy. Catch this to handle
    any library-specific error.
    """


class TransportError(Mks937bError):
    """Raised when the underlying transport fails.

    Covers failures to open the link, write errors, and read timeouts. These
    are link-level problems, not protocol violations, and are never retried
    by the library.
    """


class ConfigError(Mks937bError):
    """Raised for invalid configuration files or values.

    Common causes include missing required keys, values of the wrong type,
    or YAML that cannot be parsed.
    """
