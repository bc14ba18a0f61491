# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Exception hierarchy for termbridge."""


class TermBridgeError(Exception):
    """Base exception for termbridge."""

    pass


class TransportError(TermBridgeError):
    """Transport I/O failed."""

    pass


class NotConnectedError(TransportError):
    """Operation requires a live transport handle."""

    pass
