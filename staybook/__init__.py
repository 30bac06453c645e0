# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""StayBook short-term rental marketplace backend."""

__version__ = "0.1.0"
