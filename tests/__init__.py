# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
PyUKHASnet Test Package

Shared fixtures live in conftest.py.
"""
