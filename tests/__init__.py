# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Valora test suite.

Unit tests per component and integration tests for end-to-end
valuation scenarios.
"""
