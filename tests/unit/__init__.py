# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for Valora components.

Each calculator is tested in isolation against in-memory repositories.
"""
