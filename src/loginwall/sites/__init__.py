# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Per-site login-wall rules. Register new sites in ``loginwall.registry``."""
